import argparse
import logging
import sys
import warnings

import matplotlib.pyplot as plt
import pandas as pd

from lung_survival import config
from lung_survival.data.data_loader import DataLoader
from lung_survival.data.data_preparation import traitement_donnees
from lung_survival.data.data_splitter import DataSplitter
from lung_survival.errors import PipelineError
from lung_survival.evaluation.evaluator import Evaluator
from lung_survival.evaluation.plots import plot_survival_curves
from lung_survival.features.merge_features import select_complete_cases
from lung_survival.models.cox_model import CoxSurvivalModel, to_long

warnings.simplefilter(action="ignore", category=FutureWarning)

logger = logging.getLogger(__name__)


def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s - %(levelname)s - %(message)s",
    )


def parse_arguments(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Nettoyage des données cancer du poumon et modèle de Cox"
    )
    parser.add_argument("--clinical", default=config.CLINICAL_PATH)
    parser.add_argument("--genomic", default=config.GENOMIC_PATH)
    parser.add_argument("--n-patients", type=int, default=config.N_PATIENTS)
    parser.add_argument("--seed", type=int, default=config.RANDOM_STATE)
    parser.add_argument("--train-size", type=float, default=config.TRAIN_SIZE)
    parser.add_argument("--penalizer", type=float, default=config.PENALIZER)
    parser.add_argument(
        "--covariates",
        nargs="+",
        default=config.COVARIATES,
        help="Covariables du modèle (colonnes cliniques ou gènes)",
    )
    parser.add_argument(
        "--plot", default=config.PLOT_PATH, help="Chemin de la figure"
    )
    parser.add_argument("--no-plot", action="store_true")
    parser.add_argument(
        "--log-level",
        default="INFO",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    return parser.parse_args(argv)


def run_pipeline(
    clinical_path: str = config.CLINICAL_PATH,
    genomic_path: str = config.GENOMIC_PATH,
    n_patients: int = config.N_PATIENTS,
    seed: int = config.RANDOM_STATE,
    train_size: float = config.TRAIN_SIZE,
    penalizer: float = config.PENALIZER,
    covariates=None,
    plot_path=None,
) -> dict:
    """
    Exécute le pipeline complet et renvoie les résultats intermédiaires :
    table fusionnée, découpage, modèle, courbes de survie et C-index.
    """
    covariates = list(covariates or config.COVARIATES)

    loader = DataLoader(clinical_path=clinical_path, genomic_path=genomic_path)
    merged = traitement_donnees(loader, n_patients)

    # Cas complets sur les covariables, avant le découpage
    model_df = select_complete_cases(
        merged, [config.DURATION, config.OUTCOME] + covariates
    )

    splitter = DataSplitter(train_size=train_size, random_state=seed)
    train_df, test_df = splitter.split(model_df)

    model = CoxSurvivalModel(covariates=covariates, penalizer=penalizer)
    model.fit(train_df)
    logger.info("Coefficients :\n%s", model.summary().to_string())

    surv = model.predict_survival(test_df, config.TIME_GRID)
    predictions = to_long(surv)

    evaluator = Evaluator()
    train_cindex, test_cindex = evaluator.evaluate_both(
        train_df,
        model.predict_risk(train_df),
        test_df,
        model.predict_risk(test_df),
    )
    logger.info("C-index train : %.4f, test : %.4f", train_cindex, test_cindex)

    if plot_path is not None:
        fig = plot_survival_curves(predictions, plot_path)
        plt.close(fig)

    return {
        "merged": merged,
        "train": train_df,
        "test": test_df,
        "model": model,
        "survival": surv,
        "predictions": predictions,
        "median_survival": model.predict_median_survival(
            test_df, config.TIME_GRID
        ),
        "c_index": (train_cindex, test_cindex),
    }


def main(argv=None) -> int:
    args = parse_arguments(argv)
    setup_logging(args.log_level)
    try:
        results = run_pipeline(
            clinical_path=args.clinical,
            genomic_path=args.genomic,
            n_patients=args.n_patients,
            seed=args.seed,
            train_size=args.train_size,
            penalizer=args.penalizer,
            covariates=args.covariates,
            plot_path=None if args.no_plot else args.plot,
        )
    except PipelineError as e:
        logger.error("%s: %s", type(e).__name__, e)
        return 1

    with pd.option_context("display.width", 120):
        logger.info(
            "Survie prédite (mois 0 à 12) :\n%s",
            results["survival"].T.round(3).to_string(),
        )
    return 0


if __name__ == "__main__":
    sys.exit(main())
