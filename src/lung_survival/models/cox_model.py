import logging
from typing import Iterable, List, Optional

import numpy as np
import pandas as pd
from lifelines import CoxPHFitter
from lifelines.exceptions import ConvergenceError

from lung_survival.config import (
    CATEGORICAL_COLUMNS,
    COVARIATES,
    DURATION,
    ID,
    OUTCOME,
    PENALIZER,
    TIME_GRID,
)
from lung_survival.errors import ModelFitError

logger = logging.getLogger(__name__)


def _term(col: str) -> str:
    name = col if col.isidentifier() else f"`{col}`"
    return f"C({name})" if col in CATEGORICAL_COLUMNS else name


def get_median_survival(s: pd.Series) -> float:
    # Premier instant où la survie passe sous 0.5
    below_half = s[s <= 0.5]
    if below_half.empty:
        return np.nan
    return below_half.index[0]


def to_long(surv: pd.DataFrame) -> pd.DataFrame:
    """
    Passe des courbes larges (index = temps, colonnes = patients)
    au format long (ID, TIME, SURVIVAL).
    """
    long_df = (
        surv.rename_axis(index="TIME", columns=ID)
        .reset_index()
        .melt(id_vars="TIME", var_name=ID, value_name="SURVIVAL")
    )
    return long_df[[ID, "TIME", "SURVIVAL"]]


class CoxSurvivalModel:
    """
    Modèle de Cox à pénalité L2 (lifelines) sur une liste fixe de covariables.

    Aucune imputation : une covariable manquante, ou un niveau catégoriel
    absent de l'entraînement, lève ModelFitError avec la liste des patients
    et colonnes concernés.
    """

    def __init__(
        self,
        covariates: Optional[List[str]] = None,
        penalizer: float = PENALIZER,
        duration_col: str = DURATION,
        event_col: str = OUTCOME,
    ):
        self.covariates = list(covariates or COVARIATES)
        self.penalizer = penalizer
        self.duration_col = duration_col
        self.event_col = event_col
        self.cph = None
        self.levels_ = {}

    @property
    def formula(self) -> str:
        return " + ".join(_term(c) for c in self.covariates)

    def _check_columns(self, df: pd.DataFrame, columns: List[str]) -> None:
        absent = [c for c in columns if c not in df.columns]
        if absent:
            raise ModelFitError("Colonnes absentes", columns=absent)
        missing = df[columns].isna()
        if missing.values.any():
            rows = missing.any(axis=1)
            ids = df.loc[rows, ID] if ID in df.columns else df.index[rows]
            raise ModelFitError(
                "Valeurs manquantes dans les covariables",
                ids=list(ids),
                columns=missing.columns[missing.any()].tolist(),
            )

    def _check_fitted(self) -> None:
        if self.cph is None:
            raise ModelFitError("Le modèle n'est pas encore entraîné.")

    def fit(self, train_df: pd.DataFrame) -> "CoxSurvivalModel":
        columns = [self.duration_col, self.event_col] + self.covariates
        self._check_columns(train_df, columns)

        cph = CoxPHFitter(penalizer=self.penalizer, l1_ratio=0.0)
        try:
            cph.fit(
                train_df[columns].reset_index(drop=True),
                duration_col=self.duration_col,
                event_col=self.event_col,
                formula=self.formula,
            )
        except ConvergenceError as e:
            raise ModelFitError(f"Échec de convergence : {e}") from e
        self.cph = cph
        self.levels_ = {
            c: set(train_df[c].unique())
            for c in self.covariates
            if c in CATEGORICAL_COLUMNS
        }

        logger.info(
            "Modèle de Cox entraîné sur %d patients (%s, pénalité %.3g), C-index train %.4f",
            len(train_df),
            self.formula,
            self.penalizer,
            cph.concordance_index_,
        )
        return self

    def _design(self, df: pd.DataFrame) -> pd.DataFrame:
        self._check_fitted()
        self._check_columns(df, self.covariates)
        # Un niveau absent de l'entraînement serait codé comme le niveau de référence
        for col, levels in self.levels_.items():
            unseen = ~df[col].isin(list(levels))
            if unseen.any():
                values = sorted({str(v) for v in df.loc[unseen, col]})
                raise ModelFitError(
                    f"Niveaux inconnus à l'entraînement : {values}",
                    ids=list(df.loc[unseen, ID]),
                    columns=[col],
                )
        return df[self.covariates]

    def predict_survival(
        self, df: pd.DataFrame, times: Iterable[float] = TIME_GRID
    ) -> pd.DataFrame:
        """
        Courbes de survie aux instants times : index = temps,
        une colonne par patient (ID). Chaque courbe est décroissante.
        """
        X = self._design(df)
        surv = self.cph.predict_survival_function(X, times=list(times))
        surv.columns = df[ID].tolist()
        surv.index.name = "TIME"
        return surv

    def predict_risk(self, df: pd.DataFrame) -> pd.Series:
        """Risque relatif (hasard partiel) par patient."""
        X = self._design(df)
        risk = self.cph.predict_partial_hazard(X)
        return pd.Series(np.asarray(risk), index=df[ID].tolist(), name="RISK")

    def predict_median_survival(
        self, df: pd.DataFrame, times: Iterable[float] = TIME_GRID
    ) -> pd.Series:
        surv = self.predict_survival(df, times)
        return surv.apply(get_median_survival, axis=0).rename(
            "MEDIAN_SURVIVAL"
        )

    def summary(self) -> pd.DataFrame:
        self._check_fitted()
        return self.cph.summary[["coef", "exp(coef)", "se(coef)", "p"]]
