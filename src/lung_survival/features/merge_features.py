import logging
from typing import List

import pandas as pd

from lung_survival.config import ID
from lung_survival.errors import JoinDefectError

logger = logging.getLogger(__name__)


def fusion_df(clin_df: pd.DataFrame, mol_matrix: pd.DataFrame) -> pd.DataFrame:
    """
    Fusionne la table clinique nettoyée et la matrice de mutations dense.

    Jointure externe complète sur ID : un patient présent d'un seul côté,
    ou une indicatrice de gène manquante après fusion, lève JoinDefectError.
    """
    gene_cols = [c for c in mol_matrix.columns if c != ID]
    overlap = sorted(set(gene_cols) & set(clin_df.columns))
    if overlap:
        raise JoinDefectError(
            f"Colonnes de gènes en conflit avec la table clinique : {overlap}"
        )

    merged = pd.merge(
        clin_df,
        mol_matrix,
        on=ID,
        how="outer",
        validate="one_to_one",
        indicator=True,
    )

    unmatched = merged[merged["_merge"] != "both"]
    if not unmatched.empty:
        raise JoinDefectError(
            "Patients non appariés lors de la fusion : "
            f"{unmatched[[ID, '_merge']].astype(str).values.tolist()}"
        )
    merged = merged.drop(columns="_merge")

    incomplete = merged[gene_cols].isna().any(axis=1)
    if incomplete.any():
        raise JoinDefectError(
            "Indicatrices de gènes manquantes pour les patients "
            f"{merged.loc[incomplete, ID].tolist()}"
        )

    logger.info(
        "Table fusionnée : %d patients, %d colonnes", len(merged), merged.shape[1]
    )
    return merged


def select_complete_cases(
    df: pd.DataFrame, columns: List[str]
) -> pd.DataFrame:
    """
    Ne garde que les patients sans valeur manquante dans columns.
    Les patients écartés sont journalisés.
    """
    incomplete = df[columns].isna().any(axis=1)
    if incomplete.any():
        for col in columns:
            n_missing = df[col].isna().sum()
            if n_missing:
                logger.warning("%s : %d valeur(s) manquante(s)", col, n_missing)
        logger.warning(
            "%d patient(s) écarté(s) pour covariables manquantes : %s",
            incomplete.sum(),
            df.loc[incomplete, ID].tolist(),
        )
    return df[~incomplete].reset_index(drop=True)
