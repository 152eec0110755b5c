import logging
from typing import Any, Iterable, List, Optional

import numpy as np
import pandas as pd

from lung_survival.config import (
    DURATION,
    GRADE_LEVELS,
    GRADE_MISSING,
    ID,
    NULL_MARKER,
    NUMERIC_COLUMNS,
    OUTCOME,
    OUTCOME_CODES,
    PRIMARY_SITE_FIXES,
    RADIATION_CODES,
    STAGE_CODES,
    T_STAGE_MISSING,
)
from lung_survival.errors import (
    DuplicatePatientError,
    InvalidValueError,
    UnmappedCategoryError,
)

logger = logging.getLogger(__name__)

INTEGER_COLUMNS = [
    DURATION,
    "AGE",
    "NUM_PRIMARIES",
    "NUM_MUTATED_GENES",
    "NUM_MUTATIONS",
]


def as_code(value: Any) -> Any:
    """
    Renvoie la valeur sous forme de code texte ("3a", "4", ...).
    Les valeurs manquantes restent NaN ; 4.0 devient "4".
    """
    if pd.isna(value):
        return np.nan
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


def normalize_missing(df: pd.DataFrame) -> pd.DataFrame:
    """
    Remplace le marqueur texte "NULL" par NaN dans toutes les colonnes.
    """
    df = df.copy()
    for col in df.columns:
        if pd.api.types.is_numeric_dtype(df[col]):
            continue
        mask = df[col].astype(str).str.strip() == NULL_MARKER
        if mask.any():
            logger.info("%s : %d valeur(s) NULL -> NaN", col, mask.sum())
            df.loc[mask, col] = np.nan
    return df


def _to_numeric(df: pd.DataFrame, col: str) -> pd.Series:
    values = pd.to_numeric(df[col], errors="coerce")
    bad = df[col].notna() & values.isna()
    if bad.any():
        raise InvalidValueError(col, df.loc[bad, col], df.loc[bad, ID])
    return values


def _check_mapped(df: pd.DataFrame, col: str, codes: Iterable[Any]) -> None:
    # Une valeur manquante compte aussi comme non reconnue
    unmapped = ~df[col].isin(list(codes))
    if unmapped.any():
        raise UnmappedCategoryError(
            col, df.loc[unmapped, col], df.loc[unmapped, ID]
        )


def recode_grade(df: pd.DataFrame) -> pd.Series:
    # 9 signifie "grade inconnu", ce n'est pas un niveau ordinal
    grade = df["GRADE"].mask(df["GRADE"] == GRADE_MISSING)
    logger.info(
        "GRADE : %d valeur(s) %d -> NaN",
        (df["GRADE"] == GRADE_MISSING).sum(),
        GRADE_MISSING,
    )
    unmapped = grade.notna() & ~grade.isin(sorted(GRADE_LEVELS))
    if unmapped.any():
        raise UnmappedCategoryError(
            "GRADE", grade[unmapped], df.loc[unmapped, ID]
        )
    return grade


def recode_stage(
    values: Iterable[Any], ids: Optional[Iterable[Any]] = None
) -> List[Any]:
    """
    Convertit les libellés de stade au diagnostic ("IIIA", "IB", "1B", ...)
    vers le codage court de T_STAGE ("3a", "1b", ...).
    Les valeurs manquantes restent NaN ; toute valeur absente de la table
    lève UnmappedCategoryError avec les patients concernés (ids).
    """
    values = list(values)
    ids = list(ids) if ids is not None else list(range(len(values)))
    recoded, unmapped, unmapped_ids = [], [], []
    for pid, value in zip(ids, values):
        code = as_code(value)
        if pd.isna(code):
            recoded.append(np.nan)
        elif code in STAGE_CODES:
            recoded.append(STAGE_CODES[code])
        else:
            unmapped.append(code)
            unmapped_ids.append(pid)
    if unmapped:
        raise UnmappedCategoryError("STAGE", unmapped, unmapped_ids)
    return recoded


def clean_clinical_df(df: pd.DataFrame) -> pd.DataFrame:
    """
    Nettoie la table clinique brute :
      - marqueurs de valeurs manquantes (NULL, grade 9, T "UNK") -> NaN
      - conversion des colonnes numériques
      - recodage de OUTCOME (Alive/Dead -> 0/1), RADIATION (0/5 -> no/yes)
        et STAGE (libellés -> codes de T_STAGE)
      - correction des fautes de frappe de PRIMARY_SITE
    Le nombre de lignes est inchangé ; toute valeur inattendue lève une erreur.
    """
    df = df.copy()
    df[ID] = df[ID].map(as_code)
    duplicated = df[ID].duplicated(keep=False)
    if duplicated.any():
        raise DuplicatePatientError(df.loc[duplicated, ID])

    df = normalize_missing(df)

    for col in NUMERIC_COLUMNS:
        df[col] = _to_numeric(df, col)
    df["GRADE"] = recode_grade(df)

    # Catégories textuelles
    for col in [OUTCOME, "T_STAGE", "STAGE", "PRIMARY_SITE", "HISTOLOGY"]:
        df[col] = df[col].map(as_code)

    df["T_STAGE"] = df["T_STAGE"].mask(df["T_STAGE"] == T_STAGE_MISSING)

    _check_mapped(df, OUTCOME, OUTCOME_CODES)
    df[OUTCOME] = df[OUTCOME].map(OUTCOME_CODES).astype(int)

    df["RADIATION"] = _to_numeric(df, "RADIATION")
    _check_mapped(df, "RADIATION", RADIATION_CODES)
    df["RADIATION"] = df["RADIATION"].map(RADIATION_CODES)

    df["STAGE"] = recode_stage(df["STAGE"], df[ID])

    df["PRIMARY_SITE"] = df["PRIMARY_SITE"].replace(PRIMARY_SITE_FIXES)

    for col in INTEGER_COLUMNS:
        if df[col].notna().all():
            df[col] = df[col].astype(int)

    logger.info(
        "Table clinique nettoyée : %d patients, %d décès",
        len(df),
        df[OUTCOME].sum(),
    )
    return df
