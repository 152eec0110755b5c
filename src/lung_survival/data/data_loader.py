import logging

import pandas as pd

from lung_survival.config import CLINICAL_COLUMNS, GENE, GENOMIC_COLUMNS, ID
from lung_survival.errors import InvalidValueError, MissingColumnError
from lung_survival.features.clinical_features import as_code

logger = logging.getLogger(__name__)


def _canonical_columns(
    df: pd.DataFrame, columns: dict, table: str
) -> pd.DataFrame:
    # Renommer les en-têtes bruts ; les noms déjà canoniques sont conservés
    df = df.rename(columns={c: columns[c] for c in df.columns if c in columns})
    missing = [c for c in columns.values() if c not in df.columns]
    if missing:
        raise MissingColumnError(table, missing)
    return df[list(columns.values())]


def _patient_ids(df: pd.DataFrame) -> pd.Series:
    # Un ID vide fait lire la colonne en float : 3.0 -> "3"
    return df[ID].map(as_code)


class DataLoader:
    def __init__(self, clinical_path: str, genomic_path: str):
        self.clinical_path = clinical_path
        self.genomic_path = genomic_path

    def load_clinical_data(self) -> pd.DataFrame:
        # Charger les données cliniques (une ligne par patient)
        df = pd.read_csv(self.clinical_path, sep=",")
        df = _canonical_columns(df, CLINICAL_COLUMNS, "clinique")
        df[ID] = _patient_ids(df)
        blank = df[ID].isna()
        if blank.any():
            # Numéros de ligne du fichier (en-tête = ligne 1)
            raise InvalidValueError(
                ID, ["<vide>"], [f"ligne {i + 2}" for i in df.index[blank]]
            )
        logger.info(
            "Données cliniques : %d lignes lues depuis %s",
            len(df),
            self.clinical_path,
        )
        return df

    def load_genomic_data(self) -> pd.DataFrame:
        # Charger les paires (patient, gène muté)
        df = pd.read_csv(self.genomic_path, sep=",")
        df = _canonical_columns(df, GENOMIC_COLUMNS, "génomique")
        df[ID] = _patient_ids(df)
        blank = df[ID].isna()
        if blank.any():
            logger.warning(
                "%d mutation(s) sans identifiant patient ignorée(s) (gènes %s)",
                blank.sum(),
                df.loc[blank, GENE].tolist(),
            )
            df = df[~blank].reset_index(drop=True)
        logger.info(
            "Données génomiques : %d paires lues depuis %s",
            len(df),
            self.genomic_path,
        )
        return df

    def load_all(self) -> tuple[pd.DataFrame, pd.DataFrame]:
        return self.load_clinical_data(), self.load_genomic_data()
