import logging
from typing import Iterable, List

import pandas as pd

from lung_survival.config import GENE, ID
from lung_survival.errors import JoinDefectError
from lung_survival.features.clinical_features import as_code

logger = logging.getLogger(__name__)


def patient_universe(n_patients: int) -> List[str]:
    """Identifiants "1".."n" de l'ensemble complet des patients."""
    return [str(i) for i in range(1, n_patients + 1)]


def create_mutation_matrix(
    mol_df: pd.DataFrame, patient_ids: Iterable[str]
) -> pd.DataFrame:
    """
    Transforme les paires (patient, gène) en une matrice 0/1 dense :
    une ligne par patient de patient_ids, une colonne par gène observé.
    Un patient sans mutation obtient une ligne de zéros.

    L'ensemble des patients est passé explicitement : il n'est jamais
    déduit de mol_df, où les patients sans mutation sont absents.
    """
    patient_ids = [str(pid) for pid in patient_ids]
    pairs = mol_df[[ID, GENE]].copy()
    incomplete = pairs.isna().any(axis=1)
    if incomplete.any():
        logger.warning(
            "%d paire(s) patient/gène incomplète(s) ignorée(s)", incomplete.sum()
        )
        pairs = pairs[~incomplete].copy()
    pairs[ID] = pairs[ID].map(as_code)
    pairs[GENE] = pairs[GENE].astype(str).str.strip()
    pairs = pairs.drop_duplicates()

    unknown = sorted(set(pairs[ID]) - set(patient_ids))
    if unknown:
        raise JoinDefectError(
            f"Patients absents de l'ensemble de référence dans les mutations : {unknown}"
        )

    # Pivot long -> large, puis jointure sur l'ensemble complet des patients
    if pairs.empty:
        matrix = pd.DataFrame(index=pd.Index(patient_ids))
    else:
        matrix = (
            pairs.assign(MUTATED=1)
            .pivot(index=ID, columns=GENE, values="MUTATED")
            .reindex(patient_ids)
            .fillna(0)
            .astype(int)
        )
    matrix.columns.name = None
    matrix.index.name = ID
    matrix = matrix.reset_index()

    logger.info(
        "Matrice de mutations : %d patients x %d gènes (%d patients sans mutation)",
        len(matrix),
        matrix.shape[1] - 1,
        len(patient_ids) - pairs[ID].nunique(),
    )
    return matrix
