import matplotlib

matplotlib.use("Agg")

import numpy as np
import pandas as pd
import pytest

from lung_survival.config import CLINICAL_COLUMNS, GENOMIC_COLUMNS, STAGE_CODES
from lung_survival.features.clinical_features import clean_clinical_df
from lung_survival.features.merge_features import fusion_df
from lung_survival.features.molecular_features import (
    create_mutation_matrix,
    patient_universe,
)

N_PATIENTS = 190
GENES = ["TP53", "KRAS", "EGFR", "STK11", "KEAP1"]


def make_raw_clinical(n=N_PATIENTS, seed=0) -> pd.DataFrame:
    rng = np.random.RandomState(seed)
    return pd.DataFrame(
        {
            "ID": np.arange(1, n + 1),
            "OUTCOME": rng.choice(["Alive", "Dead"], n, p=[0.4, 0.6]),
            "SURVIVAL_MONTHS": rng.randint(1, 60, n),
            "AGE": rng.randint(40, 86, n),
            "GRADE": rng.choice([1, 2, 3, 4, 9], n),
            "NUM_PRIMARIES": rng.choice([1, 2], n, p=[0.85, 0.15]),
            "T_STAGE": rng.choice(["1a", "1b", "2a", "2b", "3", "4", "UNK"], n),
            "N": rng.choice(["0", "1", "2", "NULL"], n),
            "M": rng.choice(["0", "1", "NULL"], n),
            "RADIATION": rng.choice([0, 5], n),
            "STAGE": rng.choice(list(STAGE_CODES), n),
            "PRIMARY_SITE": rng.choice(
                ["Right Upper Lobe", "Righ Upper Lobe", "Left Lower Lobe"], n
            ),
            "HISTOLOGY": rng.choice(
                ["Adenocarcinoma", "Squamous Cell Carcinoma"], n
            ),
            "TUMOR_SIZE": [
                "NULL" if v < 0.1 else f"{v * 8:.1f}" for v in rng.rand(n)
            ],
            "NUM_MUTATED_GENES": rng.randint(0, 6, n),
            "NUM_MUTATIONS": rng.randint(0, 12, n),
        }
    )


def make_genomic(patients, seed=0) -> pd.DataFrame:
    rng = np.random.RandomState(seed)
    rows = []
    for pid in patients:
        for gene in rng.choice(GENES, rng.randint(1, 4), replace=False):
            rows.append({"ID": str(pid), "GENE": gene})
    return pd.DataFrame(rows, columns=["ID", "GENE"])


@pytest.fixture
def raw_clinical():
    return make_raw_clinical()


@pytest.fixture
def genomic():
    # Environ un patient sur trois sans mutation
    return make_genomic([pid for pid in range(1, N_PATIENTS + 1) if pid % 3])


@pytest.fixture
def joined(raw_clinical, genomic):
    clinical = clean_clinical_df(raw_clinical)
    matrix = create_mutation_matrix(genomic, patient_universe(N_PATIENTS))
    return fusion_df(clinical, matrix)


@pytest.fixture
def write_inputs(tmp_path):
    """Écrit les tables au format CSV brut (en-têtes d'origine)."""

    def _write(clinical: pd.DataFrame, genomic: pd.DataFrame):
        clinical_path = tmp_path / "clinical.csv"
        genomic_path = tmp_path / "genomic.csv"
        clinical.rename(
            columns={v: k for k, v in CLINICAL_COLUMNS.items()}
        ).to_csv(clinical_path, index=False)
        genomic.rename(
            columns={v: k for k, v in GENOMIC_COLUMNS.items()}
        ).to_csv(genomic_path, index=False)
        return str(clinical_path), str(genomic_path)

    return _write
