import pandas as pd

from lung_survival.data.data_loader import DataLoader
from lung_survival.features.clinical_features import clean_clinical_df
from lung_survival.features.merge_features import fusion_df
from lung_survival.features.molecular_features import (
    create_mutation_matrix,
    patient_universe,
)


def traitement_donnees(loader: DataLoader, n_patients: int) -> pd.DataFrame:
    """
    Chargement, nettoyage, matrice de mutations et fusion.
    Renvoie une ligne par patient de l'ensemble de référence.
    """
    # 1. Chargement des données
    clinical_df, mol_df = loader.load_all()

    # 2. Nettoyage de la table clinique
    clinical_df = clean_clinical_df(clinical_df)

    # 3. Matrice de mutations dense sur l'ensemble complet des patients
    mol_matrix = create_mutation_matrix(mol_df, patient_universe(n_patients))

    # 4. Fusion clinique + génomique
    return fusion_df(clinical_df, mol_matrix)
