# Paramètres du pipeline (chemins, colonnes, tables de recodage)

CLINICAL_PATH = "databases/lung_clinical.csv"
GENOMIC_PATH = "databases/lung_genomic.csv"
PLOT_PATH = "figures/survival_curves.png"

N_PATIENTS = 190
RANDOM_STATE = 42
TRAIN_SIZE = 0.8
PENALIZER = 0.1
TIME_GRID = range(0, 13)

ID = "ID"
OUTCOME = "OUTCOME"
DURATION = "SURVIVAL_MONTHS"
GENE = "GENE"

# En-têtes bruts -> noms canoniques
CLINICAL_COLUMNS = {
    "Patient ID": ID,
    "Outcome": OUTCOME,
    "Survival Months": DURATION,
    "Age": "AGE",
    "Grade": "GRADE",
    "Num Primaries": "NUM_PRIMARIES",
    "T": "T_STAGE",
    "N": "N",
    "M": "M",
    "Radiation": "RADIATION",
    "Stage": "STAGE",
    "Primary Site": "PRIMARY_SITE",
    "Histology": "HISTOLOGY",
    "Tumor Size": "TUMOR_SIZE",
    "Num Mutated Genes": "NUM_MUTATED_GENES",
    "Num Mutations": "NUM_MUTATIONS",
}
GENOMIC_COLUMNS = {"Patient ID": ID, "Gene": GENE}

NUMERIC_COLUMNS = [
    DURATION,
    "AGE",
    "GRADE",
    "NUM_PRIMARIES",
    "N",
    "M",
    "TUMOR_SIZE",
    "NUM_MUTATED_GENES",
    "NUM_MUTATIONS",
]

# Colonnes traitées comme catégorielles dans la formule du modèle
CATEGORICAL_COLUMNS = {
    "GRADE",
    "NUM_PRIMARIES",
    "T_STAGE",
    "RADIATION",
    "STAGE",
    "PRIMARY_SITE",
    "HISTOLOGY",
}

NULL_MARKER = "NULL"
GRADE_MISSING = 9
GRADE_LEVELS = {1, 2, 3, 4}
T_STAGE_MISSING = "UNK"

RADIATION_CODES = {0: "no", 5: "yes"}
OUTCOME_CODES = {"Alive": 0, "Dead": 1}

# Stade au diagnostic -> même codage que T_STAGE ("IB" et "1B" donnent "1b")
STAGE_CODES = {
    "IV": "4",
    "IIIA": "3a",
    "IA": "1a",
    "IVB": "4b",
    "IIA": "2a",
    "IIIB": "3b",
    "IIB": "2b",
    "IB": "1b",
    "1B": "1b",
}

PRIMARY_SITE_FIXES = {"Righ Upper Lobe": "Right Upper Lobe"}

COVARIATES = [
    "AGE",
    "RADIATION",
    "NUM_PRIMARIES",
    "NUM_MUTATED_GENES",
    "NUM_MUTATIONS",
]
