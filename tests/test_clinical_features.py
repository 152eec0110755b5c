import numpy as np
import pandas as pd
import pytest

from lung_survival.config import STAGE_CODES
from lung_survival.errors import (
    DuplicatePatientError,
    InvalidValueError,
    UnmappedCategoryError,
)
from lung_survival.features.clinical_features import (
    as_code,
    clean_clinical_df,
    normalize_missing,
    recode_stage,
)


def test_row_count_and_ids_preserved(raw_clinical):
    cleaned = clean_clinical_df(raw_clinical)
    assert len(cleaned) == len(raw_clinical)
    assert cleaned["ID"].tolist() == [str(i) for i in raw_clinical["ID"]]


def test_grade_nine_becomes_missing(raw_clinical):
    cleaned = clean_clinical_df(raw_clinical)
    grade = cleaned["GRADE"]
    assert (grade == 9).sum() == 0
    assert grade.dropna().isin([1, 2, 3, 4]).all()
    assert grade.isna().sum() == (raw_clinical["GRADE"] == 9).sum()


def test_radiation_recoded_to_yes_no(raw_clinical):
    cleaned = clean_clinical_df(raw_clinical)
    assert set(cleaned["RADIATION"]) <= {"yes", "no"}
    expected = raw_clinical["RADIATION"].map({0: "no", 5: "yes"})
    assert cleaned["RADIATION"].tolist() == expected.tolist()


def test_outcome_recoded(raw_clinical):
    cleaned = clean_clinical_df(raw_clinical)
    assert cleaned["OUTCOME"].tolist() == (
        raw_clinical["OUTCOME"] == "Dead"
    ).astype(int).tolist()


def test_null_marker_becomes_missing_then_numeric(raw_clinical):
    cleaned = clean_clinical_df(raw_clinical)
    for col in ["N", "M", "TUMOR_SIZE"]:
        assert pd.api.types.is_numeric_dtype(cleaned[col])
        assert cleaned[col].isna().sum() == (raw_clinical[col] == "NULL").sum()


def test_normalize_missing_ignores_whitespace():
    df = pd.DataFrame({"ID": ["1", "2"], "N": [" NULL ", "3"]})
    out = normalize_missing(df)
    assert out["N"].isna().tolist() == [True, False]


def test_t_stage_unk_becomes_missing(raw_clinical):
    cleaned = clean_clinical_df(raw_clinical)
    assert "UNK" not in set(cleaned["T_STAGE"].dropna())
    assert cleaned["T_STAGE"].isna().sum() == (raw_clinical["T_STAGE"] == "UNK").sum()


STAGE_KEYS = ["IV", "IIIA", "IA", "IVB", "IIA", "IIIB", "IIB", "IB", "1B"]
STAGE_EXPECTED = ["4", "3a", "1a", "4b", "2a", "3b", "2b", "1b", "1b"]


def test_stage_lookup_table_round_trip(raw_clinical):
    assert list(STAGE_CODES) == STAGE_KEYS
    raw_clinical = raw_clinical.iloc[: len(STAGE_KEYS)].copy()
    raw_clinical["STAGE"] = STAGE_KEYS
    cleaned = clean_clinical_df(raw_clinical)
    assert cleaned["STAGE"].tolist() == STAGE_EXPECTED


def test_recode_stage_matches_lookup_table():
    assert recode_stage(STAGE_KEYS) == STAGE_EXPECTED


def test_stage_missing_stays_missing(raw_clinical):
    raw_clinical.loc[0, "STAGE"] = np.nan
    cleaned = clean_clinical_df(raw_clinical)
    assert pd.isna(cleaned.loc[0, "STAGE"])
    assert set(cleaned["STAGE"].dropna()) <= set(STAGE_CODES.values())


def test_unmapped_stage_raises_with_patient(raw_clinical):
    raw_clinical["STAGE"] = raw_clinical["STAGE"].astype(object)
    raw_clinical.loc[4, "STAGE"] = "IIC"
    with pytest.raises(UnmappedCategoryError) as excinfo:
        clean_clinical_df(raw_clinical)
    assert excinfo.value.column == "STAGE"
    assert excinfo.value.values == ["IIC"]
    assert excinfo.value.ids == ["5"]


def test_recode_stage_reports_every_unknown_label():
    with pytest.raises(UnmappedCategoryError) as excinfo:
        recode_stage(["IV", "Stage X", "IIA", "0"], ["11", "12", "13", "14"])
    assert excinfo.value.values == ["0", "Stage X"]
    assert excinfo.value.ids == ["12", "14"]


def test_unknown_radiation_code_raises(raw_clinical):
    raw_clinical.loc[9, "RADIATION"] = 3
    with pytest.raises(UnmappedCategoryError) as excinfo:
        clean_clinical_df(raw_clinical)
    assert excinfo.value.column == "RADIATION"
    assert excinfo.value.ids == ["10"]


def test_missing_radiation_raises(raw_clinical):
    raw_clinical["RADIATION"] = raw_clinical["RADIATION"].astype(object)
    raw_clinical.loc[2, "RADIATION"] = "NULL"
    with pytest.raises(UnmappedCategoryError):
        clean_clinical_df(raw_clinical)


def test_unknown_outcome_raises(raw_clinical):
    raw_clinical.loc[0, "OUTCOME"] = "Lost"
    with pytest.raises(UnmappedCategoryError) as excinfo:
        clean_clinical_df(raw_clinical)
    assert excinfo.value.values == ["Lost"]


def test_unexpected_grade_raises(raw_clinical):
    raw_clinical.loc[0, "GRADE"] = 7
    with pytest.raises(UnmappedCategoryError) as excinfo:
        clean_clinical_df(raw_clinical)
    assert excinfo.value.column == "GRADE"


def test_non_numeric_value_raises(raw_clinical):
    raw_clinical.loc[3, "TUMOR_SIZE"] = "big"
    with pytest.raises(InvalidValueError) as excinfo:
        clean_clinical_df(raw_clinical)
    assert excinfo.value.column == "TUMOR_SIZE"
    assert excinfo.value.ids == ["4"]


def test_duplicate_patient_raises(raw_clinical):
    raw_clinical.loc[1, "ID"] = 1
    with pytest.raises(DuplicatePatientError):
        clean_clinical_df(raw_clinical)


def test_primary_site_typo_fixed(raw_clinical):
    cleaned = clean_clinical_df(raw_clinical)
    assert "Righ Upper Lobe" not in set(cleaned["PRIMARY_SITE"])
    assert (cleaned["PRIMARY_SITE"] == "Right Upper Lobe").sum() == raw_clinical[
        "PRIMARY_SITE"
    ].isin(["Right Upper Lobe", "Righ Upper Lobe"]).sum()


def test_input_not_modified(raw_clinical):
    before = raw_clinical.copy()
    clean_clinical_df(raw_clinical)
    pd.testing.assert_frame_equal(raw_clinical, before)


@pytest.mark.parametrize(
    "value, expected", [(4.0, "4"), (" 3a ", "3a"), (2, "2"), ("IIIA", "IIIA")]
)
def test_as_code(value, expected):
    assert as_code(value) == expected


def test_as_code_keeps_missing():
    assert pd.isna(as_code(np.nan))
