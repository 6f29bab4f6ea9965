"""
Cardiogenic shock documentation: ICD codes OR discharge-summary text.

Resolved per admission and broadcast to every stay of that admission.
"""

from __future__ import annotations
import logging
import re
import pandas as pd
from cs_cohort.core.criteria import CS_ICD_CODES, CS_NOTE_PATTERN
from cs_cohort.transforms.common import flag_from_keys

log = logging.getLogger(__name__)

DOC_COLS = ["has_cs_icd", "has_cs_note", "has_cs_doc"]

def normalize_icd(codes: pd.Series) -> pd.Series:
    """Upper-case, trimmed, dotless codes (MIMIC-IV storage form)."""
    return codes.astype("string").str.strip().str.upper().str.replace(".", "", regex=False)

def cs_icd_admissions(diagnoses: pd.DataFrame) -> pd.Series:
    mask = normalize_icd(diagnoses["icd_code"]).isin(CS_ICD_CODES).fillna(False)
    return diagnoses.loc[mask.to_numpy(dtype=bool), "hadm_id"].drop_duplicates()

def cs_note_admissions(notes: pd.DataFrame, pattern: str = CS_NOTE_PATTERN) -> pd.Series:
    text = notes["text"].astype("string").fillna("")
    mask = text.str.contains(pattern, flags=re.IGNORECASE | re.DOTALL, regex=True)
    return notes.loc[mask.to_numpy(dtype=bool), "hadm_id"].drop_duplicates()

def resolve_documentation(stays: pd.DataFrame, diagnoses: pd.DataFrame, notes: pd.DataFrame) -> pd.DataFrame:
    out = stays.copy()
    out["has_cs_icd"] = flag_from_keys(out, "hadm_id", cs_icd_admissions(diagnoses))
    out["has_cs_note"] = flag_from_keys(out, "hadm_id", cs_note_admissions(notes))
    out["has_cs_doc"] = out["has_cs_icd"] | out["has_cs_note"]

    log.info(
        "CS documentation: icd=%d note=%d any=%d of %d stays",
        out["has_cs_icd"].sum(), out["has_cs_note"].sum(), out["has_cs_doc"].sum(), len(out),
    )
    return out
