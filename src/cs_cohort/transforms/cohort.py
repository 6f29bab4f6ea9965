"""
Cohort assembly: demographics and outcomes, ordered inclusion stages, invariant checks.
"""

from __future__ import annotations
import logging
from typing import Callable, List, Tuple
import pandas as pd
from cs_cohort.core.criteria import (
    ETIOLOGY_LABELS, LANDMARK_HOURS, MIN_AGE, MIN_CRITERIA, MIN_LOS_HOURS, NO_CARDIAC_DX,
)
from cs_cohort.transforms.cardiac_diagnoses import CATEGORY_FLAGS
from cs_cohort.transforms.common import as_flag, flag_from_keys, floor_hours
from cs_cohort.transforms.shock_criteria import CRITERIA_COLS

log = logging.getLogger(__name__)

COHORT_COLUMNS = [
    "stay_id", "subject_id", "hadm_id",
    "icu_intime", "icu_outtime", "icu_los_hours",
    # cardiac diagnoses
    "has_cardiac_dx", "has_ami", "has_hf", "has_cardiomyopathy",
    "has_arrhythmia", "has_valvular", "cs_etiology",
    # CS documentation
    "has_cs_doc", "has_cs_icd", "has_cs_note",
    # shock criteria (0-24h)
    "has_hypotension_24h", "has_vasopressor_24h", "has_lactate_24h", "criteria_0to24h_count",
    # blood culture
    "has_positive_blood_culture", "has_positive_bc_24h",
    # demographics
    "age", "gender",
    # hospital admission and outcomes
    "admittime", "dischtime", "deathtime", "hospital_expire_flag",
    "hours_to_death", "alive_at_24h", "alive_at_48h",
]

class CohortInvariantError(ValueError):
    """Derived flags are internally inconsistent."""

Stage = Tuple[str, Callable[[pd.DataFrame], pd.Series]]

# Applied cumulatively, in order; the attrition report reuses this list.
INCLUSION_STAGES: List[Stage] = [
    ("Step 2a: Age >= 18 years", lambda df: as_flag(df["age"] >= MIN_AGE)),
    ("Step 2b: ICU LOS >= 8 hours", lambda df: as_flag(df["icu_los_hours"] >= MIN_LOS_HOURS)),
    ("Step 3: Cardiac Diagnosis", lambda df: df["has_cardiac_dx"].astype(bool)),
    (
        "Step 4: CS Documented OR >= 2 Criteria",
        lambda df: df["has_cs_doc"].astype(bool) | (df["criteria_0to24h_count"] >= MIN_CRITERIA),
    ),
    (
        "Step 5: Excluded Primary Sepsis",
        lambda df: ~(df["has_positive_bc_24h"].astype(bool) & ~df["has_cs_doc"].astype(bool)),
    ),
]

def attach_demographics(flags: pd.DataFrame, patients: pd.DataFrame, admissions: pd.DataFrame) -> pd.DataFrame:
    """
    Inner-join patients by subject: stays without a patient row drop out here.
    Admissions are left-joined and has_admission_record marks the match; stays
    without one stay in the funnel and are removed from the final cohort only.
    """
    pat = patients[["subject_id", "anchor_age", "gender"]].drop_duplicates("subject_id")
    pat = pat.rename(columns={"anchor_age": "age"})
    adm = admissions[
        ["hadm_id", "admittime", "dischtime", "deathtime", "hospital_expire_flag"]
    ].drop_duplicates("hadm_id")

    out = flags.merge(pat, on="subject_id", how="inner")
    dropped = len(flags) - len(out)
    if dropped:
        log.warning("Dropped %d stays without a patient record", dropped)

    out["has_admission_record"] = flag_from_keys(out, "hadm_id", adm["hadm_id"])
    out = out.merge(adm, on="hadm_id", how="left")
    missing = int((~out["has_admission_record"]).sum())
    if missing:
        log.warning("%d stays without an admission record are excluded from the final cohort", missing)
    return add_outcomes(out)

def add_outcomes(df: pd.DataFrame) -> pd.DataFrame:
    df = df.copy()
    df["age"] = pd.to_numeric(df["age"], errors="coerce").astype("Int64")
    df["hospital_expire_flag"] = pd.to_numeric(df["hospital_expire_flag"], errors="coerce").astype("Int64")
    for c in ("admittime", "dischtime", "deathtime"):
        df[c] = pd.to_datetime(df[c], errors="coerce")

    died = as_flag(df["hospital_expire_flag"] == 1) & df["deathtime"].notna()
    hours = floor_hours(df["deathtime"] - df["icu_intime"])
    df["hours_to_death"] = hours.where(died, pd.NA)

    survived = as_flag(df["hospital_expire_flag"] == 0)
    for landmark in LANDMARK_HOURS:
        df[f"alive_at_{landmark}h"] = survived | as_flag(hours > landmark)
    return df

def stage_masks(df: pd.DataFrame) -> List[Tuple[str, pd.Series]]:
    """Cumulative masks, one per inclusion stage."""
    masks = []
    keep = pd.Series(True, index=df.index)
    for name, predicate in INCLUSION_STAGES:
        keep = keep & predicate(df).astype(bool)
        masks.append((name, keep))
    return masks

def final_mask(df: pd.DataFrame) -> pd.Series:
    """Stays passing every inclusion stage that also have an admission record."""
    keep = stage_masks(df)[-1][1]
    return keep & df["has_admission_record"].astype(bool)

def check_invariants(df: pd.DataFrame) -> None:
    """Raise CohortInvariantError when derived flags disagree with each other."""
    problems = []

    expected = df[CRITERIA_COLS].astype(int).sum(axis=1)
    if not df["criteria_0to24h_count"].eq(expected).all():
        problems.append("criteria count differs from the sum of its criteria")
    if not df["criteria_0to24h_count"].between(0, len(CRITERIA_COLS)).all():
        problems.append("criteria count out of range")

    if not df["cs_etiology"].isin(ETIOLOGY_LABELS).all():
        problems.append("unknown etiology label")
    any_category = df[CATEGORY_FLAGS].any(axis=1)
    if not df["has_cardiac_dx"].astype(bool).eq(any_category).all():
        problems.append("has_cardiac_dx differs from the category flags")
    if any_category[df["cs_etiology"].eq(NO_CARDIAC_DX)].any():
        problems.append(f"{NO_CARDIAC_DX} with a cardiac category flag set")

    if problems:
        raise CohortInvariantError("; ".join(problems))

def assemble_cohort(flags: pd.DataFrame) -> pd.DataFrame:
    """Apply every inclusion stage to the demographics-joined flag table."""
    check_invariants(flags)

    for name, keep in stage_masks(flags):
        log.info("%s: %d stays", name, int(keep.sum()))
    keep = final_mask(flags)

    cohort = flags.loc[keep, COHORT_COLUMNS].sort_values("stay_id").reset_index(drop=True)
    if cohort["cs_etiology"].eq(NO_CARDIAC_DX).any():
        raise CohortInvariantError(f"cohort contains {NO_CARDIAC_DX} stays")

    log.info("Final cohort: %d stays", len(cohort))
    return cohort
