"""
Select ICU stays whose first care unit is the designated unit.
"""

from __future__ import annotations
import logging
import pandas as pd
from cs_cohort.core.config import CARE_UNIT
from cs_cohort.transforms.common import floor_hours

log = logging.getLogger(__name__)

STAY_COLS = ["stay_id", "subject_id", "hadm_id", "icu_intime", "icu_outtime", "icu_los_hours"]

def select_care_unit_stays(icustays: pd.DataFrame, care_unit: str = CARE_UNIT) -> pd.DataFrame:
    df = icustays.loc[icustays["first_careunit"].eq(care_unit)].copy()
    df = df.drop_duplicates(subset=["stay_id"], keep="first")

    df = df.rename(columns={"intime": "icu_intime", "outtime": "icu_outtime"})
    df["icu_intime"] = pd.to_datetime(df["icu_intime"], errors="coerce")
    df["icu_outtime"] = pd.to_datetime(df["icu_outtime"], errors="coerce")
    df["icu_los_hours"] = floor_hours(df["icu_outtime"] - df["icu_intime"])

    log.info("Care unit %r: %d of %d stays", care_unit, len(df), icustays["stay_id"].nunique())
    return df[STAY_COLS].reset_index(drop=True)
