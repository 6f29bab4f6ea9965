"""
Extract discharge summaries that may document cardiogenic shock.
"""
import logging
import pandas as pd
from sqlalchemy import func, select
from cs_cohort.core.config import CARE_UNIT
from cs_cohort.core.db import read_frame
from cs_cohort.extract.extract_hosp import care_unit_admissions
from cs_cohort.models import DischargeNote

log = logging.getLogger(__name__)

# SQL-side prefilter; the regex in transforms.documentation is authoritative
CS_NOTE_LIKE = "%cardiogenic%shock%"

def read_discharge_notes(engine, care_unit: str = CARE_UNIT) -> pd.DataFrame:
    stmt = (
        select(DischargeNote.hadm_id, DischargeNote.text)
        .where(DischargeNote.hadm_id.in_(care_unit_admissions(care_unit)))
        .where(func.lower(DischargeNote.text).like(CS_NOTE_LIKE))
    )
    df = read_frame(engine, stmt)
    log.info("Extracted candidate discharge notes: %d rows", len(df))
    return df
