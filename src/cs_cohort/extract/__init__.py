"""
Extract MIMIC-IV source relations into DataFrames.
"""
import logging
from cs_cohort.core.config import CARE_UNIT
from cs_cohort.core.db import require_source_tables
from cs_cohort.extract.extract_icu import read_icustays, read_chartevents, read_vasoactive_agent
from cs_cohort.extract.extract_hosp import (
    read_patients, read_admissions, read_diagnoses, read_labevents, read_microbiology
)
from cs_cohort.extract.extract_notes import read_discharge_notes

log = logging.getLogger(__name__)

def read_sources(engine, care_unit: str = CARE_UNIT) -> dict:
    """Read every relation the pipeline needs, keyed by table name."""
    require_source_tables(engine)
    log.info("Extracting sources for care unit %r", care_unit)
    return {
        "icustays": read_icustays(engine),
        "chartevents": read_chartevents(engine, care_unit),
        "vasoactive_agent": read_vasoactive_agent(engine, care_unit),
        "patients": read_patients(engine, care_unit),
        "admissions": read_admissions(engine, care_unit),
        "diagnoses_icd": read_diagnoses(engine, care_unit),
        "labevents": read_labevents(engine, care_unit),
        "microbiologyevents": read_microbiology(engine, care_unit),
        "discharge": read_discharge_notes(engine, care_unit),
    }
