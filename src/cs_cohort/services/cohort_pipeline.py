"""
Cohort service - orchestrates extract, derive, and load for the CS cohort
"""
from __future__ import annotations
import logging
import pandas as pd
from cs_cohort.core.config import CARE_UNIT
from cs_cohort.core.db import get_engine
from cs_cohort.extract import read_sources
from cs_cohort.transforms.admission_filter import select_care_unit_stays
from cs_cohort.transforms.attrition import attrition_report
from cs_cohort.transforms.cardiac_diagnoses import classify_cardiac_diagnoses
from cs_cohort.transforms.cohort import assemble_cohort, attach_demographics
from cs_cohort.transforms.cultures import resolve_cultures
from cs_cohort.transforms.documentation import resolve_documentation
from cs_cohort.transforms.shock_criteria import aggregate_shock_criteria
from cs_cohort.load.load_to_db import load_cohort, write_outputs

log = logging.getLogger(__name__)

def derive_stay_flags(sources: dict, care_unit: str = CARE_UNIT) -> tuple[pd.DataFrame, pd.DataFrame]:
    """Care-unit stays, and every derived flag joined with demographics and outcomes."""
    stays = select_care_unit_stays(sources["icustays"], care_unit)

    flags = resolve_documentation(stays, sources["diagnoses_icd"], sources["discharge"])
    flags = classify_cardiac_diagnoses(flags, sources["diagnoses_icd"])
    flags = resolve_cultures(flags, sources["microbiologyevents"], sources["icustays"])
    flags = aggregate_shock_criteria(
        flags, sources["chartevents"], sources["vasoactive_agent"], sources["labevents"]
    )
    flags = attach_demographics(flags, sources["patients"], sources["admissions"])
    return stays, flags

def build_cohort(sources: dict, care_unit: str = CARE_UNIT) -> tuple[pd.DataFrame, pd.DataFrame]:
    """Return (cohort, consort flow) for in-memory source frames."""
    stays, flags = derive_stay_flags(sources, care_unit)
    cohort = assemble_cohort(flags)
    consort = attrition_report(sources["icustays"], stays, flags)
    return cohort, consort

def run_cohort(engine=None, care_unit: str = CARE_UNIT, write_csv: bool = True, load_db: bool = True) -> dict:
    """Execute the complete cohort pipeline against the source database"""
    engine = engine or get_engine()
    try:
        log.info("Extracting source relations...")
        sources = read_sources(engine, care_unit)

        log.info("Deriving cohort...")
        cohort, consort = build_cohort(sources, care_unit)

        if write_csv:
            write_outputs(cohort, consort)
        if load_db:
            load_cohort(engine, cohort)

        stats = {"stays": len(cohort), "admissions": cohort["hadm_id"].nunique(),
                 "subjects": cohort["subject_id"].nunique()}
        log.info(f"Pipeline complete: {stats}")
        return {"cohort": cohort, "consort": consort, "stats": stats}

    except Exception as e:
        log.error(f"Cohort pipeline failed: {e}", exc_info=True)
        raise
