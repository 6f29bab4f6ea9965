"""
Extract hospital-module relations, restricted to admissions with a stay in the
designated care unit.
"""

from __future__ import annotations
import logging
import pandas as pd
from sqlalchemy import select
from cs_cohort.core.config import CARE_UNIT
from cs_cohort.core.criteria import LACTATE_ITEMIDS
from cs_cohort.core.db import read_frame
from cs_cohort.models import (
    IcuStay, Patient, Admission, DiagnosisIcd, LabEvent, MicrobiologyEvent
)

log = logging.getLogger(__name__)

def care_unit_admissions(care_unit: str = CARE_UNIT):
    return select(IcuStay.hadm_id).where(IcuStay.first_careunit == care_unit)

def care_unit_subjects(care_unit: str = CARE_UNIT):
    return select(IcuStay.subject_id).where(IcuStay.first_careunit == care_unit)

def read_patients(engine, care_unit: str = CARE_UNIT) -> pd.DataFrame:
    stmt = (
        select(Patient.subject_id, Patient.gender, Patient.anchor_age)
        .where(Patient.subject_id.in_(care_unit_subjects(care_unit)))
    )
    df = read_frame(engine, stmt)
    log.info("Extracted patients: %d rows", len(df))
    return df

def read_admissions(engine, care_unit: str = CARE_UNIT) -> pd.DataFrame:
    stmt = (
        select(
            Admission.hadm_id, Admission.admittime, Admission.dischtime,
            Admission.deathtime, Admission.hospital_expire_flag,
        )
        .where(Admission.hadm_id.in_(care_unit_admissions(care_unit)))
    )
    df = read_frame(engine, stmt, parse_dates=["admittime", "dischtime", "deathtime"])
    log.info("Extracted admissions: %d rows", len(df))
    return df

def read_diagnoses(engine, care_unit: str = CARE_UNIT) -> pd.DataFrame:
    stmt = (
        select(DiagnosisIcd.hadm_id, DiagnosisIcd.icd_code, DiagnosisIcd.icd_version)
        .where(DiagnosisIcd.hadm_id.in_(care_unit_admissions(care_unit)))
    )
    df = read_frame(engine, stmt)
    log.info("Extracted diagnoses_icd: %d rows", len(df))
    return df

def read_labevents(engine, care_unit: str = CARE_UNIT) -> pd.DataFrame:
    """Lactate measurements only."""
    stmt = (
        select(LabEvent.hadm_id, LabEvent.itemid, LabEvent.charttime, LabEvent.valuenum)
        .where(LabEvent.itemid.in_(LACTATE_ITEMIDS))
        .where(LabEvent.hadm_id.in_(care_unit_admissions(care_unit)))
    )
    df = read_frame(engine, stmt, parse_dates=["charttime"])
    log.info("Extracted lactate labevents: %d rows", len(df))
    return df

def read_microbiology(engine, care_unit: str = CARE_UNIT) -> pd.DataFrame:
    stmt = (
        select(
            MicrobiologyEvent.hadm_id, MicrobiologyEvent.charttime,
            MicrobiologyEvent.spec_type_desc, MicrobiologyEvent.org_name,
        )
        .where(MicrobiologyEvent.hadm_id.in_(care_unit_admissions(care_unit)))
    )
    df = read_frame(engine, stmt, parse_dates=["charttime"])
    log.info("Extracted microbiologyevents: %d rows", len(df))
    return df
