"""
ORM models for the MIMIC-IV source relations and the cohort output table.

Source tables carry symbolic schemas ("icu", "hosp", "note", "derived") that
core.db translates to the configured schema names at engine creation.
MIMIC-IV declares no primary keys on several event tables; the composite
keys below only exist so the tables can be mapped and created locally.
"""

from sqlalchemy.orm import DeclarativeBase
from sqlalchemy import (
    Boolean, Column, DateTime, Float, Integer, SmallInteger, String, Text
)

class Base(DeclarativeBase):
    pass

# icu
class IcuStay(Base):
    __tablename__ = "icustays"
    __table_args__ = {"schema": "icu"}

    stay_id        = Column(Integer, primary_key=True)
    subject_id     = Column(Integer, nullable=False)
    hadm_id        = Column(Integer, nullable=False)
    first_careunit = Column(String(255))
    last_careunit  = Column(String(255))
    intime         = Column(DateTime)
    outtime        = Column(DateTime)

class ChartEvent(Base):
    __tablename__ = "chartevents"
    __table_args__ = {"schema": "icu"}

    stay_id    = Column(Integer, primary_key=True)
    itemid     = Column(Integer, primary_key=True)
    charttime  = Column(DateTime, primary_key=True)
    subject_id = Column(Integer)
    hadm_id    = Column(Integer)
    valuenum   = Column(Float)
    valueuom   = Column(String(50))

# derived
class VasoactiveAgent(Base):
    __tablename__ = "vasoactive_agent"
    __table_args__ = {"schema": "derived"}

    stay_id        = Column(Integer, primary_key=True)
    starttime      = Column(DateTime, primary_key=True)
    endtime        = Column(DateTime)
    dopamine       = Column(Float)
    epinephrine    = Column(Float)
    norepinephrine = Column(Float)
    phenylephrine  = Column(Float)
    vasopressin    = Column(Float)

# hosp
class Patient(Base):
    __tablename__ = "patients"
    __table_args__ = {"schema": "hosp"}

    subject_id  = Column(Integer, primary_key=True)
    gender      = Column(String(1))
    anchor_age  = Column(Integer)
    anchor_year = Column(Integer)
    dod         = Column(DateTime)

class Admission(Base):
    __tablename__ = "admissions"
    __table_args__ = {"schema": "hosp"}

    hadm_id              = Column(Integer, primary_key=True)
    subject_id           = Column(Integer, nullable=False)
    admittime            = Column(DateTime)
    dischtime            = Column(DateTime)
    deathtime            = Column(DateTime)
    hospital_expire_flag = Column(SmallInteger)

class DiagnosisIcd(Base):
    __tablename__ = "diagnoses_icd"
    __table_args__ = {"schema": "hosp"}

    hadm_id     = Column(Integer, primary_key=True)
    seq_num     = Column(Integer, primary_key=True)
    icd_code    = Column(String(7), primary_key=True)
    subject_id  = Column(Integer)
    icd_version = Column(SmallInteger)

class LabEvent(Base):
    __tablename__ = "labevents"
    __table_args__ = {"schema": "hosp"}

    labevent_id = Column(Integer, primary_key=True)
    subject_id  = Column(Integer)
    hadm_id     = Column(Integer)
    itemid      = Column(Integer)
    charttime   = Column(DateTime)
    valuenum    = Column(Float)
    valueuom    = Column(String(20))

class MicrobiologyEvent(Base):
    __tablename__ = "microbiologyevents"
    __table_args__ = {"schema": "hosp"}

    microevent_id  = Column(Integer, primary_key=True)
    subject_id     = Column(Integer)
    hadm_id        = Column(Integer)
    charttime      = Column(DateTime)
    spec_type_desc = Column(String(100))
    org_name       = Column(String(100))

# note
class DischargeNote(Base):
    __tablename__ = "discharge"
    __table_args__ = {"schema": "note"}

    note_id    = Column(String(25), primary_key=True)
    subject_id = Column(Integer)
    hadm_id    = Column(Integer)
    charttime  = Column(DateTime)
    text       = Column(Text)

# output
class CohortStay(Base):
    __tablename__ = "cs_cohort"

    stay_id                    = Column(Integer, primary_key=True)
    subject_id                 = Column(Integer, nullable=False)
    hadm_id                    = Column(Integer, nullable=False)
    icu_intime                 = Column(DateTime)
    icu_outtime                = Column(DateTime)
    icu_los_hours              = Column(Integer)
    has_cardiac_dx             = Column(Boolean)
    has_ami                    = Column(Boolean)
    has_hf                     = Column(Boolean)
    has_cardiomyopathy         = Column(Boolean)
    has_arrhythmia             = Column(Boolean)
    has_valvular               = Column(Boolean)
    cs_etiology                = Column(String(30))
    has_cs_doc                 = Column(Boolean)
    has_cs_icd                 = Column(Boolean)
    has_cs_note                = Column(Boolean)
    has_hypotension_24h        = Column(Boolean)
    has_vasopressor_24h        = Column(Boolean)
    has_lactate_24h            = Column(Boolean)
    criteria_0to24h_count      = Column(SmallInteger)
    has_positive_blood_culture = Column(Boolean)
    has_positive_bc_24h        = Column(Boolean)
    age                        = Column(Integer)
    gender                     = Column(String(1))
    admittime                  = Column(DateTime)
    dischtime                  = Column(DateTime)
    deathtime                  = Column(DateTime)
    hospital_expire_flag       = Column(SmallInteger)
    hours_to_death             = Column(Integer)
    alive_at_24h               = Column(Boolean)
    alive_at_48h               = Column(Boolean)

SOURCE_TABLES = [
    IcuStay, ChartEvent, VasoactiveAgent, Patient, Admission,
    DiagnosisIcd, LabEvent, MicrobiologyEvent, DischargeNote,
]
