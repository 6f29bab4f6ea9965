"""
Shared fixtures: an in-memory MIMIC-IV style database and matching DataFrames.

Scenario stays (all CCU unless noted), T0 = ICU intime:
  1  documented by ICD 78551, AMI, LOS 10h, age 45, died at T0+30h  -> included
  2  no documentation, SBP 85 + lactate 2.5, HF, LOS 12h, age 30    -> included
  3  documented by note, positive blood culture at +5h, HF          -> included
  4  no documentation, one criterion, positive culture, arrhythmia  -> excluded (step 4)
  5  documented, age 17                                             -> excluded (step 2a)
  6  documented, LOS 5h                                             -> excluded (step 2b)
  7  documented, no cardiac diagnosis                               -> excluded (step 3)
  8  MICU stay                                                      -> excluded (step 1)
  9  no documentation, two criteria, positive culture at +1h        -> excluded (step 5)
"""
from datetime import datetime, timedelta
import pandas as pd
import pytest
from sqlalchemy.orm import Session
from cs_cohort.core.db import create_tables, get_engine
from cs_cohort.models import (
    IcuStay, ChartEvent, VasoactiveAgent, Patient, Admission,
    DiagnosisIcd, LabEvent, MicrobiologyEvent, DischargeNote,
)

CCU = "Coronary Care Unit (CCU)"
MICU = "Medical Intensive Care Unit (MICU)"
T0 = datetime(2150, 1, 1, 8, 0)

NO_SCHEMAS = {"icu": None, "hosp": None, "note": None, "derived": None}

def h(hours: float) -> datetime:
    return T0 + timedelta(hours=hours)

# (stay_id, hadm_id, subject_id, care unit, LOS hours, age)
STAYS = [
    (1, 1001, 101, CCU, 10, 45),
    (2, 1002, 102, CCU, 12, 30),
    (3, 1003, 103, CCU, 20, 60),
    (4, 1004, 104, CCU, 30, 70),
    (5, 1005, 105, CCU, 15, 17),
    (6, 1006, 106, CCU, 5, 55),
    (7, 1007, 107, CCU, 15, 65),
    (8, 1008, 108, MICU, 40, 50),
    (9, 1009, 109, CCU, 25, 80),
]

def scenario_rows() -> dict:
    rows = {
        IcuStay: [
            dict(stay_id=s, hadm_id=a, subject_id=p, first_careunit=u, last_careunit=u,
                 intime=T0, outtime=h(los))
            for s, a, p, u, los, _ in STAYS
        ],
        Patient: [
            dict(subject_id=p, gender="M" if s % 2 else "F", anchor_age=age)
            for s, a, p, u, los, age in STAYS
        ],
        Admission: [
            dict(hadm_id=a, subject_id=p, admittime=h(-2), dischtime=h(100),
                 deathtime=None, hospital_expire_flag=0)
            for s, a, p, u, los, _ in STAYS
        ],
        DiagnosisIcd: [
            dict(hadm_id=1001, seq_num=1, icd_code="78551", icd_version=9, subject_id=101),
            dict(hadm_id=1001, seq_num=2, icd_code="41071", icd_version=9, subject_id=101),
            dict(hadm_id=1001, seq_num=3, icd_code="42731", icd_version=9, subject_id=101),
            dict(hadm_id=1002, seq_num=1, icd_code="4280", icd_version=9, subject_id=102),
            dict(hadm_id=1003, seq_num=1, icd_code="I5021", icd_version=10, subject_id=103),
            dict(hadm_id=1004, seq_num=1, icd_code="42731", icd_version=9, subject_id=104),
            dict(hadm_id=1005, seq_num=1, icd_code="R570", icd_version=10, subject_id=105),
            dict(hadm_id=1005, seq_num=2, icd_code="I214", icd_version=10, subject_id=105),
            dict(hadm_id=1006, seq_num=1, icd_code="R570", icd_version=10, subject_id=106),
            dict(hadm_id=1006, seq_num=2, icd_code="I214", icd_version=10, subject_id=106),
            dict(hadm_id=1007, seq_num=1, icd_code="R570", icd_version=10, subject_id=107),
            dict(hadm_id=1007, seq_num=2, icd_code="J189", icd_version=10, subject_id=107),
            dict(hadm_id=1008, seq_num=1, icd_code="R570", icd_version=10, subject_id=108),
            dict(hadm_id=1008, seq_num=2, icd_code="I214", icd_version=10, subject_id=108),
            dict(hadm_id=1009, seq_num=1, icd_code="I214", icd_version=10, subject_id=109),
        ],
        DischargeNote: [
            dict(note_id="103-DS-1", hadm_id=1003, subject_id=103, charttime=h(200),
                 text="Admitted with CARDIOGENIC SHOCK requiring inotropes."),
            dict(note_id="104-DS-1", hadm_id=1004, subject_id=104, charttime=h(200),
                 text="Septic shock, no evidence of cardiac cause."),
        ],
        ChartEvent: [
            dict(stay_id=2, itemid=220179, charttime=h(2), valuenum=85.0, hadm_id=1002, subject_id=102),
            dict(stay_id=2, itemid=220179, charttime=h(30), valuenum=70.0, hadm_id=1002, subject_id=102),
            dict(stay_id=9, itemid=220050, charttime=h(1), valuenum=80.0, hadm_id=1009, subject_id=109),
        ],
        LabEvent: [
            dict(labevent_id=1, hadm_id=1002, subject_id=102, itemid=50813, charttime=h(3), valuenum=2.5),
        ],
        VasoactiveAgent: [
            dict(stay_id=4, starttime=h(1), endtime=h(5), norepinephrine=0.1),
            dict(stay_id=9, starttime=h(2), endtime=h(8), dopamine=10.0),
        ],
        MicrobiologyEvent: [
            dict(microevent_id=1, hadm_id=1003, subject_id=103, charttime=h(5),
                 spec_type_desc="BLOOD CULTURE", org_name="STAPH AUREUS COAG +"),
            dict(microevent_id=2, hadm_id=1004, subject_id=104, charttime=h(6),
                 spec_type_desc="BLOOD CULTURE", org_name="ESCHERICHIA COLI"),
            dict(microevent_id=3, hadm_id=1009, subject_id=109, charttime=h(1),
                 spec_type_desc="BLOOD CULTURE", org_name="KLEBSIELLA PNEUMONIAE"),
        ],
    }
    # stay 1 dies in hospital 30h after ICU admission
    rows[Admission][0].update(deathtime=h(30), hospital_expire_flag=1)
    return rows

SOURCE_COLUMNS = {
    "icustays": ["stay_id", "subject_id", "hadm_id", "first_careunit", "intime", "outtime"],
    "chartevents": ["stay_id", "itemid", "charttime", "valuenum"],
    "vasoactive_agent": ["stay_id", "starttime", "endtime", "norepinephrine",
                         "epinephrine", "dopamine", "vasopressin", "phenylephrine"],
    "patients": ["subject_id", "gender", "anchor_age"],
    "admissions": ["hadm_id", "admittime", "dischtime", "deathtime", "hospital_expire_flag"],
    "diagnoses_icd": ["hadm_id", "icd_code", "icd_version"],
    "labevents": ["hadm_id", "itemid", "charttime", "valuenum"],
    "microbiologyevents": ["hadm_id", "charttime", "spec_type_desc", "org_name"],
    "discharge": ["hadm_id", "text"],
}
DATE_COLUMNS = {"intime", "outtime", "charttime", "starttime", "endtime",
                "admittime", "dischtime", "deathtime"}
ID_COLUMNS = {"stay_id", "subject_id", "hadm_id", "itemid"}

def frame(table: str, rows: list[dict]) -> pd.DataFrame:
    """DataFrame shaped like the extract step's output for one relation."""
    cols = SOURCE_COLUMNS[table]
    df = pd.DataFrame([{c: r.get(c) for c in cols} for r in rows], columns=cols)
    for c in cols:
        if c in DATE_COLUMNS:
            df[c] = pd.to_datetime(df[c])
        elif c in ID_COLUMNS:
            df[c] = df[c].astype("int64")
    return df

def frames_from_rows(rows: dict) -> dict:
    return {model.__tablename__: frame(model.__tablename__, r) for model, r in rows.items()}

@pytest.fixture
def rows():
    return scenario_rows()

@pytest.fixture
def sources(rows):
    return frames_from_rows(rows)

@pytest.fixture
def empty_sources():
    return {table: frame(table, []) for table in SOURCE_COLUMNS}

@pytest.fixture
def engine():
    eng = get_engine("sqlite://", schemas=NO_SCHEMAS)
    create_tables(eng, include_sources=True)
    yield eng
    eng.dispose()

@pytest.fixture
def scenario_engine(engine, rows):
    with Session(engine) as session:
        for model, records in rows.items():
            session.add_all([model(**r) for r in records])
        session.commit()
    return engine
