"""
Extract ICU-module relations: stays, blood pressure chart events, vasoactive agents.
Event tables are pushed down to stays of the designated care unit.
"""

from __future__ import annotations
import logging
import pandas as pd
from sqlalchemy import select
from cs_cohort.core.config import CARE_UNIT
from cs_cohort.core.criteria import SBP_ITEMIDS, VASOPRESSOR_AGENTS
from cs_cohort.core.db import read_frame
from cs_cohort.models import IcuStay, ChartEvent, VasoactiveAgent

log = logging.getLogger(__name__)

def care_unit_stays(care_unit: str = CARE_UNIT):
    return select(IcuStay.stay_id).where(IcuStay.first_careunit == care_unit)

def read_icustays(engine) -> pd.DataFrame:
    """All ICU stays (every unit); needed for the attrition count and culture windows."""
    stmt = select(
        IcuStay.stay_id, IcuStay.subject_id, IcuStay.hadm_id,
        IcuStay.first_careunit, IcuStay.intime, IcuStay.outtime,
    )
    df = read_frame(engine, stmt, parse_dates=["intime", "outtime"])
    log.info("Extracted icustays: %d rows", len(df))
    return df

def read_chartevents(engine, care_unit: str = CARE_UNIT) -> pd.DataFrame:
    stmt = (
        select(ChartEvent.stay_id, ChartEvent.itemid, ChartEvent.charttime, ChartEvent.valuenum)
        .where(ChartEvent.itemid.in_(SBP_ITEMIDS))
        .where(ChartEvent.stay_id.in_(care_unit_stays(care_unit)))
    )
    df = read_frame(engine, stmt, parse_dates=["charttime"])
    log.info("Extracted systolic BP chartevents: %d rows", len(df))
    return df

def read_vasoactive_agent(engine, care_unit: str = CARE_UNIT) -> pd.DataFrame:
    agents = [getattr(VasoactiveAgent, a) for a in VASOPRESSOR_AGENTS]
    stmt = (
        select(VasoactiveAgent.stay_id, VasoactiveAgent.starttime, VasoactiveAgent.endtime, *agents)
        .where(VasoactiveAgent.stay_id.in_(care_unit_stays(care_unit)))
    )
    df = read_frame(engine, stmt, parse_dates=["starttime", "endtime"])
    log.info("Extracted vasoactive_agent: %d rows", len(df))
    return df
