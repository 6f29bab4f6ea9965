"""
Write the derived cohort and CONSORT flow.
- CSV files under data/output for the analysis notebook.
- The cs_cohort table, replaced on every run. Source tables are never written.
"""

from __future__ import annotations
import logging
from pathlib import Path
import numpy as np
import pandas as pd
from sqlalchemy import delete
from sqlalchemy.orm import Session
from cs_cohort.core.config import COHORT_OUTPUT, CONSORT_OUTPUT
from cs_cohort.core.db import create_tables
from cs_cohort.models import CohortStay

log = logging.getLogger(__name__)

def _py(v):
    if pd.isna(v):
        return None
    if isinstance(v, pd.Timestamp):
        return v.to_pydatetime()
    if isinstance(v, np.generic):
        return v.item()
    return v

def _nan_to_none_dicts(df: pd.DataFrame, cols: list[str]) -> list[dict]:
    """Convert a DataFrame subset to list-of-dicts of plain Python values (NaN/NaT/NA -> None)."""
    return [{k: _py(v) for k, v in rec.items()} for rec in df[cols].to_dict("records")]

def write_outputs(
    cohort: pd.DataFrame,
    consort: pd.DataFrame,
    cohort_path: str | Path = COHORT_OUTPUT,
    consort_path: str | Path = CONSORT_OUTPUT,
) -> None:
    Path(cohort_path).parent.mkdir(parents=True, exist_ok=True)
    cohort.to_csv(cohort_path, index=False)
    log.info("Saved cohort: %s (%d rows)", cohort_path, len(cohort))

    Path(consort_path).parent.mkdir(parents=True, exist_ok=True)
    consort.to_csv(consort_path, index=False)
    log.info("Saved CONSORT flow: %s", consort_path)

def load_cohort(engine, cohort: pd.DataFrame) -> int:
    create_tables(engine)
    allowed = [c.name for c in CohortStay.__table__.columns]
    cols = [c for c in cohort.columns if c in allowed]

    with Session(engine) as session:
        try:
            session.execute(delete(CohortStay))
            objs = [CohortStay(**rec) for rec in _nan_to_none_dicts(cohort, cols)]
            session.bulk_save_objects(objs)
            session.commit()
            log.info("Cohort table: inserted %d", len(objs))
        except Exception as e:
            session.rollback()
            log.error("Cohort load failed; rolled back: %s", e, exc_info=True)
            raise
    return len(objs)
