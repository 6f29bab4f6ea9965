"""
CONSORT flow counts: distinct stays surviving each cumulative inclusion stage.
"""

from __future__ import annotations
import logging
import pandas as pd
from cs_cohort.transforms.cohort import CohortInvariantError, final_mask, stage_masks

log = logging.getLogger(__name__)

ALL_ICU_STEP = "Step 0: All ICU Admissions"
CARE_UNIT_STEP = "Step 1: CCU Admissions"
FINAL_STEP = "FINAL COHORT"

def attrition_report(icustays: pd.DataFrame, care_unit_stays: pd.DataFrame, flags: pd.DataFrame) -> pd.DataFrame:
    """
    Rows of (step, n, excluded). excluded is the drop from the previous step,
    empty for the first and the final row. The final row also leaves out
    stays with no admission record.
    """
    rows = [(ALL_ICU_STEP, icustays["stay_id"].nunique(), None)]
    prev = rows[0][1]

    for name, n in [(CARE_UNIT_STEP, care_unit_stays["stay_id"].nunique())] + [
        (name, flags.loc[mask, "stay_id"].nunique()) for name, mask in stage_masks(flags)
    ]:
        if n > prev:
            raise CohortInvariantError(f"{name}: count increased from {prev} to {n}")
        rows.append((name, n, prev - n))
        prev = n

    final = flags.loc[final_mask(flags), "stay_id"].nunique()
    if final > prev:
        raise CohortInvariantError(f"{FINAL_STEP}: count increased from {prev} to {final}")
    rows.append((FINAL_STEP, final, None))
    report = pd.DataFrame(rows, columns=["step", "n", "excluded"])
    report["n"] = report["n"].astype(int)
    report["excluded"] = report["excluded"].astype("Int64")

    for r in report.itertuples(index=False):
        log.info("%-40s n=%-6d excluded=%s", r.step, r.n, "" if pd.isna(r.excluded) else r.excluded)
    return report
