"""
Print the CONSORT flow counts for the cohort.
Run with: python -m cs_cohort.scripts.consort_report
"""
import pandas as pd
from cs_cohort.core.config import CARE_UNIT
from cs_cohort.core.db import get_engine
from cs_cohort.extract import read_sources
from cs_cohort.services.cohort_pipeline import build_cohort

def format_report(consort: pd.DataFrame) -> str:
    lines = [f"{'Step':<42}{'N':>8}{'Excluded':>10}"]
    for r in consort.itertuples(index=False):
        excluded = "" if pd.isna(r.excluded) else f"{int(r.excluded):,}"
        lines.append(f"{r.step:<42}{r.n:>8,}{excluded:>10}")
    return "\n".join(lines)

def main(engine=None, care_unit: str = CARE_UNIT):
    engine = engine or get_engine()
    _, consort = build_cohort(read_sources(engine, care_unit), care_unit)
    print("Cardiogenic Shock Cohort - CONSORT Flow\n")
    print(format_report(consort))
    return consort

if __name__ == "__main__":
    main()
