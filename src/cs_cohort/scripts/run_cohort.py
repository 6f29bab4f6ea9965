"""
CLI wrapper for the cardiogenic shock cohort pipeline.
Run with:
    python -m cs_cohort.scripts.run_cohort
    python -m cs_cohort.scripts.run_cohort --care-unit "Coronary Care Unit (CCU)" --no-db
"""
import argparse
import logging
from cs_cohort.core.config import CARE_UNIT
from cs_cohort.core.logging_setup import setup_logging
from cs_cohort.services.cohort_pipeline import run_cohort

def parse_args(argv=None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Derive the cardiogenic shock ICU cohort.")
    p.add_argument("--care-unit", default=CARE_UNIT, help="first_careunit to select")
    p.add_argument("--no-db", action="store_true", help="skip loading the cs_cohort table")
    p.add_argument("--no-csv", action="store_true", help="skip writing CSV outputs")
    return p.parse_args(argv)

def main(argv=None):
    args = parse_args(argv)
    setup_logging(care_unit=args.care_unit)
    log = logging.getLogger(__name__)

    log.info("Starting cardiogenic shock cohort pipeline")
    result = run_cohort(care_unit=args.care_unit, write_csv=not args.no_csv, load_db=not args.no_db)
    log.info(f"Pipeline complete: {result['stats']}")
    return result

if __name__ == "__main__":
    main()
