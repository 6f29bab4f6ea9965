
from pathlib import Path
import os
from dotenv import load_dotenv

load_dotenv()

# project paths
BASE_DIR   = Path(__file__).resolve().parent.parent.parent.parent
DATA_DIR   = Path(os.getenv("CS_DATA_DIR", BASE_DIR / "data"))
OUTPUT_DIR = DATA_DIR / "output"
LOGS_DIR   = DATA_DIR / "logs"

# output files
COHORT_OUTPUT  = OUTPUT_DIR / "cs_cohort.csv"
CONSORT_OUTPUT = OUTPUT_DIR / "consort_flow.csv"
COHORT_TABLE   = "cs_cohort"

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# cohort
CARE_UNIT = os.getenv("CARE_UNIT", "Coronary Care Unit (CCU)")

# Database
DB_USER = os.getenv("DB_USER")
DB_PASSWORD = os.getenv("DB_PASSWORD")
DB_HOST = os.getenv("DB_HOST", "localhost")
DB_PORT = os.getenv("DB_PORT", "5432")
DB_NAME = os.getenv("DB_NAME")


def _database_url() -> str:
    url = os.getenv("DATABASE_URL")
    if url:
        return url
    if all([DB_USER, DB_PASSWORD, DB_NAME]):
        return f"postgresql://{DB_USER}:{DB_PASSWORD}@{DB_HOST}:{DB_PORT}/{DB_NAME}"
    return f"sqlite:///{DATA_DIR / 'mimic.db'}"


DATABASE_URL = _database_url()

# MIMIC-IV schemas; blank means unqualified table names (e.g. SQLite)
SOURCE_SCHEMAS = {
    "icu":     os.getenv("ICU_SCHEMA", "mimiciv_icu") or None,
    "hosp":    os.getenv("HOSP_SCHEMA", "mimiciv_hosp") or None,
    "note":    os.getenv("NOTE_SCHEMA", "mimiciv_note") or None,
    "derived": os.getenv("DERIVED_SCHEMA", "mimiciv_derived") or None,
}
if DATABASE_URL.startswith("sqlite"):
    SOURCE_SCHEMAS = {k: None for k in SOURCE_SCHEMAS}
