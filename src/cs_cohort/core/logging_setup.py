import logging
import logging.handlers
import re
from pathlib import Path
from cs_cohort.core.config import CARE_UNIT, LOGS_DIR, LOG_LEVEL

DEFAULT_FMT = "%(asctime)s - %(levelname)-5s - %(message)s"
DATE_FMT = "%Y-%m-%d %H:%M:%S"

def log_file_name(care_unit: str = CARE_UNIT) -> str:
    """cohort_<unit>.log, using the unit's abbreviation in parentheses when present.

    >>> log_file_name("Coronary Care Unit (CCU)")
    'cohort_ccu.log'
    """
    abbrev = re.search(r"\(([^)]+)\)", care_unit)
    name = abbrev.group(1) if abbrev else care_unit
    slug = re.sub(r"[^a-z0-9]+", "_", name.lower()).strip("_") or "unit"
    return f"cohort_{slug}.log"

def setup_logging(level: str = LOG_LEVEL, care_unit: str = CARE_UNIT, logs_dir: Path = LOGS_DIR) -> Path:
    """Console plus a rotating file per care unit, so runs for different units keep separate logs."""
    log_path = Path(logs_dir) / log_file_name(care_unit)
    if getattr(setup_logging, "_configured", None) == log_path:
        return log_path  # prevent double-config
    log_path.parent.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    root.setLevel(level.upper())
    formatter = logging.Formatter(DEFAULT_FMT, datefmt=DATE_FMT)

    # drop handlers from an earlier call for another unit
    for handler in getattr(setup_logging, "_handlers", []):
        root.removeHandler(handler)
        handler.close()

    ch = logging.StreamHandler()
    fh = logging.handlers.RotatingFileHandler(
        log_path, maxBytes=2_000_000, backupCount=3, encoding="utf-8"
    )
    for handler in (ch, fh):
        handler.setFormatter(formatter)
        root.addHandler(handler)

    setup_logging._handlers = [ch, fh]
    setup_logging._configured = log_path
    return log_path
