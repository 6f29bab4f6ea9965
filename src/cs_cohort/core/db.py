import logging
import pandas as pd
from sqlalchemy import create_engine, inspect
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool
from cs_cohort.core.config import DATABASE_URL, SOURCE_SCHEMAS
from cs_cohort.models.tables import Base, CohortStay, SOURCE_TABLES

log = logging.getLogger(__name__)

class MissingSourceTableError(RuntimeError):
    """A required MIMIC-IV source relation is not present in the database."""

def get_engine(url: str = DATABASE_URL, schemas: dict | None = None):
    schemas = SOURCE_SCHEMAS if schemas is None else schemas
    kwargs = {}
    if url in ("sqlite://", "sqlite:///:memory:"):
        # single shared connection so in-memory tables survive between checkouts
        kwargs = {"poolclass": StaticPool, "connect_args": {"check_same_thread": False}}
    try:
        return create_engine(
            url,
            echo=False,
            execution_options={"schema_translate_map": dict(schemas)},
            **kwargs,
        )
    except SQLAlchemyError as e:
        log.error("Failed to create engine: %s", e)
        raise

def translated_schema(engine, model) -> str | None:
    schema = model.__table__.schema
    translate = engine.get_execution_options().get("schema_translate_map") or {}
    return translate.get(schema, schema)

def qualified_name(engine, model) -> str:
    schema = translated_schema(engine, model)
    name = model.__tablename__
    return f"{schema}.{name}" if schema else name

def missing_source_tables(engine) -> list[str]:
    insp = inspect(engine)
    return [
        qualified_name(engine, m) for m in SOURCE_TABLES
        if not insp.has_table(m.__tablename__, schema=translated_schema(engine, m))
    ]

def require_source_tables(engine) -> None:
    missing = missing_source_tables(engine)
    if missing:
        log.error("Missing source tables: %s", ", ".join(missing))
        raise MissingSourceTableError(f"Missing source tables: {', '.join(missing)}")

def create_tables(engine=None, include_sources: bool = False):
    """Create missing tables (idempotent). Sources only for local/test databases."""
    engine = engine or get_engine()
    models = [CohortStay] + (SOURCE_TABLES if include_sources else [])
    insp = inspect(engine)
    missing = [
        m for m in models
        if not insp.has_table(m.__tablename__, schema=translated_schema(engine, m))
    ]

    if not missing:
        log.info("All tables exist. Skipping creation.")
        return engine

    log.info("Creating tables: %s", ", ".join(qualified_name(engine, m) for m in missing))
    Base.metadata.create_all(engine, tables=[m.__table__ for m in missing])
    log.info("Tables created.")
    return engine

def read_frame(engine, stmt, parse_dates: list[str] | None = None):
    """Run a select against the source database and return a DataFrame."""
    with engine.connect() as conn:
        df = pd.read_sql(stmt, conn)
    for c in parse_dates or []:
        if c in df.columns:
            df[c] = pd.to_datetime(df[c], errors="coerce")
    return df
