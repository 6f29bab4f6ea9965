"""
Check the database connection and the MIMIC-IV source tables.
Run with: python -m cs_cohort.scripts.check_db
"""
from sqlalchemy import func, inspect, select
from cs_cohort.core.db import get_engine, qualified_name, translated_schema
from cs_cohort.models import SOURCE_TABLES

def main(engine=None) -> dict:
    counts = {}
    try:
        engine = engine or get_engine()
        insp = inspect(engine)

        print("Database Connection: SUCCESS\n")
        print("Source tables:")

        with engine.connect() as conn:
            for model in SOURCE_TABLES:
                name = qualified_name(engine, model)
                if not insp.has_table(model.__tablename__, schema=translated_schema(engine, model)):
                    print(f"  - {name}: MISSING")
                    counts[name] = None
                    continue
                count = conn.execute(select(func.count()).select_from(model.__table__)).scalar_one()
                counts[name] = count
                print(f"  - {name}: {count} rows")

    except Exception as e:
        print(f"Database Connection: FAILED")
        print(f"Error: {e}")
    return counts

if __name__ == "__main__":
    main()
