"""
End-to-end tests against an in-memory SQLite copy of the MIMIC-IV relations
"""
import pandas as pd
import pytest
from sqlalchemy import func, select
from cs_cohort.core.db import MissingSourceTableError, create_tables, get_engine, missing_source_tables
from cs_cohort.extract import read_sources
from cs_cohort.load.load_to_db import load_cohort, write_outputs
from cs_cohort.models import CohortStay
from cs_cohort.scripts import check_db, consort_report, run_cohort as run_cohort_script
from cs_cohort.services.cohort_pipeline import build_cohort, run_cohort
from conftest import CCU, NO_SCHEMAS

def test_read_sources_restricts_to_care_unit(scenario_engine):
    sources = read_sources(scenario_engine, CCU)
    assert len(sources["icustays"]) == 9  # all units, for the step 0 count
    assert 1008 not in sources["admissions"]["hadm_id"].tolist()
    assert sources["discharge"]["hadm_id"].tolist() == [1003]  # LIKE prefilter
    assert pd.api.types.is_datetime64_any_dtype(sources["chartevents"]["charttime"])

def test_missing_source_tables_are_reported():
    eng = get_engine("sqlite://", schemas=NO_SCHEMAS)
    create_tables(eng)  # output table only
    assert "icustays" in missing_source_tables(eng)
    with pytest.raises(MissingSourceTableError, match="icustays"):
        read_sources(eng, CCU)
    eng.dispose()

def test_database_matches_in_memory_run(scenario_engine, sources):
    from_db, consort_db = build_cohort(read_sources(scenario_engine, CCU), CCU)
    in_memory, consort = build_cohort(sources, CCU)
    assert from_db["stay_id"].tolist() == in_memory["stay_id"].tolist() == [1, 2, 3]
    assert consort_db["n"].tolist() == consort["n"].tolist()

def test_run_cohort_loads_table(scenario_engine):
    result = run_cohort(scenario_engine, CCU, write_csv=False, load_db=True)
    assert result["stats"] == {"stays": 3, "admissions": 3, "subjects": 3}

    with scenario_engine.connect() as conn:
        n = conn.execute(select(func.count()).select_from(CohortStay.__table__)).scalar_one()
    assert n == 3

def test_reload_replaces_rows(scenario_engine):
    """Running twice leaves one copy of the cohort"""
    run_cohort(scenario_engine, CCU, write_csv=False)
    run_cohort(scenario_engine, CCU, write_csv=False)
    with scenario_engine.connect() as conn:
        ids = conn.execute(select(CohortStay.stay_id).order_by(CohortStay.stay_id)).scalars().all()
    assert ids == [1, 2, 3]

def test_loaded_outcomes_keep_nulls(scenario_engine, sources):
    cohort, _ = build_cohort(sources)
    load_cohort(scenario_engine, cohort)
    with scenario_engine.connect() as conn:
        rows = dict(conn.execute(select(CohortStay.stay_id, CohortStay.hours_to_death)).all())
    assert rows == {1: 30, 2: None, 3: None}

def test_run_cohort_failure_propagates():
    eng = get_engine("sqlite://", schemas=NO_SCHEMAS)
    with pytest.raises(MissingSourceTableError):
        run_cohort(eng, CCU, write_csv=False, load_db=False)
    eng.dispose()

def test_write_outputs(tmp_path, sources):
    cohort, consort = build_cohort(sources)
    cohort_path = tmp_path / "out" / "cs_cohort.csv"
    consort_path = tmp_path / "out" / "consort_flow.csv"
    write_outputs(cohort, consort, cohort_path, consort_path)

    written = pd.read_csv(cohort_path)
    assert list(written.columns) == list(cohort.columns)
    assert written["stay_id"].tolist() == [1, 2, 3]
    assert pd.read_csv(consort_path)["n"].tolist() == consort["n"].tolist()

def test_check_db_counts(scenario_engine, capsys):
    counts = check_db.main(scenario_engine)
    assert counts["icustays"] == 9
    assert counts["discharge"] == 2
    assert "SUCCESS" in capsys.readouterr().out

def test_check_db_flags_missing_tables(capsys):
    eng = get_engine("sqlite://", schemas=NO_SCHEMAS)
    counts = check_db.main(eng)
    assert counts["icustays"] is None
    assert "MISSING" in capsys.readouterr().out
    eng.dispose()

def test_consort_report(scenario_engine, capsys):
    consort = consort_report.main(scenario_engine, CCU)
    out = capsys.readouterr().out
    assert "FINAL COHORT" in out
    assert consort["n"].iloc[-1] == 3
    lines = consort_report.format_report(consort).splitlines()
    assert len(lines) == len(consort) + 1

def test_cli_arguments():
    args = run_cohort_script.parse_args(["--care-unit", "MICU", "--no-db"])
    assert args.care_unit == "MICU"
    assert args.no_db and not args.no_csv
    assert run_cohort_script.parse_args([]).care_unit == CCU
