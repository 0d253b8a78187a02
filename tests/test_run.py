import logging
import os

import httpx
import pytest
from sqlalchemy import create_engine, inspect
from sqlalchemy.exc import OperationalError

from gridwatch.ingest.client import SourceClient
from gridwatch.ingest.errors import TransportError
from gridwatch.jobs import run

TABLES = {"RegionData", "Totals", "GenerationData", "FuelCost", "Metrics", "ByFuel", "LoadPerSite", "Units"}


@pytest.fixture()
def database_url(tmp_path, monkeypatch):
    url = f"sqlite:///{tmp_path / 'grid.db'}"
    monkeypatch.setenv("DATABASE_URL", url)
    monkeypatch.chdir(tmp_path)
    return url


def test_nothing_ran(database_url, caplog, monkeypatch):
    called = []
    monkeypatch.setattr(run, "run_update", lambda engine: called.append(engine))
    with caplog.at_level(logging.INFO):
        run.main()
    assert "nothing ran" in caplog.text
    assert not called


def test_create_bootstraps_schema(database_url, monkeypatch):
    monkeypatch.setenv("CREATE", "1")
    run.main()
    run.main()
    engine = create_engine(database_url)
    assert TABLES <= set(inspect(engine).get_table_names())
    engine.dispose()


def test_create_takes_precedence_over_update(database_url, monkeypatch):
    monkeypatch.setenv("CREATE", "1")
    monkeypatch.setenv("UPDATE", "1")

    async def fail(engine):
        raise AssertionError("update should not run")

    monkeypatch.setattr(run, "run_update", fail)
    run.main()


def test_update_runs_one_cycle(database_url, monkeypatch):
    calls = []

    async def fake_update(engine):
        calls.append(engine.url.database)

    monkeypatch.setenv("UPDATE", "1")
    monkeypatch.setattr(run, "run_update", fake_update)
    run.main()
    assert len(calls) == 1
    assert calls[0].endswith("grid.db")


def test_stage_failure_exits_non_zero(database_url, monkeypatch, caplog):
    async def broken(engine):
        raise TransportError("GET https://example.invalid failed")

    monkeypatch.setenv("UPDATE", "1")
    monkeypatch.setattr(run, "run_update", broken)
    with pytest.raises(SystemExit) as excinfo:
        run.main()
    assert excinfo.value.code == 1
    assert "fetch stage" in caplog.text


def test_env_file_is_loaded(database_url, tmp_path, monkeypatch):
    env_file = tmp_path / "grid.env"
    env_file.write_text("CREATE=1\n")
    monkeypatch.setenv("DOT_ENV", str(env_file))
    try:
        run.main()
    finally:
        os.environ.pop("CREATE", None)
    engine = create_engine(database_url)
    assert "Units" in inspect(engine).get_table_names()
    engine.dispose()


def test_missing_env_file_exits(database_url, monkeypatch):
    monkeypatch.setenv("DOT_ENV", "/nonexistent/grid.env")
    with pytest.raises(SystemExit) as excinfo:
        run.main()
    assert excinfo.value.code == 1


def test_http_timeout_from_env_file(database_url, tmp_path, monkeypatch):
    env_file = tmp_path / "grid.env"
    env_file.write_text("HTTP_TIMEOUT=2\n")
    monkeypatch.setenv("DOT_ENV", str(env_file))
    try:
        run.main()
        assert SourceClient().session.timeout == httpx.Timeout(2.0)
    finally:
        os.environ.pop("HTTP_TIMEOUT", None)


def test_bad_insert_policy_is_logged(database_url, monkeypatch, caplog):
    monkeypatch.setenv("UPDATE", "1")
    monkeypatch.setenv("INSERT_POLICY", "retry")
    with pytest.raises(SystemExit) as excinfo:
        run.main()
    assert excinfo.value.code == 1
    assert "Invalid configuration" in caplog.text
    assert "retry" in caplog.text


def test_database_failure_is_logged_as_persist(database_url, monkeypatch, caplog):
    async def unreachable(engine):
        raise OperationalError("connect", {}, Exception("unable to open database file"))

    monkeypatch.setenv("UPDATE", "1")
    monkeypatch.setattr(run, "run_update", unreachable)
    with pytest.raises(SystemExit) as excinfo:
        run.main()
    assert excinfo.value.code == 1
    assert "persist stage" in caplog.text
