from pathlib import Path

import pytest
from sqlalchemy import create_engine

from gridwatch.db.migrate import run_migrations

FIXTURES = Path(__file__).parent / "fixtures" / "http"

OUTAGE_EPOCH = 1710075600
GENERATION_EPOCH = 1710076542


def load_fixture(path: str) -> str:
    return (FIXTURES / path).read_text()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("INSERT_POLICY", "TIMEZONE", "ARCHIVE_DIR", "CREATE", "UPDATE", "DOT_ENV", "HTTP_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture()
def engine(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'grid.db'}", future=True, connect_args={"check_same_thread": False}
    )
    run_migrations(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def outage_body():
    return load_fixture("luma/regions.json")


@pytest.fixture()
def generation_script():
    return load_fixture("prepa/dataSource.js")
