import pytest
from fastapi.testclient import TestClient

from tizo_kiosk.core.config import Settings
from tizo_kiosk.db.dal import Database
from tizo_kiosk.main import create_app


@pytest.fixture
def settings(tmp_path):
    return Settings(
        data_dir=tmp_path,
        db_path=tmp_path / "kiosk.sqlite3",
        rate_source="database",
        source_retries=1,
        source_retry_backoff_seconds=0,
        rates_refresh_interval_seconds=0,
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def db(app, settings):
    # depends on app so schema + seed data exist
    return Database(settings.db_path)
