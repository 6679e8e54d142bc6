import pytest
from fastapi.testclient import TestClient

from napwise.core.settings import settings
from napwise.main import app
from napwise.services import sleep_state


@pytest.fixture
def client(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'napwise.db'}")
    monkeypatch.setattr(settings, "DEFAULT_BABY_AGE_MONTHS", 6.0)
    monkeypatch.setattr(settings, "KID_SLEEP_GOAL_HOURS", 10.0)
    monkeypatch.setattr(settings, "PARENT_SLEEP_GOAL_HOURS", 6.0)
    monkeypatch.setattr(sleep_state, "_sleep_state_manager", None)
    with TestClient(app) as c:
        yield c
