from pathlib import Path

import pytest
from pydantic import ValidationError

from settings import get_settings


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    for name in (
        "DATA_DIR",
        "LOG_LEVEL",
        "LOG_FILE",
        "OVERLOAD_TOLERANCE",
        "DASHBOARD_CACHE_TTL_SECONDS",
        "ICAL_START_HOUR",
    ):
        monkeypatch.delenv(f"EXAM_PLANNER_{name}", raising=False)


def test_defaults():
    settings = get_settings()
    assert settings.data_dir is None
    assert settings.log_level == "INFO"
    assert settings.overload_tolerance == 1.2
    assert settings.dashboard_cache_ttl_seconds == 300
    assert settings.ical_start_hour == 9


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("EXAM_PLANNER_OVERLOAD_TOLERANCE", "1.5")
    monkeypatch.setenv("EXAM_PLANNER_DATA_DIR", "/tmp/planner")
    settings = get_settings()
    assert settings.overload_tolerance == 1.5
    assert settings.data_dir == Path("/tmp/planner")


def test_dotenv_file(tmp_path):
    (tmp_path / ".env").write_text("EXAM_PLANNER_LOG_LEVEL=DEBUG\n", encoding="utf-8")
    assert get_settings().log_level == "DEBUG"


def test_tolerance_bounds(monkeypatch):
    monkeypatch.setenv("EXAM_PLANNER_OVERLOAD_TOLERANCE", "2.0")
    with pytest.raises(ValidationError):
        get_settings()
