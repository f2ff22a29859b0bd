import pytest

from backend.internal_core.config import DEFAULT_API_BASE_URL, load_config

_ENV_KEYS = (
    "REAGVIS_API_BASE_URL",
    "REAGVIS_DEMO_OVERRIDES",
    "REAGVIS_RANDOM_SEED",
    "REAGVIS_UPLOAD_RETRIES",
    "REAGVIS_INITIAL_TOTAL",
    "REAGVIS_INITIAL_REJECTED",
    "REAGVIS_INITIAL_MANUAL",
    "REAGVIS_INITIAL_APPROVED",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch) -> None:
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_defaults_match_demo_dashboard() -> None:
    config = load_config()
    assert config.REAGVIS_API_BASE_URL == DEFAULT_API_BASE_URL
    assert config.REAGVIS_DEMO_OVERRIDES is True
    assert config.REAGVIS_RANDOM_SEED is None
    assert config.initial_stats() == {"total": 124, "rejected": 12, "manual": 5, "approved": 107}


def test_env_overrides_are_parsed(monkeypatch) -> None:
    monkeypatch.setenv("REAGVIS_API_BASE_URL", "https://integrity.test/stage/")
    monkeypatch.setenv("REAGVIS_DEMO_OVERRIDES", "off")
    monkeypatch.setenv("REAGVIS_RANDOM_SEED", "11")
    monkeypatch.setenv("REAGVIS_UPLOAD_RETRIES", "0")

    config = load_config()
    assert config.REAGVIS_API_BASE_URL == "https://integrity.test/stage"
    assert config.REAGVIS_DEMO_OVERRIDES is False
    assert config.REAGVIS_RANDOM_SEED == 11
    assert config.REAGVIS_UPLOAD_RETRIES == 0


def test_inconsistent_initial_counters_are_rejected(monkeypatch) -> None:
    monkeypatch.setenv("REAGVIS_INITIAL_TOTAL", "10")
    with pytest.raises(ValueError, match="inconsistent"):
        load_config()


def test_negative_retries_are_rejected(monkeypatch) -> None:
    monkeypatch.setenv("REAGVIS_UPLOAD_RETRIES", "-1")
    with pytest.raises(ValueError, match="REAGVIS_UPLOAD_RETRIES"):
        load_config()
