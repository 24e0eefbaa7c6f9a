import pytest

from draftvista import config as config_module
from draftvista.config import Config

ENV_VARS = [
    "GEMINI_MODEL", "UPLOAD_DIR", "MAX_FILE_SIZE", "PORT", "FRONTEND_URL", "LLM_MAX_RETRIES",
    "SCRAPE_TIMEOUT", "CLEANUP_INTERVAL_HOURS", "CLEANUP_MAX_AGE_HOURS", "LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(config_module, "load_dotenv", lambda *a, **k: False)


def test_defaults():
    cfg = Config.from_env()
    assert cfg.model_name == "gemini-2.5-flash"
    assert cfg.port == 3001
    assert cfg.max_file_size == 10 * 1024 * 1024
    assert cfg.max_retries == 2
    assert cfg.pre_submission_retry_delay == 3.0
    assert cfg.post_rejection_retry_delay == 1.5
    assert cfg.max_manuscript_chars == 30000
    assert cfg.frontend_url == "http://localhost:3000"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("UPLOAD_DIR", "/srv/uploads")
    monkeypatch.setenv("SCRAPE_TIMEOUT", "12.5")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("GEMINI_MODEL", "gemini-2.0-flash")

    cfg = Config.from_env()
    assert cfg.port == 8080
    assert cfg.upload_dir == "/srv/uploads"
    assert cfg.scrape_timeout == 12.5
    assert cfg.log_level == "DEBUG"
    assert cfg.model_name == "gemini-2.0-flash"


def test_invalid_numbers_fall_back_to_defaults(monkeypatch, caplog):
    monkeypatch.setenv("PORT", "eighty")
    monkeypatch.setenv("LLM_MAX_RETRIES", "")

    cfg = Config.from_env()
    assert cfg.port == 3001
    assert cfg.max_retries == 2
    assert "Ignoring invalid PORT" in caplog.text
