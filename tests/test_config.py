import pytest

import logs
from config import Config, DEFAULT_LOGFILE

ENV_VARS = ("API_TOKEN", "API_URL", "API_VERSION", "REQUEST_TIMEOUT", "ALLOWED_MENTIONS", "LOG_FILE")


def _clear_env(monkeypatch):
    # setenv first so monkeypatch restores whatever load_dotenv writes
    for var in ENV_VARS:
        monkeypatch.setenv(var, "")
        monkeypatch.delenv(var)


@pytest.fixture
def restore_log_sinks():
    yield
    logs.configure(Config(env_file="/nonexistent/.env"))


def test_defaults(monkeypatch, tmp_path):
    _clear_env(monkeypatch)

    config = Config(env_file=str(tmp_path / "missing.env"))

    assert config.api_token is None
    assert config.api_url == "https://discord.com/api"
    assert config.api_version == "10"
    assert config.request_timeout == 10.0
    assert config.allowed_mentions == ("users",)
    assert config.logfile == DEFAULT_LOGFILE


def test_values_from_env_file(monkeypatch, tmp_path):
    _clear_env(monkeypatch)
    env_file = tmp_path / ".env"
    env_file.write_text("API_TOKEN=secret\nAPI_URL=https://example.test/api/\n"
                        "REQUEST_TIMEOUT=2.5\nALLOWED_MENTIONS=users, roles\n")

    config = Config(env_file=str(env_file))

    assert config.api_token == "secret"
    assert config.api_url == "https://example.test/api"
    assert config.request_timeout == 2.5
    assert config.allowed_mentions == ("users", "roles")
    assert not hasattr(config, "application_id")


def test_log_file_from_env_file_feeds_the_sink(restore_log_sinks, monkeypatch, tmp_path):
    _clear_env(monkeypatch)
    log_path = tmp_path / "logs" / "custom.log"
    env_file = tmp_path / ".env"
    env_file.write_text(f"LOG_FILE={log_path}\n")

    config = Config(env_file=str(env_file))
    assert logs.configure(config) == log_path

    logs.logger.bind(context="Test").info("written to the configured file")
    logs.logger.complete()

    assert "written to the configured file" in log_path.read_text()
