import pytest

from playersig.config import Settings
from playersig.fetcher import DEFAULT_UA


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("PLAYERSIG_TIMEOUT", "PLAYERSIG_PROXY", "PLAYERSIG_USER_AGENT",
                 "PLAYERSIG_LOG_LEVEL", "PLAYERSIG_EXECUTOR", "PLAYERSIG_NODE"):
        # set first so teardown also drops values a .env file loaded
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)


def test_defaults():
    settings = Settings.from_env(dotenv=False)
    assert settings.timeout == 12
    assert settings.proxy is None
    assert settings.user_agent == DEFAULT_UA
    assert settings.log_level == "INFO"


def test_from_env(monkeypatch):
    monkeypatch.setenv("PLAYERSIG_TIMEOUT", "30")
    monkeypatch.setenv("PLAYERSIG_PROXY", "http://127.0.0.1:8080")
    monkeypatch.setenv("PLAYERSIG_LOG_LEVEL", "debug")
    settings = Settings.from_env(dotenv=False)
    assert settings.timeout == 30
    assert settings.proxy == "http://127.0.0.1:8080"
    assert settings.log_level == "DEBUG"


@pytest.mark.parametrize("value", ["soon", "0", "-3"])
def test_bad_timeout(monkeypatch, value):
    monkeypatch.setenv("PLAYERSIG_TIMEOUT", value)
    with pytest.raises(ValueError):
        Settings.from_env(dotenv=False)


def test_dotenv_file(monkeypatch, tmp_path):
    (tmp_path / ".env").write_text("PLAYERSIG_TIMEOUT=7\n")
    monkeypatch.chdir(tmp_path)
    assert Settings.from_env().timeout == 7


def test_executor_choice(monkeypatch):
    assert Settings.from_env(dotenv=False).executor == "node"
    monkeypatch.setenv("PLAYERSIG_EXECUTOR", "Dukpy")
    monkeypatch.setenv("PLAYERSIG_NODE", "/usr/local/bin/node")
    settings = Settings.from_env(dotenv=False)
    assert settings.executor == "dukpy"
    assert settings.node_path == "/usr/local/bin/node"


def test_unknown_executor(monkeypatch):
    monkeypatch.setenv("PLAYERSIG_EXECUTOR", "rhino")
    with pytest.raises(ValueError):
        Settings.from_env(dotenv=False)
