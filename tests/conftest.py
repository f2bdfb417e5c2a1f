"""Shared fixtures for read-along tests."""

import pytest

from read_along.core.config import ConfigLoader

ZERO_DELAYS = {
    "end": 0.0,
    "no_speech": 0.0,
    "aborted": 0.0,
    "language_switch": 0.0,
    "unknown": 0.0,
    "restart_retry": 0.0,
}


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Keep tests away from the user's config, logs and language override."""
    monkeypatch.setenv("READ_ALONG_LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.setenv("READ_ALONG_CONFIG", str(tmp_path / "missing.toml"))
    monkeypatch.delenv("READ_ALONG_LANGUAGE", raising=False)
    monkeypatch.delenv("READ_ALONG_CONSOLE_LOGS", raising=False)


@pytest.fixture
def make_config(tmp_path):
    """Build a ConfigLoader with zero recovery delays plus overrides."""

    def _make(**recognition):
        overrides = {
            "recognition": {
                "delays": dict(ZERO_DELAYS),
                "max_error_retries": 3,
                "max_restart_attempts": 2,
                **recognition,
            }
        }
        return ConfigLoader(config_path=tmp_path / "missing.toml", overrides=overrides)

    return _make


@pytest.fixture
def config(make_config):
    return make_config()
