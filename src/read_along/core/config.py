#!/usr/bin/env python3
"""Configuration loader that reads from config files."""
import copy
import os
from pathlib import Path
from typing import Any

import tomllib

# Fallback order used when the recognizer rejects a language.
DEFAULT_FALLBACK_LANGUAGES = ["te-IN", "te", "hi-IN", "en-IN", "ta-IN", "ml-IN"]

DEFAULT_CONFIG: dict[str, Any] = {
    "reference": {"require_script_letters": False},
    "matcher": {
        "exact": 1.0,
        "base_form": 0.95,
        "substitution": 0.8,
        "equal_length_min": 0.6,
        "max_length_diff": 4,
        "containment": 0.9,
        "far_containment": 0.8,
        "far_containment_penalized": 0.4,
        "far_length_ratio": 0.6,
        "affix": 0.8,
        "affix_max_diff": 2,
        "char_max_diff": 3,
        "char_min": 0.5,
        "char_close_max_diff": 2,
        "char_close_min": 0.4,
        "char_close_bonus": 0.1,
    },
    "alignment": {
        "min_similarity": 0.3,
        "partial_max_length_diff": 2,
        "weights": {"current": 1.0, "next": 0.8, "ahead": 0.5},
    },
    "recognition": {
        "language": "te-IN",
        "fallback_languages": DEFAULT_FALLBACK_LANGUAGES,
        "max_alternatives": 10,
        "process_interim_results": True,
        "delays": {
            "end": 0.1,
            "no_speech": 0.5,
            "aborted": 1.0,
            "language_switch": 1.0,
            "unknown": 1.5,
            "restart_retry": 1.0,
        },
        "backoff_factor": 2.0,
        "max_error_retries": 5,
        "max_restart_attempts": 3,
    },
    "logging": {
        "level": "INFO",
        "dir": "",
        "file": "read-along.log",
        "max_bytes": 5 * 1024 * 1024,
        "backup_count": 3,
        "console": False,
    },
}


class ConfigLoader:
    """Load configuration from config files."""

    def __init__(self, config_path: str | Path | None = None, overrides: dict[str, Any] | None = None) -> None:
        if config_path is None:
            config_path = self._default_config_path()

        self.config_file = str(config_path)
        config_path = Path(config_path)
        if config_path.exists():
            with open(config_path, "rb") as f:
                full_config = tomllib.load(f)
            file_config = full_config.get("read_along", {})
        else:
            file_config = {}

        self._config = self._merge_dicts(copy.deepcopy(DEFAULT_CONFIG), file_config)
        if overrides:
            self._config = self._merge_dicts(self._config, overrides)

        self._apply_env_overrides()

    def _apply_env_overrides(self) -> None:
        env_language = os.environ.get("READ_ALONG_LANGUAGE")
        if env_language:
            self._config["recognition"]["language"] = env_language

        env_log_dir = os.environ.get("READ_ALONG_LOG_DIR")
        if env_log_dir:
            self._config["logging"]["dir"] = env_log_dir

        env_console = os.environ.get("READ_ALONG_CONSOLE_LOGS")
        if env_console is not None:
            self._config["logging"]["console"] = env_console.strip().lower() in {"1", "true", "yes"}

    def _default_config_path(self) -> Path:
        env_path = os.environ.get("READ_ALONG_CONFIG")
        if env_path:
            return Path(env_path)
        return Path.home() / ".read_along" / "config.toml"

    def _merge_dicts(self, base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        merged = base.copy()
        for key, value in override.items():
            if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
                merged[key] = self._merge_dicts(merged[key], value)
            else:
                merged[key] = value
        return merged

    def get(self, key_path: str, default: Any = None) -> Any:
        """Get a value using dot notation (e.g., 'recognition.delays.end')"""
        keys = key_path.split(".")
        value = self._config

        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default

        return value

    @property
    def require_script_letters(self) -> bool:
        return bool(self.get("reference.require_script_letters", False))

    @property
    def language(self) -> str:
        return str(self.get("recognition.language", "te-IN"))

    @property
    def fallback_languages(self) -> list[str]:
        return [str(lang) for lang in self.get("recognition.fallback_languages", DEFAULT_FALLBACK_LANGUAGES)]

    @property
    def max_alternatives(self) -> int:
        return int(self.get("recognition.max_alternatives", 10))

    @property
    def process_interim_results(self) -> bool:
        return bool(self.get("recognition.process_interim_results", True))

    @property
    def backoff_factor(self) -> float:
        return float(self.get("recognition.backoff_factor", 2.0))

    @property
    def max_error_retries(self) -> int:
        return int(self.get("recognition.max_error_retries", 5))

    @property
    def max_restart_attempts(self) -> int:
        return int(self.get("recognition.max_restart_attempts", 3))

    @property
    def log_level(self) -> str:
        return str(self.get("logging.level", "INFO"))

    @property
    def log_file(self) -> Path | None:
        """Rotating log file path, or None when file logging is disabled."""
        name = self.get("logging.file", "")
        if not name:
            return None
        log_dir = self.get("logging.dir", "")
        base = Path(log_dir).expanduser() if log_dir else Path.home() / ".read_along" / "logs"
        return base / name

    @property
    def log_console(self) -> bool:
        return bool(self.get("logging.console", False))

    def get_delay(self, name: str) -> float:
        """Get a recovery delay in seconds by name."""
        delays = self.get("recognition.delays", {})
        if name not in delays:
            raise KeyError(f"Unknown recognition delay: {name}")
        return float(delays[name])


# Global singleton instance
_config_loader: ConfigLoader | None = None


def get_config() -> ConfigLoader:
    """Get the global config loader instance"""
    global _config_loader
    if _config_loader is None:
        _config_loader = ConfigLoader()
    return _config_loader
