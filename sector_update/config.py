"""Configuration loading and validation for the sector updater.

Two files drive a run: the entries file (a JSON array of FIR entries) and an
optional settings file holding global knobs. Both are read with PyYAML, which
accepts JSON as a subset of YAML. Environment variables override settings.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .exceptions import ConfigurationError
from .models import ConfigEntry

log = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://files.aero-nav.com"
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:108.0) Gecko/20100101 Firefox/108.0"
)

ASR_MODES = ("rewrite", "clear")


@dataclass
class UpdaterSettings:
    """Global settings shared by every entry of a run."""
    base_url: str = DEFAULT_BASE_URL
    timeout: int = 60
    archive_suffix: str = ".zip"
    navdata_dir: str = "NavData"
    asr_mode: str = "rewrite"
    continue_on_failure: bool = True
    log_level: str = "INFO"
    log_dir: str = "logs"
    user_agent: str = DEFAULT_USER_AGENT

    def __post_init__(self):
        """Validate and normalise settings."""
        for f in fields(self):
            value = getattr(self, f.name)
            if f.type == "str" and not isinstance(value, str):
                raise ConfigurationError(
                    f"{f.name} must be a string, got {value!r}", config_key=f.name
                )
        if isinstance(self.timeout, bool) or not isinstance(self.timeout, int):
            raise ConfigurationError(
                f"timeout must be an integer, got {self.timeout!r}", config_key="timeout"
            )
        if not isinstance(self.continue_on_failure, bool):
            raise ConfigurationError(
                f"continue_on_failure must be true or false, got {self.continue_on_failure!r}",
                config_key="continue_on_failure",
            )
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if self.log_level.upper() not in valid_levels:
            raise ConfigurationError(
                f"Invalid log level: {self.log_level}. Must be one of {valid_levels}",
                config_key="log_level",
            )
        self.log_level = self.log_level.upper()
        if self.asr_mode not in ASR_MODES:
            raise ConfigurationError(
                f"Invalid asr_mode: {self.asr_mode}. Must be one of {list(ASR_MODES)}",
                config_key="asr_mode",
            )
        if self.timeout < 1:
            raise ConfigurationError("timeout must be at least 1 second", config_key="timeout")
        if not self.base_url.strip():
            raise ConfigurationError("base_url cannot be empty", config_key="base_url")
        self.base_url = self.base_url.rstrip("/")
        if not self.archive_suffix.startswith("."):
            self.archive_suffix = f".{self.archive_suffix}"


def _load_yaml_file(path: Path) -> Any:
    """Load a YAML (or JSON) file with error handling."""
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}", config_file=str(path))

    try:
        with path.open("r", encoding="utf-8") as fh:
            return yaml.safe_load(fh)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid JSON/YAML in {path}: {e}", config_file=str(path)) from e
    except OSError as e:
        raise ConfigurationError(f"Unable to read {path}: {e}", config_file=str(path)) from e


def load_entries(path: Path) -> List[ConfigEntry]:
    """Load and validate the entries file."""
    data = _load_yaml_file(path)

    if data is None:
        log.warning("⚠️ Entries file is empty: %s", path)
        return []
    if not isinstance(data, list):
        raise ConfigurationError(
            f"Entries file must contain an array of objects: {path}", config_file=str(path)
        )

    entries: List[ConfigEntry] = []
    for i, item in enumerate(data):
        if not isinstance(item, dict):
            raise ConfigurationError(
                f"Entry {i + 1} is not an object", config_file=str(path)
            )
        try:
            entries.append(ConfigEntry.from_mapping(item))
        except ConfigurationError as e:
            raise ConfigurationError(
                f"Entry {i + 1} validation failed: {e.message}",
                config_file=str(path),
                config_key=e.config_key,
            ) from e

    log.info("✅ Loaded %d entries from %s", len(entries), path)
    return entries


def _apply_environment_variables(config_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Apply environment variable overrides."""
    env_mappings = {
        "SECTOR_UPDATE_BASE_URL": "base_url",
        "SECTOR_UPDATE_TIMEOUT": "timeout",
        "SECTOR_UPDATE_LOG_LEVEL": "log_level",
        "SECTOR_UPDATE_ASR_MODE": "asr_mode",
    }

    for env_var, key in env_mappings.items():
        env_value = os.getenv(env_var)
        if env_value is None:
            continue
        if key == "timeout":
            try:
                config_dict[key] = int(env_value)
            except ValueError as e:
                raise ConfigurationError(
                    f"{env_var} must be an integer, got '{env_value}'", config_key=key
                ) from e
        else:
            config_dict[key] = env_value

    return config_dict


def load_settings(path: Optional[Path] = None) -> UpdaterSettings:
    """Load global settings; a missing file means defaults."""
    config_dict: Dict[str, Any] = {}

    if path is not None and path.exists():
        data = _load_yaml_file(path)
        if data is not None and not isinstance(data, dict):
            raise ConfigurationError(
                f"Settings file must contain a mapping: {path}", config_file=str(path)
            )
        known = {f.name for f in fields(UpdaterSettings)}
        for key, value in (data or {}).items():
            if key in known:
                config_dict[key] = value
            else:
                log.warning("⚠️ Ignoring unknown setting '%s' in %s", key, path)
        log.info("🛠  Using settings file %s", path)
    else:
        log.debug("No settings file supplied, using defaults")

    config_dict = _apply_environment_variables(config_dict)
    try:
        return UpdaterSettings(**config_dict)
    except TypeError as e:
        raise ConfigurationError(
            f"Invalid settings: {e}", config_file=str(path) if path else None
        ) from e


__all__ = [
    "ASR_MODES",
    "DEFAULT_BASE_URL",
    "UpdaterSettings",
    "load_entries",
    "load_settings",
]
