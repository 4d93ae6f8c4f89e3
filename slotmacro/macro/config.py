# AI GOVERNANCE:
# Apply auditor-router
# This is a CODE change

"""
Recorder configuration loading and validation
Accepts a RecorderConfig, a plain dict, or a YAML/JSON file
"""

from __future__ import annotations
from typing import Union, Optional, Dict, Any
from pathlib import Path
import json

import yaml

from .models import RecorderConfig, NotifyLevel, ConfigError
from .slots import validate_slots

from slotmacro.utils.logger import log

KNOWN_KEYS = set(RecorderConfig().to_dict().keys())

# keys holding nested sections
SECTION_KEYS = ("mapping", "performance_opts", "logging")

ConfigSource = Union[RecorderConfig, Dict[str, Any], None]


def _parse_log_level(value) -> int:
    if isinstance(value, str):
        try:
            return int(NotifyLevel[value.upper()])
        except KeyError:
            raise ConfigError(f'"{value}" is not a valid log level.')
    return value


def _check_types(data: dict):
    """Reject values of the wrong shape before they reach from_dict"""
    if "slots" in data and not isinstance(data["slots"], (list, tuple)):
        raise ConfigError(f"slots must be a list of named registers (a-z), got {data['slots']!r}.")
    for key in SECTION_KEYS:
        if key in data and not isinstance(data[key], dict):
            raise ConfigError(f"{key} must be a mapping, got {data[key]!r}.")
    events = data.get("performance_opts", {}).get("autocmd_events_ignore", [])
    if not isinstance(events, (list, tuple)):
        raise ConfigError(f"autocmd_events_ignore must be a list of events, got {events!r}.")


def build_config(source: ConfigSource = None) -> RecorderConfig:
    """
    Build and validate a RecorderConfig

    Args:
        source: RecorderConfig, dict of user overrides (missing keys take
                defaults), or None for defaults

    Raises:
        ConfigError: invalid values (SlotValidationError for bad slots)
    """
    if source is None:
        config = RecorderConfig()
    elif isinstance(source, RecorderConfig):
        config = source
    elif isinstance(source, dict):
        data = dict(source)
        unknown = set(data) - KNOWN_KEYS
        if unknown:
            log(f"[CONFIG] Ignoring unknown keys: {', '.join(sorted(unknown))}")
        _check_types(data)
        if "log_level" in data:
            data["log_level"] = _parse_log_level(data["log_level"])
        try:
            config = RecorderConfig.from_dict(data)
        except (ValueError, TypeError, AttributeError) as e:
            if isinstance(e, ConfigError):
                raise
            raise ConfigError(f"Invalid configuration: {e}") from e
    else:
        raise ConfigError(f"Unsupported configuration type: {type(source).__name__}")

    validate_config(config)
    return config


def validate_config(config: RecorderConfig):
    """Raise ConfigError if anything in config is unusable"""
    validate_slots(config.slots)

    for name, key in config.mapping.to_dict().items():
        if not isinstance(key, str) or not key:
            raise ConfigError(f'Mapping "{name}" must be a non-empty key sequence.')

    threshold = config.performance_opts.count_threshold
    if not isinstance(threshold, int) or isinstance(threshold, bool) or threshold < 1:
        raise ConfigError(f"count_threshold must be a positive integer, got {threshold!r}.")

    defer_ms = config.performance_opts.defer_ms
    if not isinstance(defer_ms, int) or isinstance(defer_ms, bool) or defer_ms < 0:
        raise ConfigError(f"defer_ms must be a non-negative integer, got {defer_ms!r}.")


def load_config(filepath: Union[str, Path]) -> RecorderConfig:
    """
    Load configuration from a .yaml/.yml or .json file

    Raises:
        ConfigError: unreadable file or invalid values
    """
    path = Path(filepath)
    try:
        with open(path, 'r', encoding='utf-8') as f:
            if path.suffix.lower() == '.json':
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
    except (OSError, json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigError(f"Cannot read config {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config {path} must contain a mapping at top level.")

    log(f"[CONFIG] Loaded: {path}")
    return build_config(data)


def save_config(config: RecorderConfig, filepath: Union[str, Path]):
    """Write configuration as YAML (or JSON for .json paths)"""
    path = Path(filepath)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        if path.suffix.lower() == '.json':
            json.dump(config.to_dict(), f, indent=2)
        else:
            yaml.safe_dump(config.to_dict(), f, sort_keys=False, allow_unicode=True)
    log(f"[CONFIG] Saved: {path}")
