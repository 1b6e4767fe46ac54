"""
Runtime configuration.

Settings are resolved in three layers: built-in defaults, an optional
YAML file, then environment variables (a ``.env`` file in the working
directory is loaded first via python-dotenv).  API keys are normally
supplied through the environment only.

Example YAML file::

    provider: gemini
    gemini_model: gemini-2.5-flash
    blind_mode: true
    context_max_records: 50
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields
from typing import Dict, Optional

import yaml  # type: ignore
from dotenv import load_dotenv

logger = logging.getLogger(__name__)


@dataclass
class Settings:
    provider: Optional[str] = None
    gemini_api_key: Optional[str] = None
    openai_api_key: Optional[str] = None
    gemini_model: str = "gemini-2.5-flash"
    gemini_chat_model: str = "gemini-3-pro-preview"
    openai_model: str = "gpt-4o-mini"
    blind_mode: bool = False
    context_max_records: Optional[int] = 100
    log_level: str = "INFO"


# Environment variable(s) for each setting, first match wins.
_ENV_VARS: Dict[str, tuple] = {
    "provider": ("LLM_PROVIDER",),
    "gemini_api_key": ("GEMINI_API_KEY", "GOOGLE_API_KEY"),
    "openai_api_key": ("OPENAI_API_KEY",),
    "gemini_model": ("GEMINI_MODEL", "GOOGLE_MODEL"),
    "gemini_chat_model": ("GEMINI_CHAT_MODEL",),
    "openai_model": ("OPENAI_MODEL",),
    "blind_mode": ("RECRUITEROS_BLIND_MODE",),
    "context_max_records": ("RECRUITEROS_CONTEXT_MAX_RECORDS",),
    "log_level": ("RECRUITEROS_LOG_LEVEL",),
}

_TRUE = {"1", "true", "yes", "on"}


def _coerce(name: str, value: object) -> object:
    if name == "blind_mode":
        return value if isinstance(value, bool) else str(value).strip().lower() in _TRUE
    if name == "context_max_records":
        if value is None or str(value).strip().lower() in ("", "none"):
            return None
        limit = int(value)
        if limit < 0:
            raise ValueError(f"context_max_records must be zero or positive, got {limit}")
        return limit
    return value


def _load_yaml(config_path: str) -> Dict[str, object]:
    with open(config_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {config_path} must contain a mapping")
    return data


def load_settings(config_path: Optional[str] = None, env: Optional[Dict[str, str]] = None) -> Settings:
    """Build `Settings` from defaults, a YAML file and the environment.

    Args:
        config_path: Optional YAML file; unknown keys are ignored with a
            warning.
        env: Environment mapping to read instead of ``os.environ``
            (``.env`` loading is skipped when given).

    Raises:
        FileNotFoundError: If ``config_path`` does not exist.
        ValueError: If the file is not a mapping or a value has the
            wrong type.
    """
    if env is None:
        load_dotenv()
        env = dict(os.environ)
    values: Dict[str, object] = {}
    known = {f.name for f in fields(Settings)}
    if config_path:
        for key, value in _load_yaml(config_path).items():
            if key not in known:
                logger.warning("Ignoring unknown config key '%s' in %s", key, config_path)
                continue
            values[key] = _coerce(key, value)
    for name, variables in _ENV_VARS.items():
        for variable in variables:
            if env.get(variable):
                values[name] = _coerce(name, env[variable])
                break
    return Settings(**values)
