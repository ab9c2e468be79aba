"""Config loading."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from loguru import logger

# Env var that supplies the NickServ password without writing it to YAML
PASSWORD_ENV = "NICKSERV_PASSWORD"


def _deep_update(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge override into base."""
    result = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_update(result[key], value)
        else:
            result[key] = value
    return result


def load_config(path: str | Path) -> dict[str, Any]:
    """Load config from YAML file. Use SafeLoader. Returns raw dict."""
    path = Path(path)
    if not path.exists():
        logger.warning("Config file not found: {}", path)
        return {}

    try:
        with open(path) as f:
            data = yaml.safe_load(f)
        if not isinstance(data, dict):
            logger.warning("Config file {} has invalid structure (expected dict)", path)
            return {}
        return data
    except yaml.YAMLError as exc:
        logger.error("Failed to parse config {}: {}", path, exc)
        raise


def _env_overlay() -> dict[str, Any]:
    password = os.environ.get(PASSWORD_ENV, "")
    if not password:
        return {}
    return {"nickserv": {"password": password}}


def load_config_with_env(path: str | Path) -> dict[str, Any]:
    """Load config from YAML and overlay env-derived values.

    Loads .env via python-dotenv when present, then lets NICKSERV_PASSWORD
    override ``nickserv.password``.
    """
    from dotenv import load_dotenv

    load_dotenv()
    return _deep_update(load_config(path), _env_overlay())
