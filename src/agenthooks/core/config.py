"""Dispatcher configuration loading (TOML, env vars)."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from agenthooks.types.config import DispatcherConfig

logger = logging.getLogger(__name__)

_TRUTHY = {"1", "true", "yes", "on"}


def load_env_config() -> dict[str, Any]:
    """Load dispatcher settings from environment variables (and .env)."""
    # Won't override variables that are already set
    load_dotenv()
    config: dict[str, Any] = {}

    if debug := os.environ.get("AGENTHOOKS_DEBUG"):
        config["debug"] = debug.strip().lower() in _TRUTHY
    if shell := os.environ.get("AGENTHOOKS_SHELL"):
        config["shell"] = shell
    for key, env_var in (
        ("default_timeout", "AGENTHOOKS_DEFAULT_TIMEOUT"),
        ("kill_grace_seconds", "AGENTHOOKS_KILL_GRACE"),
    ):
        if raw := os.environ.get(env_var):
            try:
                config[key] = float(raw)
            except ValueError:
                logger.warning("Ignoring non-numeric %s=%r", env_var, raw)

    return config


def load_toml_config(cwd: str | None = None) -> dict[str, Any]:
    """Load the ``[dispatcher]`` table from .agenthooks/config.toml if it exists.

    The project directory is searched before ``~/.agenthooks/config.toml``.
    """
    search = [Path(cwd) if cwd else Path.cwd(), Path.home()]
    for base in search:
        toml_path = base / ".agenthooks" / "config.toml"
        if not toml_path.exists():
            continue
        try:
            import tomllib
            with open(toml_path, "rb") as f:
                data = tomllib.load(f)
        except (OSError, ValueError) as exc:
            logger.warning("Cannot read %s: %s", toml_path, exc)
            continue
        table = data.get("dispatcher", {})
        return dict(table) if isinstance(table, dict) else {}
    return {}


def load_dispatcher_config(cwd: str | None = None, **overrides: Any) -> DispatcherConfig:
    """Build a DispatcherConfig: defaults < TOML < environment < overrides."""
    merged: dict[str, Any] = {}
    merged.update(load_toml_config(cwd))
    merged.update(load_env_config())
    merged.update({k: v for k, v in overrides.items() if v is not None})

    known = set(DispatcherConfig.__dataclass_fields__)
    unknown = set(merged) - known
    if unknown:
        logger.warning("Ignoring unknown dispatcher settings: %s", ", ".join(sorted(unknown)))
    return DispatcherConfig(**{k: v for k, v in merged.items() if k in known})
