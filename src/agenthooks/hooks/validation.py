"""Structural validation of hook definitions, configs and paths.

Nothing in this module spawns a process. Hook commands are treated as trusted
configuration: only their shape is checked, never their shell content.
"""

from __future__ import annotations

import json
import logging
import math
import os
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from agenthooks.types.hooks import HookCommand, HookConfig, HookEvent, HookMatcher

logger = logging.getLogger(__name__)

_SEGMENT_SPLIT = re.compile(r"[\\/]+")


class HookError(Exception):
    """Base class for hook configuration errors."""


class InvalidHookCommand(HookError):
    """A hook command has a bad command string or timeout."""


class InvalidHookConfig(HookError):
    """A hook configuration (or payload) does not have the expected shape."""


class PathTraversal(HookError):
    """A path still escapes its base directory after normalization."""


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_hook_command(command: HookCommand | Mapping[str, Any]) -> HookCommand:
    """Check a hook command's shape and return it as a HookCommand.

    Accepts either a HookCommand or the raw settings mapping
    (``{"type": "command", "command": ..., "timeout": ...}``).

    Raises:
        InvalidHookCommand: if the command string is empty or not a string,
            the type is not ``command``, or the timeout is not a finite number >= 0.
    """
    if isinstance(command, HookCommand):
        text, timeout = command.command, command.timeout
    elif isinstance(command, Mapping):
        hook_type = command.get("type", "command")
        if hook_type != "command":
            raise InvalidHookCommand(f"Unsupported hook type: {hook_type!r}")
        text, timeout = command.get("command"), command.get("timeout")
    else:
        raise InvalidHookCommand(f"Hook must be a mapping, got {type(command).__name__}")

    if not isinstance(text, str) or not text.strip():
        raise InvalidHookCommand("Hook must have a valid command string")
    if "\x00" in text:
        raise InvalidHookCommand("Hook command must not contain NUL bytes")
    if timeout is not None and (not _is_number(timeout) or not math.isfinite(timeout) or timeout < 0):
        raise InvalidHookCommand(f"Hook timeout must be a finite non-negative number, got {timeout!r}")

    if isinstance(command, HookCommand):
        return command
    return HookCommand(command=text, timeout=float(timeout) if timeout is not None else None)


def validate_path(path: str | os.PathLike[str], cwd: str | os.PathLike[str] | None = None) -> Path:
    """Reject parent-directory traversal and resolve relative paths.

    Returns the absolute, normalized path. Relative paths are joined onto
    ``cwd`` (the process working directory when omitted).
    """
    if not isinstance(path, (str, os.PathLike)):
        raise PathTraversal(f"Path must be a string, got {type(path).__name__}")

    normalized = os.path.normpath(os.fspath(path))
    if ".." in _SEGMENT_SPLIT.split(normalized):
        raise PathTraversal(f"Path traversal is not allowed: {path}")

    candidate = Path(normalized)
    if candidate.is_absolute():
        return candidate
    base = Path(cwd) if cwd is not None else Path.cwd()
    return Path(os.path.normpath(base.absolute() / candidate))


def _parse_matcher(event: HookEvent, index: int, raw: Any) -> HookMatcher:
    where = f"{event.value}[{index}]"
    if not isinstance(raw, Mapping):
        raise InvalidHookConfig(f"{where}: matcher entry must be a mapping")

    pattern = raw.get("matcher")
    if pattern is not None and not isinstance(pattern, str):
        raise InvalidHookConfig(f"{where}: 'matcher' must be a string")

    hooks = raw.get("hooks", [])
    if not isinstance(hooks, list):
        raise InvalidHookConfig(f"{where}: 'hooks' must be a list")

    commands = []
    for cmd_index, cmd in enumerate(hooks):
        try:
            commands.append(validate_hook_command(cmd))
        except InvalidHookCommand as exc:
            raise InvalidHookCommand(f"{where}.hooks[{cmd_index}]: {exc}") from exc

    return HookMatcher(pattern=pattern or None, commands=tuple(commands))


def parse_hook_config(raw: Mapping[str, Any] | None) -> HookConfig:
    """Validate a settings-shaped hook mapping once and build a HookConfig.

    Raises:
        InvalidHookConfig: unknown event names or malformed matcher entries.
        InvalidHookCommand: a command fails :func:`validate_hook_command`.
    """
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        raise InvalidHookConfig(f"Hook config must be a mapping, got {type(raw).__name__}")

    config: HookConfig = {}
    for key, entries in raw.items():
        try:
            event = HookEvent.parse(key)
        except ValueError:
            raise InvalidHookConfig(f"Unknown hook event: {key!r}") from None
        if not isinstance(entries, list):
            raise InvalidHookConfig(f"{event.value}: expected a list of matchers")
        config[event] = tuple(_parse_matcher(event, i, entry) for i, entry in enumerate(entries))
    return config


def _read_config_file(path: Path) -> Any:
    suffix = path.suffix.lower()
    text = path.read_text()

    if suffix == ".json":
        return json.loads(text)
    if suffix in (".yml", ".yaml"):
        import yaml
        return yaml.safe_load(text)
    if suffix == ".toml":
        import tomllib
        return tomllib.loads(text)
    raise InvalidHookConfig(f"Unsupported hook config extension: {path}")


def load_hook_config(path: str | os.PathLike[str]) -> HookConfig:
    """Load and validate one hook config file (JSON, YAML or TOML).

    The document may be the bare event mapping or a settings document whose
    ``hooks`` key holds it.
    """
    config_path = Path(path)
    try:
        data = _read_config_file(config_path)
    except OSError as exc:
        raise InvalidHookConfig(f"Cannot read hook config {config_path}: {exc}") from exc
    except InvalidHookConfig:
        raise
    except Exception as exc:
        raise InvalidHookConfig(f"Failed to parse hook config {config_path}: {exc}") from exc

    if isinstance(data, Mapping) and isinstance(data.get("hooks"), Mapping):
        data = data["hooks"]
    config = parse_hook_config(data)
    logger.debug(
        "Loaded %d hook matchers from %s",
        sum(len(m) for m in config.values()), config_path,
    )
    return config
