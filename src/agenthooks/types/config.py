"""Configuration types for agenthooks."""

from __future__ import annotations

from dataclasses import dataclass

from agenthooks.types.hooks import DEFAULT_TIMEOUT_SECONDS

# Fixed delay between SIGTERM and SIGKILL for a hook that outlives its timeout.
KILL_GRACE_SECONDS = 5.0


@dataclass(frozen=True, slots=True)
class DispatcherConfig:
    """Settings handed to a HookDispatcher at construction."""

    debug: bool = False  # Log every command start/finish
    default_timeout: float = DEFAULT_TIMEOUT_SECONDS
    kill_grace_seconds: float = KILL_GRACE_SECONDS
    shell: str | None = None  # Shell executable; None uses the platform default
