"""Type definitions for agenthooks."""

from agenthooks.types.config import DispatcherConfig
from agenthooks.types.hooks import (
    DispatchResult,
    HookCommand,
    HookConfig,
    HookEvent,
    HookMatcher,
    HookResult,
    StructuredDecision,
)

__all__ = [
    "DispatchResult",
    "DispatcherConfig",
    "HookCommand",
    "HookConfig",
    "HookEvent",
    "HookMatcher",
    "HookResult",
    "StructuredDecision",
]
