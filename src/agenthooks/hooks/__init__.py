"""Hook orchestration: matching, process execution, dispatch and aggregation."""

from agenthooks.hooks.aggregate import aggregate, summarize_results
from agenthooks.hooks.dispatcher import HookDispatcher
from agenthooks.hooks.events import (
    EventPayload,
    NotificationPayload,
    PostToolUsePayload,
    PreCompactPayload,
    PreToolUsePayload,
    StopPayload,
    UserPromptSubmitPayload,
    build_event_payload,
)
from agenthooks.hooks.matcher import select_commands, selects
from agenthooks.hooks.runner import ProcessRunner, parse_structured_output
from agenthooks.hooks.validation import (
    HookError,
    InvalidHookCommand,
    InvalidHookConfig,
    PathTraversal,
    load_hook_config,
    parse_hook_config,
    validate_hook_command,
    validate_path,
)

__all__ = [
    "EventPayload",
    "HookDispatcher",
    "HookError",
    "InvalidHookCommand",
    "InvalidHookConfig",
    "NotificationPayload",
    "PathTraversal",
    "PostToolUsePayload",
    "PreCompactPayload",
    "PreToolUsePayload",
    "ProcessRunner",
    "StopPayload",
    "UserPromptSubmitPayload",
    "aggregate",
    "build_event_payload",
    "load_hook_config",
    "parse_hook_config",
    "parse_structured_output",
    "select_commands",
    "selects",
    "summarize_results",
    "validate_hook_command",
    "validate_path",
]
