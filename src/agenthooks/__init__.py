"""agenthooks: lifecycle hook orchestration for coding agents.

Usage:
    from agenthooks import HookDispatcher, HookEvent, build_event_payload

    dispatcher = HookDispatcher()
    payload = build_event_payload(
        HookEvent.PRE_TOOL_USE,
        session_id="s1",
        cwd="/repo",
        tool_name="Bash",
        tool_input={"command": "rm -rf build"},
    )
    outcome = await dispatcher.dispatch(HookEvent.PRE_TOOL_USE, payload, settings["hooks"], "Bash")
    if outcome.should_block:
        print(outcome.block_reason)
"""

from agenthooks.core.config import load_dispatcher_config
from agenthooks.hooks.aggregate import aggregate
from agenthooks.hooks.dispatcher import HookDispatcher
from agenthooks.hooks.events import EventPayload, build_event_payload
from agenthooks.hooks.lifecycle import HookSession, run_tool_with_hooks, submit_prompt
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

__version__ = "0.1.0"

__all__ = [
    # Core API
    "HookDispatcher",
    "aggregate",
    "run_tool_with_hooks",
    "submit_prompt",
    # Payloads
    "EventPayload",
    "HookSession",
    "build_event_payload",
    # Configuration
    "DispatcherConfig",
    "HookCommand",
    "HookConfig",
    "HookEvent",
    "HookMatcher",
    "load_dispatcher_config",
    "load_hook_config",
    "parse_hook_config",
    # Results
    "DispatchResult",
    "HookResult",
    "StructuredDecision",
    # Validation
    "HookError",
    "InvalidHookCommand",
    "InvalidHookConfig",
    "PathTraversal",
    "validate_hook_command",
    "validate_path",
]
