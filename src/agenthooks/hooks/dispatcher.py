"""Hook dispatcher: fan one lifecycle event out to its hook commands."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Mapping
from typing import Any

from agenthooks.hooks.aggregate import aggregate
from agenthooks.hooks.events import EventPayload, check_payload, format_event_data
from agenthooks.hooks.matcher import select_commands
from agenthooks.hooks.runner import ProcessRunner
from agenthooks.hooks.validation import InvalidHookConfig, parse_hook_config, validate_hook_command
from agenthooks.types.config import DispatcherConfig
from agenthooks.types.hooks import DispatchResult, HookConfig, HookEvent, HookMatcher, HookResult

logger = logging.getLogger(__name__)


class HookDispatcher:
    """Runs every hook selected for an event concurrently and aggregates them.

    The dispatcher holds no state between calls: each ``dispatch`` builds
    fresh runners and returns a fresh DispatchResult.
    """

    def __init__(self, config: DispatcherConfig | None = None) -> None:
        self._config = config or DispatcherConfig()

    @property
    def config(self) -> DispatcherConfig:
        return self._config

    async def dispatch(
        self,
        event: HookEvent | str,
        payload: EventPayload | Mapping[str, Any],
        hook_config: HookConfig | Mapping[str, Any] | None,
        match_key: str | None = None,
        *,
        abort: asyncio.Event | None = None,
    ) -> DispatchResult:
        """Run the hooks configured for ``event`` and fold their results.

        Args:
            event: Lifecycle event (enum or wire name).
            payload: Event payload dataclass, or an already wire-shaped mapping.
            hook_config: Parsed HookConfig, or a raw settings mapping that is
                validated before anything runs.
            match_key: Tool name for tool events; None for the others.
            abort: Setting this event terminates every in-flight hook.

        Raises:
            HookError: if the event, config or payload is malformed. Nothing
                is spawned in that case.
        """
        hook_event = self._parse_event(event)
        matchers = self._matchers_for(hook_event, hook_config)
        wire, cwd = self._wire_payload(hook_event, payload)
        try:
            document = json.dumps(wire)
        except (TypeError, ValueError) as exc:
            raise InvalidHookConfig(f"Payload is not JSON serializable: {exc}") from exc

        commands = [validate_hook_command(c) for c in select_commands(matchers, match_key)]
        if not commands:
            return aggregate([])

        if self._config.debug and isinstance(payload, EventPayload):
            logger.debug("Dispatching %d hooks\n%s", len(commands), format_event_data(hook_event, payload))

        runners = [
            ProcessRunner(command, document, cwd=cwd, config=self._config, abort=abort)
            for command in commands
        ]
        # gather() keeps request order regardless of completion order
        results = await asyncio.gather(*(self._run_one(runner) for runner in runners))

        outcome = aggregate(results)
        if outcome.should_block:
            logger.info("%s blocked by hook: %s", hook_event.value, outcome.block_reason)
        return outcome

    @staticmethod
    async def _run_one(runner: ProcessRunner) -> HookResult:
        """Run one hook; an unexpected error becomes a failed result so
        siblings are still awaited."""
        try:
            return await runner.run()
        except Exception as exc:
            logger.exception("Hook runner failed: %s", runner.command.command)
            return HookResult(
                success=False,
                exit_code=-1,
                error=f"Hook runner failed: {type(exc).__name__}: {exc}",
            )

    @staticmethod
    def _parse_event(event: HookEvent | str) -> HookEvent:
        try:
            return HookEvent.parse(event)
        except ValueError:
            raise InvalidHookConfig(f"Unknown hook event: {event!r}") from None

    @staticmethod
    def _matchers_for(
        event: HookEvent, hook_config: HookConfig | Mapping[str, Any] | None,
    ) -> tuple[HookMatcher, ...]:
        if not hook_config:
            return ()
        if all(isinstance(key, HookEvent) for key in hook_config):
            return tuple(hook_config.get(event, ()))
        return parse_hook_config(hook_config).get(event, ())

    @staticmethod
    def _wire_payload(
        event: HookEvent, payload: EventPayload | Mapping[str, Any],
    ) -> tuple[dict[str, Any], str | None]:
        if isinstance(payload, EventPayload):
            check_payload(event, payload)
            return payload.to_wire(event), payload.cwd or None
        if isinstance(payload, Mapping):
            wire = dict(payload)
            wire["hook_event_name"] = event.value
            cwd = wire.get("cwd")
            return wire, cwd if isinstance(cwd, str) and cwd else None
        raise InvalidHookConfig(f"Payload must be an EventPayload or mapping, got {type(payload).__name__}")
