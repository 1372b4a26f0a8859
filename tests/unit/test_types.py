"""Tests for agenthooks.types module."""

import pytest

from agenthooks.types.config import DispatcherConfig
from agenthooks.types.hooks import (
    DEFAULT_TIMEOUT_SECONDS,
    DispatchResult,
    HookCommand,
    HookEvent,
    HookMatcher,
    StructuredDecision,
)
from tests.conftest import make_result


class TestHookEvent:
    def test_parse_wire_name(self):
        assert HookEvent.parse("PreToolUse") is HookEvent.PRE_TOOL_USE

    def test_parse_member(self):
        assert HookEvent.parse(HookEvent.STOP) is HookEvent.STOP

    def test_parse_unknown(self):
        with pytest.raises(ValueError):
            HookEvent.parse("OnSave")


class TestHookCommand:
    def test_default_timeout(self):
        assert HookCommand("true").effective_timeout() == DEFAULT_TIMEOUT_SECONDS

    def test_zero_means_default(self):
        assert HookCommand("true", timeout=0).effective_timeout(30) == 30

    def test_explicit_timeout(self):
        assert HookCommand("true", timeout=2).effective_timeout(30) == 2.0

    def test_frozen(self):
        cmd = HookCommand("true")
        with pytest.raises(AttributeError):
            cmd.command = "false"  # type: ignore[misc]


class TestHookMatcher:
    def test_defaults(self):
        matcher = HookMatcher()
        assert matcher.pattern is None
        assert matcher.commands == ()


class TestStructuredDecision:
    def test_raw_ignored_in_equality(self):
        a = StructuredDecision(decision="block", raw={"decision": "block"})
        b = StructuredDecision(decision="block", raw={"decision": "block", "extra": 1})
        assert a == b


class TestDispatchResult:
    def test_defaults(self):
        outcome = DispatchResult()
        assert outcome.should_block is False
        assert outcome.should_continue is True
        assert outcome.context == ""

    def test_context_joined(self):
        assert DispatchResult(context_to_add=("a", "b")).context == "a\n\nb"

    def test_failures(self):
        ok, bad = make_result(0), make_result(1)
        assert DispatchResult(results=(ok, bad)).failures == (bad,)


class TestDispatcherConfig:
    def test_defaults(self):
        config = DispatcherConfig()
        assert config.debug is False
        assert config.default_timeout == 60.0
        assert config.kill_grace_seconds == 5.0
        assert config.shell is None
