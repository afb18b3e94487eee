"""Tests for enumfsm.helpers."""

import logging
from enum import Enum

import pytest

from enumfsm.helpers import build_registry, log_side_effect
from enumfsm.registry import TransitionRegistry


class DummyStates(Enum):
    A = "a"
    B = "b"


# ── build_registry ─────────────────────────────────────────────────────────────

class TestBuildRegistry:
    def test_builds_conditions_and_side_effects(self):
        cond = lambda ctx: True  # noqa: E731
        effect = lambda ctx, frm, to: None  # noqa: E731
        r = build_registry(conditions={"Go": cond}, side_effects={"Do": effect})
        assert r.conditions["Go"] is cond
        assert r.side_effects["Do"] is effect

    def test_empty_registry(self):
        r = build_registry()
        assert r.condition_names() == []
        assert r.side_effect_names() == []

    def test_adds_to_existing_registry(self):
        existing = TransitionRegistry()
        existing.register_condition("Old", lambda ctx: False)
        r = build_registry(conditions={"New": lambda ctx: True}, registry=existing)
        assert r is existing
        assert r.condition_names() == ["Old", "New"]

    def test_non_callable_condition_raises(self):
        with pytest.raises(TypeError, match="Bad"):
            build_registry(conditions={"Bad": True})

    def test_non_callable_side_effect_raises(self):
        with pytest.raises(TypeError, match="Bad"):
            build_registry(side_effects={"Bad": "not a function"})


# ── log_side_effect ────────────────────────────────────────────────────────────

class TestLogSideEffect:
    def test_preserves_function_name(self):
        @log_side_effect
        def notify(ctx, frm, to):
            pass

        assert notify.__name__ == "notify"

    def test_calls_wrapped_function(self):
        calls = []

        @log_side_effect
        def notify(ctx, frm, to):
            calls.append((ctx, frm, to))

        notify("ctx", DummyStates.A, DummyStates.B)
        assert calls == [("ctx", DummyStates.A, DummyStates.B)]

    def test_logs_start_and_complete(self, caplog):
        @log_side_effect
        def notify(ctx, frm, to):
            pass

        with caplog.at_level(logging.DEBUG, logger="enumfsm.helpers"):
            notify(None, DummyStates.A, DummyStates.B)

        assert "notify A → B: Starting..." in caplog.text
        assert "notify A → B: Complete" in caplog.text

    def test_logs_and_reraises_failure(self, caplog):
        @log_side_effect
        def notify(ctx, frm, to):
            raise RuntimeError("boom")

        with caplog.at_level(logging.DEBUG, logger="enumfsm.helpers"):
            with pytest.raises(RuntimeError, match="boom"):
                notify(None, DummyStates.A, DummyStates.B)

        assert "Failed" in caplog.text
