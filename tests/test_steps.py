"""
Unit tests for parsing raw instruction entries into typed steps.
"""

import pytest

from uiforge_core.exceptions import InstructionParseError
from uiforge_core.steps import (
    ClickStep, ExtractStep, NavigateStep, RefineStep, SkipStep, TypeStep,
    UnknownStep, WaitStep, describe, parse_step, parse_steps, parse_wait_ms,
)


class TestParseStep:

    def test_navigate(self):
        assert parse_step({"action": "navigate", "details": "https://v0.dev"}) == NavigateStep("https://v0.dev")

    def test_type(self):
        step = parse_step({"action": "type", "details": {"selector": "textarea", "text": "hello"}})
        assert step == TypeStep(selector="textarea", text="hello")

    def test_click_and_extract(self):
        assert parse_step({"action": "click", "details": "button[type=submit]"}) == ClickStep("button[type=submit]")
        assert parse_step({"action": "extractCode", "details": "pre code"}) == ExtractStep("pre code")

    def test_refine(self):
        step = parse_step({"action": "refineCode", "details": {"refinement": "add a footer"}})
        assert step == RefineStep("add a footer")

    def test_wait(self):
        assert parse_step({"action": "wait", "details": "3000"}) == WaitStep(3000)

    def test_unknown_action(self):
        raw = {"action": "scroll", "details": 100}
        step = parse_step(raw)
        assert isinstance(step, UnknownStep)
        assert step.action == "scroll"
        assert step.raw == raw

    def test_action_names_are_case_sensitive(self):
        assert isinstance(parse_step({"action": "Navigate", "details": "https://x"}), UnknownStep)

    @pytest.mark.parametrize("raw", [
        {"action": "navigate", "details": 42},
        {"action": "navigate"},
        {"action": "type", "details": {"selector": "", "text": "x"}},
        {"action": "type", "details": ["#a", "x"]},
        {"action": "click", "details": {"selector": "#a"}},
        {"action": "extractCode", "details": ""},
        {"action": "refineCode", "details": "make it blue"},
        {"action": "refineCode", "details": {"refinement": "  "}},
    ])
    def test_shape_mismatch_becomes_skip(self, raw):
        step = parse_step(raw)
        assert isinstance(step, SkipStep)
        assert step.action == raw["action"]
        assert step.raw == raw

    @pytest.mark.parametrize("raw", ["navigate", 7, None, {"details": "x"}, {"action": 3}])
    def test_not_a_step_object(self, raw):
        step = parse_step(raw)
        assert isinstance(step, SkipStep)
        assert step.action == ""


class TestParseSteps:

    def test_order_preserved(self):
        raw = [
            {"action": "navigate", "details": "https://x"},
            {"action": "bogus"},
            {"action": "wait", "details": 10},
            {"action": "navigate", "details": "https://x"},
        ]
        steps = parse_steps(raw)
        assert [s.action for s in steps] == ["navigate", "bogus", "wait", "navigate"]

    def test_empty_list(self):
        assert parse_steps([]) == []

    @pytest.mark.parametrize("payload", [{"steps": []}, "navigate", None, 5])
    def test_non_list_rejected(self, payload):
        with pytest.raises(InstructionParseError):
            parse_steps(payload)


class TestParseWaitMs:

    @pytest.mark.parametrize("details,expected", [
        (2000, 2000),
        ("2000", 2000),
        (" 1500ms", 1500),
        (1500.7, 1500),
        ("abc", 0),
        ("", 0),
        (None, 0),
        ({"ms": 100}, 0),
        (-50, 0),
        ("-50", 0),
        (True, 0),
        (float("nan"), 0),
    ])
    def test_values(self, details, expected):
        assert parse_wait_ms(details) == expected


def test_describe_labels():
    assert describe(NavigateStep("https://x")) == "navigate https://x"
    assert describe(WaitStep(5)) == "wait 5ms"
    assert describe(UnknownStep("hover")) == "unknown action 'hover'"
    assert "selector" in describe(SkipStep("type", "details need non-empty 'selector' and 'text'"))
