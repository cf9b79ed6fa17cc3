"""
Step model - typed view of the instruction list produced by the LLM

Raw entries look like {"action": "...", "details": ...}. Each one is parsed
once, at the boundary, into a dataclass that carries exactly the fields its
action needs:

    navigate     -> NavigateStep(url)
    wait         -> WaitStep(ms)
    type         -> TypeStep(selector, text)
    click        -> ClickStep(selector)
    extractCode  -> ExtractStep(selector)
    refineCode   -> RefineStep(refinement)

Entries whose details do not fit their action become SkipStep, entries with
an action we do not know become UnknownStep. Both are kept in place so the
interpreter can log them in sequence.
"""

import re
from dataclasses import dataclass
from typing import Any, List, Mapping, Union

from .exceptions import InstructionParseError


@dataclass(frozen=True)
class NavigateStep:
    url: str
    action: str = "navigate"


@dataclass(frozen=True)
class WaitStep:
    ms: int
    action: str = "wait"


@dataclass(frozen=True)
class TypeStep:
    selector: str
    text: str
    action: str = "type"


@dataclass(frozen=True)
class ClickStep:
    selector: str
    action: str = "click"


@dataclass(frozen=True)
class ExtractStep:
    selector: str
    action: str = "extractCode"


@dataclass(frozen=True)
class RefineStep:
    refinement: str
    action: str = "refineCode"


@dataclass(frozen=True)
class SkipStep:
    """Known action with details that do not match its shape."""
    action: str
    reason: str
    raw: Any = None


@dataclass(frozen=True)
class UnknownStep:
    action: str
    raw: Any = None


Step = Union[NavigateStep, WaitStep, TypeStep, ClickStep, ExtractStep, RefineStep, SkipStep, UnknownStep]

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_wait_ms(details: Any) -> int:
    """
    Permissive millisecond parse: the leading integer of a number or string.

    "2000" -> 2000, "1500ms" -> 1500, 1500.7 -> 1500.
    Anything non-numeric (and negatives) gives 0, i.e. a no-op wait.
    """
    if isinstance(details, bool):
        return 0
    if isinstance(details, (int, float)):
        if details != details or details in (float("inf"), float("-inf")):
            return 0
        return max(int(details), 0)
    if isinstance(details, str):
        match = _LEADING_INT.match(details)
        if match:
            return max(int(match.group(1)), 0)
    return 0


def _non_empty_str(value: Any) -> bool:
    return isinstance(value, str) and value.strip() != ""


def _parse_navigate(details: Any, raw: Any) -> Step:
    if not _non_empty_str(details):
        return SkipStep("navigate", "details must be a URL string", raw)
    return NavigateStep(url=details.strip())


def _parse_wait(details: Any, raw: Any) -> Step:
    return WaitStep(ms=parse_wait_ms(details))


def _parse_type(details: Any, raw: Any) -> Step:
    if not isinstance(details, Mapping):
        return SkipStep("type", "details must be an object with selector and text", raw)
    selector = details.get("selector")
    text = details.get("text")
    if not _non_empty_str(selector) or not _non_empty_str(text):
        return SkipStep("type", "details need non-empty 'selector' and 'text'", raw)
    return TypeStep(selector=selector, text=text)


def _parse_click(details: Any, raw: Any) -> Step:
    if not _non_empty_str(details):
        return SkipStep("click", "details must be a selector string", raw)
    return ClickStep(selector=details)


def _parse_extract(details: Any, raw: Any) -> Step:
    if not _non_empty_str(details):
        return SkipStep("extractCode", "details must be a selector string", raw)
    return ExtractStep(selector=details)


def _parse_refine(details: Any, raw: Any) -> Step:
    if not isinstance(details, Mapping) or not _non_empty_str(details.get("refinement")):
        return SkipStep("refineCode", "details need a non-empty 'refinement'", raw)
    return RefineStep(refinement=details["refinement"])


PARSERS = {
    "navigate": _parse_navigate,
    "wait": _parse_wait,
    "type": _parse_type,
    "click": _parse_click,
    "extractCode": _parse_extract,
    "refineCode": _parse_refine,
}


def parse_step(raw: Any) -> Step:
    """Parse one raw entry. Never raises."""
    if not isinstance(raw, Mapping):
        return SkipStep("", "step is not an object", raw)
    action = raw.get("action")
    if not isinstance(action, str):
        return SkipStep("", "step has no action name", raw)
    parser = PARSERS.get(action)
    if parser is None:
        return UnknownStep(action=action, raw=raw)
    return parser(raw.get("details"), raw)


def parse_steps(payload: Any) -> List[Step]:
    """
    Parse the whole instruction list.

    Raises InstructionParseError if the payload is not a list; individual
    entries never fail the parse.
    """
    if not isinstance(payload, list):
        raise InstructionParseError(
            f"Instructions must be a JSON array, got {type(payload).__name__}",
            raw_text=repr(payload)[:500],
        )
    return [parse_step(item) for item in payload]


def describe(step: Step) -> str:
    """Short human-readable label used in logs."""
    if isinstance(step, NavigateStep):
        return f"navigate {step.url}"
    if isinstance(step, WaitStep):
        return f"wait {step.ms}ms"
    if isinstance(step, TypeStep):
        return f"type '{step.text}' into {step.selector}"
    if isinstance(step, ClickStep):
        return f"click {step.selector}"
    if isinstance(step, ExtractStep):
        return f"extractCode from {step.selector}"
    if isinstance(step, RefineStep):
        return f"refineCode '{step.refinement}'"
    if isinstance(step, SkipStep):
        return f"skip {step.action or '?'} ({step.reason})"
    return f"unknown action '{step.action}'"
