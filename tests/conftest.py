"""
Shared fixtures: a recording fake browser session and fake LLM clients.
"""

from contextlib import asynccontextmanager
from pathlib import Path
from typing import Dict, List, Tuple
from unittest.mock import AsyncMock

import pytest

from uiforge_core.exceptions import ElementResolutionError


class FakeHandle:
    def __init__(self, html: str):
        self.html = html

    async def inner_html(self) -> str:
        return self.html


class FakeSession:
    """
    Stand-in for BrowserSession that records every call in order.

    `elements` maps selectors to inner HTML; selectors that are not present
    time out on click / wait_for_selector.
    """

    def __init__(self, elements: Dict[str, str] = None, clickable: List[str] = None):
        self.elements = dict(elements or {})
        self.clickable = set(clickable or []) | set(self.elements)
        self.calls: List[Tuple] = []

    async def goto(self, url):
        self.calls.append(("goto", url))

    async def fill(self, selector, text):
        self.calls.append(("fill", selector, text))

    async def click(self, selector, timeout_ms):
        self.calls.append(("click", selector, timeout_ms))
        if selector not in self.clickable:
            raise ElementResolutionError(selector, timeout_ms, "not actionable")

    async def wait_for_selector(self, selector, timeout_ms):
        self.calls.append(("wait_for_selector", selector, timeout_ms))
        if selector not in self.elements:
            raise ElementResolutionError(selector, timeout_ms, "no matching element")
        return FakeHandle(self.elements[selector])

    async def inner_html(self, handle):
        return await handle.inner_html()

    async def wait_for_timeout(self, ms):
        self.calls.append(("wait_for_timeout", ms))

    async def screenshot(self, path):
        self.calls.append(("screenshot", str(path)))
        Path(path).write_bytes(b"\x89PNG")
        return str(path)

    def names(self) -> List[str]:
        return [c[0] for c in self.calls]


@pytest.fixture
def fake_session():
    return FakeSession(elements={".ui": "<div>UI</div>"}, clickable=["#generate"])


@pytest.fixture
def session_factory(fake_session):
    """Async context manager factory yielding the shared fake session."""
    @asynccontextmanager
    async def factory():
        yield fake_session
    return factory


@pytest.fixture
def refiner():
    mock = AsyncMock()
    mock.refine.return_value = "<div class='r'>UI</div>"
    return mock


@pytest.fixture
def fake_llm():
    """LLM client; tests set ainvoke.return_value or side_effect."""
    return AsyncMock()
