"""
Action Interpreter - executes a parsed step list against one browser session

Steps run strictly in order, one at a time. Each step's browser call, LLM
call or artifact write completes before the next step starts, because later
steps (refineCode) depend on state produced by earlier ones (extractCode).

Failure policy:
- SkipStep / UnknownStep, refineCode without code, RefinementError:
  warn and continue
- ElementResolutionError from click / extractCode: propagate, aborting
  the remaining steps
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from .artifacts import ArtifactStore
from .config import config
from .diagnostics import get_logger
from .exceptions import RefinementError
from .steps import (
    ClickStep, ExtractStep, NavigateStep, RefineStep, SkipStep, Step,
    TypeStep, UnknownStep, WaitStep, describe,
)

logger = get_logger(__name__)


@dataclass
class RunState:
    """Mutable state of one command execution, owned by the interpreter."""

    current_code: str = ""
    iteration_count: int = 0
    artifacts: List[Path] = field(default_factory=list)

    @property
    def has_code(self) -> bool:
        return self.current_code != ""


class ActionInterpreter:
    """
    Execute steps against a BrowserSession.

    Args:
        refiner: object with `async refine(code, refinement) -> str`
        artifacts: ArtifactStore for extracted/refined code (None = don't persist)
        run_logger: optional uiforge_logs.RunLogger
    """

    HANDLERS = {
        NavigateStep: '_navigate',
        WaitStep: '_wait',
        TypeStep: '_type',
        ClickStep: '_click',
        ExtractStep: '_extract',
        RefineStep: '_refine',
        SkipStep: '_skip',
        UnknownStep: '_unknown',
    }

    def __init__(
        self,
        refiner,
        artifacts: Optional[ArtifactStore] = None,
        run_logger=None,
        navigate_settle_ms: int = None,
        type_settle_ms: int = None,
        click_settle_ms: int = None,
        click_timeout_ms: int = None,
        extract_timeout_ms: int = None,
    ):
        self.refiner = refiner
        self.artifacts = artifacts
        self.run_logger = run_logger
        self.navigate_settle_ms = config.navigate_settle_ms if navigate_settle_ms is None else navigate_settle_ms
        self.type_settle_ms = config.type_settle_ms if type_settle_ms is None else type_settle_ms
        self.click_settle_ms = config.click_settle_ms if click_settle_ms is None else click_settle_ms
        self.click_timeout_ms = config.click_timeout_ms if click_timeout_ms is None else click_timeout_ms
        self.extract_timeout_ms = config.extract_timeout_ms if extract_timeout_ms is None else extract_timeout_ms

    def _warn(self, msg: str):
        logger.warning(msg)
        if self.run_logger:
            self.run_logger.log_warning(msg)

    async def execute(self, steps: Sequence[Step], session, state: Optional[RunState] = None) -> RunState:
        """
        Run every step in order and return the final RunState.

        A fresh RunState is created unless one is handed in.
        """
        state = state if state is not None else RunState()
        total = len(steps)

        for index, step in enumerate(steps, 1):
            label = describe(step)
            logger.info(f"Step {index}/{total}: {label}")
            if self.run_logger:
                self.run_logger.log_heading(f"Step {index}: {step.action or 'invalid'}")
                self.run_logger.log_text(label)

            handler = getattr(self, self.HANDLERS[type(step)])
            try:
                await handler(step, session, state)
            except Exception as e:
                logger.error(f"Step {index}/{total} failed, aborting run: {e}")
                if self.run_logger:
                    self.run_logger.log_error(f"{label}: {e}")
                raise

        return state

    async def _navigate(self, step: NavigateStep, session, state: RunState):
        logger.info(f"Navigating to {step.url}")
        await session.goto(step.url)
        await session.wait_for_timeout(self.navigate_settle_ms)

    async def _wait(self, step: WaitStep, session, state: RunState):
        if step.ms <= 0:
            self._warn("Wait duration is not a positive number, not waiting")
            return
        logger.info(f"Waiting {step.ms}ms")
        await session.wait_for_timeout(step.ms)

    async def _type(self, step: TypeStep, session, state: RunState):
        logger.info(f'Typing "{step.text}" into element with selector {step.selector}')
        await session.fill(step.selector, step.text)
        await session.wait_for_timeout(self.type_settle_ms)

    async def _click(self, step: ClickStep, session, state: RunState):
        logger.info(f"Clicking {step.selector}")
        await session.click(step.selector, timeout_ms=self.click_timeout_ms)
        await session.wait_for_timeout(self.click_settle_ms)

    async def _extract(self, step: ExtractStep, session, state: RunState):
        logger.info(f"Extracting code from {step.selector}")
        handle = await session.wait_for_selector(step.selector, timeout_ms=self.extract_timeout_ms)
        state.current_code = await session.inner_html(handle)
        logger.info(f"Extracted {len(state.current_code)} characters of code")
        if self.run_logger:
            self.run_logger.log_code("html", state.current_code)
        if self.artifacts:
            state.artifacts.append(self.artifacts.save_extraction(state.current_code))

    async def _refine(self, step: RefineStep, session, state: RunState):
        if not state.has_code:
            self._warn("No code extracted yet, skipping refinement")
            return
        logger.info(f"Refining code: {step.refinement}")
        try:
            refined = await self.refiner.refine(state.current_code, step.refinement)
        except RefinementError as e:
            self._warn(f"Refinement failed, keeping current code: {e}")
            return
        state.current_code = refined
        state.iteration_count += 1
        logger.info(f"Refinement iteration {state.iteration_count} complete")
        if self.run_logger:
            self.run_logger.log_code("html", state.current_code)
        if self.artifacts:
            state.artifacts.append(self.artifacts.save_iteration(state.iteration_count, state.current_code))

    async def _skip(self, step: SkipStep, session, state: RunState):
        self._warn(f"Invalid details for {step.action or 'step'} action ({step.reason}): {_preview(step.raw)}")

    async def _unknown(self, step: UnknownStep, session, state: RunState):
        self._warn(f"Unknown action: {step.action}")


def _preview(raw: Any, limit: int = 200) -> str:
    try:
        text = json.dumps(raw, ensure_ascii=False)
    except (TypeError, ValueError):
        text = repr(raw)
    return text[:limit]


def summarize(state: RunState) -> Dict[str, Any]:
    return {
        "iteration_count": state.iteration_count,
        "code_length": len(state.current_code),
        "artifacts": [str(p) for p in state.artifacts],
    }
