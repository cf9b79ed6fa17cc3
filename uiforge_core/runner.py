"""
Run Driver - command -> instructions -> browser session -> final code

    result = await run_command("Build a signup form and make it dark themed")
    print(result.state.current_code)
"""

import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, List, Optional

from uiforge_logs import RunLogger

from .artifacts import ArtifactStore, new_run_dir
from .browser import open_browser_session
from .config import config
from .diagnostics import get_logger
from .interpreter import ActionInterpreter, RunState, summarize
from .llm_factory import setup_llm
from .providers import InstructionProvider, RefinementProvider
from .steps import Step, describe

logger = get_logger(__name__)


@dataclass
class RunResult:
    command: str
    steps: List[Step]
    state: RunState
    run_dir: Path
    screenshot: Optional[Path] = None
    log_path: Optional[str] = None

    @property
    def final_code(self) -> str:
        return self.state.current_code


async def run_command(
    command: Optional[str] = None,
    llm: Any = None,
    session_factory: Callable = None,
    artifact_dir: Optional[Path] = None,
    log_dir: Optional[Path] = None,
) -> RunResult:
    """
    Execute one natural-language command end to end.

    Args:
        command: Command text; config.default_command when omitted
        llm: LLM client with ainvoke(); built from UIFORGE_* env when omitted
        session_factory: async context manager yielding a BrowserSession
        artifact_dir: Base directory for run artifacts
        log_dir: Directory for the markdown run log

    Raises:
        InstructionParseError: the LLM did not return a valid step list
            (raised before any browser is launched)
        ElementResolutionError: a click/extractCode selector never resolved
    """
    command = command or config.default_command
    llm = llm if llm is not None else setup_llm()
    session_factory = session_factory or open_browser_session
    start = time.time()

    logger.info(f"Processing command: {command}")
    steps = await InstructionProvider(llm).generate(command)
    logger.info(f"Generated {len(steps)} instructions: " + "; ".join(describe(s) for s in steps))

    run_dir = new_run_dir(artifact_dir)
    run_id = run_dir.name[len("run-"):]
    store = ArtifactStore(run_dir)
    run_log = RunLogger(
        command=command,
        url=config.builder_url,
        log_dir=log_dir or config.log_dir,
        session_id=run_id,
    )
    run_log.log_table(
        ["#", "Action", "Step"],
        [[str(i), s.action or "-", describe(s)] for i, s in enumerate(steps, 1)],
        title="Generated Instructions",
    )

    interpreter = ActionInterpreter(
        refiner=RefinementProvider(llm),
        artifacts=store,
        run_logger=run_log,
    )
    state = RunState()
    result = RunResult(command=command, steps=steps, state=state, run_dir=run_dir, log_path=run_log.log_path)

    try:
        async with session_factory() as session:
            try:
                await interpreter.execute(steps, session, state)
            finally:
                await _capture_screenshot(session, store, run_log, result)
    except Exception as e:
        # Also reached when the browser never launched
        run_log.finalize(success=False, duration_ms=_elapsed_ms(start), error=str(e))
        raise

    if state.has_code:
        logger.info(f"Final code ({state.iteration_count} refinements):\n{state.current_code}")
    else:
        logger.info("No code was extracted during this run")
        run_log.log_warning("No code was extracted during this run")
    logger.debug(f"Run summary: {summarize(state)}")
    run_log.finalize(success=True, duration_ms=_elapsed_ms(start))
    return result


async def _capture_screenshot(session, store: ArtifactStore, run_log: RunLogger, result: RunResult):
    """Final page screenshot; a failure here never masks the run outcome."""
    path = store.screenshot_path()
    try:
        await session.screenshot(path)
    except Exception as e:
        logger.warning(f"Final screenshot failed: {e}")
        return
    logger.info(f"Final screenshot saved: {path}")
    result.screenshot = path
    run_log.log_heading("Final Screenshot")
    run_log.log_image(path, "Final page state")


def _elapsed_ms(start: float) -> int:
    return int((time.time() - start) * 1000)
