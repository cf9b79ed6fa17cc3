"""
uiforge_core package: natural-language commands -> browser actions -> UI code

Usage:
    from uiforge_core import run_command

    result = await run_command("Build a pricing page and make it responsive")
    print(result.final_code)
"""
from .config import Config, config
from .exceptions import (
    UiforgeError, InstructionParseError, RefinementError,
    ElementResolutionError, LLMError,
)
from .llm_config import LLMConfig
from .llm_factory import setup_llm, create_llm_client
from .steps import parse_step, parse_steps
from .interpreter import ActionInterpreter, RunState
from .providers import InstructionProvider, RefinementProvider
from .artifacts import ArtifactStore, cleanup_old_runs
from .browser import BrowserSession, open_browser_session
from .runner import RunResult, run_command

__all__ = [
    "Config",
    "config",
    "UiforgeError",
    "InstructionParseError",
    "RefinementError",
    "ElementResolutionError",
    "LLMError",
    "LLMConfig",
    "setup_llm",
    "create_llm_client",
    "parse_step",
    "parse_steps",
    "ActionInterpreter",
    "RunState",
    "InstructionProvider",
    "RefinementProvider",
    "ArtifactStore",
    "cleanup_old_runs",
    "BrowserSession",
    "open_browser_session",
    "RunResult",
    "run_command",
]
