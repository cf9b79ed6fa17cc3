"""
LLM-backed providers

InstructionProvider: natural-language command -> list of typed steps
RefinementProvider:  (current code, instruction) -> full replacement code

Both wrap any client exposing `async ainvoke(prompt) -> {"text": str}`.
"""

import json
import re
from typing import Any, List

from .config import config
from .diagnostics import get_logger
from .exceptions import InstructionParseError, RefinementError
from .steps import Step, parse_steps

logger = get_logger(__name__)

_CODE_BLOCK = re.compile(r"^\s*```[\w-]*\s*\n?([\s\S]*?)\n?```\s*$")


INSTRUCTION_PROMPT = """You control a web browser that drives an AI UI builder at {builder_url}.
Translate the user's command into a JSON array of steps. Each step is an object
with "action" and "details".

For actions:
- "navigate" expects a URL string.
- "wait" expects a number in milliseconds.
- "type" expects an object with "selector" and "text".
- "click" expects a CSS or text selector string.
- "extractCode" expects a selector string of the element holding the generated code.
- "refineCode" expects an object with "refinement" describing the change to make.

Always navigate to the builder first, and extract the code before any refineCode step.
Return only the JSON array, with no extra text, comments, or formatting.

Command: {command}
"""

REFINE_PROMPT = """You are improving UI code produced by an AI UI builder.
Apply the requested change and return the COMPLETE updated code, not a diff.
Return only the code, with no explanations.

Requested change: {refinement}

Current code:
{code}
"""


def strip_code_fences(text: str) -> str:
    """Remove a single surrounding ```lang ... ``` block if present."""
    match = _CODE_BLOCK.match(text)
    if match:
        return match.group(1).strip()
    return text.strip()


def _response_text(response: Any) -> str:
    if isinstance(response, dict):
        return str(response.get("text", ""))
    return str(getattr(response, "content", response))


class InstructionProvider:
    """Ask the LLM for a step list and parse it into typed steps."""

    def __init__(self, llm, builder_url: str = None):
        self.llm = llm
        self.builder_url = builder_url or config.builder_url

    async def generate(self, command: str) -> List[Step]:
        prompt = INSTRUCTION_PROMPT.format(builder_url=self.builder_url, command=command)
        response = await self.llm.ainvoke(prompt)
        text = strip_code_fences(_response_text(response))
        logger.debug(f"Raw instruction output: {text}")
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse instructions. Response text: {text}")
            raise InstructionParseError(f"Invalid JSON from LLM: {e}", raw_text=text) from e
        return parse_steps(payload)


class RefinementProvider:
    """Ask the LLM for an updated version of the current code."""

    def __init__(self, llm):
        self.llm = llm

    async def refine(self, code: str, refinement: str) -> str:
        prompt = REFINE_PROMPT.format(refinement=refinement, code=code)
        try:
            response = await self.llm.ainvoke(prompt)
        except Exception as e:
            raise RefinementError(f"Refinement call failed: {e}") from e
        refined = strip_code_fences(_response_text(response))
        if not refined:
            raise RefinementError("Refinement returned empty code")
        return refined
