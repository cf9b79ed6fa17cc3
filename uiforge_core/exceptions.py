"""
uiforge exceptions
"""


class UiforgeError(Exception):
    """Base exception for uiforge"""
    pass


class InstructionParseError(UiforgeError):
    """Instruction list from the LLM is not a valid JSON array of steps"""

    def __init__(self, message: str, raw_text: str = ""):
        super().__init__(message)
        self.raw_text = raw_text


class RefinementError(UiforgeError):
    """Refinement call failed or returned unusable code"""
    pass


class ElementResolutionError(UiforgeError):
    """Selector did not resolve (or become actionable) within its bound"""

    def __init__(self, selector: str, timeout_ms: int, reason: str = ""):
        msg = f"Element '{selector}' not resolved within {timeout_ms}ms"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)
        self.selector = selector
        self.timeout_ms = timeout_ms


class LLMError(UiforgeError):
    """LLM API returned an error response"""
    pass
