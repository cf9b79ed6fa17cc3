from typing import Any, Dict, Optional

import aiohttp

from .diagnostics import get_logger
from .exceptions import LLMError
from .llm_config import LLMConfig

logger = get_logger(__name__)

# Low temperature keeps the step JSON parseable across calls
TEMPERATURE = 0.2
MAX_TOKENS = 4096


def setup_llm(llm_config: Optional[LLMConfig] = None) -> Any:
    """Client for the configured provider; settings come from the environment when omitted."""
    return create_llm_client(llm_config or LLMConfig.from_env())


def create_llm_client(llm_config: LLMConfig) -> "ChatClient":
    client_cls = CLIENTS.get(llm_config.provider, OpenAICompatibleClient)
    logger.debug(f"LLM client: {client_cls.__name__} {llm_config.model} at {llm_config.base_url}")
    return client_cls(llm_config)


class ChatClient:
    """
    One POST per prompt against a provider's HTTP API.

    Subclasses set `path` and shape the request body and the reply; callers
    only see ainvoke(prompt) -> {"text": str}.
    """

    path = ""

    def __init__(self, llm_config: LLMConfig):
        self.llm_config = llm_config
        self.url = llm_config.base_url + self.path

    def headers(self) -> Dict[str, str]:
        return {}

    def body(self, prompt: str) -> Dict[str, Any]:
        raise NotImplementedError

    def reply_text(self, data: Dict[str, Any]) -> str:
        raise NotImplementedError

    async def ainvoke(self, prompt: str) -> dict:
        timeout = aiohttp.ClientTimeout(total=self.llm_config.timeout)
        async with aiohttp.ClientSession(timeout=timeout) as http:
            async with http.post(self.url, json=self.body(prompt), headers=self.headers()) as resp:
                if resp.status != 200:
                    detail = await resp.text()
                    raise LLMError(f"{self.llm_config.provider} returned HTTP {resp.status}: {detail}")
                data = await resp.json()
        return {"text": self.reply_text(data) or ""}


class OllamaClient(ChatClient):
    path = "/api/generate"

    def body(self, prompt):
        return {
            "model": self.llm_config.model,
            "prompt": prompt,
            "stream": False,
            "options": {"temperature": TEMPERATURE, "num_predict": MAX_TOKENS},
        }

    def reply_text(self, data):
        return data.get("response", "")


class OpenAICompatibleClient(ChatClient):
    """OpenAI chat completions; Groq and DeepSeek speak the same dialect."""

    path = "/chat/completions"

    def headers(self):
        return {"Authorization": f"Bearer {self.llm_config.api_token}"}

    def body(self, prompt):
        return {
            "model": self.llm_config.model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": TEMPERATURE,
            "max_tokens": MAX_TOKENS,
        }

    def reply_text(self, data):
        choices = data.get("choices") or [{}]
        return choices[0].get("message", {}).get("content", "")


class AnthropicClient(ChatClient):
    path = "/v1/messages"

    def headers(self):
        return {"x-api-key": self.llm_config.api_token or "", "anthropic-version": "2023-06-01"}

    def body(self, prompt):
        return {
            "model": self.llm_config.model,
            "max_tokens": MAX_TOKENS,
            "temperature": TEMPERATURE,
            "messages": [{"role": "user", "content": prompt}],
        }

    def reply_text(self, data):
        return "".join(block.get("text", "") for block in data.get("content", []) if block.get("type") == "text")


CLIENTS = {
    "ollama": OllamaClient,
    "anthropic": AnthropicClient,
}
