import logging
from typing import Optional

import httpx
from openai import APIConnectionError, APIError, APIStatusError, OpenAI

from . import config
from .errors import TextGenerationError

log = logging.getLogger(__name__)


class TextGenerator:
    """
    Prompt in, text out. One chat-completions call per `generate`, no retries:
    a failed call is reported as TextGenerationError and the caller decides.
    """

    def __init__(self, api_key: str, *, model: Optional[str] = None,
                 base_url: Optional[str] = None, timeout_sec: Optional[float] = None):
        self.model = model or config.LLM_MODEL
        self.client = OpenAI(
            api_key=api_key,
            base_url=base_url or config.LLM_BASE_URL,
            timeout=httpx.Timeout(timeout_sec or config.LLM_TIMEOUT_SEC, connect=10.0),
            max_retries=0,
        )

    @classmethod
    def from_config(cls) -> "TextGenerator":
        return cls(config.require_llm_api_key())

    def generate(self, prompt: str, *, max_tokens: int, temperature: float = 0.0) -> str:
        try:
            resp = self.client.chat.completions.create(
                model=self.model,
                temperature=temperature,
                max_tokens=max_tokens,
                messages=[{"role": "user", "content": prompt}],
            )
        except APIStatusError as e:
            log.error("text generation returned %s", e.status_code)
            raise TextGenerationError(f"Text generation failed: {e.status_code}",
                                      status_code=e.status_code) from e
        except APIConnectionError as e:
            raise TextGenerationError(f"Text generation unreachable: {e}") from e
        except APIError as e:
            raise TextGenerationError(f"Text generation failed: {e}") from e

        if not resp.choices:
            return ""
        return resp.choices[0].message.content or ""
