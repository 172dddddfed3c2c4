"""Thin wrapper around the OpenAI chat completion API.

The rest of the application only sees ``request_completion``: a prompt goes
in, the raw response text comes out, or ``CompletionError`` is raised. Failed
requests are not retried.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from openai import OpenAI, OpenAIError

from merge_api.core.config import settings

logger = logging.getLogger(__name__)

MODEL_PRICING = {
    "gpt-4o-mini": {"input": 0.15, "output": 0.60},
    "gpt-4o": {"input": 2.50, "output": 10.00},
    "gpt-4": {"input": 30.00, "output": 60.00},
}

try:
    openai_client: Optional[OpenAI] = OpenAI(api_key=settings.OPENAI_API_KEY)
    logger.info("✅ OpenAI client configured.")
except OpenAIError as e:
    openai_client = None
    logger.warning("⚠️ OpenAI client unavailable: %s", e)


class CompletionError(Exception):
    """Raised when the completion service cannot produce a response."""


@dataclass
class CompletionResult:
    text: str
    model: str
    prompt_tokens: int = 0
    completion_tokens: int = 0

    @property
    def cost_usd(self) -> float:
        prices = MODEL_PRICING.get(self.model)
        if not prices:
            return 0.0
        return (self.prompt_tokens / 1_000_000) * prices["input"] + (
            self.completion_tokens / 1_000_000
        ) * prices["output"]


def request_completion(prompt: str, *, system_prompt: str, model: str | None = None) -> CompletionResult:
    """Send one chat completion request asking for a JSON object."""

    if openai_client is None:
        raise CompletionError("openai_client_not_configured")

    model = model or settings.OPENAI_MODEL
    logger.info("Requesting completion from OpenAI model %s", model)
    try:
        response = openai_client.chat.completions.create(
            model=model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": prompt},
            ],
            response_format={"type": "json_object"},
        )
    except OpenAIError as exc:
        logger.error("OpenAI completion request failed: %s", exc)
        raise CompletionError(str(exc)) from exc

    content = response.choices[0].message.content if response.choices else None
    if not content:
        raise CompletionError("empty_completion")

    usage = getattr(response, "usage", None)
    return CompletionResult(
        text=content,
        model=model,
        prompt_tokens=getattr(usage, "prompt_tokens", 0) or 0,
        completion_tokens=getattr(usage, "completion_tokens", 0) or 0,
    )
