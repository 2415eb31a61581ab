"""Single completion call with timeout, converted into an Outcome."""
from __future__ import annotations

import asyncio
import logging
from typing import Optional, Sequence

from supportdesk.agent.types import EMPTY_RESPONSE, PROVIDER_ERROR, TIMEOUT, Outcome
from supportdesk.clients.llm.base import BaseLLMClient, LLMMessage
from supportdesk.core.exceptions import EmptyResponse, ProviderError

logger = logging.getLogger(__name__)


async def run_completion(
    llm: BaseLLMClient,
    system_prompt: str,
    messages: Sequence[LLMMessage],
    *,
    temperature: float,
    max_tokens: Optional[int],
    timeout_seconds: Optional[float] = None,
    purpose: str = "completion",
) -> Outcome[str]:
    """Call ``llm.complete`` and report failures as a tagged Outcome.

    Only provider-side failures are converted; programming errors propagate.
    """
    try:
        text = await asyncio.wait_for(
            llm.complete(system_prompt, messages, temperature=temperature, max_tokens=max_tokens),
            timeout=timeout_seconds,
        )
    except asyncio.TimeoutError:
        logger.warning("%s timed out after %ss (provider=%s)", purpose, timeout_seconds, llm.provider)
        return Outcome.failed(TIMEOUT)
    except EmptyResponse as exc:
        logger.warning("%s returned nothing (provider=%s): %s", purpose, llm.provider, exc)
        return Outcome.failed(EMPTY_RESPONSE)
    except ProviderError as exc:
        logger.warning("%s failed (provider=%s): %s", purpose, llm.provider, exc)
        return Outcome.failed(PROVIDER_ERROR)

    text = (text or "").strip()
    if not text:
        return Outcome.failed(EMPTY_RESPONSE)
    return Outcome.success(text)
