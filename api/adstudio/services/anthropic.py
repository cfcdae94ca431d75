"""Anthropic Messages API integration."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import httpx

from ..core.config import settings
from ..core.structured_logging import log_external_call
from ..models.exceptions import (
    CompletionException,
    EmptyCompletionException,
    ServiceNotConfiguredException,
)
from .langfuse import Trace

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImageInput:
    """Base64 image data with its declared media type."""

    data: str
    media_type: str = "image/png"


def build_content(prompt: str, image: Optional[ImageInput] = None) -> Any:
    """Plain text, or an image part followed by a text part."""
    if image is None:
        return prompt
    return [
        {
            "type": "image",
            "source": {"type": "base64", "media_type": image.media_type, "data": image.data},
        },
        {"type": "text", "text": prompt},
    ]


def extract_text(response: Dict[str, Any]) -> Optional[str]:
    """Return the first ``text`` segment, skipping reasoning segments."""
    for block in response.get("content") or []:
        if isinstance(block, dict) and block.get("type") == "text":
            return block.get("text", "")
    return None


class CompletionClient:
    """Sends one role-tagged message list per call; results are never cached."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        trace: Optional[Trace] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.anthropic_api_key
        self.model = model or settings.anthropic_model
        self.base_url = (base_url or settings.anthropic_base_url).rstrip("/")
        self.trace = trace

    def _headers(self) -> Dict[str, str]:
        return {
            "x-api-key": self.api_key or "",
            "anthropic-version": settings.anthropic_version,
            "content-type": "application/json",
        }

    async def complete(
        self,
        prompt: str,
        *,
        image: Optional[ImageInput] = None,
        max_tokens: int = 4096,
        thinking_budget: Optional[int] = None,
        system: Optional[str] = None,
        task: str = "",
    ) -> str:
        if not self.api_key:
            raise ServiceNotConfiguredException("Completion service", "ANTHROPIC_API_KEY")

        messages: List[Dict[str, Any]] = [{"role": "user", "content": build_content(prompt, image)}]
        payload: Dict[str, Any] = {
            "model": self.model,
            "max_tokens": max_tokens,
            "messages": messages,
        }
        if system:
            payload["system"] = system
        if thinking_budget:
            payload["thinking"] = {"type": "enabled", "budget_tokens": thinking_budget}

        timeout = settings.completion_timeout_long if thinking_budget else settings.completion_timeout
        log_external_call(
            logger, "anthropic", "messages",
            model=self.model, task=task, max_tokens=max_tokens,
            has_image=image is not None, thinking_budget=thinking_budget,
        )

        start = time.time()
        try:
            async with httpx.AsyncClient(timeout=float(timeout)) as client:
                resp = await client.post(
                    f"{self.base_url}/v1/messages",
                    headers=self._headers(),
                    json=payload,
                )
                resp.raise_for_status()
                data = resp.json()
        except httpx.HTTPStatusError as e:
            raise CompletionException(
                _upstream_message(e.response),
                status_code=e.response.status_code,
                model=self.model,
            ) from e
        except httpx.TimeoutException as e:
            raise CompletionException("Completion request timed out", model=self.model) from e
        except httpx.HTTPError as e:
            raise CompletionException(f"Completion request failed: {e}", model=self.model) from e
        except ValueError as e:
            raise CompletionException("Invalid JSON from completion service", model=self.model) from e

        latency_ms = int((time.time() - start) * 1000)
        text = extract_text(data)
        if self.trace is not None:
            usage = data.get("usage") or {}
            self.trace.log_llm_call(
                model=data.get("model", self.model),
                prompt=prompt,
                completion=text or "",
                latency_ms=latency_ms,
                prompt_tokens=usage.get("input_tokens", 0),
                completion_tokens=usage.get("output_tokens", 0),
                task=task,
                metadata={"response_id": data.get("id"), "stop_reason": data.get("stop_reason")},
            )

        if text is None:
            raise EmptyCompletionException(model=self.model)
        return text


def _upstream_message(response: httpx.Response) -> str:
    """Prefer the provider's own error message when it sent one."""
    try:
        body = response.json()
    except ValueError:
        return f"Completion service error {response.status_code}"
    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict) and error.get("message"):
        return error["message"]
    return f"Completion service error {response.status_code}"


async def health_check() -> bool:
    """Report whether the completion service is configured."""
    return bool(settings.anthropic_api_key)
