from __future__ import annotations

import hashlib
import json
import time
import uuid
from contextlib import contextmanager
from typing import Any, Dict, Optional

import httpx
import logging

from ..core.config import settings
from ..core.structured_logging import trace_id_var

logger = logging.getLogger(__name__)


class Trace:
    """Langfuse trace with per-step spans and LLM call tracking."""

    def __init__(self, name: str):
        self.name = name
        self.id = str(uuid.uuid4())
        self.spans: list[dict] = []
        self.logs: list[dict] = []
        self.llm_calls: list[dict] = []
        self.total_tokens = 0
        trace_id_var.set(self.id)

    def log(self, message: str, level: str = "INFO"):
        """Add a log entry to the trace"""
        self.logs.append({
            "timestamp": time.time(),
            "level": level,
            "message": message
        })

    def log_llm_call(
        self,
        model: str,
        prompt: str,
        completion: str,
        latency_ms: int,
        prompt_tokens: int,
        completion_tokens: int,
        task: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None
    ):
        """Log a complete LLM call with token usage and latency."""
        # Hash prompt/completion to avoid logging raw brief text
        prompt_hash = hashlib.sha256((prompt or "").encode("utf-8")).hexdigest()
        completion_hash = hashlib.sha256((completion or "").encode("utf-8")).hexdigest()
        llm_call = {
            "timestamp": time.time(),
            "model": model,
            "task": task,
            "prompt_hash": prompt_hash,
            "completion_hash": completion_hash,
            "latency_ms": latency_ms,
            "prompt_tokens": prompt_tokens,
            "completion_tokens": completion_tokens,
            "total_tokens": prompt_tokens + completion_tokens,
            "metadata": metadata or {}
        }

        self.llm_calls.append(llm_call)
        self.total_tokens += llm_call["total_tokens"]

        logger.info(
            f"LLM call tracked: model={model}, task={task}, "
            f"tokens={llm_call['total_tokens']}, latency={latency_ms}ms"
        )

    @contextmanager
    def span(self, name: str, meta: Optional[Dict[str, Any]] = None):
        """Create a span for tracking operation timing and metadata."""
        start = time.time()
        span = {
            "name": name,
            "start": start,
            "meta": meta or {},
            "llm_calls": []
        }

        try:
            yield span
            span["status"] = "OK"
        except Exception as e:  # noqa: BLE001
            span["status"] = "ERROR"
            span["error"] = str(e)
            raise
        finally:
            span["end"] = time.time()
            span["duration_ms"] = int((span["end"] - start) * 1000)

            span_llm_calls = [
                call for call in self.llm_calls
                if start <= call["timestamp"] <= span["end"]
            ]
            if span_llm_calls:
                span["llm_calls"] = span_llm_calls
                span["llm_tokens"] = sum(call["total_tokens"] for call in span_llm_calls)

            self.spans.append(span)
            logger.debug(
                f"Span '{name}' completed: {span['duration_ms']}ms, "
                f"status={span.get('status')}, LLM calls: {len(span_llm_calls)}"
            )

    async def flush(self):
        """Send trace data to Langfuse cloud."""
        if not (settings.langfuse_public_key and settings.langfuse_secret_key):
            logger.debug("Langfuse credentials not configured, skipping trace flush")
            return

        payload = {
            "traceId": self.id,
            "name": self.name,
            "spans": self.spans,
            "logs": self.logs,
            "llmCalls": self.llm_calls,
            "metrics": {
                "totalTokens": self.total_tokens,
                "llmCallCount": len(self.llm_calls)
            },
            "service": settings.service_name,
            "env": settings.service_env,
            "region": settings.service_region,
            "timestamp": time.time()
        }

        try:
            async with httpx.AsyncClient(timeout=5.0) as client:
                response = await client.post(
                    f"{settings.langfuse_host}/api/public/ingestion",
                    auth=(settings.langfuse_public_key, settings.langfuse_secret_key),
                    headers={"Content-Type": "application/json"},
                    content=json.dumps(payload, default=str),
                )
                response.raise_for_status()
                logger.debug(f"Trace {self.id} flushed to Langfuse successfully")
        except Exception as e:
            # Tracing failures never break the request
            logger.error(f"Failed to flush trace to Langfuse: {e}")
