"""
Structured record extraction from free-form model output.

Strategies run in a fixed order and the first success wins:

1. ``direct``: the whole trimmed text is a JSON object.
2. ``fenced``: the first fenced code block (optionally tagged ``json``).
3. ``brace_span``: the substring from the first ``{`` to the last ``}``.

Each strategy returns an :class:`Extraction` instead of raising, so the chain
never uses exceptions for control flow.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

from ..models.exceptions import UnparseableResponseException

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"```(?:json)?\s*([\s\S]*?)```", re.IGNORECASE)


@dataclass(frozen=True)
class Extraction:
    """Tagged result of an extraction attempt."""

    ok: bool
    strategy: str
    value: Optional[Dict[str, Any]] = None
    reason: Optional[str] = None
    attempts: Tuple[str, ...] = field(default=())

    @classmethod
    def success(cls, strategy: str, value: Dict[str, Any]) -> "Extraction":
        return cls(ok=True, strategy=strategy, value=value)

    @classmethod
    def failure(cls, strategy: str, reason: str) -> "Extraction":
        return cls(ok=False, strategy=strategy, reason=reason)


def _loads_object(candidate: str, strategy: str) -> Extraction:
    try:
        value = json.loads(candidate)
    except ValueError as e:
        return Extraction.failure(strategy, f"invalid JSON: {e}")
    except RecursionError:
        return Extraction.failure(strategy, "JSON nested too deeply")
    if not isinstance(value, dict):
        return Extraction.failure(strategy, f"expected object, got {type(value).__name__}")
    return Extraction.success(strategy, value)


def _direct(text: str) -> Extraction:
    return _loads_object(text.strip(), "direct")


def _fenced(text: str) -> Extraction:
    match = _FENCE_RE.search(text)
    if not match:
        return Extraction.failure("fenced", "no fenced block")
    return _loads_object(match.group(1).strip(), "fenced")


def _brace_span(text: str) -> Extraction:
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end <= start:
        return Extraction.failure("brace_span", "no brace span")
    return _loads_object(text[start:end + 1], "brace_span")


STRATEGIES: List[Tuple[str, Callable[[str], Extraction]]] = [
    ("direct", _direct),
    ("fenced", _fenced),
    ("brace_span", _brace_span),
]


def extract_json(text: Optional[str]) -> Extraction:
    """Run every strategy in order; never raises."""
    if not text or not text.strip():
        return Extraction(ok=False, strategy="none", reason="empty response")

    reasons: List[str] = []
    for name, strategy in STRATEGIES:
        result = strategy(text)
        if result.ok:
            if reasons:
                logger.debug(f"Extracted JSON via {name} after: {'; '.join(reasons)}")
            return result
        reasons.append(f"{name}: {result.reason}")

    return Extraction(
        ok=False,
        strategy="none",
        reason="all strategies failed",
        attempts=tuple(reasons),
    )


def parse_json_response(text: Optional[str]) -> Dict[str, Any]:
    """Extract a JSON object or raise :class:`UnparseableResponseException`."""
    result = extract_json(text)
    if not result.ok or result.value is None:
        reasons = list(result.attempts) or [result.reason or "unknown"]
        logger.warning("Unparseable model response", extra={"strategies": reasons})
        raise UnparseableResponseException(reasons, preview=(text or "")[:200])
    return result.value
