"""
``{{key}}`` placeholder rendering for ad markup.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Any, List, Mapping, Optional

from ..models.exceptions import UnresolvedPlaceholderException

PLACEHOLDER_RE = re.compile(r"\{\{([^{}\s]+)\}\}")
# Any key a field map can name, including keys with spaces.
_TOKEN_RE = re.compile(r"\{\{([^{}]+)\}\}")


class MissingPolicy(str, Enum):
    """What to do with placeholders that have no field value."""

    KEEP = "keep"
    BLANK = "blank"
    STRICT = "strict"


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def find_placeholders(markup: str) -> List[str]:
    """Placeholder names in order of first appearance, without duplicates."""
    seen: dict[str, None] = {}
    for match in PLACEHOLDER_RE.finditer(markup or ""):
        seen.setdefault(match.group(1), None)
    return list(seen)


def missing_fields(markup: str, fields: Optional[Mapping[str, Any]]) -> List[str]:
    fields = fields or {}
    return [name for name in find_placeholders(markup) if name not in fields]


def render(
    markup: str,
    fields: Optional[Mapping[str, Any]],
    missing: MissingPolicy = MissingPolicy.KEEP,
) -> str:
    """Substitute every ``{{key}}`` occurrence for every key in ``fields``.

    Substitution is a single pass over ``markup``: values are inserted as-is and
    never expanded again, so the result does not depend on key order. Values of
    ``None`` render as the empty string. Placeholders with no key are kept
    verbatim, blanked, or rejected according to ``missing``.
    """
    fields = fields or {}
    markup = markup or ""

    unresolved = missing_fields(markup, fields)
    if unresolved and missing is MissingPolicy.STRICT:
        raise UnresolvedPlaceholderException(unresolved)

    def substitute(match: "re.Match[str]") -> str:
        key = match.group(1)
        if key in fields:
            return _as_text(fields[key])
        if missing is MissingPolicy.BLANK and PLACEHOLDER_RE.fullmatch(match.group(0)):
            return ""
        return match.group(0)

    return _TOKEN_RE.sub(substitute, markup)


def replace_color(markup: str, old: str, new: str) -> str:
    """Replace every occurrence of colour ``old`` with ``new``, ignoring case."""
    if not old:
        return markup
    return re.sub(re.escape(old), lambda _m: new, markup, flags=re.IGNORECASE)
