from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

from jsonschema import Draft7Validator

from ..models.exceptions import ContractValidationException


_SCHEMA_CACHE: Dict[str, Draft7Validator] = {}
_GUARDRAILS_DIR = Path(__file__).resolve().parent.parent / "guardrails"


def _load_schema(name: str) -> Draft7Validator:
    if name in _SCHEMA_CACHE:
        return _SCHEMA_CACHE[name]

    schema_path = _GUARDRAILS_DIR / name
    with open(schema_path, "r", encoding="utf-8") as f:
        schema = json.load(f)
    validator = Draft7Validator(schema)
    _SCHEMA_CACHE[name] = validator
    return validator


def validate_contract(name: str, payload: Any) -> None:
    """Validate a parsed model response against ``guardrails/<name>``.

    Raises ContractValidationException listing every violation, ordered by path.
    """
    validator = _load_schema(name)
    errors = sorted(validator.iter_errors(payload), key=lambda e: list(map(str, e.path)))
    if errors:
        msgs = [f"{list(e.path)}: {e.message}" for e in errors]
        raise ContractValidationException(name, msgs)
