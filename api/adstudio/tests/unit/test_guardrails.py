"""Unit tests for Guardrails validation service."""

import pytest

from adstudio.models.exceptions import ContractValidationException
from adstudio.services.guardrails import _load_schema, validate_contract


class TestGuardrailsService:
    """Test cases for Guardrails validation service."""

    def test_load_schema_caches_validator(self):
        validator = _load_schema("generation.json")
        assert validator is _load_schema("generation.json")

    @pytest.mark.parametrize("name", [
        "generation.json",
        "self_review.json",
        "performance_review.json",
        "template_selection.json",
        "analysis.json",
        "copy.json",
    ])
    def test_every_contract_loads(self, name):
        assert _load_schema(name).schema["type"] == "object"

    def test_valid_generation(self, ad_payload):
        validate_contract("generation.json", ad_payload)

    def test_generation_missing_fields(self):
        with pytest.raises(ContractValidationException) as exc_info:
            validate_contract("generation.json", {"html": "<p>{{a}}</p>"})
        assert exc_info.value.contract_name == "generation.json"
        assert any("fields" in e for e in exc_info.value.validation_errors)

    def test_generation_rejects_unknown_keys(self, ad_payload):
        with pytest.raises(ContractValidationException):
            validate_contract("generation.json", {**ad_payload, "css": "body{}"})

    def test_generation_rejects_empty_html(self):
        with pytest.raises(ContractValidationException):
            validate_contract("generation.json", {"html": "", "fields": {}})

    def test_all_violations_reported(self):
        with pytest.raises(ContractValidationException) as exc_info:
            validate_contract("template_selection.json", {"templateId": "", "modifications": {"a": [1]}})
        assert len(exc_info.value.validation_errors) == 2
        assert exc_info.value.details["contract"] == "template_selection.json"

    def test_self_review_only_fixed_required(self):
        validate_contract("self_review.json", {"fixed": False})

    def test_self_review_score_range(self):
        with pytest.raises(ContractValidationException):
            validate_contract("self_review.json", {"fixed": False, "score": 11})

    def test_performance_review_requires_verdict(self):
        with pytest.raises(ContractValidationException):
            validate_contract("performance_review.json", {"score": 7, "improvements": []})

    def test_copy_variation_requires_cta(self):
        with pytest.raises(ContractValidationException):
            validate_contract("copy.json", {"variations": [{"headline": "Hi"}]})

    def test_non_object_payload(self):
        with pytest.raises(ContractValidationException):
            validate_contract("analysis.json", ["not", "an", "object"])
