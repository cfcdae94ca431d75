"""Integration tests for the generation, review and creative endpoints."""

import re

from adstudio.core.config import settings
from adstudio.services.placeholders import find_placeholders

TOKEN = re.compile(r"\{\{(\w+)\}\}")


class TestGenerateAd:

    def test_every_placeholder_has_a_field(self, client, use_completion, ad_payload):
        use_completion([ad_payload])
        response = client.post("/api/generate-ad", json={"description": "bold promo, 20% off", "adWidth": 1080, "adHeight": 1080})

        assert response.status_code == 200
        body = response.json()
        assert body["html"] and body["fields"]
        assert set(TOKEN.findall(body["html"])) <= set(body["fields"])
        assert body["backgroundColor"] == "#fffbec"
        assert body["enhanced"] is False
        assert body["review"] is None

    def test_missing_description(self, client, use_completion):
        fake = use_completion([])
        response = client.post("/api/generate-ad", json={"adWidth": 1080})

        assert response.status_code == 400
        assert response.json()["error"] == "ValidationError"
        assert response.json()["field"] == "description"
        assert fake.calls == []

    def test_completion_not_configured(self, client, monkeypatch):
        monkeypatch.setattr(settings, "anthropic_api_key", None)
        response = client.post("/api/generate-ad", json={"description": "promo"})

        assert response.status_code == 503
        assert response.json()["error"] == "ServiceNotConfiguredException"
        assert response.json()["setting"] == "ANTHROPIC_API_KEY"

    def test_unparseable_output(self, client, use_completion):
        use_completion(["I'm sorry, I can't produce HTML today."])
        response = client.post("/api/generate-ad", json={"description": "promo"})

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "UnparseableResponseException"
        assert len(body["strategies"]) == 3

    def test_contract_violation(self, client, use_completion):
        use_completion([{"markup": "<p/>"}])
        response = client.post("/api/generate-ad", json={"description": "promo"})

        assert response.status_code == 500
        assert response.json()["error"] == "ContractValidationException"

    def test_self_review_enhances(self, client, use_completion, ad_payload):
        fake = use_completion([
            ad_payload,
            {
                "fixed": True,
                "score": 5,
                "scores": {"hook": 4},
                "html": "<h1>{{headline}}</h1><b>{{cta}}</b>",
                "fields": {"headline": "Better", "cta": "Go"},
            },
        ])
        response = client.post("/api/generate-ad", json={"description": "promo", "selfReview": True})

        body = response.json()
        assert response.status_code == 200
        assert body["enhanced"] is True
        assert body["html"] == "<h1>{{headline}}</h1><b>{{cta}}</b>"
        assert body["review"]["hookScore"] == 4
        assert [c["task"] for c in fake.calls] == ["generate", "self_review"]

    def test_self_review_failure_returns_original(self, client, use_completion, ad_payload):
        use_completion([ad_payload, "not json"])
        response = client.post("/api/generate-ad", json={"description": "promo", "selfReview": True})

        assert response.status_code == 200
        assert response.json()["html"] == ad_payload["html"]
        assert response.json()["enhanced"] is False

    def test_invalid_body_is_400(self, client, use_completion):
        use_completion([])
        response = client.post("/api/generate-ad", json={"description": "promo", "adWidth": "wide"})

        assert response.status_code == 400
        body = response.json()
        assert body["message"] == "Invalid request"
        assert body["errors"][0]["field"] == "adWidth"

    def test_asset_ids_need_database(self, client, use_completion):
        use_completion([])
        response = client.post("/api/generate-ad", json={"description": "promo", "assetIds": ["a1"]})
        assert response.status_code == 503

    def test_request_id_header(self, client, use_completion, ad_payload):
        use_completion([ad_payload])
        response = client.post("/api/generate-ad", json={"description": "promo"}, headers={"X-Request-ID": "req-1"})
        assert response.headers["X-Request-ID"] == "req-1"


class TestRecreate:

    def test_requires_image(self, client, use_completion):
        use_completion([])
        response = client.post("/api/recreate", json={"adWidth": 1080, "adHeight": 1920})

        assert response.status_code == 400
        assert response.json()["message"] == "No image provided"

    def test_recreates(self, client, use_completion, ad_payload):
        fake = use_completion([ad_payload])
        response = client.post("/api/recreate", json={"imageBase64": "aGVsbG8=", "mediaType": "image/jpeg"})

        assert response.status_code == 200
        assert fake.calls[0]["image"].media_type == "image/jpeg"
        assert fake.calls[0]["thinking_budget"] == 5000


class TestSinglePassEndpoints:

    def test_edit(self, client, use_completion, ad_payload):
        fake = use_completion([ad_payload])
        response = client.post("/api/edit-ad", json={"currentHtml": "<h1>{{headline}}</h1>", "instruction": "bigger"})

        assert response.status_code == 200
        assert '"bigger"' in fake.calls[0]["prompt"]

    def test_edit_missing_instruction(self, client, use_completion):
        use_completion([])
        response = client.post("/api/edit-ad", json={"currentHtml": "<p/>", "instruction": ""})
        assert response.status_code == 400

    def test_tokenize(self, client, use_completion):
        use_completion([{"html": "<h1>{{headline}}</h1>", "fields": {"headline": "Hello"}}])
        response = client.post("/api/tokenize", json={"html": "<h1>Hello</h1>"})

        assert response.status_code == 200
        assert response.json()["fields"] == {"headline": "Hello"}

    def test_apply_fixes(self, client, use_completion):
        fake = use_completion([{"html": "<h1>{{headline}}</h1>", "fields": {"headline": "New"}}])
        response = client.post("/api/apply-fixes", json={
            "html": "<h1>{{headline}}</h1>",
            "fields": {"headline": "Old"},
            "accentColor": "#123456",
            "improvements": [{"issue": "Weak hook", "fix": "Lead with taste", "priority": "high"}],
        })

        body = response.json()
        assert response.status_code == 200
        assert body["accentColor"] == "#123456"
        assert body["backgroundColor"] == "#fffbec"
        assert "[high] Weak hook -> Lead with taste" in fake.calls[0]["prompt"]

    def test_apply_fixes_without_improvements(self, client, use_completion):
        use_completion([])
        response = client.post("/api/apply-fixes", json={"html": "<p/>", "improvements": []})
        assert response.status_code == 400

    def test_review_ad_renders_fields(self, client, use_completion):
        fake = use_completion([{
            "score": 6,
            "verdict": "Decent",
            "improvements": [{"issue": "CTA", "fix": "Bigger"}],
            "hookScore": 7,
        }])
        response = client.post("/api/review-ad", json={
            "adHtml": "<h1>{{headline}}</h1>",
            "fields": {"headline": "Snack happy"},
            "channel": "instagram",
        })

        body = response.json()
        assert response.status_code == 200
        assert body["score"] == 6
        assert body["hookScore"] == 7
        assert body["improvements"][0]["priority"] == "medium"
        assert "<h1>Snack happy</h1>" in fake.calls[0]["prompt"]

    def test_review_ad_failure_propagates(self, client, use_completion):
        use_completion(["no idea"])
        response = client.post("/api/review-ad", json={"adHtml": "<p>ad</p>"})
        assert response.status_code == 500

    def test_analyze(self, client, use_completion):
        use_completion([{"layout": {"structure": "hero"}, "colorPalette": ["#fff"], "styleNotes": "Clean"}])
        response = client.post("/api/analyze", json={"imageBase64": "aGVsbG8="})

        assert response.status_code == 200
        assert response.json()["analysis"]["layout"]["structure"] == "hero"

    def test_analyze_without_image(self, client, use_completion):
        use_completion([])
        response = client.post("/api/analyze", json={})
        assert response.status_code == 400

    def test_generate_copy(self, client, use_completion):
        use_completion([{"variations": [{"headline": "Hi", "cta": "Go"}]}])
        response = client.post("/api/generate-copy", json={"flavor": "All / General", "channel": "dtc"})

        assert response.status_code == 200
        assert response.json()["variations"] == [{"headline": "Hi", "subheadline": "", "body": "", "cta": "Go"}]


class TestLocalEndpoints:

    def test_preview_keeps_unknown_tokens(self, client):
        response = client.post("/api/preview", json={
            "html": "<h1>{{headline}}</h1><a>{{cta}}</a>",
            "fields": {"headline": "Hi"},
        })

        body = response.json()
        assert body["html"] == "<h1>Hi</h1><a>{{cta}}</a>"
        assert body["placeholders"] == ["headline", "cta"]
        assert body["missing"] == ["cta"]

    def test_preview_strict(self, client):
        response = client.post("/api/preview", json={"html": "{{cta}}", "fields": {}, "missing": "strict"})

        assert response.status_code == 400
        assert response.json()["missing"] == ["cta"]

    def test_preview_output_has_no_covered_tokens(self, client):
        fields = {"a": "1", "b": "2"}
        response = client.post("/api/preview", json={"html": "{{a}}{{b}}{{a}}", "fields": fields})
        assert find_placeholders(response.json()["html"]) == []

    def test_recolor(self, client):
        response = client.post("/api/recolor", json={
            "html": "<div style='color:#F0615A;border-color:#f0615a'></div>",
            "oldColor": "#f0615a",
            "newColor": "#249b96",
        })

        body = response.json()
        assert body["replaced"] == 2
        assert "#249b96" in body["html"]
        assert "f0615a" not in body["html"].lower()

    def test_recolor_rejects_bad_hex(self, client):
        response = client.post("/api/recolor", json={"html": "<p/>", "oldColor": "#fff", "newColor": "blue"})
        assert response.status_code == 400
