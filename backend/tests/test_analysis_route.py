"""
Tests for routes/analysis.py — /api/analysis task dispatch.
"""

import json
import pytest
from unittest.mock import patch, MagicMock, AsyncMock

from google.genai import types

from analysis_schema import ANALYSIS_SCHEMA
from gemini_client import ANALYSIS_MODEL_ID


def as_schema(value):
    return value if isinstance(value, types.Schema) else types.Schema.model_validate(value)


def make_genai_client(text=None, side_effect=None):
    """Mock genai.Client whose async generate_content returns `text`."""
    mock_client = MagicMock()
    generate = AsyncMock()
    if side_effect is not None:
        generate.side_effect = side_effect
    else:
        generate.return_value = MagicMock(text=text)
    mock_client.aio.models.generate_content = generate
    mock_client.aio.__aenter__.return_value = mock_client.aio
    return mock_client


class TestMethodGate:
    """Only POST reaches the handler."""

    @pytest.mark.parametrize("method", ["GET", "PUT", "PATCH", "DELETE"])
    def test_non_post_is_405(self, client, api_key, method):
        response = client.request(method, "/api/analysis")
        assert response.status_code == 405
        assert response.json() == {"error": "Method not allowed"}


class TestMissingKey:
    """Server credential check."""

    @pytest.mark.parametrize("body", [
        {},
        {"task": "analyzeBehavior", "prompt": "x"},
        {"task": "bogus"},
    ])
    @patch("gemini_client.genai.Client")
    def test_missing_key_is_500(self, mock_client_cls, client, no_api_key, body):
        response = client.post("/api/analysis", json=body)
        assert response.status_code == 500
        assert response.json() == {"error": "Server configuration error: API Key missing."}
        mock_client_cls.assert_not_called()


class TestRequestValidation:
    """Task and field checks."""

    @patch("gemini_client.genai.Client")
    def test_unknown_task_is_400(self, mock_client_cls, client, api_key):
        response = client.post("/api/analysis", json={"task": "bogus", "prompt": "x"})
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid task specified"}
        mock_client_cls.assert_not_called()

    @pytest.mark.parametrize("body", [
        {"task": "bogus", "prompt": 5},
        {"task": "bogus", "prompt": "x", "model": 5},
        {"task": "bogus"},
        {"task": ["analyzeBehavior"], "prompt": "x"},
    ])
    def test_task_is_checked_before_other_fields(self, client, api_key, body):
        response = client.post("/api/analysis", json=body)
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid task specified"}

    @pytest.mark.parametrize("body", [{}, {"prompt": "x"}, {"task": 3, "prompt": "x"}])
    def test_missing_or_non_string_task_is_400(self, client, api_key, body):
        response = client.post("/api/analysis", json=body)
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid task specified"}

    def test_missing_prompt_is_400(self, client, api_key):
        response = client.post("/api/analysis", json={"task": "getABAInfo"})
        assert response.status_code == 400
        assert response.json() == {"error": "Missing prompt"}

    def test_non_string_model_is_400(self, client, api_key):
        response = client.post(
            "/api/analysis",
            json={"task": "getABAInfo", "prompt": "x", "model": 7},
        )
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid model"}


class TestAnalyzeBehavior:
    """Schema-constrained JSON generation."""

    @patch("gemini_client.genai.Client")
    def test_raw_text_is_returned_unparsed(self, mock_client_cls, client, api_key):
        raw = '{"summary": {"behavior": "hits sibling"'  # truncated JSON, not validated
        mock_client_cls.return_value = make_genai_client(text=raw)

        response = client.post(
            "/api/analysis", json={"task": "analyzeBehavior", "prompt": "x"}
        )

        assert response.status_code == 200
        assert response.json() == {"text": raw}

    @patch("gemini_client.genai.Client")
    def test_call_uses_schema_and_default_model(self, mock_client_cls, client, api_key):
        mock_client = make_genai_client(text=json.dumps({"closingComment": "ok"}))
        mock_client_cls.return_value = mock_client

        client.post("/api/analysis", json={"task": "analyzeBehavior", "prompt": "x"})

        mock_client_cls.assert_called_once_with(api_key="test-key")
        kwargs = mock_client.aio.models.generate_content.call_args.kwargs
        assert kwargs["model"] == ANALYSIS_MODEL_ID
        assert kwargs["contents"] == "x"
        assert kwargs["config"].response_mime_type == "application/json"
        assert as_schema(kwargs["config"].response_schema) == types.Schema.model_validate(ANALYSIS_SCHEMA)
        assert kwargs["config"].temperature == 0.7
        mock_client.aio.__aexit__.assert_awaited_once()


class TestGetABAInfo:
    """Free-text low temperature generation."""

    @patch("gemini_client.genai.Client")
    def test_custom_model_and_temperature(self, mock_client_cls, client, api_key):
        mock_client = make_genai_client(text="ABA stands for...")
        mock_client_cls.return_value = mock_client

        response = client.post(
            "/api/analysis",
            json={"task": "getABAInfo", "prompt": "x", "model": "custom-model"},
        )

        assert response.status_code == 200
        assert response.json() == {"text": "ABA stands for..."}
        kwargs = mock_client.aio.models.generate_content.call_args.kwargs
        assert kwargs["model"] == "custom-model"
        assert kwargs["config"].temperature == 0.1
        assert kwargs["config"].response_schema is None

    @patch("gemini_client.genai.Client")
    def test_missing_text_gives_empty_string(self, mock_client_cls, client, api_key):
        mock_client_cls.return_value = make_genai_client(text=None)

        response = client.post("/api/analysis", json={"task": "getABAInfo", "prompt": "x"})

        assert response.status_code == 200
        assert response.json() == {"text": ""}


class TestUpstreamFailure:
    """SDK errors are always re-wrapped as 500."""

    @patch("gemini_client.genai.Client")
    def test_exception_message_is_returned(self, mock_client_cls, client, api_key):
        mock_client_cls.return_value = make_genai_client(
            side_effect=RuntimeError("quota exceeded")
        )

        response = client.post("/api/analysis", json={"task": "getABAInfo", "prompt": "x"})

        assert response.status_code == 500
        assert response.json() == {"error": "quota exceeded"}

    @patch("gemini_client.genai.Client")
    def test_message_attribute_is_preferred(self, mock_client_cls, client, api_key):
        class SdkError(Exception):
            def __init__(self):
                super().__init__("429 RESOURCE_EXHAUSTED. {...}")
                self.message = "Resource has been exhausted"

        mock_client_cls.return_value = make_genai_client(side_effect=SdkError())

        response = client.post("/api/analysis", json={"task": "getABAInfo", "prompt": "x"})

        assert response.status_code == 500
        assert response.json() == {"error": "Resource has been exhausted"}

    @patch("gemini_client.genai.Client")
    def test_empty_message_uses_fallback(self, mock_client_cls, client, api_key):
        mock_client_cls.return_value = make_genai_client(side_effect=Exception())

        response = client.post("/api/analysis", json={"task": "getABAInfo", "prompt": "x"})

        assert response.status_code == 500
        assert response.json() == {"error": "Error processing AI request"}

    @patch("gemini_client.genai.Client")
    def test_client_construction_failure_is_500(self, mock_client_cls, client, api_key):
        mock_client_cls.side_effect = ValueError("bad key format")

        response = client.post(
            "/api/analysis", json={"task": "analyzeBehavior", "prompt": "x"}
        )

        assert response.status_code == 500
        assert response.json() == {"error": "bad key format"}
