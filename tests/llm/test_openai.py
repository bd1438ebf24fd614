from unittest.mock import MagicMock, patch

import pytest

from llm.providers.openai import DEFAULT_TIMEOUT, ExpenseClassification, OpenAIProvider
from models.category import Category

CATEGORIES = [
    Category(1, "coffee_shops", "Coffee Shops"),
    Category(2, "uncategorized", "Uncategorized"),
]


def _response(parsed):
    message = MagicMock()
    message.parsed = parsed
    choice = MagicMock()
    choice.message = message
    response = MagicMock()
    response.choices = [choice]
    return response


@pytest.fixture
def client():
    with patch("llm.providers.openai.OpenAI") as openai_cls:
        yield openai_cls.return_value


class TestOpenAIProvider:
    """Tests for OpenAIProvider."""

    def test_client_without_retries(self):
        """Test that the client is built with the timeout and no retries."""
        with patch("llm.providers.openai.OpenAI") as openai_cls:
            OpenAIProvider(api_key="sk-test", timeout=4.0)

        openai_cls.assert_called_once_with(api_key="sk-test", timeout=4.0, max_retries=0)

    def test_classify(self, client):
        """Test that the structured answer is converted."""
        client.chat.completions.parse.return_value = _response(
            ExpenseClassification(
                category_slug="coffee_shops", confidence=0.8, reasoning="Coffee"
            )
        )
        provider = OpenAIProvider(api_key="sk-test")

        answer = provider.classify("café en Starbucks", 85.0, CATEGORIES)

        assert answer.category_slug == "coffee_shops"
        assert answer.confidence == 0.8
        assert answer.reasoning == "Coffee"

    def test_request(self, client):
        """Test the model, prompt and response format sent to OpenAI."""
        client.chat.completions.parse.return_value = _response(
            ExpenseClassification(category_slug=None, confidence=0.1)
        )
        provider = OpenAIProvider(api_key="sk-test", model="gpt-test", timeout=10.0)

        provider.classify("regalo", 250.0, CATEGORIES)

        kwargs = client.chat.completions.parse.call_args.kwargs
        assert kwargs["model"] == "gpt-test"
        assert kwargs["response_format"] is ExpenseClassification
        assert kwargs["timeout"] == 10.0
        assert kwargs["temperature"] == 0.1
        user_prompt = kwargs["messages"][1]["content"]
        assert "Description: regalo" in user_prompt
        assert "Amount: 250.0 MXN" in user_prompt
        assert "- coffee_shops - Coffee Shops" in user_prompt
        assert "- uncategorized - Uncategorized" in user_prompt

    def test_default_model_from_prompt(self, client):
        """Test that the prompt's model is used when none is configured."""
        client.chat.completions.parse.return_value = _response(
            ExpenseClassification(category_slug=None, confidence=0.0)
        )

        OpenAIProvider(api_key="sk-test").classify("regalo", None, CATEGORIES)

        kwargs = client.chat.completions.parse.call_args.kwargs
        assert kwargs["model"] == "gpt-4o-mini"
        assert "Amount:" not in kwargs["messages"][1]["content"]

    def test_call_timeout_overrides_default(self, client):
        """Test that a per-call timeout wins over the provider default."""
        client.chat.completions.parse.return_value = _response(
            ExpenseClassification(category_slug=None, confidence=0.0)
        )
        provider = OpenAIProvider(api_key="sk-test", timeout=10.0)

        provider.classify("regalo", None, CATEGORIES, timeout=1.5)

        assert client.chat.completions.parse.call_args.kwargs["timeout"] == 1.5

    def test_timeout_never_unbounded(self, client):
        """Test that without any configured timeout a finite default is sent."""
        client.chat.completions.parse.return_value = _response(
            ExpenseClassification(category_slug=None, confidence=0.0)
        )
        with patch("llm.providers.openai.OpenAI") as openai_cls:
            openai_cls.return_value = client
            provider = OpenAIProvider(api_key="sk-test")

        provider.classify("regalo", None, CATEGORIES)

        assert provider.timeout == DEFAULT_TIMEOUT
        openai_cls.assert_called_once_with(
            api_key="sk-test", timeout=DEFAULT_TIMEOUT, max_retries=0
        )
        assert client.chat.completions.parse.call_args.kwargs["timeout"] == DEFAULT_TIMEOUT

    def test_null_parsed_response(self, client):
        """Test that a refusal or unparsable answer raises ValueError."""
        client.chat.completions.parse.return_value = _response(None)
        provider = OpenAIProvider(api_key="sk-test")

        with pytest.raises(ValueError, match="null parsed response"):
            provider.classify("regalo", None, CATEGORIES)

    def test_api_error_propagates(self, client):
        """Test that API errors are left to the caller."""
        client.chat.completions.parse.side_effect = TimeoutError("timed out")
        provider = OpenAIProvider(api_key="sk-test")

        with pytest.raises(TimeoutError):
            provider.classify("regalo", None, CATEGORIES)


class TestExpenseClassification:
    """Tests for the structured output schema."""

    def test_confidence_bounds(self):
        """Test that confidence outside [0, 1] is rejected."""
        from pydantic import ValidationError

        with pytest.raises(ValidationError):
            ExpenseClassification(category_slug="x", confidence=1.5)

    def test_slug_optional(self):
        """Test that the model may answer without a slug."""
        assert ExpenseClassification(confidence=0.2).category_slug is None
