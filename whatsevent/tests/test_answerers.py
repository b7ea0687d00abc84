"""
Test suite for answer strategies.
"""

from unittest.mock import MagicMock, patch

import pytest

from whatsevent.chat.answerers import HeuristicAnswerer, RemoteAnswerer, create_answerer
from whatsevent.chat.heuristics import heuristic_answer
from whatsevent.config.external_services.openai import OpenAIConfig, create_openai_client
from whatsevent.utils.llm import EMPTY_RESPONSE, ERROR_RESPONSE, SYSTEM_MESSAGE

CONTEXT = "Event Information:\nName: Hack Day\nTime: June 15 at 10:00"


def _completion(content):
    """Shape of an OpenAI chat completion with one choice."""
    return MagicMock(choices=[MagicMock(message=MagicMock(content=content))])


@pytest.fixture
def openai_config(monkeypatch):
    for name in ('OPENAI_MODEL', 'OPENAI_TEMPERATURE', 'OPENAI_MAX_TOKENS', 'OPENAI_TIMEOUT'):
        monkeypatch.delenv(name, raising=False)
    return OpenAIConfig(api_key="sk-test", model="gpt-4o-mini")


class TestRemoteAnswerer:
    """Test answering through the OpenAI client."""

    def test_returns_model_answer(self, openai_config):
        client = MagicMock()
        client.chat.completions.create.return_value = _completion("  It starts at 10:00.  ")

        answer = RemoteAnswerer(client, openai_config).answer(CONTEXT, "When does it start?")

        assert answer == "It starts at 10:00."

    def test_request_parameters(self, openai_config):
        """One call with the configured model, limits and the prompt."""
        client = MagicMock()
        client.chat.completions.create.return_value = _completion("Answer")

        RemoteAnswerer(client, openai_config).answer(CONTEXT, "When does it start?")

        client.chat.completions.create.assert_called_once()
        kwargs = client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "gpt-4o-mini"
        assert kwargs["max_tokens"] == 500
        assert kwargs["temperature"] == 0.5
        messages = kwargs["messages"]
        assert messages[0] == {"role": "system", "content": SYSTEM_MESSAGE}
        assert CONTEXT in messages[1]["content"]
        assert '"When does it start?"' in messages[1]["content"]

    def test_empty_completion(self, openai_config):
        client = MagicMock()
        client.chat.completions.create.return_value = _completion(None)

        assert RemoteAnswerer(client, openai_config).answer(CONTEXT, "Hi?") == EMPTY_RESPONSE

    def test_service_error_becomes_apology(self, openai_config):
        """Errors are converted to the apology text, with no retry."""
        client = MagicMock()
        client.chat.completions.create.side_effect = TimeoutError("timed out")

        answer = RemoteAnswerer(client, openai_config).answer(CONTEXT, "Hi?")

        assert answer == ERROR_RESPONSE
        assert client.chat.completions.create.call_count == 1


class TestHeuristicAnswerer:
    """Test the offline strategy."""

    def test_delegates_to_shared_function(self):
        question = "When does it start?"

        assert HeuristicAnswerer().answer(CONTEXT, question) == heuristic_answer(CONTEXT, question)


class TestCreateAnswerer:
    """Test strategy selection at startup."""

    def test_without_key_uses_heuristics(self, monkeypatch):
        monkeypatch.delenv('OPENAI_API_KEY', raising=False)

        assert isinstance(create_answerer(OpenAIConfig()), HeuristicAnswerer)

    def test_with_key_uses_remote(self, openai_config):
        with patch('whatsevent.chat.answerers.create_openai_client') as mock_create_client:
            answerer = create_answerer(openai_config)

        assert isinstance(answerer, RemoteAnswerer)
        mock_create_client.assert_called_once_with(openai_config)
        assert answerer.client is mock_create_client.return_value


class TestCreateOpenAIClient:
    """Test the OpenAI client settings."""

    def test_single_attempt_with_configured_timeout(self, monkeypatch):
        monkeypatch.delenv('OPENAI_TIMEOUT', raising=False)

        client = create_openai_client(OpenAIConfig(api_key="sk-test", timeout=5.0))

        assert client.max_retries == 0
        assert client.timeout == 5.0

    def test_requires_api_key(self, monkeypatch):
        monkeypatch.delenv('OPENAI_API_KEY', raising=False)

        with pytest.raises(ValueError, match="OPENAI_API_KEY"):
            create_openai_client(OpenAIConfig())
