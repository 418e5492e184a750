"""Tests for the OpenAI chat-completion client wrapper."""

from types import SimpleNamespace
from unittest.mock import MagicMock

import httpx
import openai
import pytest

from app.errors import ConfigurationError, MalformedResponse, UpstreamError, UpstreamTimeout
from app.services.llm_client import OpenAIChatClient


REQUEST = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")


def _completion(content):
    message = SimpleNamespace(content=content)
    return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def _client(create):
    sdk = MagicMock()
    sdk.chat.completions.create.side_effect = create
    return OpenAIChatClient(api_key=None, model="gpt-test", timeout_seconds=7, client=sdk), sdk


def test_complete_sends_single_user_message():
    client, sdk = _client(lambda **kwargs: _completion('{"idea": "x"}'))

    assert client.complete("Analyze this") == '{"idea": "x"}'
    kwargs = sdk.chat.completions.create.call_args.kwargs
    assert kwargs["model"] == "gpt-test"
    assert kwargs["messages"] == [{"role": "user", "content": "Analyze this"}]


def test_missing_api_key_is_configuration_error():
    with pytest.raises(ConfigurationError) as exc_info:
        OpenAIChatClient(api_key=None)
    assert exc_info.value.public_message == "OpenAI API key is not configured"


def test_timeout_is_upstream_timeout():
    def raise_timeout(**kwargs):
        raise openai.APITimeoutError(request=REQUEST)

    client, _ = _client(raise_timeout)
    with pytest.raises(UpstreamTimeout) as exc_info:
        client.complete("prompt")
    assert exc_info.value.timeout_seconds == 7


def test_api_error_is_upstream_error():
    def raise_connection(**kwargs):
        raise openai.APIConnectionError(request=REQUEST)

    client, _ = _client(raise_connection)
    with pytest.raises(UpstreamError) as exc_info:
        client.complete("prompt")
    assert not isinstance(exc_info.value, UpstreamTimeout)


@pytest.mark.parametrize("completion", [_completion(None), _completion(""), SimpleNamespace(choices=[])])
def test_empty_completion_is_malformed(completion):
    client, _ = _client(lambda **kwargs: completion)
    with pytest.raises(MalformedResponse):
        client.complete("prompt")
