from types import SimpleNamespace

import anthropic
import httpx
import pytest

from prompt_judge.components.integrations.claude import service as claude_service
from prompt_judge.components.integrations.claude.model_fallback import (
    LEGACY_HAIKU_MODEL,
    PRIMARY_HAIKU_MODEL,
    SNAPSHOT_HAIKU_MODEL,
    candidate_models_for,
    is_model_not_found_error,
)
from prompt_judge.components.integrations.claude.service import AnalysisModelClient
from prompt_judge.platform.config import settings
from prompt_judge.shared.errors import ExternalServiceError, ModelNotConfiguredError, ModelTimeoutError

_REQUEST = httpx.Request("POST", "https://api.anthropic.com/v1/messages")


def _status_error(status_code, message="provider error"):
    return anthropic.APIStatusError(
        message,
        response=httpx.Response(status_code, request=_REQUEST),
        body=None,
    )


def _not_found(model):
    return _status_error(
        404,
        "Error code: 404 - {'type':'error','error':{'type':'not_found_error','message':'model: %s'}}" % model,
    )


def _reply(text):
    return SimpleNamespace(
        content=[SimpleNamespace(text=text)],
        usage=SimpleNamespace(input_tokens=120, output_tokens=80),
    )


@pytest.fixture
def fake_anthropic(monkeypatch):
    """Replace the Anthropic SDK client; ``outcomes`` is consumed one per call."""
    state = SimpleNamespace(outcomes=[], calls=[], init_kwargs=None)

    class FakeMessages:
        def create(self, *, model, max_tokens, system, messages):
            state.calls.append(model)
            outcome = state.outcomes.pop(0)
            if isinstance(outcome, Exception):
                raise outcome
            return _reply(outcome)

    class FakeAnthropic:
        def __init__(self, **kwargs):
            state.init_kwargs = kwargs
            self.messages = FakeMessages()

    monkeypatch.setattr(claude_service, "Anthropic", FakeAnthropic)
    monkeypatch.setattr(settings, "ANALYSIS_RETRY_BACKOFF_SECONDS", 0.0)
    monkeypatch.setattr(settings, "ANALYSIS_MAX_RETRIES", 2)
    monkeypatch.setattr(settings, "CLAUDE_FALLBACK_MODELS", "")
    return state


def test_candidate_models_for_known_haiku_aliases():
    assert candidate_models_for(PRIMARY_HAIKU_MODEL, extra=[]) == [
        PRIMARY_HAIKU_MODEL,
        SNAPSHOT_HAIKU_MODEL,
        LEGACY_HAIKU_MODEL,
    ]


def test_candidate_models_for_custom_model_uses_configured_fallbacks():
    assert candidate_models_for("claude-sonnet-4-5", extra=["claude-3-5-haiku-latest", "claude-sonnet-4-5"]) == [
        "claude-sonnet-4-5",
        "claude-3-5-haiku-latest",
    ]


def test_is_model_not_found_error_matches_provider_payloads():
    assert is_model_not_found_error(_not_found("claude-3-5-haiku-latest")) is True
    assert is_model_not_found_error(Exception("timeout while contacting provider")) is False


def test_missing_api_key_is_not_configured():
    with pytest.raises(ModelNotConfiguredError):
        AnalysisModelClient(api_key="")


def test_client_disables_sdk_retries_and_sets_timeout(fake_anthropic):
    AnalysisModelClient(api_key="test-key")
    assert fake_anthropic.init_kwargs["max_retries"] == 0
    assert fake_anthropic.init_kwargs["timeout"] == settings.ANALYSIS_TIMEOUT_SECONDS


def test_complete_returns_text(fake_anthropic):
    fake_anthropic.outcomes = ['{"ok": true}']
    client = AnalysisModelClient(api_key="test-key", model=PRIMARY_HAIKU_MODEL)
    assert client.complete("instruction", system="system") == '{"ok": true}'
    assert fake_anthropic.calls == [PRIMARY_HAIKU_MODEL]


def test_transient_status_is_retried(fake_anthropic):
    fake_anthropic.outcomes = [_status_error(529), _status_error(503), "done"]
    client = AnalysisModelClient(api_key="test-key", model=PRIMARY_HAIKU_MODEL)
    assert client.complete("instruction", system="system") == "done"
    assert len(fake_anthropic.calls) == 3


def test_timeouts_exhaust_retries(fake_anthropic):
    fake_anthropic.outcomes = [anthropic.APITimeoutError(request=_REQUEST) for _ in range(3)]
    client = AnalysisModelClient(api_key="test-key", model=PRIMARY_HAIKU_MODEL)
    with pytest.raises(ModelTimeoutError):
        client.complete("instruction", system="system")
    assert len(fake_anthropic.calls) == 3


def test_connection_errors_become_external_service_error(fake_anthropic):
    fake_anthropic.outcomes = [anthropic.APIConnectionError(request=_REQUEST) for _ in range(3)]
    client = AnalysisModelClient(api_key="test-key", model=PRIMARY_HAIKU_MODEL)
    with pytest.raises(ExternalServiceError):
        client.complete("instruction", system="system")


def test_client_error_is_not_retried(fake_anthropic):
    fake_anthropic.outcomes = [_status_error(400, "bad request")]
    client = AnalysisModelClient(api_key="test-key", model=PRIMARY_HAIKU_MODEL)
    with pytest.raises(ExternalServiceError):
        client.complete("instruction", system="system")
    assert len(fake_anthropic.calls) == 1


def test_unavailable_model_falls_back(fake_anthropic):
    fake_anthropic.outcomes = [_not_found(PRIMARY_HAIKU_MODEL), "fallback answer"]
    client = AnalysisModelClient(api_key="test-key", model=PRIMARY_HAIKU_MODEL)
    assert client.complete("instruction", system="system") == "fallback answer"
    assert fake_anthropic.calls == [PRIMARY_HAIKU_MODEL, SNAPSHOT_HAIKU_MODEL]


def test_empty_output_is_an_external_failure(fake_anthropic):
    fake_anthropic.outcomes = ["   "]
    client = AnalysisModelClient(api_key="test-key", model=PRIMARY_HAIKU_MODEL)
    with pytest.raises(ExternalServiceError):
        client.complete("instruction", system="system")
