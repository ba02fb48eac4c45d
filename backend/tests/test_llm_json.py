import httpx
import pytest

from career_transition.services import llm
from career_transition.services.llm import LLMError, LLMResponseParseError, extract_json_object


def test_extracts_whole_reply():
    assert extract_json_object('{"phases": []}') == {"phases": []}


def test_extracts_fenced_block_with_prose():
    text = 'Here you go:\n```json\n{"title": "Phase 1", "items": [1, 2]}\n```\nGood luck!'
    assert extract_json_object(text) == {"title": "Phase 1", "items": [1, 2]}


def test_extracts_brace_span_when_unfenced():
    text = 'Sure! {"currentRole": "Nurse", "skills": ["care"]} Let me know.'
    assert extract_json_object(text)["currentRole"] == "Nurse"


def test_rejects_arrays_and_garbage():
    with pytest.raises(LLMResponseParseError):
        extract_json_object("[1, 2, 3]")
    with pytest.raises(LLMResponseParseError):
        extract_json_object("no json here {oops")
    with pytest.raises(LLMResponseParseError):
        extract_json_object("   ")


def _patch_transport(monkeypatch, handler):
    real_client = httpx.Client

    def client_factory(timeout=None):
        return real_client(transport=httpx.MockTransport(handler), timeout=timeout)

    monkeypatch.setattr(llm.httpx, "Client", client_factory)


def test_send_message_uses_anthropic_messages_api(monkeypatch):
    monkeypatch.setattr(llm.settings, "llm_provider", "anthropic")
    monkeypatch.setattr(llm.settings, "anthropic_api_key", "test-key")
    seen = {}

    def handler(request):
        seen["url"] = str(request.url)
        seen["key"] = request.headers.get("x-api-key")
        seen["body"] = request.read()
        return httpx.Response(
            200,
            json={"content": [{"type": "text", "text": "What is your current role?"}]},
        )

    _patch_transport(monkeypatch, handler)
    reply = llm.send_message("system", [{"role": "user", "content": "hi"}], 256)

    assert reply == "What is your current role?"
    assert seen["url"].endswith("/messages")
    assert seen["key"] == "test-key"
    assert b'"system":"system"' in seen["body"].replace(b" ", b"")


def test_send_message_wraps_http_errors(monkeypatch):
    monkeypatch.setattr(llm.settings, "llm_provider", "anthropic")
    monkeypatch.setattr(llm.settings, "anthropic_api_key", "test-key")
    _patch_transport(
        monkeypatch,
        lambda request: httpx.Response(529, text="overloaded: upstream-node=internal-7"),
    )

    with pytest.raises(LLMError, match="529") as excinfo:
        llm.send_message("system", [{"role": "user", "content": "hi"}])
    assert "internal-7" not in str(excinfo.value)


def test_provider_error_body_never_reaches_the_client(client, auth, monkeypatch):
    monkeypatch.setattr(llm.settings, "llm_provider", "anthropic")
    monkeypatch.setattr(llm.settings, "anthropic_api_key", "test-key")
    _patch_transport(
        monkeypatch,
        lambda request: httpx.Response(500, text='{"error": "db at 10.0.0.12 refused"}'),
    )

    response = client.post("/api/intake/start", headers=auth["headers"])

    assert response.status_code == 500
    assert response.json()["error"]["message"] == "AI service request failed (500)"
    assert "10.0.0.12" not in response.text


def test_send_message_requires_text_block(monkeypatch):
    monkeypatch.setattr(llm.settings, "llm_provider", "anthropic")
    monkeypatch.setattr(llm.settings, "anthropic_api_key", "test-key")
    _patch_transport(monkeypatch, lambda request: httpx.Response(200, json={"content": []}))

    with pytest.raises(LLMError, match="No text content"):
        llm.send_message("system", [{"role": "user", "content": "hi"}])


def test_send_message_without_key_fails_fast(monkeypatch):
    monkeypatch.setattr(llm.settings, "llm_provider", "anthropic")
    monkeypatch.setattr(llm.settings, "anthropic_api_key", None)

    with pytest.raises(LLMError, match="API key"):
        llm.send_message("system", [{"role": "user", "content": "hi"}])


def test_chat_completions_providers_read_first_choice():
    data = {"choices": [{"message": {"content": "hello"}}]}
    assert llm.first_text_block("openai", data) == "hello"
    assert llm.first_text_block("groq", {"choices": []}) is None
