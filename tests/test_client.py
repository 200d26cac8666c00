import pytest
import requests

from conftest import gemini_payload, make_response
from material_engine.client import GenAIClient, parse_generation, user_turn
from material_engine.config import EngineConfig
from material_engine.errors import RequestFailure


def test_build_request_plain_prompt(real_client):
    body = real_client.build_request("hello")
    assert body == {"contents": [{"role": "user", "parts": [{"text": "hello"}]}]}


def test_build_request_all_modes(real_client):
    history = [{"role": "user", "parts": [{"text": "earlier"}]}]
    body = real_client.build_request(
        "now",
        system="be terse",
        json_mode=True,
        grounded=True,
        thinking=True,
        documents=[("application/pdf", "QUJD")],
        history=history,
    )
    assert body["contents"][0] == history[0]
    assert body["contents"][1]["parts"][0] == {"inlineData": {"mimeType": "application/pdf", "data": "QUJD"}}
    assert body["contents"][1]["parts"][1] == {"text": "now"}
    assert body["systemInstruction"] == {"parts": [{"text": "be terse"}]}
    assert body["tools"] == [{"google_search": {}}]
    assert body["generationConfig"] == {
        "responseMimeType": "application/json",
        "thinkingConfig": {"thinkingBudget": 32768},
    }
    # caller's history list is not mutated
    assert len(history) == 1


def test_thinking_disabled_by_zero_budget(http_session):
    client = GenAIClient(EngineConfig(api_key="k", thinking_budget=0), session=http_session)
    body = client.build_request("x", thinking=True)
    assert "generationConfig" not in body


def test_generate_posts_with_key_and_timeout(real_client, http_session):
    http_session.post.return_value = make_response(gemini_payload('{"ok": true}'))
    result = real_client.generate("prompt", json_mode=True)

    assert result.text == '{"ok": true}'
    assert result.finish_reason == "STOP"
    args, kwargs = http_session.post.call_args
    assert args[0] == "https://api.test/v1beta/models/gemini-3-pro-preview:generateContent"
    assert kwargs["headers"] == {"x-goog-api-key": "test-key"}
    assert "params" not in kwargs
    assert "test-key" not in args[0]
    assert kwargs["timeout"] == 120.0
    assert kwargs["json"]["generationConfig"]["responseMimeType"] == "application/json"


def test_generate_uses_explicit_model_and_timeout(real_client, http_session):
    http_session.post.return_value = make_response(gemini_payload("hi"))
    real_client.generate("prompt", model="gemini-2.5-flash", timeout=5)
    args, kwargs = http_session.post.call_args
    assert args[0].endswith("/models/gemini-2.5-flash:generateContent")
    assert kwargs["timeout"] == 5


def test_grounding_sources_are_collected(real_client, http_session):
    payload = gemini_payload("summary", sources=[("NatureWorks news", "https://example.com/a")])
    payload["candidates"][0]["groundingMetadata"]["groundingChunks"].append({"web": {}})
    http_session.post.return_value = make_response(payload)
    result = real_client.generate("q", grounded=True)
    assert [(s.title, s.uri) for s in result.sources] == [
        ("NatureWorks news", "https://example.com/a"),
        ("Unknown Source", "#"),
    ]


def test_thought_parts_are_skipped():
    data = {
        "candidates": [
            {"content": {"parts": [{"text": "reasoning...", "thought": True}, {"text": "answer"}, {"text": " two"}]}}
        ]
    }
    assert parse_generation(data).text == "answer two"


def test_blocked_prompt_yields_empty_text():
    result = parse_generation({"promptFeedback": {"blockReason": "SAFETY"}})
    assert result.text == ""
    assert result.sources == []


def test_missing_api_key_fails_before_network(http_session):
    client = GenAIClient(EngineConfig(api_key=""), session=http_session)
    with pytest.raises(RequestFailure):
        client.generate("x")
    http_session.post.assert_not_called()


def test_http_error_becomes_request_failure(real_client, http_session):
    http_session.post.return_value = make_response({}, status_code=429, text="quota exceeded")
    with pytest.raises(RequestFailure) as exc:
        real_client.generate("x")
    assert exc.value.status_code == 429
    assert "quota exceeded" in str(exc.value)


def test_network_error_becomes_request_failure(real_client, http_session):
    http_session.post.side_effect = requests.ConnectionError("down")
    with pytest.raises(RequestFailure):
        real_client.generate("x")


def test_network_error_message_does_not_carry_api_key(http_session):
    client = GenAIClient(EngineConfig(api_key="SECRET-KEY-123", api_base="http://127.0.0.1:9/v1beta"), session=http_session)

    def refuse(url, **kwargs):
        raise requests.ConnectionError(f"Max retries exceeded with url: {url} (Caused by NewConnectionError)")

    http_session.post.side_effect = refuse
    with pytest.raises(RequestFailure) as exc:
        client.generate("x")
    assert "SECRET-KEY-123" not in str(exc.value)
    assert "127.0.0.1" in str(exc.value)


def test_refused_connection_does_not_leak_api_key():
    client = GenAIClient(EngineConfig(api_key="SECRET-KEY-123", api_base="http://127.0.0.1:9/v1beta", request_timeout=2))
    with pytest.raises(RequestFailure) as exc:
        client.generate("x")
    assert "SECRET-KEY-123" not in str(exc.value)


def test_non_json_body_becomes_request_failure(real_client, http_session):
    http_session.post.return_value = make_response(ValueError("no json"), text="<html>")
    with pytest.raises(RequestFailure):
        real_client.generate("x")


def test_generate_image_returns_data_uri(real_client, http_session):
    http_session.post.return_value = make_response({"predictions": [{"bytesBase64Encoded": "AAAA", "mimeType": "image/png"}]})
    uri = real_client.generate_image("a cup")
    assert uri == "data:image/png;base64,AAAA"
    args, kwargs = http_session.post.call_args
    assert args[0].endswith("/models/imagen-4.0-generate-001:predict")
    assert kwargs["json"]["parameters"]["aspectRatio"] == "4:3"
    assert kwargs["json"]["instances"] == [{"prompt": "a cup"}]


def test_generate_image_without_predictions(real_client, http_session):
    http_session.post.return_value = make_response({"predictions": []})
    assert real_client.generate_image("a cup") == ""


def test_user_turn_puts_documents_first():
    turn = user_turn("question", [("application/pdf", "Zm9v")])
    assert turn["role"] == "user"
    assert list(turn["parts"][0].keys()) == ["inlineData"]
    assert turn["parts"][-1] == {"text": "question"}
