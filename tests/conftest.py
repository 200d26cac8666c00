import pytest
from unittest.mock import MagicMock

from material_engine.client import GenAIClient
from material_engine.config import EngineConfig
from material_engine.types import GenerationResult, GroundingSource


@pytest.fixture
def config():
    return EngineConfig(api_key="test-key", api_base="https://api.test/v1beta")


@pytest.fixture
def http_session():
    return MagicMock()


@pytest.fixture
def real_client(config, http_session):
    return GenAIClient(config, session=http_session)


def make_response(payload=None, status_code=200, text=""):
    resp = MagicMock()
    resp.status_code = status_code
    resp.text = text
    if isinstance(payload, Exception):
        resp.json.side_effect = payload
    else:
        resp.json.return_value = payload
    return resp


def gemini_payload(text, sources=None):
    candidate = {
        "content": {"role": "model", "parts": [{"text": text}]},
        "finishReason": "STOP",
    }
    if sources:
        candidate["groundingMetadata"] = {
            "groundingChunks": [{"web": {"title": title, "uri": uri}} for title, uri in sources]
        }
    return {"candidates": [candidate]}


@pytest.fixture
def fake_client(config):
    """A client whose ``generate`` returns whatever text the test sets via ``reply``."""
    client = MagicMock(spec=GenAIClient)
    client.config = config

    def reply(text, sources=None):
        client.generate.return_value = GenerationResult(
            text=text,
            sources=[GroundingSource(title=t, uri=u) for t, u in (sources or [])],
        )

    client.reply = reply
    reply("")
    return client
