import pytest
from streamlit.testing.v1 import AppTest

import material_engine
from material_engine.errors import RequestFailure

FAILED_MESSAGE = "The Material Strategy Engine request failed, try again."


@pytest.fixture
def app(monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "test-key")
    at = AppTest.from_file("../app.py", default_timeout=30)
    at.run()
    assert not at.exception
    return at


def test_failed_company_news_search_stays_visible(app, monkeypatch):
    def unreachable(client, query):
        raise RequestFailure("Request to generative API failed: connection refused")

    monkeypatch.setattr(material_engine, "search_market_intel", unreachable)
    app.selectbox(key="intel_company_pick").select_index(1).run()

    assert not app.exception
    assert FAILED_MESSAGE in [e.value for e in app.error]
    assert app.session_state["company_news_failed"] is True


def test_company_news_search_renders_sources(app, monkeypatch):
    monkeypatch.setattr(material_engine, "search_market_intel", lambda client, query: [])
    app.selectbox(key="intel_company_pick").select_index(1).run()

    assert not app.exception
    assert FAILED_MESSAGE not in [e.value for e in app.error]
    assert app.session_state["company_news_failed"] is False
