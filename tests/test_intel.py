import json
from datetime import date

import pytest

from material_engine.errors import SchemaMismatch
from material_engine.intel import get_daily_intel_briefing, search_market_intel, search_patents


def test_market_intel_items_come_from_sources(fake_client):
    fake_client.reply(
        "Summary of findings.",
        sources=[
            ("PHA capacity doubles", "https://news.example/pha"),
            ("PHA capacity doubles (dup)", "https://news.example/PHA"),
            ("EU packaging rules", "https://news.example/eu"),
        ],
    )
    items = search_market_intel(fake_client, "PHA news")
    assert [i.url for i in items] == ["https://news.example/pha", "https://news.example/eu"]
    assert all(i.snippet == "Web Source" and i.source == "Google Search" for i in items)
    kwargs = fake_client.generate.call_args.kwargs
    assert kwargs["grounded"] is True
    assert kwargs["model"] == "gemini-2.5-flash"


def test_market_intel_falls_back_to_generated_summary(fake_client):
    text = "x" * 250
    fake_client.reply(text)
    items = search_market_intel(fake_client, "anything")
    assert len(items) == 1
    item = items[0]
    assert item.title == "Generated Summary"
    assert item.url == "#"
    assert item.source == "Gemini Analysis"
    assert item.snippet == "x" * 200 + "..."


def test_market_intel_empty(fake_client):
    fake_client.reply("   ")
    assert search_market_intel(fake_client, "anything") == []


def test_daily_briefing(fake_client):
    fake_client.reply(
        json.dumps(
            {
                "date": "2025-03-04",
                "summary": "**Busy** day for PHA.",
                "commercialMoves": [{"title": "Funding round", "snippet": "Series B", "source": "TechCrunch", "url": "https://t.co/x"}],
                "researchBreakthroughs": {"title": "New enzyme"},
            }
        )
    )
    briefing = get_daily_intel_briefing(fake_client)
    assert briefing.date == "2025-03-04"
    assert briefing.summary == "Busy day for PHA."
    assert briefing.commercial_moves[0].source == "TechCrunch"
    assert [i.title for i in briefing.research_breakthroughs] == ["New enzyme"]
    assert briefing.research_breakthroughs[0].url == "#"
    assert briefing.research_breakthroughs[0].source == "Web"
    assert briefing.policy_updates == []
    kwargs = fake_client.generate.call_args.kwargs
    assert kwargs["grounded"] is True and kwargs["json_mode"] is True


def test_daily_briefing_defaults(fake_client):
    fake_client.reply("{}")
    briefing = get_daily_intel_briefing(fake_client)
    assert briefing.date == date.today().isoformat()
    assert briefing.summary == "Daily briefing ready."


def test_daily_briefing_wrong_shape(fake_client):
    fake_client.reply("[1, 2]")
    with pytest.raises(SchemaMismatch):
        get_daily_intel_briefing(fake_client)


def test_search_patents(fake_client):
    fake_client.reply(
        "```json\n"
        '[{"title": "**PHA** blend", "number": "US1234567B2", "snippet": "A blend", "url": "https://patents.example/1", "date": "2024-01-02"},'
        ' {"number": "EP999"}]\n'
        "```"
    )
    patents = search_patents(fake_client, "Danimer")
    assert patents[0].title == "PHA blend"
    assert patents[0].assignee == "Danimer"
    assert patents[1].title == "Untitled patent"
    assert patents[1].url == "#"
