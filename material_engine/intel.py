from __future__ import annotations

from datetime import date
from typing import Dict, List

from .client import GenAIClient
from .logger import setup_logger
from .normalize import (
    coerce_dict_list,
    coerce_field_list,
    coerce_str,
    expect_array,
    expect_object,
    extract_and_parse,
)
from .prompts import MARKET_RESEARCHER_INSTRUCTION, SYSTEM_INSTRUCTION
from .types import IntelBriefing, NewsItem, Patent
from .utils import clean_text

logger = setup_logger(__name__)

SUMMARY_SNIPPET_CHARS = 200


def search_market_intel(client: GenAIClient, query: str) -> List[NewsItem]:
    """Grounded search; items come from the search citations, not the generated text."""
    prompt = (
        f'Find the latest technical news, patents, or market updates regarding: "{query}". '
        "Return a summary of the top 3-5 findings. Focus on 2024-2025 data."
    )
    result = client.generate(
        prompt,
        system=MARKET_RESEARCHER_INSTRUCTION,
        model=client.config.fast_model,
        grounded=True,
    )
    items: List[NewsItem] = []
    seen = set()
    for src in result.sources:
        key = src.uri.lower()
        if key != "#" and key in seen:
            continue
        seen.add(key)
        items.append(NewsItem(title=src.title, url=src.uri, snippet="Web Source", source="Google Search"))

    if not items and result.text.strip():
        items.append(
            NewsItem(
                title="Generated Summary",
                url="#",
                snippet=clean_text(result.text[:SUMMARY_SNIPPET_CHARS] + "..."),
                source="Gemini Analysis",
            )
        )
    return items


def _news_items(payload: Dict[str, object], field: str) -> List[NewsItem]:
    return [
        NewsItem(
            title=clean_text(coerce_str(row.get("title"), "Untitled")),
            snippet=clean_text(coerce_str(row.get("snippet"))),
            source=clean_text(coerce_str(row.get("source"), "Web")),
            url=coerce_str(row.get("url"), "#"),
            date=coerce_str(row.get("date")),
        )
        for row in coerce_dict_list(coerce_field_list(payload, field, "daily_briefing"))
    ]


def get_daily_intel_briefing(client: GenAIClient) -> IntelBriefing:
    prompt = (
        "Act as an Editor-in-Chief for a Material Science publication.\n"
        'Search for the latest news in "Biomaterials", "Sustainable Polymers", "Bio-startups", and '
        '"Material Science Research" from the last 7 days (or recent 2024-2025 news).\n'
        "Categorize the findings into three arrays:\n"
        "1. commercialMoves: funding, M&A, startups, product launches.\n"
        "2. researchBreakthroughs: papers, university discoveries, new technologies.\n"
        "3. policyUpdates: regulations, bans, government grants (EU/US/Asia).\n"
        "Return valid JSON:\n"
        "{\n"
        '  "date": "Today\'s Date",\n'
        '  "summary": "A 1-sentence executive summary of the day.",\n'
        '  "commercialMoves": [{"title": "...", "snippet": "...", "source": "...", "url": "..."}],\n'
        '  "researchBreakthroughs": [{"title": "...", "snippet": "...", "source": "...", "url": "..."}],\n'
        '  "policyUpdates": [{"title": "...", "snippet": "...", "source": "...", "url": "..."}]\n'
        "}"
    )
    result = client.generate(prompt, system=SYSTEM_INSTRUCTION, json_mode=True, grounded=True, thinking=True)
    payload = expect_object(extract_and_parse(result.text, default={}), raw_text=result.text)
    return IntelBriefing(
        date=coerce_str(payload.get("date"), date.today().isoformat()),
        summary=clean_text(coerce_str(payload.get("summary"), "Daily briefing ready.")),
        commercial_moves=_news_items(payload, "commercialMoves"),
        research_breakthroughs=_news_items(payload, "researchBreakthroughs"),
        policy_updates=_news_items(payload, "policyUpdates"),
    )


def search_patents(client: GenAIClient, company: str) -> List[Patent]:
    prompt = (
        f'Find recent patents assigned to "{company}". List the top 3-5 most relevant patents.\n'
        "Return ONLY a valid JSON array of objects.\n"
        'JSON Format: [{"title": "...", "number": "...", "assignee": "...", "snippet": "...", "url": "...", "date": "..."}]\n'
        "Do not use numbered lists. Do not include markdown formatting."
    )
    result = client.generate(prompt, model=client.config.fast_model, grounded=True)
    rows = expect_array(extract_and_parse(result.text, default=[]), raw_text=result.text)
    patents = [
        Patent(
            title=clean_text(coerce_str(row.get("title"), "Untitled patent")),
            number=coerce_str(row.get("number")),
            assignee=coerce_str(row.get("assignee"), company),
            snippet=clean_text(coerce_str(row.get("snippet"))),
            url=coerce_str(row.get("url"), "#"),
            date=coerce_str(row.get("date")),
        )
        for row in coerce_dict_list(rows)
    ]
    logger.info("Patent search for %r returned %d results", company, len(patents))
    return patents
