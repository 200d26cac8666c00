import json

import pytest

from material_engine.discovery import ask_quadrant_question, discover_emerging_polymers, find_manufacturers
from material_engine.errors import MalformedResponse, SchemaMismatch


def test_ask_quadrant_question_cleans_markdown(fake_client):
    fake_client.reply("## Outlook\n* **PHA** capacity is growing\n- PLA prices fell")
    answer = ask_quadrant_question(fake_client, "BIO-BIO", "capacity outlook")
    assert answer == "Outlook\n• PHA capacity is growing\n• PLA prices fell"
    prompt = fake_client.generate.call_args.args[0]
    assert "BIO-BIO" in prompt and "capacity outlook" in prompt


def test_ask_quadrant_question_empty_reply(fake_client):
    fake_client.reply("")
    assert ask_quadrant_question(fake_client, "NEXT-GEN", "anything") == "No analysis generated."


def test_discover_emerging_polymers(fake_client):
    fake_client.reply(
        json.dumps(
            [
                {
                    "name": "PHBV",
                    "description": "**Tough** copolymer",
                    "commonGrades": "ENMAT Y1000",
                    "readiness": 65,
                    "innovators": ["TianAn"],
                },
                {"description": "nameless entry"},
            ]
        )
    )
    families = discover_emerging_polymers(fake_client, "BIO-BIO")
    assert len(families) == 1
    fam = families[0]
    assert fam.name == "PHBV"
    assert fam.description == "Tough copolymer"
    assert fam.common_grades == ["ENMAT Y1000"]
    assert fam.readiness == 65.0
    assert fam.innovators == ["TianAn"]


def test_discover_emerging_polymers_accepts_wrapped_array(fake_client):
    fake_client.reply('{"materials": [{"name": "PEF"}]}')
    families = discover_emerging_polymers(fake_client, "BIO-DURABLE")
    assert [f.name for f in families] == ["PEF"]
    assert families[0].readiness is None
    assert families[0].common_grades == []


def test_discover_emerging_polymers_rejects_object(fake_client):
    fake_client.reply('{"name": "PEF", "description": "single"}')
    with pytest.raises(SchemaMismatch):
        discover_emerging_polymers(fake_client, "BIO-DURABLE")


def test_find_manufacturers_from_grounded_prose(fake_client):
    fake_client.reply(
        "Here are companies I found:\n"
        '[{"name": "Sulapac", "product": "Cosmetic jars", "location": "Helsinki, Finland", '
        '"description": "**Wood** composite jars", "website": "https://sulapac.com"}]\n'
        "Sources: web search."
    )
    found = find_manufacturers(fake_client, "Injection Molding", "wood composite")
    assert len(found) == 1
    assert found[0].name == "Sulapac"
    assert found[0].description == "Wood composite jars"
    kwargs = fake_client.generate.call_args.kwargs
    assert kwargs["grounded"] is True
    assert kwargs["model"] == "gemini-2.5-flash"
    assert "json_mode" not in kwargs


def test_find_manufacturers_empty_reply(fake_client):
    fake_client.reply("")
    assert find_manufacturers(fake_client, "Blown Film", "PBAT") == []


def test_find_manufacturers_garbage(fake_client):
    fake_client.reply("I could not find any manufacturers.")
    with pytest.raises(MalformedResponse):
        find_manufacturers(fake_client, "Blown Film", "PBAT")
