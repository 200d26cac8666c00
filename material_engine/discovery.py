from __future__ import annotations

from typing import List

from .client import GenAIClient
from .logger import setup_logger
from .normalize import coerce_dict_list, coerce_number, coerce_str, coerce_str_list, expect_array, extract_and_parse
from .prompts import SYSTEM_INSTRUCTION
from .types import Manufacturer, MaterialFamily
from .utils import clean_text

logger = setup_logger(__name__)


def ask_quadrant_question(client: GenAIClient, quadrant: str, topic: str) -> str:
    prompt = (
        f"Context: The user is analyzing the {quadrant} material quadrant.\n"
        f'Task: Provide a technical answer regarding: "{topic}".\n'
        "Keep it concise, data-driven, and focused on market realities for 2024-2025.\n"
        "Use plain text only, no markdown."
    )
    result = client.generate(prompt, system=SYSTEM_INSTRUCTION, thinking=True)
    return clean_text(result.text) or "No analysis generated."


def discover_emerging_polymers(client: GenAIClient, quadrant: str) -> List[MaterialFamily]:
    prompt = (
        f'Identify 3 emerging or novel polymer classes or specific high-performance grades within the "{quadrant}" '
        "material sector that are gaining traction in 2024-2025. Focus on cutting-edge or recently commercialized materials.\n"
        "Return ONLY a valid JSON array with this structure:\n"
        "[\n"
        "  {\n"
        '    "name": "Name of Material/Class",\n'
        '    "description": "Brief technical description and why it matters.",\n'
        '    "commonGrades": ["Example Grade 1", "Example Grade 2"],\n'
        '    "readiness": 60,\n'
        '    "innovators": ["Company A", "Company B"]\n'
        "  }\n"
        "]\n"
        "Do not include markdown formatting."
    )
    result = client.generate(prompt, system=SYSTEM_INSTRUCTION, json_mode=True, thinking=True)
    rows = expect_array(extract_and_parse(result.text, default=[]), raw_text=result.text)

    families: List[MaterialFamily] = []
    for row in coerce_dict_list(rows):
        name = coerce_str(row.get("name"))
        if not name:
            continue
        readiness = row.get("readiness")
        families.append(
            MaterialFamily(
                name=name,
                description=clean_text(coerce_str(row.get("description"))),
                common_grades=coerce_str_list(row.get("commonGrades")),
                readiness=max(0.0, min(100.0, coerce_number(readiness))) if readiness is not None else None,
                innovators=coerce_str_list(row.get("innovators")),
            )
        )
    logger.info("Discovered %d emerging families for %s", len(families), quadrant)
    return families


def find_manufacturers(client: GenAIClient, process: str, material: str) -> List[Manufacturer]:
    prompt = (
        f"Find real-world companies that manufacture products using {process} with {material} "
        "(or similar sustainable materials). Focus on companies active in 2024-2025 and specific consumer "
        "products available on the market.\n"
        "Return a JSON array of objects:\n"
        "[\n"
        "  {\n"
        '    "name": "Company Name",\n'
        '    "product": "Specific product example",\n'
        '    "location": "City/Country",\n'
        '    "description": "Brief description of the product and market fit.",\n'
        '    "website": "Website URL"\n'
        "  }\n"
        "]\n"
        "Use Google Search to find real data."
    )
    result = client.generate(prompt, system=SYSTEM_INSTRUCTION, model=client.config.fast_model, grounded=True)
    rows = expect_array(extract_and_parse(result.text, default=[]), raw_text=result.text)
    return [
        Manufacturer(
            name=coerce_str(row.get("name")),
            product=coerce_str(row.get("product")),
            location=coerce_str(row.get("location")),
            description=clean_text(coerce_str(row.get("description"))),
            website=coerce_str(row.get("website")),
        )
        for row in coerce_dict_list(rows)
        if coerce_str(row.get("name"))
    ]
