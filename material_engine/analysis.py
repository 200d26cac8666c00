from __future__ import annotations

from typing import Dict, List

from .client import GenAIClient
from .logger import setup_logger
from .normalize import (
    coerce_dict,
    coerce_dict_list,
    coerce_field_list,
    coerce_number,
    coerce_str,
    coerce_str_list,
    expect_object,
    extract_and_parse,
)
from .prompts import JSON_ONLY, SYSTEM_INSTRUCTION
from .types import (
    DEFAULT_QUADRANT,
    QUADRANT_IDS,
    AnalysisResult,
    EngineeringLogic,
    Ingredient,
    LCAComparison,
    LCAData,
    MaterialProperty,
    MaterialRecipe,
    RecipeVariation,
    VisualizationData,
)
from .utils import clean_text

logger = setup_logger(__name__)

ANALYSIS_SCHEMA = (
    "{\n"
    '  "quadrant": "BIO_BIO" | "BIO_DURABLE" | "FOSSIL_BIO" | "NEXT_GEN",\n'
    '  "summary": "Brief technical summary",\n'
    '  "engineeringLogic": {"compounding": "...", "processing": "...", "system": "..."},\n'
    '  "constraints": ["Constraint 1", "Constraint 2"]\n'
    "}"
)


def normalize_quadrant(value: object) -> str:
    raw = coerce_str(value).upper().replace("-", "_").replace(" ", "_")
    if raw in QUADRANT_IDS:
        return raw
    if raw:
        logger.warning("Unknown quadrant %r; using %s", value, DEFAULT_QUADRANT)
    return DEFAULT_QUADRANT


def _analysis_from_payload(payload: Dict[str, object], fallback_logic: str, context: str) -> AnalysisResult:
    logic = coerce_dict(payload.get("engineeringLogic"))
    constraints = [clean_text(c) for c in coerce_field_list(payload, "constraints", context) if coerce_str(c)]
    return AnalysisResult(
        quadrant=normalize_quadrant(payload.get("quadrant")),
        summary=clean_text(coerce_str(payload.get("summary"), "No summary available.")),
        engineering_logic=EngineeringLogic(
            compounding=clean_text(coerce_str(logic.get("compounding"), fallback_logic)),
            processing=clean_text(coerce_str(logic.get("processing"), fallback_logic)),
            system=clean_text(coerce_str(logic.get("system"), fallback_logic)),
        ),
        constraints=constraints,
    )


def analyze_material(client: GenAIClient, material: str) -> AnalysisResult:
    prompt = (
        f'Analyze the following material/product request: "{material}".\n'
        "Classify it into one quadrant, summarize it technically, and explain the engineering logic "
        "for each of the 3 pillars. List the key constraints.\n"
        f"JSON structure:\n{ANALYSIS_SCHEMA}\n"
        f"{JSON_ONLY}"
    )
    result = client.generate(prompt, system=SYSTEM_INSTRUCTION, json_mode=True, thinking=True)
    payload = expect_object(extract_and_parse(result.text, default={}), raw_text=result.text)
    return _analysis_from_payload(payload, "Analysis unavailable.", "analyze_material")


def analyze_patent_pdf(client: GenAIClient, pdf_b64: str, mime_type: str = "application/pdf") -> AnalysisResult:
    prompt = (
        "Analyze this patent document.\n"
        'Deconstruct the invention using the "3 Pillar Strategy": Advanced Compounding, '
        "Application Engineering, System Intelligence. Also classify it into one of the 4 quadrants.\n"
        f"JSON structure:\n{ANALYSIS_SCHEMA}\n"
        "Use plain text for all string fields.\n"
        f"{JSON_ONLY}"
    )
    result = client.generate(
        prompt,
        system=SYSTEM_INSTRUCTION,
        json_mode=True,
        thinking=True,
        documents=[(mime_type, pdf_b64)],
    )
    payload = expect_object(extract_and_parse(result.text, default={}), raw_text=result.text)
    return _analysis_from_payload(payload, "Details not extracted.", "analyze_patent_pdf")


def recipe_from_payload(payload: Dict[str, object]) -> MaterialRecipe:
    context = "material_recipe"
    ingredients: List[Ingredient] = []
    for row in coerce_dict_list(coerce_field_list(payload, "ingredients", context)):
        name = coerce_str(row.get("name"))
        if not name:
            continue
        ingredients.append(
            Ingredient(
                name=name,
                percentage=coerce_str(row.get("percentage")),
                function=clean_text(coerce_str(row.get("function"))),
            )
        )
    properties = [
        MaterialProperty(name=coerce_str(row.get("name")), value=coerce_str(row.get("value")))
        for row in coerce_dict_list(coerce_field_list(payload, "properties", context))
        if coerce_str(row.get("name"))
    ]
    variations = [
        RecipeVariation(name=coerce_str(row.get("name")), description=clean_text(coerce_str(row.get("description"))))
        for row in coerce_dict_list(payload.get("variations"))
        if coerce_str(row.get("name"))
    ]
    score = max(0.0, min(100.0, coerce_number(payload.get("sustainabilityScore"), 0.0)))
    return MaterialRecipe(
        name=coerce_str(payload.get("name"), "Unnamed Material"),
        quadrant=normalize_quadrant(payload.get("quadrant")),
        description=clean_text(coerce_str(payload.get("description"))),
        ingredients=ingredients,
        properties=properties,
        sustainability_score=score,
        applications=coerce_str_list(coerce_field_list(payload, "applications", context)),
        processing_steps=[clean_text(s) for s in coerce_str_list(payload.get("processingSteps"))],
        variations=variations,
    )


def generate_material_recipe(client: GenAIClient, problem_statement: str) -> MaterialRecipe:
    prompt = (
        "Act as a Chief Technology Officer in Material Science.\n"
        f'Invent a novel sustainable material solution for this problem: "{problem_statement}".\n'
        'Generate a commercial "Material Profile" with this JSON structure:\n'
        "{\n"
        '  "name": "Trade Name",\n'
        '  "quadrant": "BIO_BIO" | "BIO_DURABLE" | "FOSSIL_BIO" | "NEXT_GEN",\n'
        '  "description": "Technical description of the composite.",\n'
        '  "ingredients": [{"name": "Ingredient", "percentage": "XX%", "function": "Why it is here"}],\n'
        '  "properties": [{"name": "Property", "value": "Value"}],\n'
        '  "sustainabilityScore": 85,\n'
        '  "applications": ["App 1", "App 2", "App 3"],\n'
        '  "processingSteps": ["Step 1", "Step 2"],\n'
        '  "variations": [{"name": "Variant", "description": "How it differs"}]\n'
        "}\n"
        f"{JSON_ONLY}"
    )
    result = client.generate(prompt, system=SYSTEM_INSTRUCTION, json_mode=True, thinking=True)
    payload = expect_object(extract_and_parse(result.text, default={}), raw_text=result.text)
    return recipe_from_payload(payload)


def generate_material_image(client: GenAIClient, description: str) -> str:
    prompt = (
        f"Photorealistic product design render of: {description}. "
        "Focus on accurate material texture, surface finish, and physical form factor. "
        "Cinematic studio lighting, macro details, raw material aesthetics."
    )
    return client.generate_image(prompt, aspect_ratio="4:3")


def estimate_lca(client: GenAIClient, material: str) -> LCAData:
    prompt = (
        f'Estimate a cradle-to-gate life cycle assessment for the material "{material}".\n'
        "Compare it against 3 conventional materials it could replace.\n"
        "JSON structure:\n"
        "{\n"
        '  "carbonFootprint": 1.2,\n'
        '  "waterUsage": 40,\n'
        '  "circularityScore": 7,\n'
        '  "comparison": [{"material": "Virgin PP", "carbon": 1.9}],\n'
        '  "verdict": "One paragraph verdict in plain text."\n'
        "}\n"
        "carbonFootprint and carbon are kg CO2e per kg, waterUsage is L per kg, circularityScore is 0-10.\n"
        f"{JSON_ONLY}"
    )
    result = client.generate(prompt, system=SYSTEM_INSTRUCTION, model=client.config.fast_model, json_mode=True)
    payload = expect_object(extract_and_parse(result.text, default={}), raw_text=result.text)
    comparison = [
        LCAComparison(material=coerce_str(row.get("material")), carbon=coerce_number(row.get("carbon")))
        for row in coerce_dict_list(coerce_field_list(payload, "comparison", "estimate_lca"))
        if coerce_str(row.get("material"))
    ]
    return LCAData(
        carbon_footprint=coerce_number(payload.get("carbonFootprint")),
        water_usage=coerce_number(payload.get("waterUsage")),
        circularity_score=max(0.0, min(10.0, coerce_number(payload.get("circularityScore")))),
        comparison=comparison,
        verdict=clean_text(coerce_str(payload.get("verdict"))),
    )


def generate_visualization(client: GenAIClient, material: str) -> VisualizationData:
    prompt = (
        f'Design a 3D Plotly visualization of the internal structure of "{material}" '
        "(for example fibre orientation, particle dispersion, or a molecular backbone sketch).\n"
        "JSON structure:\n"
        "{\n"
        '  "data": [ Plotly trace objects such as {"type": "scatter3d", "x": [...], "y": [...], "z": [...], "mode": "markers"} ],\n'
        '  "layout": { Plotly layout object },\n'
        '  "explanation": "What the viewer is looking at, plain text."\n'
        "}\n"
        "Keep every trace under 300 points.\n"
        f"{JSON_ONLY}"
    )
    result = client.generate(prompt, system=SYSTEM_INSTRUCTION, model=client.config.fast_model, json_mode=True)
    payload = expect_object(extract_and_parse(result.text, default={}), raw_text=result.text)
    traces = [t for t in coerce_dict_list(coerce_field_list(payload, "data", "visualization")) if t]
    return VisualizationData(
        data=traces,
        layout=coerce_dict(payload.get("layout")),
        explanation=clean_text(coerce_str(payload.get("explanation"))),
    )
