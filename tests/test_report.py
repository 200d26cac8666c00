import io

from PyPDF2 import PdfReader

from material_engine.report import render_spec_sheet_pdf, wrap_lines
from material_engine.types import (
    AnalysisResult,
    EngineeringLogic,
    Ingredient,
    MaterialProperty,
    MaterialRecipe,
    RecipeVariation,
)


def test_minimal_recipe_renders():
    pdf = render_spec_sheet_pdf(MaterialRecipe(name="Unnamed Material", quadrant="NEXT_GEN", description=""))
    assert pdf.startswith(b"%PDF")


def test_long_recipe_with_analysis_spans_pages():
    recipe = MaterialRecipe(
        name="Lignin Reinforced PHA Compound For Injection Molded Housings",
        quadrant="BIO_BIO",
        description="A compound of PHA and lignin. " * 40,
        ingredients=[Ingredient(f"Component {i}", f"{i}%", "Filler " * 12) for i in range(30)],
        properties=[MaterialProperty(f"Property {i}", "12 MPa") for i in range(20)],
        sustainability_score=130,
        applications=["Housings", "Trays", "Clips", "Brackets", "Cups", "Lids", "Handles"],
        processing_steps=["Dry pellets at 60°C for 4 h"] * 10,
        variations=[RecipeVariation("High flow", "More plasticizer.")],
    )
    analysis = AnalysisResult(
        "BIO_BIO",
        "PHA compound with lignin.",
        EngineeringLogic("Twin-screw compounding.", "Low shear screws.", "Home compostable."),
        ["Heat sensitivity", "Moisture uptake"],
    )
    pdf = render_spec_sheet_pdf(recipe, analysis)
    assert pdf.startswith(b"%PDF")
    assert len(PdfReader(io.BytesIO(pdf)).pages) >= 2


def test_wrap_lines_respects_width():
    lines = wrap_lines("word " * 50, 120)
    assert len(lines) > 1
    assert wrap_lines("", 120) == [""]
