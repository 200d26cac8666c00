import json
from datetime import datetime, timezone

from material_engine.library import MaterialLibrary, export_filename, export_json, export_mat, new_library_item
from material_engine.types import (
    AnalysisResult,
    EngineeringLogic,
    Ingredient,
    LibraryItem,
    MaterialProperty,
    MaterialRecipe,
)


def make_recipe(name="Algae Foam"):
    return MaterialRecipe(
        name=name,
        quadrant="NEXT_GEN",
        description="Foam from algae biomass.",
        ingredients=[Ingredient("Algae flour", "60%", "Matrix")],
        properties=[MaterialProperty("Density", "0.05 g/cm3"), MaterialProperty("Tensile", "2 MPa")],
        sustainability_score=88,
        applications=["Shoe soles"],
    )


def make_item(item_id, name):
    return LibraryItem(id=item_id, recipe=make_recipe(name), created_at=datetime(2025, 1, 1, tzinfo=timezone.utc))


def test_new_library_item():
    item = new_library_item(make_recipe(), image="data:image/png;base64,AA")
    assert item.id.isdigit()
    assert item.category == "Custom"
    assert item.name == "Algae Foam"
    assert item.created_at.tzinfo is not None


def test_library_keeps_newest_first():
    lib = MaterialLibrary()
    lib.add(make_item("1", "First"))
    lib.add(make_item("2", "Second"))
    assert [it.name for it in lib] == ["Second", "First"]
    assert len(lib) == 2


def test_library_remove_and_search():
    lib = MaterialLibrary([make_item("1", "Algae Foam"), make_item("2", "Hemp Board")])
    assert [it.id for it in lib.search("hemp")] == ["2"]
    assert len(lib.search("  ")) == 2
    assert lib.remove("1") is True
    assert lib.remove("1") is False
    assert [it.id for it in lib] == ["2"]


def test_library_item_to_dict():
    data = make_item("7", "Algae Foam").to_dict()
    assert data["id"] == "7"
    assert data["dateCreated"].startswith("2025-01-01")
    assert data["hasImage"] is False
    assert data["ingredients"][0]["name"] == "Algae flour"


def test_export_json_uses_to_dict():
    analysis = AnalysisResult("BIO_BIO", "PLA cup", EngineeringLogic("a", "b", "c"), ["Brittle"])
    data = json.loads(export_json(analysis).decode("utf-8"))
    assert data["engineering_logic"]["processing"] == "b"
    assert data["constraints"] == ["Brittle"]


def test_export_json_plain_values_and_unicode():
    raw = export_json({"name": "Bio-Harz °C"})
    assert "°C" in raw.decode("utf-8")


def test_export_mat():
    data = json.loads(export_mat(make_recipe()))
    assert data["material"] == "Algae Foam"
    assert data["quadrant"] == "NEXT_GEN"
    assert data["properties"] == {"Density": "0.05 g/cm3", "Tensile": "2 MPa"}
    assert data["timestamp"].endswith("Z")


def test_export_filename():
    assert export_filename("Algae  Foam v2", ".mat") == "Algae_Foam_v2.mat"
    assert export_filename("", ".json") == "material.json"
