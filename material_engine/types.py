from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Tuple


QUADRANT_IDS: Tuple[str, ...] = ("BIO_BIO", "BIO_DURABLE", "FOSSIL_BIO", "NEXT_GEN")
DEFAULT_QUADRANT = "NEXT_GEN"


@dataclass
class EngineeringLogic:
    compounding: str
    processing: str
    system: str


@dataclass
class AnalysisResult:
    quadrant: str
    summary: str
    engineering_logic: EngineeringLogic
    constraints: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, object]:
        return asdict(self)


@dataclass
class Ingredient:
    name: str
    percentage: str = ""
    function: str = ""


@dataclass
class MaterialProperty:
    name: str
    value: str = ""


@dataclass
class RecipeVariation:
    name: str
    description: str = ""


@dataclass
class MaterialRecipe:
    name: str
    quadrant: str
    description: str
    ingredients: List[Ingredient] = field(default_factory=list)
    properties: List[MaterialProperty] = field(default_factory=list)
    sustainability_score: float = 0.0
    applications: List[str] = field(default_factory=list)
    processing_steps: List[str] = field(default_factory=list)
    variations: List[RecipeVariation] = field(default_factory=list)

    def to_dict(self) -> Dict[str, object]:
        return asdict(self)


@dataclass
class LibraryItem:
    id: str
    recipe: MaterialRecipe
    created_at: datetime
    category: str = "Custom"
    image: str = ""

    @property
    def name(self) -> str:
        return self.recipe.name

    def to_dict(self) -> Dict[str, object]:
        data = self.recipe.to_dict()
        data.update(
            {
                "id": self.id,
                "dateCreated": self.created_at.isoformat(),
                "category": self.category,
                "hasImage": bool(self.image),
            }
        )
        return data


@dataclass
class MaterialFamily:
    name: str
    description: str = ""
    common_grades: List[str] = field(default_factory=list)
    readiness: Optional[float] = None
    innovators: List[str] = field(default_factory=list)


@dataclass
class Manufacturer:
    name: str
    product: str = ""
    location: str = ""
    description: str = ""
    website: str = ""


@dataclass
class NewsItem:
    title: str
    url: str = "#"
    snippet: str = ""
    source: str = ""
    date: str = ""


@dataclass
class IntelBriefing:
    date: str
    summary: str
    commercial_moves: List[NewsItem] = field(default_factory=list)
    research_breakthroughs: List[NewsItem] = field(default_factory=list)
    policy_updates: List[NewsItem] = field(default_factory=list)

    def to_dict(self) -> Dict[str, object]:
        return asdict(self)


@dataclass
class Patent:
    title: str
    number: str = ""
    assignee: str = ""
    snippet: str = ""
    url: str = "#"
    date: str = ""


@dataclass
class LCAComparison:
    material: str
    carbon: float


@dataclass
class LCAData:
    carbon_footprint: float
    water_usage: float
    circularity_score: float
    comparison: List[LCAComparison] = field(default_factory=list)
    verdict: str = ""

    def to_dict(self) -> Dict[str, object]:
        return asdict(self)


@dataclass
class VisualizationData:
    data: List[Dict[str, object]]
    layout: Dict[str, object]
    explanation: str = ""

    def to_dict(self) -> Dict[str, object]:
        return asdict(self)


@dataclass
class GroundingSource:
    title: str
    uri: str


@dataclass
class GenerationResult:
    text: str
    sources: List[GroundingSource] = field(default_factory=list)
    finish_reason: str = ""


@dataclass
class ChatMessage:
    role: str
    content: str
    id: str = ""
    timestamp: str = ""


@dataclass
class PatentDocument:
    name: str
    page_count: int
    preview_text: str
    base64_data: str
    mime_type: str = "application/pdf"


@dataclass
class PlayerInfo:
    name: str
    tech: str


@dataclass
class QuadrantInfo:
    id: str
    title: str
    tagline: str
    definition: str
    core_logic: str
    readiness: int
    sustainability: int
    scalability: int
    cost: str
    families: List[MaterialFamily] = field(default_factory=list)
    challenges: List[str] = field(default_factory=list)
    processing: List[str] = field(default_factory=list)
    applications: List[str] = field(default_factory=list)
    players: List[PlayerInfo] = field(default_factory=list)


@dataclass
class ProcessParameter:
    name: str
    unit: str
    standard_value: str
    bio_value: str
    insight: str


@dataclass
class ManufacturingProcess:
    id: str
    name: str
    description: str
    outputs: List[str]
    run_logic: str
    parameters: List[ProcessParameter] = field(default_factory=list)


@dataclass
class CompanyNode:
    id: str
    name: str
    location: str
    lat: float
    lon: float
    quadrant: str
    product: str
    strategy: str
