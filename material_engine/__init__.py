from .config import EngineConfig, load_config
from .errors import (
    ConfigError,
    InvalidDocument,
    MalformedResponse,
    MaterialEngineError,
    RequestFailure,
    SchemaMismatch,
    SessionClosed,
)
from .types import (
    AnalysisResult,
    IntelBriefing,
    LCAData,
    LibraryItem,
    Manufacturer,
    MaterialFamily,
    MaterialRecipe,
    NewsItem,
    Patent,
    PatentDocument,
    VisualizationData,
)
from .normalize import coerce_list, expect_array, expect_object, extract_and_parse
from .client import GenAIClient
from .analysis import (
    analyze_material,
    analyze_patent_pdf,
    estimate_lca,
    generate_material_image,
    generate_material_recipe,
    generate_visualization,
)
from .discovery import ask_quadrant_question, discover_emerging_polymers, find_manufacturers
from .intel import get_daily_intel_briefing, search_market_intel, search_patents
from .chat import ChatSession, PatentChatSession
from .catalog import COMPANIES, PROCESSES, QUADRANTS, filter_companies, flag_process_constraints
from .library import MaterialLibrary, export_filename, export_json, export_mat, new_library_item
from .report import render_spec_sheet_pdf
from .documents import load_patent_document

__all__ = [
    "EngineConfig",
    "load_config",
    "ConfigError",
    "InvalidDocument",
    "MalformedResponse",
    "MaterialEngineError",
    "RequestFailure",
    "SchemaMismatch",
    "SessionClosed",
    "AnalysisResult",
    "IntelBriefing",
    "LCAData",
    "LibraryItem",
    "Manufacturer",
    "MaterialFamily",
    "MaterialRecipe",
    "NewsItem",
    "Patent",
    "PatentDocument",
    "VisualizationData",
    "coerce_list",
    "expect_array",
    "expect_object",
    "extract_and_parse",
    "GenAIClient",
    "analyze_material",
    "analyze_patent_pdf",
    "estimate_lca",
    "generate_material_image",
    "generate_material_recipe",
    "generate_visualization",
    "ask_quadrant_question",
    "discover_emerging_polymers",
    "find_manufacturers",
    "get_daily_intel_briefing",
    "search_market_intel",
    "search_patents",
    "ChatSession",
    "PatentChatSession",
    "COMPANIES",
    "PROCESSES",
    "QUADRANTS",
    "filter_companies",
    "flag_process_constraints",
    "MaterialLibrary",
    "export_filename",
    "export_json",
    "export_mat",
    "new_library_item",
    "render_spec_sheet_pdf",
    "load_patent_document",
]
