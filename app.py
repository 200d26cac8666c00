import base64
import hashlib
import html
import time
import uuid
from typing import Callable, Dict, List, Optional

import plotly.graph_objects as go
import streamlit as st

from material_engine import (
    QUADRANTS,
    PROCESSES,
    AnalysisResult,
    ChatSession,
    GenAIClient,
    LCAData,
    MaterialEngineError,
    MaterialLibrary,
    MaterialRecipe,
    NewsItem,
    PatentChatSession,
    VisualizationData,
    analyze_material,
    analyze_patent_pdf,
    ask_quadrant_question,
    discover_emerging_polymers,
    estimate_lca,
    export_filename,
    export_json,
    export_mat,
    filter_companies,
    find_manufacturers,
    flag_process_constraints,
    generate_material_image,
    generate_material_recipe,
    generate_visualization,
    get_daily_intel_briefing,
    load_config,
    load_patent_document,
    new_library_item,
    render_spec_sheet_pdf,
    search_market_intel,
    search_patents,
)
from material_engine.catalog import get_process
from material_engine.errors import ConfigError, MalformedResponse, SchemaMismatch
from material_engine.logger import set_package_level, setup_logger
from material_engine.utils import ellipsize, now_iso

logger = setup_logger("material_engine.app")

QUADRANT_COLORS = {
    "BIO_BIO": "#9fe7d3",
    "BIO_DURABLE": "#f7c6a0",
    "FOSSIL_BIO": "#f6b4d5",
    "NEXT_GEN": "#9ed2ff",
}
FAILED_MESSAGE = "The Material Strategy Engine request failed, try again."


def do_rerun() -> None:
    rerun_fn = getattr(st, "rerun", None)
    if rerun_fn is None:
        rerun_fn = getattr(st, "experimental_rerun")
    rerun_fn()


def set_status_bubble(message: str, kind: str = "processing") -> None:
    st.session_state.status_bubble = {
        "message": message,
        "kind": kind,
        "ts": time.time(),
    }


def render_status_bubble() -> None:
    bubble = st.session_state.get("status_bubble")
    if not bubble:
        return
    if time.time() - float(bubble.get("ts", 0)) > 2.2:
        st.session_state.status_bubble = None
        return
    kind = str(bubble.get("kind", "processing")).lower()
    css_kind = kind if kind in {"success", "processing", "warning"} else "processing"
    message = str(bubble.get("message", ""))
    if not message:
        return
    st.markdown(
        f'<div class="bubble {css_kind} auto-hide">{html.escape(message)}</div>',
        unsafe_allow_html=True,
    )


def inject_theme() -> None:
    st.markdown(
        """
        <style>
        @import url('https://fonts.googleapis.com/css2?family=Space+Grotesk:wght@400;500;600;700&family=Sora:wght@600;700&display=swap');
        :root {
          --bg: #0b1020;
          --panel: rgba(16, 22, 38, 0.85);
          --text: #e9eefb;
          --muted: #a8b0c2;
          --mint: #9fe7d3;
          --peach: #f7c6a0;
          --sky: #9ed2ff;
          --rose: #f6b4d5;
          --glow: rgba(159, 231, 211, 0.25);
        }
        html, body, [class*="css"] {
          font-family: 'Space Grotesk', sans-serif;
          color: var(--text);
        }
        .stApp {
          background:
            radial-gradient(1200px 800px at 10% 10%, rgba(158, 210, 255, 0.08), transparent 60%),
            radial-gradient(900px 900px at 80% 90%, rgba(159, 231, 211, 0.07), transparent 55%),
            var(--bg);
        }
        div[data-testid="stSidebar"] {
          background: linear-gradient(180deg, rgba(12, 17, 32, 0.98), rgba(10, 14, 26, 0.98));
          border-right: 1px solid rgba(160, 170, 200, 0.12);
        }
        .hero {
          padding: 18px 22px;
          border-radius: 18px;
          background: linear-gradient(135deg, rgba(18, 26, 46, 0.9), rgba(12, 16, 30, 0.9));
          border: 1px solid rgba(160, 170, 200, 0.18);
          box-shadow: 0 20px 50px rgba(0, 0, 0, 0.35), 0 0 40px var(--glow);
          margin-bottom: 16px;
        }
        .hero h1 { font-family: "Sora", sans-serif; font-size: 28px; margin: 0 0 4px 0; }
        .hero p { color: var(--muted); margin: 0; }
        .quad-card {
          border-radius: 16px;
          padding: 14px 16px;
          background: linear-gradient(165deg, rgba(20, 28, 48, 0.84), rgba(12, 17, 30, 0.86));
          border: 1px solid rgba(160, 170, 200, 0.18);
          min-height: 128px;
        }
        .quad-card.active { box-shadow: 0 0 22px var(--glow); border-color: rgba(159, 231, 211, 0.5); }
        .quad-title { font-family: "Sora", sans-serif; font-weight: 700; font-size: 17px; }
        .quad-tag { color: var(--muted); font-size: 12px; margin-top: 2px; }
        .chip {
          display: inline-flex;
          padding: 4px 11px;
          margin: 0 6px 6px 0;
          border-radius: 999px;
          font-size: 12px;
          background: rgba(20, 28, 48, 0.9);
          border: 1px solid rgba(160, 170, 200, 0.25);
          color: var(--muted);
        }
        .chip.warn { border-color: rgba(255, 211, 128, 0.7); color: #ffd380; }
        .panel-card {
          background: var(--panel);
          border: 1px solid rgba(160, 170, 200, 0.18);
          border-radius: 16px;
          padding: 14px 16px;
          margin-bottom: 10px;
        }
        .panel-card h4 { margin: 0 0 6px 0; font-size: 15px; }
        .muted { color: var(--muted); font-size: 13px; }
        .news-item a { color: var(--sky); text-decoration: none; font-weight: 600; }
        .news-item { padding: 8px 0; border-bottom: 1px solid rgba(160, 170, 200, 0.12); }
        [data-testid="stTabs"] [data-baseweb="tab-list"] {
          gap: 8px;
          background: rgba(12, 17, 32, 0.68);
          border: 1px solid rgba(160, 170, 200, 0.2);
          border-radius: 14px;
          padding: 6px;
        }
        [data-testid="stTabs"] [aria-selected="true"] {
          background: linear-gradient(135deg, rgba(159, 231, 211, 0.18), rgba(158, 210, 255, 0.2));
          color: #e9eefb !important;
          border-radius: 10px;
        }
        .bubble {
          padding: 10px 14px;
          border-radius: 14px;
          background: rgba(20, 28, 48, 0.9);
          border: 1px solid rgba(160, 170, 200, 0.2);
          display: inline-block;
        }
        .bubble.auto-hide { animation: fade-out 0.8s ease 1.4s forwards; }
        .bubble.success { border-color: rgba(159, 231, 211, 0.5); }
        .bubble.processing { border-color: rgba(247, 198, 160, 0.5); }
        .bubble.warning { border-color: rgba(255, 211, 128, 0.5); }
        @keyframes fade-out {
          to { opacity: 0.0; height: 0; margin: 0; padding: 0; border: 0; }
        }
        .stButton > button {
          background: linear-gradient(135deg, rgba(158, 210, 255, 0.25), rgba(159, 231, 211, 0.2));
          border: 1px solid rgba(160, 170, 200, 0.35);
          color: var(--text);
          border-radius: 12px;
        }
        .stTextInput input, .stTextArea textarea {
          background: rgba(10, 14, 26, 0.7);
          border: 1px solid rgba(160, 170, 200, 0.25);
          border-radius: 12px;
          color: var(--text);
        }
        </style>
        """,
        unsafe_allow_html=True,
    )


def get_client() -> GenAIClient:
    if "engine_client" not in st.session_state:
        try:
            config = load_config()
        except ConfigError as exc:
            logger.error("Settings could not be loaded: %s", exc)
            st.error(f"Settings could not be loaded: {exc}")
            st.stop()
        set_package_level(config.log_level)
        logger.info("Engine configured: %s", config.to_dict())
        st.session_state.engine_client = GenAIClient(config)
    return st.session_state.engine_client


def run_engine_call(label: str, fn: Callable, *args):
    """Run one service call behind a spinner; failures become an inline error and ``None``."""
    with st.spinner(label):
        try:
            return fn(*args)
        except MaterialEngineError as exc:
            logger.warning("%s failed: %s", getattr(fn, "__name__", "call"), exc)
            if isinstance(exc, (MalformedResponse, SchemaMismatch)):
                logger.debug("Raw model output: %.2000s", exc.raw_text)
            st.error(FAILED_MESSAGE)
            return None


def chips_html(labels: List[str], warn: bool = False) -> str:
    cls = "chip warn" if warn else "chip"
    return "".join([f'<span class="{cls}">{html.escape(str(label))}</span>' for label in labels])


def image_bytes(data_uri: str) -> Optional[bytes]:
    if not data_uri or "," not in data_uri:
        return None
    try:
        return base64.b64decode(data_uri.split(",", 1)[1])
    except ValueError:
        logger.warning("Generated image was not valid base64")
        return None


def dark_layout(fig: go.Figure, title: str = "") -> None:
    fig.update_layout(
        title={"text": title, "font": {"color": "#e0e0e0"}},
        paper_bgcolor="rgba(0,0,0,0)",
        plot_bgcolor="rgba(0,0,0,0)",
        font={"color": "#d7deef"},
        margin={"l": 20, "r": 20, "t": 55 if title else 20, "b": 25},
    )


def render_news_items(items: List[NewsItem]) -> None:
    if not items:
        st.caption("No sources returned.")
        return
    rows = []
    for item in items:
        title = html.escape(item.title or "Untitled")
        link = f'<a href="{html.escape(item.url)}" target="_blank">{title}</a>' if item.url and item.url != "#" else title
        meta = " · ".join([x for x in [item.source, item.date] if x])
        snippet = html.escape(item.snippet)
        rows.append(
            f'<div class="news-item">{link}<div class="muted">{html.escape(meta)}</div>'
            f'<div class="muted">{snippet}</div></div>'
        )
    st.markdown("".join(rows), unsafe_allow_html=True)


def render_analysis(result: AnalysisResult) -> None:
    quad = QUADRANTS.get(result.quadrant)
    st.markdown(
        f'<div class="panel-card"><h4>{html.escape(quad.title if quad else result.quadrant)}</h4>'
        f'<div class="muted">{html.escape(result.summary)}</div></div>',
        unsafe_allow_html=True,
    )
    pillars = st.columns(3)
    for col, (label, body) in zip(
        pillars,
        [
            ("Advanced Compounding", result.engineering_logic.compounding),
            ("Application Engineering", result.engineering_logic.processing),
            ("System Intelligence", result.engineering_logic.system),
        ],
    ):
        with col:
            st.markdown(f"**{label}**")
            st.write(body)
    if result.constraints:
        st.markdown("**Constraints**")
        st.markdown("\n".join([f"- {c}" for c in result.constraints]))


def render_visualization(viz: VisualizationData) -> None:
    if not viz.data:
        st.info("No visualization data returned.")
        return
    try:
        fig = go.Figure(data=viz.data, layout=viz.layout)
    except ValueError as exc:
        logger.warning("Model returned an unusable plotly figure: %s", exc)
        st.warning("The structure model could not be rendered.")
        return
    dark_layout(fig)
    fig.update_layout(height=520)
    st.plotly_chart(fig, use_container_width=True, config={"displayModeBar": False})
    if viz.explanation:
        st.caption(viz.explanation)


def render_lca(material: str, lca: LCAData) -> None:
    metric_cols = st.columns(3)
    metric_cols[0].metric("Carbon footprint", f"{lca.carbon_footprint:.2f} kg CO2e/kg")
    metric_cols[1].metric("Water usage", f"{lca.water_usage:.0f} L/kg")
    metric_cols[2].metric("Circularity", f"{lca.circularity_score:.1f} / 10")
    labels = [ellipsize(material, 28)] + [c.material for c in lca.comparison]
    values = [lca.carbon_footprint] + [c.carbon for c in lca.comparison]
    fig = go.Figure(
        data=[
            go.Bar(
                x=labels,
                y=values,
                marker={"color": ["#9fe7d3"] + ["#3a4a72"] * len(lca.comparison)},
            )
        ]
    )
    dark_layout(fig, "Cradle-to-gate carbon (kg CO2e/kg)")
    fig.update_layout(
        xaxis={"gridcolor": "rgba(255,255,255,0.08)"},
        yaxis={"gridcolor": "rgba(255,255,255,0.10)"},
    )
    st.plotly_chart(fig, use_container_width=True, config={"displayModeBar": False})
    if lca.verdict:
        st.write(lca.verdict)


def render_recipe(recipe: MaterialRecipe, image: str = "") -> None:
    left, right = st.columns([3, 2])
    with left:
        st.markdown(f"### {recipe.name}")
        st.markdown(
            chips_html([recipe.quadrant.replace("_", "-"), f"Sustainability {recipe.sustainability_score:.0f}/100"]),
            unsafe_allow_html=True,
        )
        st.write(recipe.description)
        if recipe.ingredients:
            st.markdown("**Formulation**")
            st.table([{"Ingredient": i.name, "Share": i.percentage, "Function": i.function} for i in recipe.ingredients])
        if recipe.properties:
            st.markdown("**Properties**")
            st.table([{"Property": p.name, "Value": p.value} for p in recipe.properties])
    with right:
        img = image_bytes(image)
        if img:
            st.image(img, use_container_width=True)
        else:
            st.caption("No render available.")
        if recipe.applications:
            st.markdown("**Applications**")
            st.markdown(chips_html(recipe.applications), unsafe_allow_html=True)
        if recipe.processing_steps:
            st.markdown("**Processing**")
            st.markdown("\n".join([f"{i}. {s}" for i, s in enumerate(recipe.processing_steps, start=1)]))
        for var in recipe.variations:
            with st.expander(var.name):
                st.write(var.description)


def render_recipe_downloads(recipe: MaterialRecipe, pdf_bytes: bytes, key: str) -> None:
    cols = st.columns(3)
    cols[0].download_button(
        "Profile JSON",
        data=export_json(recipe),
        file_name=export_filename(recipe.name, "_profile.json"),
        mime="application/json",
        use_container_width=True,
        key=f"dl_json_{key}",
    )
    cols[1].download_button(
        "CAD .mat",
        data=export_mat(recipe),
        file_name=export_filename(recipe.name, "_props.mat"),
        mime="application/json",
        use_container_width=True,
        key=f"dl_mat_{key}",
    )
    if pdf_bytes:
        cols[2].download_button(
            "Spec Sheet PDF",
            data=pdf_bytes,
            file_name=export_filename(recipe.name, "_spec_sheet.pdf"),
            mime="application/pdf",
            use_container_width=True,
            key=f"dl_pdf_{key}",
        )
    else:
        cols[2].button("Spec Sheet PDF", disabled=True, use_container_width=True, key=f"dl_pdf_off_{key}")


def build_globe(companies, focus=None) -> go.Figure:
    fig = go.Figure()
    for quadrant_id, color in QUADRANT_COLORS.items():
        group = [c for c in companies if c.quadrant == quadrant_id]
        if not group:
            continue
        fig.add_trace(
            go.Scattergeo(
                lat=[c.lat for c in group],
                lon=[c.lon for c in group],
                text=[f"{c.name}<br>{c.product}<br>{c.location}" for c in group],
                hoverinfo="text",
                mode="markers",
                name=QUADRANTS[quadrant_id].title,
                marker={"size": 8, "color": color, "line": {"width": 0.5, "color": "#0b1020"}},
            )
        )
    rotation = {"lon": focus.lon, "lat": focus.lat} if focus else {"lon": -30, "lat": 25}
    fig.update_geos(
        projection_type="orthographic",
        projection_rotation=rotation,
        showland=True,
        landcolor="#172347",
        showocean=True,
        oceancolor="#0b1020",
        showcountries=True,
        countrycolor="#26345e",
        coastlinecolor="#26345e",
        bgcolor="rgba(0,0,0,0)",
    )
    dark_layout(fig)
    fig.update_layout(height=520, legend={"orientation": "h", "y": -0.05})
    return fig


def create_chat_entry(title: str = "New Session") -> Dict[str, object]:
    now = now_iso()
    return {
        "id": str(uuid.uuid4()),
        "title": title,
        "created_at": now,
        "updated_at": now,
        "session": ChatSession(get_client()),
    }


def ensure_chat_state() -> None:
    if not st.session_state.chat_entries:
        entry = create_chat_entry()
        st.session_state.chat_entries = [entry]
        st.session_state.active_chat_id = entry["id"]
    ids = [e["id"] for e in st.session_state.chat_entries]
    if st.session_state.get("active_chat_id") not in ids:
        st.session_state.active_chat_id = ids[0]


def get_active_chat_entry() -> Dict[str, object]:
    sid = st.session_state.get("active_chat_id", "")
    for entry in st.session_state.chat_entries:
        if entry["id"] == sid:
            return entry
    return st.session_state.chat_entries[0]


def apply_pending_inputs() -> None:
    # Cross-tab hand-offs have to land before the target widget is created.
    for pending_key, widget_key in [
        ("pending_analyzer_input", "analyzer_input"),
        ("pending_factory_material", "factory_material_input"),
    ]:
        value = st.session_state.pop(pending_key, None)
        if value is not None:
            st.session_state[widget_key] = value


st.set_page_config(page_title="Material Strategy Engine", layout="wide")
inject_theme()

for key, default in [
    ("status_bubble", None),
    ("selected_quadrant", "BIO_BIO"),
    ("quadrant_qa", {}),
    ("quadrant_families", {}),
    ("quadrant_intel", {}),
    ("analysis", None),
    ("analysis_material", ""),
    ("visualization", None),
    ("lca", None),
    ("lab_recipe", None),
    ("lab_image", ""),
    ("lab_pdf", b""),
    ("library", MaterialLibrary()),
    ("factory_process", ""),
    ("factory_constraints", []),
    ("manufacturers", []),
    ("patents", []),
    ("patent_doc", None),
    ("patent_doc_hash", ""),
    ("patent_analysis", None),
    ("patent_chat", None),
    ("intel_company", ""),
    ("company_news", []),
    ("company_news_failed", False),
    ("briefing", None),
    ("chat_entries", []),
    ("active_chat_id", ""),
]:
    if key not in st.session_state:
        st.session_state[key] = default

client = get_client()
apply_pending_inputs()
ensure_chat_state()

st.markdown(
    '<div class="hero"><h1>Material Strategy Engine</h1>'
    "<p>Sustainable materials intelligence: ecosystem map, analysis, invention, manufacturing and market signals.</p></div>",
    unsafe_allow_html=True,
)
render_status_bubble()
if not client.config.api_key:
    st.warning("No API key configured. Set GEMINI_API_KEY (or API_KEY) to enable the engine.")

with st.sidebar:
    st.markdown("### STRATEGY SESSIONS")
    if st.button("＋ New Session", use_container_width=True, key="new_chat_session_btn", type="secondary"):
        entry = create_chat_entry()
        st.session_state.chat_entries.insert(0, entry)
        st.session_state.active_chat_id = entry["id"]
        do_rerun()
    for entry in list(st.session_state.chat_entries):
        sid = entry["id"]
        full_title = str(entry.get("title", "New Session")).strip() or "New Session"
        updated = str(entry.get("updated_at", "")).replace("T", " ")[:19]
        active = sid == st.session_state.get("active_chat_id")
        row = st.columns([8.5, 1.3], gap="small")
        with row[0]:
            if st.button(
                ellipsize(full_title, max_chars=28),
                key=f"open_sess_{sid}",
                use_container_width=True,
                help=f"{full_title}\n{updated}" if updated else full_title,
                type="primary" if active else "secondary",
            ):
                st.session_state.active_chat_id = sid
                do_rerun()
        with row[1]:
            if st.button("✕", key=f"del_sess_{sid}", use_container_width=True, help=f"Delete: {full_title}", type="secondary"):
                entry["session"].close()
                st.session_state.chat_entries = [e for e in st.session_state.chat_entries if e["id"] != sid]
                ensure_chat_state()
                do_rerun()
    st.markdown("---")
    st.caption(f"Library: {len(st.session_state.library)} saved materials")
    st.caption(f"Reasoning model: {client.config.reasoning_model}")

(
    tab_map,
    tab_analyzer,
    tab_lab,
    tab_library,
    tab_factory,
    tab_patents,
    tab_intel,
    tab_chat,
) = st.tabs(
    [
        "🧭 Ecosystem Map",
        "🔬 Analyzer",
        "🧪 Innovation Lab",
        "📚 Library",
        "🏭 Factory",
        "📜 Patent Hub",
        "🌍 Market Intel",
        "💬 Strategy Chat",
    ]
)

with tab_map:
    quad_cols = st.columns(4)
    for col, (qid, info) in zip(quad_cols, QUADRANTS.items()):
        with col:
            active_cls = " active" if qid == st.session_state.selected_quadrant else ""
            st.markdown(
                f'<div class="quad-card{active_cls}" style="border-top: 3px solid {QUADRANT_COLORS[qid]}">'
                f'<div class="quad-title">{html.escape(info.title)}</div>'
                f'<div class="quad-tag">{html.escape(info.tagline)}</div>'
                f'<div class="muted" style="margin-top:8px">{html.escape(info.core_logic)} · {info.cost} cost</div>'
                "</div>",
                unsafe_allow_html=True,
            )
            if st.button("Explore", key=f"quad_pick_{qid}", use_container_width=True):
                st.session_state.selected_quadrant = qid
                do_rerun()

    qid = st.session_state.selected_quadrant
    info = QUADRANTS[qid]
    st.markdown(f"### {info.title}: {info.tagline}")
    st.caption(info.definition)
    sub_overview, sub_engineering, sub_players, sub_intel, sub_ask = st.tabs(
        ["Overview", "Engineering", "Players & Applications", "Live Intel", "Ask the Engine"]
    )
    with sub_overview:
        stat_cols = st.columns(3)
        for col, (label, value) in zip(
            stat_cols,
            [("Readiness", info.readiness), ("Sustainability", info.sustainability), ("Scalability", info.scalability)],
        ):
            with col:
                st.markdown(f"**{label}** {value}%")
                st.progress(value / 100.0)
        fam_cols = st.columns(len(info.families))
        for col, fam in zip(fam_cols, info.families):
            with col:
                st.markdown(
                    f'<div class="panel-card"><h4>{html.escape(fam.name)}</h4>'
                    f'<div class="muted">{html.escape(fam.description)}</div>'
                    f"<div style='margin-top:6px'>{chips_html(fam.common_grades)}</div></div>",
                    unsafe_allow_html=True,
                )
        if st.button("Discover emerging polymers", key=f"discover_{qid}"):
            families = run_engine_call("Scanning for emerging materials...", discover_emerging_polymers, client, info.title)
            if families is not None:
                st.session_state.quadrant_families[qid] = families
                set_status_bubble(f"Found {len(families)} emerging families.", "success")
        for fam in st.session_state.quadrant_families.get(qid, []):
            readiness = f" · readiness {fam.readiness:.0f}%" if fam.readiness is not None else ""
            with st.expander(f"✨ {fam.name}{readiness}"):
                st.write(fam.description)
                if fam.common_grades:
                    st.markdown(chips_html(fam.common_grades), unsafe_allow_html=True)
                if fam.innovators:
                    st.caption("Innovators: " + ", ".join(fam.innovators))
    with sub_engineering:
        eng_left, eng_right = st.columns(2)
        with eng_left:
            st.markdown("**Challenges**")
            st.markdown("\n".join([f"- {c}" for c in info.challenges]))
        with eng_right:
            st.markdown("**Processing notes**")
            st.markdown("\n".join([f"- {p}" for p in info.processing]))
    with sub_players:
        st.markdown(chips_html(info.applications), unsafe_allow_html=True)
        st.table([{"Company": p.name, "Technology": p.tech} for p in info.players])
    with sub_intel:
        if st.button("Fetch live intel", key=f"intel_{qid}"):
            items = run_engine_call(
                "Searching the web...",
                search_market_intel,
                client,
                f"{info.title} material trends and news 2024",
            )
            if items is not None:
                st.session_state.quadrant_intel[qid] = items
        render_news_items(st.session_state.quadrant_intel.get(qid, []))
    with sub_ask:
        for question, answer in st.session_state.quadrant_qa.get(qid, []):
            with st.chat_message("user"):
                st.write(question)
            with st.chat_message("assistant"):
                st.write(answer)
        with st.form(key=f"quad_ask_form_{qid}", clear_on_submit=True):
            question = st.text_input("Question", placeholder=f"What limits {info.families[0].name} adoption at scale?")
            submitted = st.form_submit_button("Ask")
        if submitted and question.strip():
            answer = run_engine_call("Reasoning...", ask_quadrant_question, client, info.title, question.strip())
            if answer is not None:
                st.session_state.quadrant_qa.setdefault(qid, []).append((question.strip(), answer))
                do_rerun()

with tab_analyzer:
    material_query = st.text_input(
        "Material or product",
        key="analyzer_input",
        placeholder="e.g. PHA-based injection molded cutlery",
    )
    action_cols = st.columns(3)
    if action_cols[0].button("Analyze", use_container_width=True, key="analyze_btn"):
        if not material_query.strip():
            st.warning("Describe a material first.")
        else:
            result = run_engine_call("Running three-pillar analysis...", analyze_material, client, material_query.strip())
            if result is not None:
                st.session_state.analysis = result
                st.session_state.analysis_material = material_query.strip()
                st.session_state.visualization = None
                st.session_state.lca = None
                set_status_bubble("Analysis complete.", "success")
    analysis = st.session_state.analysis
    analysis_material = st.session_state.analysis_material
    if analysis is not None:
        if action_cols[1].button("Structure model", use_container_width=True, key="viz_btn"):
            viz = run_engine_call("Building 3D structure...", generate_visualization, client, analysis_material)
            if viz is not None:
                st.session_state.visualization = viz
        if action_cols[2].button("Eco impact", use_container_width=True, key="lca_btn"):
            lca = run_engine_call("Estimating life cycle impact...", estimate_lca, client, analysis_material)
            if lca is not None:
                st.session_state.lca = lca
        st.markdown(f"#### {analysis_material}")
        render_analysis(analysis)
        if st.button("Send to Factory", key="analysis_to_factory"):
            st.session_state.pending_factory_material = analysis_material
            st.session_state.factory_constraints = list(analysis.constraints)
            set_status_bubble("Constraints sent to the Factory tab.", "success")
            do_rerun()
        if st.session_state.visualization is not None:
            st.markdown("#### Structure model")
            render_visualization(st.session_state.visualization)
        if st.session_state.lca is not None:
            st.markdown("#### Eco impact")
            render_lca(analysis_material, st.session_state.lca)
    else:
        st.info("Analyze a material to see its quadrant, engineering logic and constraints.")

with tab_lab:
    problem = st.text_area(
        "Problem statement",
        key="lab_problem",
        height=100,
        placeholder="A home-compostable coffee capsule that survives 95°C brewing pressure",
    )
    if st.button("Invent material", key="lab_generate_btn"):
        if not problem.strip():
            st.warning("Describe the problem first.")
        else:
            recipe = run_engine_call("Inventing a material...", generate_material_recipe, client, problem.strip())
            if recipe is not None:
                st.session_state.lab_recipe = recipe
                st.session_state.lab_image = ""
                st.session_state.lab_pdf = render_spec_sheet_pdf(recipe)
                image = run_engine_call(
                    "Rendering a concept image...",
                    generate_material_image,
                    client,
                    f"{recipe.name}: {recipe.description}",
                )
                st.session_state.lab_image = image or ""
                set_status_bubble(f"Invented {recipe.name}.", "success")
    recipe = st.session_state.lab_recipe
    if recipe is not None:
        render_recipe(recipe, st.session_state.lab_image)
        render_recipe_downloads(recipe, st.session_state.lab_pdf, key="lab")
        save_cols = st.columns([1, 1, 2])
        category = save_cols[2].selectbox("Category", ["Custom", "Packaging", "Textile", "Automotive", "Consumer"], key="lab_category")
        if save_cols[0].button("Save to library", use_container_width=True, key="lab_save_btn"):
            st.session_state.library.add(new_library_item(recipe, image=st.session_state.lab_image, category=category))
            set_status_bubble(f"Saved {recipe.name} to the library.", "success")
            do_rerun()
        if save_cols[1].button("Analyze this", use_container_width=True, key="lab_analyze_btn"):
            st.session_state.pending_analyzer_input = recipe.name
            set_status_bubble("Sent to the Analyzer tab.", "success")
            do_rerun()

with tab_library:
    library: MaterialLibrary = st.session_state.library
    lib_query = st.text_input("Search library", key="library_search", placeholder="Filter by name")
    items = library.search(lib_query)
    if not len(library):
        st.info("Materials saved from the Innovation Lab appear here.")
    elif not items:
        st.caption("No saved material matches that name.")
    for item in items:
        created = item.created_at.strftime("%Y-%m-%d %H:%M")
        with st.expander(f"{item.name} · {item.category} · {created}"):
            img = image_bytes(item.image)
            if img:
                st.image(img, width=320)
            st.write(item.recipe.description)
            st.markdown(chips_html(item.recipe.applications), unsafe_allow_html=True)
            lib_cols = st.columns(3)
            lib_cols[0].download_button(
                "Export JSON",
                data=export_json(item),
                file_name=export_filename(item.name, ".json"),
                mime="application/json",
                use_container_width=True,
                key=f"lib_json_{item.id}",
            )
            lib_cols[1].download_button(
                "CAD .mat",
                data=export_mat(item.recipe),
                file_name=export_filename(item.name, "_props.mat"),
                mime="application/json",
                use_container_width=True,
                key=f"lib_mat_{item.id}",
            )
            if lib_cols[2].button("Remove", use_container_width=True, key=f"lib_rm_{item.id}"):
                library.remove(item.id)
                set_status_bubble(f"Removed {item.name}.", "warning")
                do_rerun()

with tab_factory:
    flagged = flag_process_constraints(st.session_state.factory_constraints)
    if st.session_state.factory_constraints:
        st.markdown(chips_html(st.session_state.factory_constraints, warn=True), unsafe_allow_html=True)
    proc_cols = st.columns(4)
    for idx, proc in enumerate(PROCESSES):
        with proc_cols[idx % 4]:
            warn = "⚠️ " if proc.id in flagged else ""
            st.markdown(
                f'<div class="panel-card"><h4>{warn}{html.escape(proc.name)}</h4>'
                f'<div class="muted">{html.escape(proc.description)}</div></div>',
                unsafe_allow_html=True,
            )
            if st.button("Open line", key=f"proc_{proc.id}", use_container_width=True):
                st.session_state.factory_process = proc.id
                st.session_state.manufacturers = []
                do_rerun()
    selected = get_process(st.session_state.factory_process)
    if selected is not None:
        st.markdown(f"### {selected.name}")
        if selected.id in flagged:
            st.warning("The analyzed material has constraints that hit this process's main failure mode.")
        st.markdown(chips_html(selected.outputs), unsafe_allow_html=True)
        st.write(selected.run_logic)
        st.table(
            [
                {
                    "Parameter": p.name,
                    "Unit": p.unit,
                    "Standard": p.standard_value,
                    "Bio": p.bio_value,
                    "Insight": p.insight,
                }
                for p in selected.parameters
            ]
        )
        factory_material = st.text_input("Material", key="factory_material_input", placeholder="PLA / PHA blend")
        if st.button("Find manufacturers", key="find_mfr_btn"):
            found = run_engine_call(
                "Searching for manufacturers...",
                find_manufacturers,
                client,
                selected.name,
                factory_material.strip() or "sustainable bioplastics",
            )
            if found is not None:
                st.session_state.manufacturers = found
                if not found:
                    st.caption("No manufacturers found.")
        for mfr in st.session_state.manufacturers:
            site = f' · <a href="{html.escape(mfr.website)}" target="_blank">website</a>' if mfr.website else ""
            st.markdown(
                f'<div class="panel-card"><h4>{html.escape(mfr.name)}</h4>'
                f'<div class="muted">{html.escape(mfr.product)} · {html.escape(mfr.location)}{site}</div>'
                f"<div>{html.escape(mfr.description)}</div></div>",
                unsafe_allow_html=True,
            )

with tab_patents:
    search_col, doc_col = st.columns([2, 3])
    with search_col:
        st.markdown("#### Patent search")
        company = st.text_input("Assignee", key="patent_company", placeholder="NatureWorks")
        if st.button("Search patents", key="patent_search_btn"):
            if not company.strip():
                st.warning("Enter a company first.")
            else:
                found = run_engine_call("Searching patents...", search_patents, client, company.strip())
                if found is not None:
                    st.session_state.patents = found
        for pat in st.session_state.patents:
            label = f"{pat.number} · {pat.title}" if pat.number else pat.title
            with st.expander(ellipsize(label, 80)):
                st.caption(" · ".join([x for x in [pat.assignee, pat.date] if x]))
                st.write(pat.snippet)
                if pat.url and pat.url != "#":
                    st.markdown(f"[Open patent]({pat.url})")
    with doc_col:
        st.markdown("#### Patent deconstruction")
        uploaded = st.file_uploader("Upload patent PDF", type=["pdf"], key="patent_pdf_uploader")
        if uploaded:
            pdf_bytes = uploaded.getvalue()
            pdf_hash = hashlib.md5(pdf_bytes).hexdigest()
            if st.session_state.patent_doc_hash != pdf_hash:
                try:
                    doc = load_patent_document(pdf_bytes, uploaded.name)
                except MaterialEngineError as exc:
                    logger.warning("Rejected upload %s: %s", uploaded.name, exc)
                    st.error(f"Failed to read PDF: {exc}")
                else:
                    if st.session_state.patent_chat is not None:
                        st.session_state.patent_chat.close()
                    st.session_state.patent_doc = doc
                    st.session_state.patent_doc_hash = pdf_hash
                    st.session_state.patent_analysis = None
                    st.session_state.patent_chat = PatentChatSession(client, doc.base64_data, mime_type=doc.mime_type)
        doc = st.session_state.patent_doc
        if doc is not None:
            st.caption(f"{doc.name} · {doc.page_count} pages")
            with st.expander("Text preview"):
                st.write(doc.preview_text or "No extractable text.")
            if st.button("Deconstruct patent", key="patent_analyze_btn"):
                result = run_engine_call("Reading the patent...", analyze_patent_pdf, client, doc.base64_data, doc.mime_type)
                if result is not None:
                    st.session_state.patent_analysis = result
            if st.session_state.patent_analysis is not None:
                render_analysis(st.session_state.patent_analysis)
            patent_chat = st.session_state.patent_chat
            if patent_chat is not None:
                st.markdown("#### Ask the patent")
                for msg in patent_chat.messages:
                    with st.chat_message("user" if msg.role == "user" else "assistant"):
                        st.write(msg.content)
                with st.form(key="patent_chat_form", clear_on_submit=True):
                    patent_q = st.text_input("Question", placeholder="What is the key claim?")
                    asked = st.form_submit_button("Send")
                if asked and patent_q.strip():
                    reply = run_engine_call("Consulting the patent...", patent_chat.send, patent_q.strip())
                    if reply is not None:
                        do_rerun()

with tab_intel:
    globe_col, news_col = st.columns([3, 2])
    with globe_col:
        filter_cols = st.columns(2)
        quadrant_filter = filter_cols[0].selectbox(
            "Quadrant",
            ["ALL"] + list(QUADRANTS.keys()),
            format_func=lambda q: "All quadrants" if q == "ALL" else QUADRANTS[q].title,
            key="intel_quadrant_filter",
        )
        company_search = filter_cols[1].text_input("Search", key="intel_company_search", placeholder="Company or product")
        companies = filter_companies(quadrant_filter, company_search)
        focus = next((c for c in companies if c.id == st.session_state.intel_company), None)
        st.plotly_chart(build_globe(companies, focus), use_container_width=True, config={"displayModeBar": False})
        st.caption(f"{len(companies)} innovators shown")
        picked = st.selectbox(
            "Company",
            [""] + [c.id for c in companies],
            format_func=lambda cid: "Select a company" if not cid else next(c.name for c in companies if c.id == cid),
            key="intel_company_pick",
        )
        if picked and picked != st.session_state.intel_company:
            node = next(c for c in companies if c.id == picked)
            st.session_state.intel_company = picked
            news = run_engine_call(
                f"Scanning news for {node.name}...",
                search_market_intel,
                client,
                f"Latest business news and partnerships for {node.name} {node.product} sustainable materials 2024 2025",
            )
            st.session_state.company_news = news or []
            # kept across the rerun so the failure stays on screen
            st.session_state.company_news_failed = news is None
            do_rerun()
    with news_col:
        node = next((c for c in filter_companies() if c.id == st.session_state.intel_company), None)
        if node is not None:
            st.markdown(
                f'<div class="panel-card"><h4>{html.escape(node.name)}</h4>'
                f'<div class="muted">{html.escape(node.location)} · {html.escape(node.product)}</div>'
                f"<div>{html.escape(node.strategy)}</div></div>",
                unsafe_allow_html=True,
            )
            if st.session_state.company_news_failed:
                st.error(FAILED_MESSAGE)
            else:
                render_news_items(st.session_state.company_news)
        st.markdown("#### Daily briefing")
        if st.button("Generate today's briefing", key="briefing_btn"):
            briefing = run_engine_call("Compiling the briefing...", get_daily_intel_briefing, client)
            if briefing is not None:
                st.session_state.briefing = briefing
        briefing = st.session_state.briefing
        if briefing is not None:
            st.caption(briefing.date)
            st.write(briefing.summary)
            for label, section in [
                ("Commercial moves", briefing.commercial_moves),
                ("Research breakthroughs", briefing.research_breakthroughs),
                ("Policy updates", briefing.policy_updates),
            ]:
                with st.expander(f"{label} ({len(section)})", expanded=bool(section)):
                    render_news_items(section)

with tab_chat:
    entry = get_active_chat_entry()
    session: ChatSession = entry["session"]
    st.markdown(f"### Strategy Chat · `{entry['title']}`")
    if st.button("Clear Current Session", key="chat_clear_btn"):
        session.close()
        entry["session"] = ChatSession(client)
        entry["updated_at"] = now_iso()
        do_rerun()
    for msg in session.messages:
        with st.chat_message("user" if msg.role == "user" else "assistant"):
            st.write(msg.content)
    user_prompt = st.chat_input("Ask the Material Strategy Engine")
    if user_prompt:
        reply = run_engine_call("Thinking...", session.send, user_prompt)
        if reply is not None:
            entry["updated_at"] = now_iso()
            if entry.get("title", "New Session") == "New Session":
                entry["title"] = ellipsize(user_prompt.strip(), 64) or "New Session"
            st.session_state.chat_entries.sort(key=lambda x: x.get("updated_at", ""), reverse=True)
            do_rerun()
