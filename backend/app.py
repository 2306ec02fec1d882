import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent / "src"))

import streamlit as st

from config import find_config_path, get_config_value, load_config, validate_api_keys
from pipelines import (
    IngestionPipeline,
    RetrievalPipeline,
    create_embedder_from_config,
    create_vector_store_from_config,
    create_voice_service_from_config,
)
from ui import render_chat, render_landing, render_sidebar

st.set_page_config(page_title="RAG Assistant", page_icon="🤖", layout="wide")

CONFIG_PATH = find_config_path()
CONFIG = load_config(CONFIG_PATH)

logging.basicConfig(
    level=get_config_value(CONFIG, "logging.level", "INFO"),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@st.cache_resource
def get_components():
    """Build the pipelines once per server process.

    Both pipelines share one embedder and one vector store so uploads are
    immediately visible to chat.
    """
    embedder = create_embedder_from_config(CONFIG)
    store = create_vector_store_from_config(CONFIG, CONFIG_PATH, embedder)
    ingestion = IngestionPipeline.from_config(
        CONFIG, CONFIG_PATH, embedder=embedder, vector_store=store
    )
    retrieval = RetrievalPipeline.from_config(
        CONFIG, CONFIG_PATH, embedder=embedder, vector_store=store
    )
    voice = create_voice_service_from_config(CONFIG)
    logger.info(
        f"Components ready: embedder={embedder.model}, store={type(store).__name__}, "
        f"llm={'configured' if retrieval.llm else 'mock'}, voice={voice.is_supported}"
    )
    return ingestion, retrieval, store, voice


def warn_missing_keys() -> None:
    if st.session_state.get("keys_checked"):
        return
    st.session_state["keys_checked"] = True

    is_valid, missing = validate_api_keys(CONFIG)
    if not is_valid:
        logger.warning(f"Missing API keys: {', '.join(missing)}")
        st.toast(
            f"Missing API keys: {', '.join(missing)}. "
            "Some features will use mock responses.",
            icon="ℹ️",
        )


ingestion, retrieval, store, voice = get_components()
warn_missing_keys()

if "show_landing" not in st.session_state:
    st.session_state["show_landing"] = get_config_value(CONFIG, "app.show_landing", True)

if st.session_state["show_landing"]:
    render_landing(voice)
else:
    render_sidebar(ingestion, store)
    render_chat(retrieval, voice)
