import logging

import streamlit as st

from models import Document
from pipelines import IngestionPipeline
from stores import BaseVectorStore, VectorStoreError

from .formatting import format_date, format_file_size
from .state import UploadTracker, get_or_create, run_upload

logger = logging.getLogger(__name__)

_STATUS_ICONS = {"processing": "⏳", "success": "✅", "error": "❌"}


def _load_documents(store: BaseVectorStore) -> list[Document]:
    """Document list, reloaded only after it has been invalidated."""
    if st.session_state.get("documents") is None:
        try:
            st.session_state["documents"] = store.get_all_documents()
        except VectorStoreError as e:
            logger.error(f"Error loading documents: {e}")
            return []
    return st.session_state["documents"]


def _invalidate_documents() -> None:
    st.session_state["documents"] = None


def _process_upload(ingestion: IngestionPipeline, tracker: UploadTracker, uploaded_file) -> None:
    file_id = uploaded_file.file_id
    is_valid, error = ingestion.validate(uploaded_file.name, uploaded_file.size)
    if not is_valid:
        tracker.dismissed.add(file_id)
        st.toast(f"{uploaded_file.name}: {error}", icon="❌")
        return

    with st.spinner(f"Processing {uploaded_file.name}..."):
        error = run_upload(
            tracker,
            file_id,
            uploaded_file.name,
            uploaded_file.size,
            lambda: ingestion.ingest_file(
                uploaded_file.name, uploaded_file.getvalue(), uploaded_file.type
            ),
        )
    if error:
        st.toast(error, icon="❌")
        return

    st.toast(f"Successfully uploaded: {uploaded_file.name}", icon="✅")
    _invalidate_documents()


def _render_uploads(tracker: UploadTracker) -> None:
    for upload in tracker.items:
        name_col, action_col = st.columns([5, 1])
        with name_col:
            st.markdown(f"{_STATUS_ICONS[upload.status]} **{upload.filename}**")
            st.caption(upload.error or format_file_size(upload.size, decimals=2))
        with action_col:
            if st.button("✕", key=f"remove-upload-{upload.file_id}"):
                tracker.remove(upload.file_id)
                st.rerun()


def _render_document(store: BaseVectorStore, document: Document) -> None:
    name_col, action_col = st.columns([5, 1])
    with name_col:
        st.markdown(f"📄 **{document.filename}**")
        st.caption(f"{format_file_size(document.size)} · {format_date(document.uploaded_at)}")
    with action_col:
        if st.button("🗑", key=f"delete-{document.id}"):
            st.session_state["pending_delete"] = document.id
            st.rerun()

    if st.session_state.get("pending_delete") != document.id:
        return

    st.warning("Are you sure you want to delete this document?")
    confirm_col, cancel_col = st.columns(2)
    if confirm_col.button("Delete", key=f"confirm-delete-{document.id}", type="primary"):
        st.session_state["pending_delete"] = None
        try:
            store.delete_document(document.id)
        except VectorStoreError as e:
            st.toast(str(e), icon="❌")
        _invalidate_documents()
        st.rerun()
    if cancel_col.button("Cancel", key=f"cancel-delete-{document.id}"):
        st.session_state["pending_delete"] = None
        st.rerun()


def render_sidebar(ingestion: IngestionPipeline, store: BaseVectorStore) -> None:
    """Uploader, upload progress and the document list."""
    tracker: UploadTracker = get_or_create(st.session_state, "uploads", UploadTracker)
    max_mb = ingestion.max_file_size / (1024 * 1024)
    labels = ", ".join(ext.lstrip(".").upper() for ext in ingestion.supported_extensions)

    with st.sidebar:
        st.header("RAG Assistant")
        st.caption("Upload documents and chat")

        st.subheader("Upload Documents")
        uploaded_files = st.file_uploader(
            "Drop files here or click to browse",
            type=[ext.lstrip(".") for ext in ingestion.supported_extensions],
            accept_multiple_files=True,
            help=f"{labels} up to {max_mb:g}MB",
        )
        for uploaded_file in uploaded_files or []:
            if uploaded_file.file_id not in tracker:
                _process_upload(ingestion, tracker, uploaded_file)
        _render_uploads(tracker)

        documents = _load_documents(store)
        st.subheader(f"Documents ({len(documents)})")
        if not documents:
            st.caption("No documents uploaded")
        for document in documents:
            _render_document(store, document)
