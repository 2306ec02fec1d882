import streamlit as st

from adapters import VoiceService, should_auto_submit
from models import ChatMessage
from pipelines import RetrievalPipeline

from .audio import speak, transcribe_new_recording
from .formatting import format_time
from .state import ChatHistory, answer_question, get_or_create


def _render_sources(message: ChatMessage) -> None:
    if not message.sources:
        return
    st.caption("Sources:")
    for chunk in message.sources:
        st.caption(f"📄 Chunk {chunk.chunk_index + 1}")


def _render_message(message: ChatMessage, voice: VoiceService) -> None:
    role = "user" if message.is_user else "assistant"
    with st.chat_message(role):
        st.markdown(message.content)
        _render_sources(message)
        st.caption(format_time(message.timestamp))
        if not message.is_user and voice.is_supported:
            if st.button("🔊", key=f"speak-{message.id}", help="Read aloud"):
                speak(voice, message.content)


def _submit(question: str, retrieval: RetrievalPipeline, history: ChatHistory) -> None:
    with st.spinner("Thinking..."):
        reply, error = answer_question(question, retrieval, history)
    if error:
        st.toast(error, icon="❌")
    if st.session_state.get("speak_replies"):
        st.session_state["pending_speech"] = reply.content
    st.rerun()


def render_chat(retrieval: RetrievalPipeline, voice: VoiceService) -> None:
    """Chat pane: history, text input and voice input."""
    history: ChatHistory = get_or_create(st.session_state, "chat_history", ChatHistory)

    st.title("AI Assistant Chat")
    st.caption("Ask questions about your uploaded documents")

    for message in history.messages:
        _render_message(message, voice)

    pending_speech = st.session_state.pop("pending_speech", None)
    if pending_speech and voice.is_supported:
        speak(voice, pending_speech)

    if voice.is_supported:
        st.toggle("Speak replies", key="speak_replies")
        transcript = transcribe_new_recording(voice, key="chat_voice")
        if transcript and should_auto_submit(transcript):
            _submit(transcript, retrieval, history)
        elif transcript:
            st.toast(f"Heard: {transcript}")

    question = st.chat_input("Ask a question about your documents...")
    if question and question.strip():
        _submit(question, retrieval, history)
