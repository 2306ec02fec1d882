from dataclasses import dataclass
from typing import Optional

import streamlit as st

from adapters import VoiceService

from .audio import speak, transcribe_new_recording
from .state import get_or_create

ASSISTANT_NAME = "Adam"
INTRO = (
    "Your 24/7 AI assistant for documents, chat, and voice. "
    "Ask anything, upload files, or use your voice!"
)
TRAITS = ["Medium beard", "Brown eyes", "Jet black suit"]


@dataclass
class Exchange:
    user: str
    reply: str


def greeting_reply(text: str) -> Optional[str]:
    """Canned reply of the landing-page bot; None for blank input."""
    if not text.strip():
        return None
    return f'Hello! You said: "{text}". How can I assist you further?'


def render_landing(voice: VoiceService) -> None:
    """Greeting bot shown before the assistant; no retrieval involved."""
    exchanges: list[Exchange] = get_or_create(st.session_state, "landing_exchanges", list)

    left, right = st.columns(2)

    with left:
        st.title(f"Welcome to {ASSISTANT_NAME}")
        st.write(INTRO)

        if voice.is_supported:
            transcript = transcribe_new_recording(voice, key="landing_voice")
            if transcript:
                st.session_state["landing_input"] = transcript
        else:
            st.caption("Speech recognition not supported")

        reply = None
        with st.form("landing_form", clear_on_submit=True):
            text = st.text_input("Type your question...", key="landing_input")
            if st.form_submit_button("Send"):
                reply = greeting_reply(text)
                if reply:
                    exchanges.append(Exchange(user=text, reply=reply))

        for exchange in exchanges:
            with st.chat_message("user"):
                st.markdown(exchange.user)
            with st.chat_message("assistant", avatar="🧔"):
                st.markdown(exchange.reply)

        if reply and voice.is_supported:
            speak(voice, reply)

    with right:
        st.markdown("# 🧔")
        st.subheader(ASSISTANT_NAME)
        st.caption("Your AI Assistant")
        st.write(" · ".join(TRAITS))

    if st.button(f"Enter {ASSISTANT_NAME} Assistant", type="primary"):
        st.session_state["show_landing"] = False
        st.rerun()
