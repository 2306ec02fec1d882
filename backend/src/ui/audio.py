"""Recorder and playback widgets shared by the landing page and the chat."""

import hashlib
import logging
from typing import Optional

import streamlit as st

from adapters import VoiceService
from adapters.mock import FALLBACK_ERRORS

logger = logging.getLogger(__name__)


def transcribe_new_recording(voice: VoiceService, key: str) -> Optional[str]:
    """Transcribe the recorder's audio once; later reruns return None."""
    recording = st.audio_input("Voice input", key=key)
    if recording is None:
        return None

    audio = recording.getvalue()
    digest = hashlib.md5(audio).hexdigest()
    if st.session_state.get(f"{key}_digest") == digest:
        return None
    st.session_state[f"{key}_digest"] = digest

    try:
        return voice.transcribe(audio, filename=recording.name or "speech.wav")
    except FALLBACK_ERRORS as e:
        logger.error(f"Voice recognition failed: {e}")
        st.toast(f"Voice recognition error: {e}", icon="❌")
        return None


def speak(voice: VoiceService, text: str) -> None:
    try:
        st.audio(voice.speak(text), format="audio/mp3", autoplay=True)
    except FALLBACK_ERRORS as e:
        logger.error(f"Speech synthesis failed: {e}")
