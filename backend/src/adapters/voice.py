"""Speech-to-text and text-to-speech for voice input and spoken replies."""

import io
import logging
import os
from typing import Any, Optional

from openai import OpenAI

logger = logging.getLogger(__name__)

# Transcripts shorter than this are left for the user to edit instead of
# being submitted automatically.
AUTO_SUBMIT_MIN_CHARS = 5


class VoiceService:
    """OpenAI audio wrapper.

    Voice features are only available when an OpenAI key is configured;
    callers gate every voice control on ``is_supported``.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        language: str = "en",
        transcription_model: str = "whisper-1",
        speech_model: str = "tts-1",
        voice: str = "alloy",
        speed: float = 0.9,
        **kwargs: Any,
    ):
        self.api_key = api_key or os.environ.get("OPENAI_API_KEY")
        self.language = language
        self.transcription_model = transcription_model
        self.speech_model = speech_model
        self.voice = voice
        self.speed = speed
        self.client: Optional[OpenAI] = (
            OpenAI(api_key=self.api_key, base_url=kwargs.get("base_url"))
            if self.api_key
            else None
        )

    @property
    def is_supported(self) -> bool:
        return self.client is not None

    def transcribe(self, audio: bytes, filename: str = "speech.wav") -> str:
        """Convert recorded speech to text."""
        if self.client is None:
            raise RuntimeError("Voice input is not configured")

        buffer = io.BytesIO(audio)
        buffer.name = filename
        result = self.client.audio.transcriptions.create(
            model=self.transcription_model,
            file=buffer,
            language=self.language,
        )
        transcript = result.text.strip()
        logger.info(f"Transcribed {len(audio)} bytes of audio into {len(transcript)} chars")
        return transcript

    def speak(self, text: str) -> bytes:
        """Synthesize speech for ``text`` and return MP3 bytes."""
        if self.client is None:
            raise RuntimeError("Voice output is not configured")

        response = self.client.audio.speech.create(
            model=self.speech_model,
            voice=self.voice,
            input=text,
            speed=self.speed,
        )
        return response.read()


def should_auto_submit(transcript: str, is_final: bool = True) -> bool:
    """Whether a finished transcript is substantial enough to send as-is."""
    return is_final and len(transcript.strip()) > AUTO_SUBMIT_MIN_CHARS
