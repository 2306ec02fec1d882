import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent.parent / "backend" / "src"))

from adapters.voice import VoiceService, should_auto_submit


class TestVoiceService:
    def test_unsupported_without_key(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        voice = VoiceService()

        assert voice.is_supported is False
        with pytest.raises(RuntimeError):
            voice.transcribe(b"audio")
        with pytest.raises(RuntimeError):
            voice.speak("hello")

    def test_transcribe_sends_named_buffer(self) -> None:
        voice = VoiceService(api_key="test-key", language="en")
        voice.client = MagicMock()
        voice.client.audio.transcriptions.create.return_value = MagicMock(
            text="  what is in my notes  "
        )

        result = voice.transcribe(b"audio-bytes", filename="clip.wav")

        assert result == "what is in my notes"
        call_kwargs = voice.client.audio.transcriptions.create.call_args[1]
        assert call_kwargs["model"] == "whisper-1"
        assert call_kwargs["language"] == "en"
        assert call_kwargs["file"].name == "clip.wav"
        assert call_kwargs["file"].read() == b"audio-bytes"

    def test_speak_returns_audio_bytes(self) -> None:
        voice = VoiceService(api_key="test-key")
        voice.client = MagicMock()
        voice.client.audio.speech.create.return_value.read.return_value = b"mp3"

        assert voice.speak("Hello there") == b"mp3"
        voice.client.audio.speech.create.assert_called_once_with(
            model="tts-1", voice="alloy", input="Hello there", speed=0.9
        )


class TestShouldAutoSubmit:
    def test_long_final_transcript(self) -> None:
        assert should_auto_submit("summarize the report") is True

    def test_short_transcript(self) -> None:
        assert should_auto_submit("hello") is False
        assert should_auto_submit("   hi   ") is False

    def test_interim_transcript(self) -> None:
        assert should_auto_submit("summarize the report", is_final=False) is False
