"""Speech synthesis payloads."""

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class SpokenReply(BaseModel):
    """
    Audio for one sentence, or an instruction to use the device voice.

    ``audio_content`` is base64 mp3. When it is absent the client speaks
    ``text`` with its on-device synthesizer, preferring a voice whose name
    contains one of ``preferred_voices``.
    """

    text: str
    audio_content: Optional[str] = None
    use_device_voice: bool = False
    preferred_voices: List[str] = Field(default_factory=list)


class SpeechRequest(BaseModel):
    """Body of POST /speech."""

    text: str

    @field_validator("text")
    @classmethod
    def validate_text(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("text must be provided")
        return value
