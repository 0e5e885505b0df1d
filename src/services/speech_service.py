"""
Speech synthesis via Amazon Polly.

``synthesize`` is the gateway contract used by POST /speech and raises on
failure. ``speak`` is what the dispatch pipeline uses: it never raises and
tells the client to fall back to its on-device voice instead.
"""

from __future__ import annotations

import base64
import os
from typing import Optional

import boto3

from models.speech import SpokenReply
from utils.cache_service import AudioCache
from utils.error_handling import ExternalServiceError
from utils.logging_config import get_logger
from utils.validators import ensure_text

logger = get_logger(__name__)

DEVICE_VOICE_HINTS = ["female", "woman", "samantha", "victoria"]


class SpeechService:
    """Polly-backed text-to-speech with an audio cache."""

    def __init__(
        self,
        voice_id: Optional[str] = None,
        engine: str = "neural",
        cache: Optional[AudioCache] = None,
    ) -> None:
        region = (
            os.environ.get("BEDROCK_REGION")
            or os.environ.get("AWS_REGION")
            or "eu-west-2"
        )
        self.voice_id = voice_id or os.environ.get("POLLY_VOICE_ID", "Joanna")
        self.engine = engine
        self.client = boto3.client("polly", region_name=region)
        self.cache = cache if cache is not None else AudioCache(
            max_bytes=int(os.environ.get("SPEECH_CACHE_MAX_BYTES", str(4 * 1024 * 1024)))
        )

    def synthesize(self, text: str) -> str:
        """Return base64 mp3 audio for ``text``."""
        ensure_text(text, "text")
        cached = self.cache.get(self.voice_id, text)
        if cached:
            logger.debug("Speech cache hit", extra=self.cache.stats())
            return cached

        try:
            response = self.client.synthesize_speech(
                Text=text,
                OutputFormat="mp3",
                VoiceId=self.voice_id,
                Engine=self.engine,
            )
            audio = response["AudioStream"].read()
        except Exception as exc:
            logger.warning("Speech synthesis failed", extra={"error": str(exc)})
            raise ExternalServiceError(f"Speech synthesis failed: {exc}") from exc

        if not audio:
            raise ExternalServiceError("Speech synthesis returned no audio")

        encoded = base64.b64encode(audio).decode("ascii")
        if not self.cache.put(self.voice_id, text, encoded):
            logger.info("Speech clip too large to cache", extra={"bytes": len(encoded)})
        return encoded

    def speak(self, text: str) -> SpokenReply:
        """Synthesize, or hand the sentence back for on-device synthesis."""
        try:
            return SpokenReply(text=text, audio_content=self.synthesize(text))
        except Exception as exc:
            logger.info("Falling back to device voice", extra={"error": str(exc)})
            return SpokenReply(
                text=text,
                use_device_voice=True,
                preferred_voices=list(DEVICE_VOICE_HINTS),
            )
