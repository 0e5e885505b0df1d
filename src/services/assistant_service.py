"""
Conversational acknowledgment via Amazon Bedrock.

The reply is auxiliary: it is shown and spoken to the caller and scanned for
the child-input marker, but ticket creation never depends on the model being
reachable. Every failure collapses to a fixed acknowledgment.
"""

from __future__ import annotations

import json
import os
import time
from dataclasses import dataclass
from datetime import date
from typing import Optional

import boto3

from utils.logging_config import get_logger

logger = get_logger(__name__)

FALLBACK_REPLY = "I understand. Let me help you with that."
WELCOME_MESSAGE = "We are here to support and assist you."
CHILD_INPUT_REPLY = (
    "This seems like a child's input. Please ask an adult to use this system."
)

SYSTEM_PROMPT = """You are a helpful female voice assistant for an Operations Hub. Your role is to:
1. Be warm, friendly, and professional
2. Always greet new users with "{welcome}"
3. Help users report maintenance problems by extracting: problem type and building name
4. If user provides problem + building, respond positively about the issue being noted
5. If missing info, ask for it politely
6. Detect if input sounds like a child (nonsense words, mentions monsters, toys, mommy/daddy) and respond: "{child_reply}"
7. Classify priority: P1 (leakage, fire, gas), P2 (AC, heating, electrical), P3 (lights, internet), P4 (other)
8. Keep responses conversational and under 30 words
9. Never mention ticket creation or generation - just acknowledge the issue

Current date: {today}"""


@dataclass
class AssistantService:
    """Short conversational replies from a Bedrock-hosted Claude model."""

    model_id: str = os.environ.get("MODEL_ID", "anthropic.claude-3-haiku-20240307-v1:0")
    max_tokens: int = 150
    temperature: float = 0.7

    def __post_init__(self) -> None:
        region = (
            os.environ.get("BEDROCK_REGION")
            or os.environ.get("AWS_REGION")
            or "eu-west-2"
        )
        self.client = boto3.client("bedrock-runtime", region_name=region)

    def reply(self, message: str) -> str:
        """Return the model's acknowledgment, or the fixed fallback on any failure."""
        start = time.perf_counter()
        try:
            response = self.client.invoke_model(
                modelId=self.model_id,
                contentType="application/json",
                accept="application/json",
                body=json.dumps(
                    {
                        "anthropic_version": "bedrock-2023-05-31",
                        "system": self._build_system_prompt(),
                        "messages": [
                            {"role": "user", "content": [{"type": "text", "text": message}]}
                        ],
                        "max_tokens": self.max_tokens,
                        "temperature": self.temperature,
                    }
                ),
            )
            return self._parse_response(response["body"].read())
        except Exception as exc:
            logger.warning(
                "Assistant reply failed; using fallback acknowledgment",
                extra={"error": str(exc)},
            )
            return FALLBACK_REPLY
        finally:
            logger.info(
                "Assistant latency captured",
                extra={"duration_ms": int((time.perf_counter() - start) * 1000)},
            )

    def _build_system_prompt(self, today: Optional[date] = None) -> str:
        return SYSTEM_PROMPT.format(
            welcome=WELCOME_MESSAGE,
            child_reply=CHILD_INPUT_REPLY,
            today=(today or date.today()).strftime("%m/%d/%Y"),
        )

    def _parse_response(self, raw: bytes) -> str:
        """Extract the first text block; anything unexpected is an error."""
        payload = json.loads(raw)
        if not isinstance(payload, dict):
            raise ValueError("Model returned a non-object body")
        blocks = payload.get("content") or []
        texts = [
            block.get("text", "")
            for block in blocks
            if isinstance(block, dict) and block.get("type", "text") == "text"
        ]
        text = " ".join(t.strip() for t in texts if t and t.strip())
        if not text:
            raise ValueError("Model returned no text content")
        return text
