"""
Environment-specific deployment settings.

Cost-optimized defaults for development/testing.
"""

from dataclasses import dataclass
import os
from typing import Any, Dict, Mapping, Optional


@dataclass
class Settings:
    """Deployment settings for the facility operations stack."""

    # Environment
    environment: str = "dev"
    aws_region: str = "eu-west-2"

    # Hosted model and voice
    model_id: str = "anthropic.claude-3-haiku-20240307-v1:0"
    polly_voice_id: str = "Joanna"

    # Database Configuration (Cost-optimized)
    db_instance_class: str = "t3.micro"  # Free tier eligible
    db_allocated_storage: int = 20  # Minimum GB

    # Lambda Configuration
    lambda_memory_mb: int = 512
    lambda_timeout_seconds: int = 30

    # Polly audio kept per warm Lambda, by total base64 size
    speech_cache_max_bytes: int = 4 * 1024 * 1024

    log_level: str = "INFO"

    # Keep a ticket without a technician instead of dropping it
    persist_unassigned_tickets: bool = False

    @classmethod
    def from_environment(cls, context: Optional[Mapping[str, Any]] = None) -> "Settings":
        """
        Load settings from CDK context, falling back to environment variables.

        ``cdk deploy -c environment=prod -c persist_unassigned_tickets=true``
        wins over ``ENVIRONMENT`` / ``PERSIST_UNASSIGNED_TICKETS``.
        """
        context = context or {}

        def lookup(key: str, env_var: str, default: str) -> str:
            value = context.get(key)
            if value is None:
                value = os.environ.get(env_var, default)
            return str(value)

        env = lookup("environment", "ENVIRONMENT", "dev")
        region = lookup("region", "AWS_REGION", cls.aws_region)
        persist_unassigned = (
            lookup("persist_unassigned_tickets", "PERSIST_UNASSIGNED_TICKETS", "false").lower()
            == "true"
        )
        common = {
            "environment": env,
            "aws_region": region,
            "persist_unassigned_tickets": persist_unassigned,
            "speech_cache_max_bytes": int(
                lookup("speech_cache_max_bytes", "SPEECH_CACHE_MAX_BYTES", str(cls.speech_cache_max_bytes))
            ),
        }

        # Production overrides
        if env == "prod":
            return cls(
                db_instance_class="t3.small",
                db_allocated_storage=50,
                lambda_memory_mb=1024,
                lambda_timeout_seconds=60,
                log_level=lookup("log_level", "LOG_LEVEL", "INFO"),
                **common,
            )

        return cls(log_level=lookup("log_level", "LOG_LEVEL", "DEBUG"), **common)

    @property
    def tags(self) -> Dict[str, str]:
        """Cost-allocation tags applied to every resource in the stack."""
        return {"project": "facility-ops", "environment": self.environment}
