"""
Pytest configuration to ensure paths are set up correctly for tests.

This allows imports like `from handlers import health_check` to work
when running tests, simulating the Lambda environment where code
is deployed from the src/ directory.
"""

import os
import sys
from pathlib import Path

import boto3
import pytest


def _ensure_paths_on_sys_path() -> None:
    """Add repository root AND src/ to sys.path if missing.

    The src/ directory is added to simulate Lambda's import behavior,
    where Code.from_asset("src") makes src/ the root of the package.
    """
    repo_root = Path(__file__).resolve().parents[1]
    src_root = repo_root / "src"

    root_str = str(repo_root)
    if root_str not in sys.path:
        sys.path.insert(0, root_str)

    src_str = str(src_root)
    if src_str not in sys.path:
        sys.path.insert(0, src_str)


_ensure_paths_on_sys_path()

# Ensure boto3 has offline-friendly defaults so tests do not require AWS access.
os.environ.setdefault("AWS_REGION", "eu-west-2")
os.environ.setdefault("AWS_DEFAULT_REGION", "eu-west-2")
os.environ.setdefault("AWS_ACCESS_KEY_ID", "test")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "test")
os.environ.setdefault("AWS_SESSION_TOKEN", "test")
os.environ.setdefault("ENVIRONMENT", "dev")
os.environ.setdefault("BEDROCK_REGION", "eu-west-2")
os.environ.setdefault("MODEL_ID", "anthropic.claude-3-haiku-20240307-v1:0")
os.environ.setdefault("CONVERSATIONS_TABLE", "test-conversations")

# Nothing in the unit tests may reach a real database or event bus.
for _name in (
    "DATABASE_URL",
    "DB_SECRET_ARN",
    "EVENT_BUS_NAME",
    "PERSIST_UNASSIGNED_TICKETS",
    "SPEECH_CACHE_MAX_BYTES",
    "LOG_LEVEL",
):
    os.environ.pop(_name, None)

# Create a default boto3 session so resources/clients do not error during import.
boto3.setup_default_session(region_name="eu-west-2")


@pytest.fixture
def engine():
    """In-memory SQLite shared by every connection of the test."""
    from sqlalchemy import create_engine
    from sqlalchemy.pool import StaticPool

    from repositories.schema import metadata

    eng = create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    metadata.create_all(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def technician_repo(engine):
    from repositories.technician_repo import TechnicianRepository

    return TechnicianRepository(engine)


@pytest.fixture
def ticket_repo(engine):
    from repositories.ticket_repo import TicketRepository

    return TicketRepository(engine)
