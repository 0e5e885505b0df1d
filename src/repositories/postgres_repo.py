"""PostgreSQL access using SQLAlchemy Core."""

from __future__ import annotations

import json
import os
from typing import Any, List, Optional

import boto3
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.pool import QueuePool
from sqlalchemy.sql import Executable

from utils.logging_config import get_logger

logger = get_logger(__name__)

# Connection pooling for Lambda reuse.
_engine: Optional[Engine] = None


def get_db_engine() -> Optional[Engine]:
    """Get or create the SQLAlchemy engine; None when no database is configured."""
    global _engine
    if _engine is None:
        db_url = os.environ.get("DATABASE_URL")
        if not db_url:
            secret_arn = os.environ.get("DB_SECRET_ARN")
            db_url = _secret_to_db_url(secret_arn) if secret_arn else None
        if not db_url:
            logger.warning("DATABASE_URL not set; store calls will fail")
            return None
        _engine = create_engine(
            db_url,
            poolclass=QueuePool,
            pool_size=1,
            max_overflow=2,
            pool_pre_ping=True,
            pool_recycle=300,
        )
    return _engine


def _secret_to_db_url(secret_arn: str) -> Optional[str]:
    """Build a SQLAlchemy URL from an RDS secret."""
    try:
        sm = boto3.client("secretsmanager")
        secret = json.loads(sm.get_secret_value(SecretId=secret_arn)["SecretString"])
        host = secret.get("host")
        port = secret.get("port", 5432)
        username = secret.get("username")
        password = secret.get("password")
        dbname = secret.get("dbname", "postgres")
        if not (host and username and password):
            return None
        return f"postgresql+psycopg2://{username}:{password}@{host}:{port}/{dbname}"
    except Exception as exc:
        logger.warning("Failed to load DB secret", extra={"error": str(exc)})
        return None


class PostgresRepository:
    """Thin wrapper to keep statements organized and parameterized."""

    def __init__(self, engine: Optional[Engine] = None):
        engine = engine if engine is not None else get_db_engine()
        if engine is None:
            raise RuntimeError("No database configured (set DATABASE_URL or DB_SECRET_ARN)")
        self.engine = engine

    def fetch_one(self, stmt: Executable) -> Optional[dict]:
        """Execute a SELECT and return one row as dict."""
        with self.engine.connect() as conn:
            row = conn.execute(stmt).fetchone()
            return dict(row._mapping) if row else None

    def fetch_all(self, stmt: Executable) -> List[dict]:
        """Execute a SELECT and return all rows as dicts."""
        with self.engine.connect() as conn:
            return [dict(row._mapping) for row in conn.execute(stmt)]

    def execute(self, stmt: Executable) -> Any:
        """Execute a write inside its own transaction and return the rowcount."""
        with self.engine.begin() as conn:
            return conn.execute(stmt).rowcount
