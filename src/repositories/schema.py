"""Table definitions for the technician directory and the ticket store."""

from sqlalchemy import Column, DateTime, ForeignKey, MetaData, String, Table, Text

metadata = MetaData()

technicians = Table(
    "technicians",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("name", String(120), nullable=False),
    Column("status", String(16), nullable=False, index=True),
    Column("created_at", DateTime(timezone=True), nullable=False),
)

tickets = Table(
    "tickets",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("complaint", Text, nullable=False),
    Column("building", String(64), nullable=False),
    Column("date", String(10), nullable=False),
    Column("priority", String(2), nullable=False),
    Column("technician_id", String(36), ForeignKey("technicians.id"), nullable=True),
    Column("technician_name", String(120), nullable=True),
    Column("status", String(16), nullable=False),
    Column("created_at", DateTime(timezone=True), nullable=False, index=True),
)
