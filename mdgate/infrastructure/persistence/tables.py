"""SQLAlchemy table definitions - dialect-agnostic (works with SQLite and PostgreSQL)."""

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    String,
    Table,
)

# Metadata object for all tables
metadata = MetaData()

# ============================================================================
# DATASETS TABLE
# ============================================================================
datasets_table = Table(
    "datasets",
    metadata,
    Column("dataset_id", Integer, primary_key=True, autoincrement=True),
    Column("dataset", String, nullable=False, unique=True),  # /experiment/processing/tier
    Column("experiment", String, nullable=False),
    Column("processing", String, nullable=False),
    Column("tier", String, nullable=False),
    Column("created_at", DateTime(timezone=True), nullable=False),
)

# ============================================================================
# FILES TABLE
# ============================================================================
files_table = Table(
    "files",
    metadata,
    Column("file_id", Integer, primary_key=True, autoincrement=True),
    Column("dataset_id", Integer, ForeignKey("datasets.dataset_id"), nullable=False),
    Column("path", String, nullable=False, unique=True),
    Column("created_at", DateTime(timezone=True), nullable=False),
)

Index("idx_files_dataset_id", files_table.c.dataset_id)
