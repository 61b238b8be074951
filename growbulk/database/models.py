"""
SQLAlchemy models for plant records.

Schema:
- plants: one row per plant; well-known fields are columns, the rest of the
  entity snapshot lives in the ``attributes`` JSON column
- plant_logs: append-only sub-logs (notes, metrics, stage_history, ...)
"""

from datetime import datetime
from typing import Optional, List, Dict
from sqlalchemy import (
    String,
    Integer,
    DateTime,
    ForeignKey,
    JSON,
    Index,
)
from sqlalchemy.orm import DeclarativeBase, relationship, Mapped, mapped_column
from sqlalchemy.sql import func


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


class PlantDB(Base):
    """A plant record."""
    __tablename__ = "plants"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    strain: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    status: Mapped[Optional[str]] = mapped_column(String(50), nullable=True, index=True)
    stage: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    location: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    parent_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True, index=True)

    # Remaining snapshot fields (timestamps written by operations, custom data)
    attributes: Mapped[Optional[Dict]] = mapped_column(JSON, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now(), onupdate=func.now())

    logs: Mapped[List["PlantLogDB"]] = relationship(
        back_populates="plant", cascade="all, delete-orphan"
    )


class PlantLogDB(Base):
    """One entry of a plant sub-log."""
    __tablename__ = "plant_logs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    plant_id: Mapped[str] = mapped_column(String(64), ForeignKey("plants.id", ondelete="CASCADE"), nullable=False)
    log_name: Mapped[str] = mapped_column(String(50), nullable=False)
    entry: Mapped[Dict] = mapped_column(JSON, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())

    plant: Mapped["PlantDB"] = relationship(back_populates="logs")

    __table_args__ = (
        Index("ix_plant_logs_plant_log", "plant_id", "log_name"),
    )
