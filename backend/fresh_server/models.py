"""SQLAlchemy ORM models."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Index, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from fresh_server.database import Base


class ConfigRecord(Base):
    """One named configuration entry.

    ``name`` carries no unique constraint; duplicates are allowed and lookups
    resolve them by creation order.
    """

    __tablename__ = "configs"
    __table_args__ = (
        Index("idx_configs_created", "created_at"),
        {"sqlite_autoincrement": True},
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    # "metadata" is reserved on declarative classes
    metadata_text: Mapped[str] = mapped_column("metadata", Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now()
    )


__all__ = ["ConfigRecord"]
