"""SQLAlchemy ORM model for the Background entity."""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.database.base import Base


class BackgroundModel(Base):
    """ORM model — maps to the 'backgrounds' table."""

    __tablename__ = "backgrounds"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    type: Mapped[str] = mapped_column(String(20), nullable=False)
    primary_asset_url: Mapped[str | None] = mapped_column(String(2048), nullable=True)
    primary_asset_handle: Mapped[str | None] = mapped_column(String(512), nullable=True)
    thumbnail_asset_url: Mapped[str | None] = mapped_column(String(2048), nullable=True)
    thumbnail_asset_handle: Mapped[str | None] = mapped_column(String(512), nullable=True)
    style: Mapped[str | None] = mapped_column(String(500), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    __table_args__ = (
        Index("ix_backgrounds_created_at", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<BackgroundModel(id={self.id}, name='{self.name}', type='{self.type}')>"
