"""SQLAlchemy ORM model for citizen-submitted civic issue reports."""
from __future__ import annotations

import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import expression, func

from app.database import Base


class ReportCategory(str, enum.Enum):
    garbage = "garbage"
    waterlogging = "waterlogging"
    other = "other"


REPORT_CATEGORIES: tuple[str, ...] = tuple(category.value for category in ReportCategory)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Report(Base):
    __tablename__ = "reports"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)

    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False, default="")
    category = Column(String(32), nullable=False, index=True)

    # {"lat": float, "lng": float}
    location = Column(JSON, nullable=False)

    # Main image shown in lists and map popups; mirrors images[0]["url"].
    image_url = Column(String(1024), nullable=False, default="")
    # Ordered [{"url": str, "publicId": str}, ...]
    images = Column(JSON, nullable=False, default=list)

    resolved = Column(Boolean, nullable=False, server_default=expression.false(), default=False, index=True)
    resolved_at = Column(DateTime(timezone=True), nullable=True)
    resolved_by = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    created_by = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow, server_default=func.now(), nullable=False, index=True)
    updated_at = Column(
        DateTime(timezone=True),
        default=_utcnow,
        onupdate=_utcnow,
        server_default=func.now(),
        nullable=False,
    )

    owner = relationship("User", back_populates="reports", foreign_keys=[created_by])
    resolver = relationship("User", foreign_keys=[resolved_by])
    reviews = relationship(
        "ReportReview",
        back_populates="report",
        cascade="all, delete-orphan",
        order_by="ReportReview.created_at",
    )

    @property
    def public_ids(self) -> list[str]:
        return [str(image.get("publicId")) for image in (self.images or []) if image.get("publicId")]


__all__ = ["Report", "ReportCategory", "REPORT_CATEGORIES"]
