"""SQLAlchemy ORM model for community reviews attached to a report."""
from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Text, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import expression, func

from app.database import Base


class ReportReview(Base):
    __tablename__ = "report_reviews"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    report_id = Column(Uuid(as_uuid=True), ForeignKey("reports.id", ondelete="CASCADE"), nullable=False, index=True)
    author_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    comment = Column(Text, nullable=False, default="")
    upvote = Column(Boolean, nullable=False, server_default=expression.false(), default=False)
    created_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        server_default=func.now(),
        nullable=False,
    )

    report = relationship("Report", back_populates="reviews")
    author = relationship("User", back_populates="reviews")


__all__ = ["ReportReview"]
