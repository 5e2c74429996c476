"""SQLAlchemy ORM model for the users that own reports."""
from __future__ import annotations

import uuid

from sqlalchemy import Column, DateTime, String, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    username = Column(String(150), unique=True, nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=True)
    # "user" | "admin" | "owner"
    role = Column(String(32), nullable=False, server_default="user", default="user")
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    reports = relationship("Report", back_populates="owner", foreign_keys="Report.created_by")
    reviews = relationship("ReportReview", back_populates="author", cascade="all, delete-orphan")


__all__ = ["User"]
