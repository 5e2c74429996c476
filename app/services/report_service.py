"""Data access for civic issue reports."""
from __future__ import annotations

import logging
import math
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Iterator, Mapping
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload, selectinload

from ..models import REPORT_CATEGORIES, Report, ReportReview
from .errors import InternalServiceError, ReportValidationError

logger = logging.getLogger(__name__)

_INVALID_ID_LITERALS = {"", "undefined", "null"}

_MERGEABLE_FIELDS = ("title", "description", "category", "location")


@dataclass(frozen=True)
class ReportPage:
    reports: list[Report]
    page: int
    limit: int
    total: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0

    def pagination(self) -> dict[str, Any]:
        return {
            "current_page": self.page,
            "total_pages": self.total_pages,
            "total_reports": self.total,
            "limit": self.limit,
            "has_next_page": self.page < self.total_pages,
            "has_prev_page": self.page > 1,
        }


@contextmanager
def _guarded(db: Session, action: str) -> Iterator[None]:
    """Roll back and convert database failures into an opaque 500."""

    try:
        yield
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Database error while trying to %s", action)
        raise InternalServiceError() from exc


def parse_report_id(raw: str | None) -> UUID:
    """Reject placeholder and malformed identifiers before any database access."""

    value = (raw or "").strip()
    if value in _INVALID_ID_LITERALS:
        raise ReportValidationError("Invalid report ID")
    try:
        return UUID(value)
    except ValueError as exc:
        raise ReportValidationError("Invalid report ID") from exc


def validate_category(category: str) -> str:
    if category not in REPORT_CATEGORIES:
        raise ReportValidationError("Invalid category. Must be one of: " + ", ".join(REPORT_CATEGORIES))
    return category


def _main_image_url(images: list[dict[str, str]]) -> str:
    return images[0].get("url", "") if images else ""


def create_report(db: Session, data: Mapping[str, Any]) -> Report:
    """Persist a new report. ``data`` carries already validated model fields."""

    images = [dict(image) for image in data.get("images") or []]
    report = Report(
        title=data["title"],
        description=data.get("description") or "",
        category=data["category"],
        location=dict(data["location"]),
        image_url=_main_image_url(images),
        images=images,
        created_by=data["created_by"],
    )
    with _guarded(db, "create report"):
        db.add(report)
        db.commit()
        db.refresh(report)
    logger.info("Created report %s (%s) for user %s", report.id, report.category, report.created_by)
    return report


def get_report_by_id(db: Session, report_id: UUID, *, include_reviews: bool = False) -> Report | None:
    options = [joinedload(Report.owner)]
    if include_reviews:
        options.append(selectinload(Report.reviews).joinedload(ReportReview.author))
    with _guarded(db, "load report"):
        return db.execute(select(Report).options(*options).where(Report.id == report_id)).unique().scalar_one_or_none()


def list_reports(
    db: Session,
    *,
    page: int = 1,
    limit: int = 20,
    category: str | None = None,
    resolved: bool | None = None,
) -> ReportPage:
    """Return one page of reports, newest first, with the total match count."""

    filters = []
    if category:
        filters.append(Report.category == category)
    if resolved is not None:
        filters.append(Report.resolved == resolved)

    with _guarded(db, "list reports"):
        total = int(db.execute(select(func.count(Report.id)).where(*filters)).scalar() or 0)
        rows = (
            db.execute(
                select(Report)
                .options(joinedload(Report.owner))
                .where(*filters)
                .order_by(Report.created_at.desc(), Report.id)
                .offset((page - 1) * limit)
                .limit(limit)
            )
            .unique()
            .scalars()
            .all()
        )
    return ReportPage(reports=list(rows), page=page, limit=limit, total=total)


def update_report(db: Session, report_id: UUID, patch: Mapping[str, Any]) -> Report | None:
    """Apply image removals/additions, then merge the scalar fields present in ``patch``."""

    report = get_report_by_id(db, report_id)
    if report is None:
        return None

    to_delete = set(patch.get("images_to_delete") or [])
    new_images = [dict(image) for image in patch.get("new_images") or []]
    if to_delete or new_images:
        images = [dict(image) for image in report.images or [] if image.get("publicId") not in to_delete]
        images.extend(new_images)
        report.images = images
        report.image_url = _main_image_url(images)

    for field_name in _MERGEABLE_FIELDS:
        if field_name in patch:
            value = patch[field_name]
            setattr(report, field_name, dict(value) if field_name == "location" else value)

    with _guarded(db, "update report"):
        db.add(report)
        db.commit()
        db.refresh(report)
    return report


def set_report_resolution(db: Session, report_id: UUID, *, resolved: bool, actor_id: UUID) -> Report | None:
    report = get_report_by_id(db, report_id)
    if report is None:
        return None

    report.resolved = resolved
    report.resolved_at = datetime.now(timezone.utc) if resolved else None
    report.resolved_by = actor_id if resolved else None

    with _guarded(db, "update report resolution"):
        db.add(report)
        db.commit()
        db.refresh(report)
    logger.info("Report %s marked %s by %s", report.id, "resolved" if resolved else "pending", actor_id)
    return report


def delete_report_if_owner(db: Session, report_id: UUID, user_id: UUID) -> bool:
    """Delete the report only when ``user_id`` owns it."""

    with _guarded(db, "delete report"):
        report = db.get(Report, report_id)
        if report is None or report.created_by != user_id:
            return False
        db.delete(report)
        db.commit()
    logger.info("Deleted report %s", report_id)
    return True


__all__ = [
    "ReportPage",
    "parse_report_id",
    "validate_category",
    "create_report",
    "get_report_by_id",
    "list_reports",
    "update_report",
    "set_report_resolution",
    "delete_report_if_owner",
]
