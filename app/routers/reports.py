"""Civic report endpoints backed by PostgreSQL, DigitalOcean Spaces and geopy."""
from __future__ import annotations

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.orm import Session

from ..database import get_session
from ..models import User
from ..schemas.reports import (
    CreatedReport,
    Location,
    MapFeature,
    MapFeatureCollection,
    PaginationSchema,
    ReportCreateRequest,
    ReportCreateResponse,
    ReportDeleteResponse,
    ReportDetail,
    ReportDetailResponse,
    ReportListResponse,
    ReportResolveRequest,
    ReportSummary,
    ReportUpdateRequest,
)
from ..services import media_service
from ..services.auth_service import (
    AuthenticatedPrincipal,
    ensure_placeholder_user,
    get_current_principal,
    get_reporting_principal,
    require_admin,
)
from ..services.errors import (
    InternalServiceError,
    OwnershipError,
    ReportNotFoundError,
    ReportValidationError,
    UpstreamServiceError,
)
from ..services.geocoding_service import GeocodeError, geocode_address
from ..services.image_storage import ImageUploadError, StoredImage
from ..services.report_service import (
    create_report,
    delete_report_if_owner,
    get_report_by_id,
    list_reports,
    parse_report_id,
    set_report_resolution,
    update_report,
    validate_category,
)

router = APIRouter(prefix="/api/report", tags=["reports"])

logger = logging.getLogger(__name__)

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 20
MAX_LIMIT = 100
MAX_MAP_FEATURES = 500


def valid_report_id(id: str = Path(...)) -> UUID:
    return parse_report_id(id)


def _parse_int(raw: str | None, default: int) -> int:
    try:
        return int((raw or "").strip())
    except ValueError:
        return default


def _parse_resolved(raw: str | None) -> bool | None:
    if raw is None or raw == "":
        return None
    value = raw.strip().lower()
    if value not in {"true", "false"}:
        raise ReportValidationError("Invalid resolved filter. Must be true or false")
    return value == "true"


def _parse_category_filter(raw: str | None) -> str | None:
    if not raw:
        return None
    return validate_category(raw)


async def _resolve_location(location: Location | None, address: str | None) -> dict[str, float] | None:
    if location is not None:
        return location.model_dump()
    if address and address.strip():
        try:
            coords = await geocode_address(address)
        except GeocodeError as exc:
            raise UpstreamServiceError(
                f"Failed to geocode address: {exc}",
                status_code=status.HTTP_400_BAD_REQUEST,
            ) from exc
        return coords.as_dict()
    return None


async def _upload_batch(payloads: list[str]) -> list[StoredImage]:
    try:
        return await media_service.upload_images(payloads)
    except ImageUploadError as exc:
        raise UpstreamServiceError(f"Failed to upload image: {exc}") from exc


def _require_owner(report, principal: AuthenticatedPrincipal, action: str) -> None:
    if report.created_by != principal.user_id:
        raise OwnershipError(f"Unauthorized: You can only {action} your own reports")


@router.post("", response_model=ReportCreateResponse, status_code=status.HTTP_201_CREATED)
async def create_report_endpoint(
    payload: ReportCreateRequest,
    db: Session = Depends(get_session),
    principal: AuthenticatedPrincipal = Depends(get_reporting_principal),
) -> ReportCreateResponse:
    title = (payload.title or "").strip()
    description = (payload.description or "").strip()
    has_address = bool(payload.address and payload.address.strip())
    if not title or not description or not payload.category or not payload.new_images or (
        payload.location is None and not has_address
    ):
        raise ReportValidationError(
            "Missing required fields: title, description, category, images, and location/address"
        )
    category = validate_category(payload.category)

    if principal.is_placeholder:
        ensure_placeholder_user(db)

    location = await _resolve_location(payload.location, payload.address)
    uploaded = await _upload_batch(payload.new_images)

    try:
        report = create_report(
            db,
            {
                "title": title,
                "description": description,
                "category": category,
                "location": location,
                "images": [image.as_dict() for image in uploaded],
                "created_by": principal.user_id,
            },
        )
    except InternalServiceError:
        await media_service.discard_images((image.public_id for image in uploaded), reason="persist_rollback")
        raise

    if principal.is_placeholder:
        logger.warning("Report %s created with the placeholder identity", report.id)
    return ReportCreateResponse(report=CreatedReport.from_report(report))


@router.get("", response_model=ReportListResponse)
async def list_reports_endpoint(
    page: str | None = None,
    limit: str | None = None,
    category: str | None = None,
    resolved: str | None = None,
    db: Session = Depends(get_session),
) -> ReportListResponse:
    page_number = _parse_int(page, DEFAULT_PAGE)
    page_size = _parse_int(limit, DEFAULT_LIMIT)
    if page_number < 1 or page_size < 1 or page_size > MAX_LIMIT:
        raise ReportValidationError("Invalid pagination parameters")

    result = list_reports(
        db,
        page=page_number,
        limit=page_size,
        category=_parse_category_filter(category),
        resolved=_parse_resolved(resolved),
    )
    return ReportListResponse(
        reports=[ReportSummary.from_report(report) for report in result.reports],
        pagination=PaginationSchema(**result.pagination()),
    )


@router.get("/map", response_model=MapFeatureCollection)
async def report_map_endpoint(
    limit: str | None = None,
    category: str | None = None,
    resolved: str | None = None,
    db: Session = Depends(get_session),
) -> MapFeatureCollection:
    """GeoJSON feature list consumed by the explorer map."""

    page_size = _parse_int(limit, MAX_MAP_FEATURES)
    if page_size < 1 or page_size > MAX_MAP_FEATURES:
        raise ReportValidationError("Invalid pagination parameters")

    result = list_reports(
        db,
        page=1,
        limit=page_size,
        category=_parse_category_filter(category),
        resolved=_parse_resolved(resolved),
    )
    return MapFeatureCollection(features=[MapFeature.from_report(report) for report in result.reports])


@router.get("/", include_in_schema=False)
@router.patch("/", include_in_schema=False)
@router.delete("/", include_in_schema=False)
async def missing_report_id_endpoint() -> None:
    raise ReportValidationError("Invalid report ID")


@router.get("/{id}", response_model=ReportDetailResponse, response_model_exclude_unset=True)
async def get_report_endpoint(
    report_id: UUID = Depends(valid_report_id),
    include_reviews_flag: str | None = Query(default=None, alias="includeReviews"),
    db: Session = Depends(get_session),
) -> ReportDetailResponse:
    include_reviews = (include_reviews_flag or "").strip().lower() == "true"
    report = get_report_by_id(db, report_id, include_reviews=include_reviews)
    if report is None:
        raise ReportNotFoundError()
    return ReportDetailResponse(success=True, report=ReportDetail.from_report(report, include_reviews=include_reviews))


@router.patch("/{id}", response_model=ReportDetailResponse, response_model_exclude_unset=True)
async def update_report_endpoint(
    payload: ReportUpdateRequest,
    report_id: UUID = Depends(valid_report_id),
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    db: Session = Depends(get_session),
) -> ReportDetailResponse:
    current = get_report_by_id(db, report_id)
    if current is None:
        raise ReportNotFoundError()
    _require_owner(current, principal, "edit")

    fields = payload.model_dump(exclude_unset=True, exclude_none=True)
    if "category" in fields:
        validate_category(fields["category"])
    if "title" in fields:
        fields["title"] = fields["title"].strip()
        if not fields["title"]:
            raise ReportValidationError("Title cannot be empty")

    address = fields.pop("address", None)
    if "location" not in fields:
        location = await _resolve_location(None, address)
        if location is not None:
            fields["location"] = location

    owned_ids = set(current.public_ids)
    requested_deletions = fields.pop("images_to_delete", [])
    deletions = [public_id for public_id in requested_deletions if public_id in owned_ids]
    if len(deletions) != len(requested_deletions):
        logger.warning(
            "Ignoring %d image id(s) not attached to report %s",
            len(requested_deletions) - len(deletions),
            report_id,
        )

    uploaded = await _upload_batch(fields.pop("new_images", []))

    patch = dict(fields)
    if deletions:
        patch["images_to_delete"] = deletions
    if uploaded:
        patch["new_images"] = [image.as_dict() for image in uploaded]

    try:
        updated = update_report(db, report_id, patch)
    except InternalServiceError:
        await media_service.discard_images((image.public_id for image in uploaded), reason="persist_rollback")
        raise
    if updated is None:
        await media_service.discard_images((image.public_id for image in uploaded), reason="persist_rollback")
        raise InternalServiceError("Failed to update report")

    # Removed images are released only once the record no longer references them.
    await media_service.discard_images(deletions, reason="image_removed")

    return ReportDetailResponse(success=True, report=ReportDetail.from_report(updated))


@router.delete("/{id}", response_model=ReportDeleteResponse)
async def delete_report_endpoint(
    report_id: UUID = Depends(valid_report_id),
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    db: Session = Depends(get_session),
) -> ReportDeleteResponse:
    report = get_report_by_id(db, report_id)
    if report is None:
        raise ReportNotFoundError()
    _require_owner(report, principal, "delete")

    await media_service.discard_report_images(report.images or [], report.image_url, reason="report_delete")

    if not delete_report_if_owner(db, report_id, principal.user_id):
        raise InternalServiceError("Failed to delete report")
    return ReportDeleteResponse()


@router.post("/{id}/resolve", response_model=ReportDetailResponse, response_model_exclude_unset=True)
async def resolve_report_endpoint(
    payload: ReportResolveRequest,
    report_id: UUID = Depends(valid_report_id),
    admin: User = Depends(require_admin()),
    db: Session = Depends(get_session),
) -> ReportDetailResponse:
    report = set_report_resolution(db, report_id, resolved=payload.resolved, actor_id=admin.id)
    if report is None:
        raise ReportNotFoundError()
    return ReportDetailResponse(success=True, report=ReportDetail.from_report(report))


__all__ = ["router"]
