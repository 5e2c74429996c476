"""Request and response schemas for the report API.

Wire names follow the JavaScript client: camelCase fields and ``_id`` for
identifiers.
"""
from __future__ import annotations

from datetime import datetime
from typing import Any, Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..models import Report, ReportReview


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Location(BaseModel):
    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)


class ReportCreateRequest(CamelModel):
    title: str | None = None
    description: str | None = None
    category: str | None = None
    location: Location | None = None
    address: str | None = None
    new_images: list[str] | None = None


class ReportUpdateRequest(CamelModel):
    title: str | None = None
    description: str | None = None
    category: str | None = None
    location: Location | None = None
    address: str | None = None
    new_images: list[str] | None = None
    images_to_delete: list[str] | None = None


class ReportResolveRequest(CamelModel):
    resolved: bool = True


class ImageSchema(CamelModel):
    url: str
    public_id: str


class OwnerSchema(CamelModel):
    id: UUID = Field(alias="_id")
    username: str | None = None
    email: str | None = None


class ReviewAuthorSchema(CamelModel):
    id: UUID = Field(alias="_id")
    username: str | None = None


class ReviewSchema(CamelModel):
    id: UUID = Field(alias="_id")
    comment: str
    upvote: bool
    created_at: datetime
    author: ReviewAuthorSchema

    @classmethod
    def from_review(cls, review: ReportReview) -> "ReviewSchema":
        author = review.author
        return cls(
            id=review.id,
            comment=review.comment,
            upvote=bool(review.upvote),
            created_at=review.created_at,
            author=ReviewAuthorSchema(
                id=review.author_id,
                username=author.username if author is not None else None,
            ),
        )


class CreatedReport(CamelModel):
    id: UUID = Field(alias="_id")
    title: str
    category: str
    location: dict[str, float]
    image_url: str
    created_at: datetime

    @classmethod
    def from_report(cls, report: Report) -> "CreatedReport":
        return cls(
            id=report.id,
            title=report.title,
            category=report.category,
            location=report.location,
            image_url=report.image_url or "",
            created_at=report.created_at,
        )


class ReportDetail(CamelModel):
    id: UUID = Field(alias="_id")
    title: str
    description: str
    category: str
    location: dict[str, float]
    image_url: str
    images: list[ImageSchema]
    resolved: bool
    resolved_at: datetime | None
    resolved_by: UUID | None
    created_at: datetime
    created_by: OwnerSchema
    # Only set when the caller asked for reviews.
    reviews: list[ReviewSchema] | None = None

    @classmethod
    def from_report(cls, report: Report, *, include_reviews: bool = False) -> "ReportDetail":
        owner = report.owner
        detail = cls(
            id=report.id,
            title=report.title,
            description=report.description or "",
            category=report.category,
            location=report.location,
            image_url=report.image_url or "",
            images=[ImageSchema(url=image["url"], public_id=image["publicId"]) for image in report.images or []],
            resolved=bool(report.resolved),
            resolved_at=report.resolved_at,
            resolved_by=report.resolved_by,
            created_at=report.created_at,
            created_by=OwnerSchema(
                id=report.created_by,
                username=owner.username if owner is not None else None,
                email=owner.email if owner is not None else None,
            ),
        )
        if include_reviews:
            detail.reviews = [ReviewSchema.from_review(review) for review in report.reviews]
        return detail


class ReportSummary(CamelModel):
    id: UUID = Field(alias="_id")
    title: str
    category: str
    location: dict[str, float]
    thumbnail: str
    status: Literal["resolved", "pending"]
    created_at: datetime
    created_by: str

    @classmethod
    def from_report(cls, report: Report) -> "ReportSummary":
        owner = report.owner
        return cls(
            id=report.id,
            title=report.title,
            category=report.category,
            location=report.location,
            thumbnail=report.image_url or "",
            status="resolved" if report.resolved else "pending",
            created_at=report.created_at,
            created_by=owner.username if owner is not None and owner.username else "Unknown",
        )


class PaginationSchema(CamelModel):
    current_page: int
    total_pages: int
    total_reports: int
    limit: int
    has_next_page: bool
    has_prev_page: bool


class ReportCreateResponse(CamelModel):
    success: bool = True
    report: CreatedReport


class ReportDetailResponse(CamelModel):
    success: bool = True
    report: ReportDetail


class ReportListResponse(CamelModel):
    success: bool = True
    reports: list[ReportSummary]
    pagination: PaginationSchema


class ReportDeleteResponse(CamelModel):
    success: bool = True


class MapFeatureProperties(BaseModel):
    id: UUID
    title: str
    thumbnail: str
    status: Literal["resolved", "pending"]


class MapFeatureGeometry(BaseModel):
    type: Literal["Point"] = "Point"
    # GeoJSON order: [lng, lat]
    coordinates: tuple[float, float]


class MapFeature(BaseModel):
    type: Literal["Feature"] = "Feature"
    properties: MapFeatureProperties
    geometry: MapFeatureGeometry

    @classmethod
    def from_report(cls, report: Report) -> "MapFeature":
        location: dict[str, Any] = report.location or {}
        return cls(
            properties=MapFeatureProperties(
                id=report.id,
                title=report.title,
                thumbnail=report.image_url or "",
                status="resolved" if report.resolved else "pending",
            ),
            geometry=MapFeatureGeometry(coordinates=(float(location["lng"]), float(location["lat"]))),
        )


class MapFeatureCollection(BaseModel):
    type: Literal["FeatureCollection"] = "FeatureCollection"
    features: list[MapFeature]


__all__ = [
    "Location",
    "ReportCreateRequest",
    "ReportUpdateRequest",
    "ReportResolveRequest",
    "ImageSchema",
    "OwnerSchema",
    "ReviewSchema",
    "CreatedReport",
    "ReportDetail",
    "ReportSummary",
    "PaginationSchema",
    "ReportCreateResponse",
    "ReportDetailResponse",
    "ReportListResponse",
    "ReportDeleteResponse",
    "MapFeature",
    "MapFeatureCollection",
]
