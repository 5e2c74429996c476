"""Convenience exports for schema layer."""
from .reports import (
    CreatedReport,
    Location,
    MapFeature,
    MapFeatureCollection,
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

__all__ = [
    "CreatedReport",
    "Location",
    "MapFeature",
    "MapFeatureCollection",
    "ReportCreateRequest",
    "ReportCreateResponse",
    "ReportDeleteResponse",
    "ReportDetail",
    "ReportDetailResponse",
    "ReportListResponse",
    "ReportResolveRequest",
    "ReportSummary",
    "ReportUpdateRequest",
]
