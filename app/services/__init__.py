"""Convenience exports for service layer."""
from .auth_service import (
    AuthenticatedPrincipal,
    ensure_placeholder_user,
    get_current_principal,
    get_optional_principal,
    get_reporting_principal,
    require_admin,
    require_roles,
)
from .geocoding_service import Coordinates, GeocodeError, geocode_address
from .image_storage import (
    ImageDeleteError,
    ImageStorageConfigurationError,
    ImageUploadError,
    StoredImage,
    delete_image,
    upload_image,
)
from .media_service import compensation_snapshot, discard_images, discard_report_images, upload_images
from .report_service import (
    ReportPage,
    create_report,
    delete_report_if_owner,
    get_report_by_id,
    list_reports,
    parse_report_id,
    set_report_resolution,
    update_report,
    validate_category,
)

__all__ = [
    "AuthenticatedPrincipal",
    "ensure_placeholder_user",
    "get_current_principal",
    "get_optional_principal",
    "get_reporting_principal",
    "require_admin",
    "require_roles",
    "Coordinates",
    "GeocodeError",
    "geocode_address",
    "ImageDeleteError",
    "ImageStorageConfigurationError",
    "ImageUploadError",
    "StoredImage",
    "delete_image",
    "upload_image",
    "compensation_snapshot",
    "discard_images",
    "discard_report_images",
    "upload_images",
    "ReportPage",
    "create_report",
    "delete_report_if_owner",
    "get_report_by_id",
    "list_reports",
    "parse_report_id",
    "set_report_resolution",
    "update_report",
    "validate_category",
]
