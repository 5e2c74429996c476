"""Convenience exports for ORM models."""
from .report import REPORT_CATEGORIES, Report, ReportCategory
from .review import ReportReview
from .user import User

__all__ = [
    "REPORT_CATEGORIES",
    "Report",
    "ReportCategory",
    "ReportReview",
    "User",
]
