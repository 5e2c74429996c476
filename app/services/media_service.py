"""Batch image operations with compensating cleanup.

Uploads within a request are all-or-nothing: when one upload fails, every
image stored earlier in the same batch is deleted again before the error is
re-raised. Deletions are best effort; failures are logged and counted so that
orphaned hosted objects stay observable through ``compensation_snapshot``.
"""
from __future__ import annotations

import logging
import threading
from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable, Sequence

from . import image_storage
from .image_storage import ImageDeleteError, ImageUploadError, StoredImage

logger = logging.getLogger(__name__)


@dataclass
class CompensationStats:
    """Process-wide counters for best-effort image deletions."""

    attempted: int = 0
    failed: int = 0
    failed_by_reason: Counter = field(default_factory=Counter)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def record(self, reason: str, *, ok: bool) -> None:
        with self._lock:
            self.attempted += 1
            if not ok:
                self.failed += 1
                self.failed_by_reason[reason] += 1

    def snapshot(self) -> dict[str, object]:
        with self._lock:
            return {
                "attempted": self.attempted,
                "failed": self.failed,
                "failedByReason": dict(self.failed_by_reason),
            }

    def reset(self) -> None:
        with self._lock:
            self.attempted = 0
            self.failed = 0
            self.failed_by_reason.clear()


compensation_stats = CompensationStats()


def compensation_snapshot() -> dict[str, object]:
    return compensation_stats.snapshot()


async def discard_images(public_ids: Iterable[str], *, reason: str) -> int:
    """Delete each hosted image independently and return the number of failures."""

    failures = 0
    for public_id in public_ids:
        if not public_id:
            continue
        try:
            await image_storage.delete_image(public_id)
        except ImageDeleteError as exc:
            failures += 1
            compensation_stats.record(reason, ok=False)
            logger.warning("Failed to delete image %s (%s): %s", public_id, reason, exc)
            continue
        compensation_stats.record(reason, ok=True)
    return failures


async def discard_report_images(images: Sequence[dict], image_url: str | None, *, reason: str) -> int:
    """Release every hosted image of a report.

    Records created before the ``images`` list existed only carry ``image_url``;
    their object key is recovered from the URL.
    """

    public_ids = [str(image.get("publicId")) for image in images if image.get("publicId")]
    if not public_ids and image_url:
        try:
            key = image_storage.key_from_public_url(image_url)
        except image_storage.ImageStorageConfigurationError as exc:
            compensation_stats.record(reason, ok=False)
            logger.warning("Cannot derive object key for %s: %s", image_url, exc)
            return 1
        if key:
            public_ids = [key]
    return await discard_images(public_ids, reason=reason)


async def upload_images(payloads: Sequence[str], *, folder: str | None = None) -> list[StoredImage]:
    """Upload payloads in order; on failure roll back this batch and re-raise."""

    uploaded: list[StoredImage] = []
    for index, payload in enumerate(payloads):
        try:
            uploaded.append(await image_storage.upload_image(payload, folder=folder))
        except ImageUploadError as exc:
            logger.warning(
                "Image %d of %d failed to upload, rolling back %d stored image(s): %s",
                index + 1,
                len(payloads),
                len(uploaded),
                exc,
            )
            await discard_images((image.public_id for image in uploaded), reason="upload_rollback")
            raise
    return uploaded


__all__ = [
    "CompensationStats",
    "compensation_stats",
    "compensation_snapshot",
    "discard_images",
    "discard_report_images",
    "upload_images",
]
