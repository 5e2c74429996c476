"""Tests for batch uploads and compensating image cleanup."""
from __future__ import annotations

import asyncio
import os
from typing import Iterator

import pytest

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///./test_media_service.db")

from app.services import image_storage, media_service  # noqa: E402
from app.services.image_storage import ImageDeleteError, ImageUploadError, StoredImage  # noqa: E402


@pytest.fixture(autouse=True)
def _reset_stats() -> Iterator[None]:
    media_service.compensation_stats.reset()
    yield
    media_service.compensation_stats.reset()


@pytest.fixture
def deleted(monkeypatch) -> list[str]:
    removed: list[str] = []

    async def _delete(public_id: str, *, client=None) -> None:
        if public_id.startswith("stuck/"):
            raise ImageDeleteError(f"Unable to delete image {public_id}")
        removed.append(public_id)

    monkeypatch.setattr(image_storage, "delete_image", _delete)
    return removed


def test_upload_images_keeps_payload_order(monkeypatch, deleted):
    async def _upload(payload: str, *, folder=None, client=None) -> StoredImage:
        return StoredImage(url=f"https://cdn.example.test/{payload}", public_id=payload)

    monkeypatch.setattr(image_storage, "upload_image", _upload)

    stored = asyncio.run(media_service.upload_images(["one", "two", "three"]))

    assert [image.public_id for image in stored] == ["one", "two", "three"]
    assert deleted == []


def test_upload_images_rolls_back_batch_on_failure(monkeypatch, deleted):
    async def _upload(payload: str, *, folder=None, client=None) -> StoredImage:
        if payload == "bad":
            raise ImageUploadError("corrupt payload")
        return StoredImage(url=f"https://cdn.example.test/{payload}", public_id=payload)

    monkeypatch.setattr(image_storage, "upload_image", _upload)

    with pytest.raises(ImageUploadError):
        asyncio.run(media_service.upload_images(["first", "second", "bad", "never"]))

    assert deleted == ["first", "second"]
    snapshot = media_service.compensation_snapshot()
    assert snapshot == {"attempted": 2, "failed": 0, "failedByReason": {}}


def test_discard_images_counts_failures_without_raising(deleted):
    failures = asyncio.run(
        media_service.discard_images(["reports/a.png", "stuck/b.png", "", "reports/c.png"], reason="image_removed")
    )

    assert failures == 1
    assert deleted == ["reports/a.png", "reports/c.png"]
    assert media_service.compensation_snapshot() == {
        "attempted": 3,
        "failed": 1,
        "failedByReason": {"image_removed": 1},
    }


def test_discard_report_images_prefers_image_list(deleted):
    images = [{"url": "https://cdn.example.test/reports/a.png", "publicId": "reports/a.png"}]

    asyncio.run(
        media_service.discard_report_images(images, "https://cdn.example.test/reports/a.png", reason="report_delete")
    )

    assert deleted == ["reports/a.png"]


def test_discard_report_images_counts_unresolvable_legacy_url(monkeypatch, deleted):
    for var in ("DO_SPACES_KEY", "DO_SPACES_SECRET", "DO_SPACES_REGION", "DO_SPACES_NAME", "DO_SPACES_ENDPOINT"):
        monkeypatch.delenv(var, raising=False)
    image_storage.load_spaces_config.cache_clear()

    failures = asyncio.run(
        media_service.discard_report_images([], "https://cdn.example.test/legacy.png", reason="report_delete")
    )

    image_storage.load_spaces_config.cache_clear()
    assert failures == 1
    assert deleted == []
    assert media_service.compensation_snapshot()["failedByReason"] == {"report_delete": 1}
