"""DigitalOcean Spaces integration for report photos."""
from __future__ import annotations

import base64
import binascii
import logging
import mimetypes
import re
import uuid
from dataclasses import dataclass
from functools import lru_cache
from typing import Iterable
from urllib.parse import urlparse

from boto3.session import Session
from botocore.client import BaseClient
from botocore.exceptions import BotoCoreError, ClientError
from fastapi.concurrency import run_in_threadpool

from ..config import get_settings
from ..security.secrets import MissingSecretError, require_env

logger = logging.getLogger(__name__)

_DATA_URI_RE = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)?(?P<params>(;[\w=.-]+)*?);base64,(?P<data>.*)$", re.DOTALL)


@dataclass(frozen=True)
class SpacesConfig:
    """Runtime configuration extracted from environment variables."""

    key: str
    secret: str
    region: str
    bucket: str
    api_endpoint: str
    public_endpoint: str


@dataclass(frozen=True)
class StoredImage:
    """A hosted image: public URL plus the opaque id needed to delete it."""

    url: str
    public_id: str

    def as_dict(self) -> dict[str, str]:
        return {"url": self.url, "publicId": self.public_id}


class ImageStorageConfigurationError(RuntimeError):
    """Raised when required DigitalOcean Spaces settings are missing or invalid."""


class ImageUploadError(RuntimeError):
    """Raised when an image cannot be decoded or stored."""


class ImageDeleteError(RuntimeError):
    """Raised when deleting a hosted image fails."""


@lru_cache(maxsize=1)
def load_spaces_config() -> SpacesConfig:
    """Read and validate DigitalOcean Spaces configuration from the environment."""

    try:
        env = require_env(
            "DO_SPACES_KEY",
            "DO_SPACES_SECRET",
            "DO_SPACES_REGION",
            "DO_SPACES_NAME",
            "DO_SPACES_ENDPOINT",
        )
    except MissingSecretError as exc:
        raise ImageStorageConfigurationError(
            "Missing required DigitalOcean Spaces configuration: " + ", ".join(exc.names)
        ) from exc

    region = env["DO_SPACES_REGION"]
    public_endpoint = env["DO_SPACES_ENDPOINT"].rstrip("/")
    if "://" not in public_endpoint:
        public_endpoint = f"https://{public_endpoint.lstrip(':/')}"
    host = urlparse(public_endpoint).netloc
    if not host:
        raise ImageStorageConfigurationError("DO_SPACES_ENDPOINT must include a hostname.")
    if not host.endswith(".digitaloceanspaces.com"):
        raise ImageStorageConfigurationError("DO_SPACES_ENDPOINT must point to a *.digitaloceanspaces.com hostname.")

    return SpacesConfig(
        key=env["DO_SPACES_KEY"],
        secret=env["DO_SPACES_SECRET"],
        region=region,
        bucket=env["DO_SPACES_NAME"],
        api_endpoint=f"https://{region}.digitaloceanspaces.com",
        public_endpoint=public_endpoint,
    )


@lru_cache(maxsize=1)
def get_spaces_client() -> BaseClient:
    """Create a singleton boto3 client for Spaces interactions."""

    config = load_spaces_config()
    session = Session()
    return session.client(
        "s3",
        region_name=config.region,
        endpoint_url=config.api_endpoint,
        aws_access_key_id=config.key,
        aws_secret_access_key=config.secret,
    )


def _sanitize_segments(parts: Iterable[str]) -> list[str]:
    sanitized: list[str] = []
    for part in parts:
        if part in {"", ".", ".."}:
            continue
        cleaned = re.sub(r"[^A-Za-z0-9._-]", "-", part.strip())
        cleaned = re.sub(r"-+", "-", cleaned).strip("-._")
        if cleaned:
            sanitized.append(cleaned)
    return sanitized


def _object_key(folder: str, extension: str) -> str:
    folder_segments = _sanitize_segments((folder or "reports").replace("\\", "/").split("/"))
    safe_folder = "/".join(folder_segments) or "reports"
    return f"{safe_folder}/{uuid.uuid4().hex}{extension}"


def decode_image_payload(payload: str) -> tuple[bytes, str, str]:
    """Decode a base64 data URI (or bare base64) into ``(body, content_type, extension)``."""

    raw = (payload or "").strip()
    if not raw:
        raise ImageUploadError("Image payload is empty")

    content_type = "application/octet-stream"
    match = _DATA_URI_RE.match(raw)
    if match:
        content_type = match.group("mime") or content_type
        raw = match.group("data")
        if not content_type.startswith("image/") and content_type != "application/octet-stream":
            raise ImageUploadError(f"Unsupported content type {content_type}")
    elif raw.startswith("data:"):
        raise ImageUploadError("Only base64 encoded data URIs are supported")

    try:
        body = base64.b64decode(raw, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ImageUploadError("Image payload is not valid base64") from exc
    if not body:
        raise ImageUploadError("Image payload is empty")

    extension = (mimetypes.guess_extension(content_type) or "") if content_type.startswith("image/") else ""
    if extension == ".jpe":
        extension = ".jpg"
    return body, content_type, extension


def build_public_url(key: str) -> str:
    """Build the public URL for an object stored in DigitalOcean Spaces."""

    config = load_spaces_config()
    normalized_key = key.lstrip("/")
    endpoint = config.public_endpoint.rstrip("/")
    return f"{endpoint}/{normalized_key}" if normalized_key else endpoint


def key_from_public_url(url: str) -> str | None:
    """Map a public URL produced by :func:`build_public_url` back to its object key."""

    if not url:
        return None
    config = load_spaces_config()
    endpoint = config.public_endpoint.rstrip("/") + "/"
    if url.startswith(endpoint):
        return url[len(endpoint):] or None
    path = urlparse(url).path.lstrip("/")
    return path or None


async def upload_image(payload: str, *, folder: str | None = None, client: BaseClient | None = None) -> StoredImage:
    """Store one image payload and return its public URL and object key."""

    try:
        config = load_spaces_config()
        s3_client = client or get_spaces_client()
    except ImageStorageConfigurationError as exc:
        raise ImageUploadError(str(exc)) from exc

    body, content_type, extension = decode_image_payload(payload)
    key = _object_key(folder or get_settings().image_folder, extension)

    def _upload() -> None:
        try:
            s3_client.put_object(
                Bucket=config.bucket,
                Key=key,
                Body=body,
                ACL="public-read",
                ContentType=content_type,
            )
        except (ClientError, BotoCoreError) as exc:  # pragma: no cover - network errors hard to reproduce
            logger.exception("Upload to DigitalOcean Spaces failed: %s", exc)
            raise ImageUploadError("Upload to DigitalOcean Spaces failed") from exc

    await run_in_threadpool(_upload)

    logger.info("Stored report image %s (%d bytes)", key, len(body))
    return StoredImage(url=build_public_url(key), public_id=key)


async def delete_image(public_id: str, *, client: BaseClient | None = None) -> None:
    """Remove a hosted image by its object key."""

    if not public_id:
        return

    try:
        config = load_spaces_config()
        s3_client = client or get_spaces_client()
    except ImageStorageConfigurationError as exc:
        raise ImageDeleteError(str(exc)) from exc

    normalized_key = public_id.lstrip("/")

    def _delete() -> None:
        try:
            s3_client.delete_object(Bucket=config.bucket, Key=normalized_key)
        except (ClientError, BotoCoreError) as exc:  # pragma: no cover - network bound
            logger.exception("Failed to delete Spaces object %s", normalized_key)
            raise ImageDeleteError(f"Unable to delete image {normalized_key}") from exc

    await run_in_threadpool(_delete)


__all__ = [
    "SpacesConfig",
    "StoredImage",
    "ImageStorageConfigurationError",
    "ImageUploadError",
    "ImageDeleteError",
    "load_spaces_config",
    "get_spaces_client",
    "decode_image_payload",
    "build_public_url",
    "key_from_public_url",
    "upload_image",
    "delete_image",
]
