"""Read storage credentials from the environment without echoing their values."""
from __future__ import annotations

import os
from typing import Final

__all__ = ["MissingSecretError", "is_placeholder", "require_env"]


class MissingSecretError(RuntimeError):
    """One or more required variables are unset or still hold a template value."""

    def __init__(self, names: list[str]) -> None:
        self.names = names
        super().__init__("Missing required configuration: " + ", ".join(names))


# Values copied verbatim from .env.example files
_PLACEHOLDER_VALUES: Final[frozenset[str]] = frozenset(
    {
        "changeme",
        "change-me",
        "placeholder",
        "your-key-here",
        "your-secret-here",
        "your-bucket-name",
        "xxx",
    }
)


def is_placeholder(value: str | None) -> bool:
    normalized = (value or "").strip().lower()
    return not normalized or normalized in _PLACEHOLDER_VALUES


def require_env(*names: str) -> dict[str, str]:
    """Return trimmed values for ``names``; report every unusable one at once."""

    values: dict[str, str] = {}
    missing: list[str] = []
    for name in names:
        raw = os.getenv(name)
        if is_placeholder(raw):
            missing.append(name)
        else:
            values[name] = raw.strip()
    if missing:
        raise MissingSecretError(sorted(missing))
    return values
