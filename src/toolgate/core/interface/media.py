"""Helpers for inline (base64) media in content parts."""

from __future__ import annotations


def split_data_url(value: str) -> tuple[str | None, str]:
    """Split ``data:<media>;base64,<payload>`` into ``(media, payload)``.

    Values that are not data URLs are returned unchanged with no media type.
    """
    if not value.startswith("data:") or "," not in value:
        return None, value
    header, payload = value[5:].split(",", 1)
    media_type = header.split(";", 1)[0] or None
    return media_type, payload


def to_data_url(media_type: str, data: str) -> str:
    """Wrap raw base64 *data* in a data URL; existing data URLs pass through."""
    if data.startswith("data:"):
        return data
    return f"data:{media_type};base64,{data}"
