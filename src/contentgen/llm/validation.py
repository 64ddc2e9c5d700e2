from __future__ import annotations

from typing import Any, Mapping

from contentgen import config

from ._json import validate_json
from .errors import ContentValidationError
from .types import GeneratedContent, GenerationSettings

DEFAULT_TAGS = ("generated", "ai")
ELLIPSIS = "..."

REQUIRED_FIELDS_SCHEMA: dict[str, Any] = {
    "type": "object",
    "required": ["title", "body"],
    "properties": {
        "title": {"type": "string", "minLength": 1},
        "body": {"type": "string", "minLength": 1},
    },
}


def length_bounds(settings: GenerationSettings) -> tuple[float, int]:
    """Return (min_length, max_length) for the requested content length."""
    target = settings.target_length
    return max(10, target * 0.5), target * 2


def validate_content_quality(
    record: Mapping[str, Any], settings: GenerationSettings
) -> GeneratedContent:
    """Check a parsed record and normalize it into GeneratedContent.

    - title and body must be non-empty strings
    - body shorter than the minimum length is rejected
    - body longer than ten times the maximum length is cut and marked with "..."
    - tags are capped at MAX_TAGS; a non-list becomes the default pair
    - a missing mediaUrl becomes ""
    """

    validate_json(
        dict(record),
        REQUIRED_FIELDS_SCHEMA,
        "Generated content missing required fields",
    )

    body: str = record["body"]
    min_length, max_length = length_bounds(settings)
    if len(body) < min_length:
        raise ContentValidationError("Generated content too short")

    ceiling = max_length * 10
    if len(body) > ceiling:
        body = body[:ceiling] + ELLIPSIS

    tags = record.get("tags")
    if not isinstance(tags, list):
        tags = list(DEFAULT_TAGS)
    tags = [str(t) for t in tags[: config.MAX_TAGS]]

    media_url = record.get("mediaUrl") or ""

    return GeneratedContent(
        title=record["title"],
        body=body,
        tags=tags,
        media_url=str(media_url),
    )
