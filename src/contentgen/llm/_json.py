from __future__ import annotations

import json
import re
from typing import Any

from jsonschema import validate
from jsonschema.exceptions import ValidationError as _SchemaValidationError

from .errors import ContentValidationError
from .types import ParseResult

FALLBACK_TITLE = "Generated Content"
FALLBACK_TAGS = ("ai", "generated")

# Greedy: first "{" through last "}"
_EMBEDDED_OBJECT = re.compile(r"\{.*\}", re.DOTALL)


def _load_object(text: str) -> dict[str, Any] | None:
    try:
        data = json.loads(text)
    except ValueError:
        return None
    return data if isinstance(data, dict) else None


def parse_ai_response(text: str) -> ParseResult:
    """Parse a provider response into a content record.

    Providers are told to answer with a bare JSON object but often wrap it in
    prose or markdown fences. This never raises: text with no usable object
    becomes the body of a placeholder record.
    """

    data = _load_object(text)
    if data is not None:
        return ParseResult(record=data, source="json")

    match = _EMBEDDED_OBJECT.search(text)
    if match:
        data = _load_object(match.group(0))
        if data is not None:
            return ParseResult(record=data, source="embedded")

    return ParseResult(
        record={
            "title": FALLBACK_TITLE,
            "body": text,
            "tags": list(FALLBACK_TAGS),
            "mediaUrl": "",
        },
        source="fallback",
    )


def validate_json(instance: dict[str, Any], schema: dict[str, Any], message: str) -> None:
    try:
        validate(instance=instance, schema=schema)
    except _SchemaValidationError as e:
        raise ContentValidationError(message) from e
