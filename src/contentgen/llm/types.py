from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal, Mapping

from contentgen import config

from .errors import InputError

ParseSource = Literal["json", "embedded", "fallback"]


def _int_or_none(value: Any, name: str) -> int | None:
    """Numbers and numeric strings alike; fractions truncate toward zero."""
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise InputError(f"Invalid setting: {name}")
    if isinstance(value, int):
        return value
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError) as e:
        raise InputError(f"Invalid setting: {name}") from e


def _text(value: Any) -> str:
    return "" if value is None else str(value)


@dataclass(frozen=True)
class GenerationSettings:
    tone: str = ""
    creativity_level: str = ""
    target_audience: str = ""
    ai_temperature: int | None = None
    content_length: int | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> GenerationSettings:
        return cls(
            tone=_text(data.get("tone")),
            # Only ever interpolated into the prompt, so any value is kept as text.
            creativity_level=_text(data.get("creativity_level")),
            target_audience=_text(data.get("target_audience")),
            ai_temperature=_int_or_none(data.get("ai_temperature"), "ai_temperature"),
            content_length=_int_or_none(data.get("content_length"), "content_length"),
        )

    @property
    def temperature(self) -> float:
        """Sampling temperature on the 0..1 scale providers expect."""
        return (self.ai_temperature or config.DEFAULT_AI_TEMPERATURE) / 100

    @property
    def target_length(self) -> int:
        return self.content_length or config.DEFAULT_CONTENT_LENGTH


@dataclass(frozen=True)
class GenerationRequest:
    prompt: str
    settings: GenerationSettings
    requester_id: str
    requested_model: str | None = None

    @classmethod
    def from_payload(cls, payload: Any) -> GenerationRequest:
        """Build a request from the inbound JSON body.

        Raises InputError when prompt, settings or userId are missing.
        """
        if not isinstance(payload, Mapping):
            payload = {}
        prompt = payload.get("prompt")
        settings = payload.get("settings")
        user_id = payload.get("userId")
        if (
            not isinstance(prompt, str)
            or not prompt
            or not isinstance(settings, Mapping)
            or user_id in (None, "")
        ):
            raise InputError("Missing required fields: prompt, settings, or userId")

        model = payload.get("model")
        return cls(
            prompt=prompt,
            settings=GenerationSettings.from_dict(settings),
            requester_id=str(user_id),
            requested_model=model if isinstance(model, str) and model else None,
        )


@dataclass(frozen=True)
class ParseResult:
    """Outcome of parsing raw provider text.

    `source` tells whether the record came straight from JSON, from a JSON
    object embedded in prose, or was synthesized from the raw text.
    """

    record: dict[str, Any]
    source: ParseSource

    @property
    def is_fallback(self) -> bool:
        return self.source == "fallback"


@dataclass
class GeneratedContent:
    title: str
    body: str
    tags: list[str] = field(default_factory=list)
    media_url: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "body": self.body,
            "tags": list(self.tags),
            "mediaUrl": self.media_url,
        }
