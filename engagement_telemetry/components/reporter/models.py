"""
Reporter component models - tags and outbound event shapes.

Event bodies serialize with camelCase keys; optional fields left unset are
omitted from the body.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

# --- Tags ---


class TrafficSource(str, Enum):
    """UI surface a view originated from."""

    FEED = "FEED"
    PROFILE = "PROFILE"
    SEARCH = "SEARCH"
    SHARE = "SHARE"
    DIRECT = "DIRECT"
    OTHER = "OTHER"


class ContentType(str, Enum):
    REEL = "REEL"
    VOICE = "VOICE"
    PHOTO = "PHOTO"
    TEXT = "TEXT"
    STORY = "STORY"


class InteractionType(str, Enum):
    """Outcome of an observation. The tracker only produces VIEW, SKIP and REWATCH."""

    VIEW = "VIEW"
    LIKE = "LIKE"
    SAVE = "SAVE"
    SHARE = "SHARE"
    COMMENT = "COMMENT"
    SKIP = "SKIP"
    REWATCH = "REWATCH"


def map_source(source: TrafficSource | str | None) -> TrafficSource:
    """Normalize a caller-supplied source; anything unrecognised is OTHER."""
    if isinstance(source, TrafficSource):
        return source
    try:
        return TrafficSource(source)
    except ValueError:
        return TrafficSource.OTHER


def normalize_content_type(content_type: ContentType | str | None) -> ContentType:
    """Unspecified or unrecognised content types default to REEL."""
    if isinstance(content_type, ContentType):
        return content_type
    try:
        return ContentType(content_type)
    except ValueError:
        return ContentType.REEL


# --- Event Shapes ---


class TelemetryEvent(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    def to_body(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class _SourcedEvent(TelemetryEvent):
    source: TrafficSource = TrafficSource.FEED

    @field_validator("source", mode="before")
    @classmethod
    def _normalize_source(cls, v: Any) -> TrafficSource:
        return map_source(v)


class PostViewEvent(_SourcedEvent):
    """Body of a post view; the post id travels in the endpoint path."""


class ProfileViewEvent(_SourcedEvent):
    profile_user_id: str
    source: TrafficSource = TrafficSource.DIRECT


class WatchDurationEvent(_SourcedEvent):
    post_id: str
    watch_time_ms: int = Field(ge=0)
    completed: bool


class DiscoveryInteraction(TelemetryEvent):
    """Classified interaction as supplied by a caller (no session id)."""

    content_id: str
    content_type: ContentType = ContentType.REEL
    interaction_type: InteractionType
    watch_time_ms: int | None = Field(default=None, ge=0)
    completion_rate: float | None = Field(default=None, ge=0.0, le=1.0)
    rewatch_count: int | None = Field(default=None, ge=0)
    skipped_at_ms: int | None = Field(default=None, ge=0)
    creator_id: str | None = None

    @field_validator("content_type", mode="before")
    @classmethod
    def _default_content_type(cls, v: Any) -> ContentType:
        return normalize_content_type(v)


class DiscoveryInteractionEvent(DiscoveryInteraction):
    """Wire shape: the interaction stamped with the current session id."""

    session_id: str

    @classmethod
    def stamp(cls, interaction: DiscoveryInteraction, session_id: str) -> DiscoveryInteractionEvent:
        return cls(**interaction.model_dump(), session_id=session_id)


class NotInterestedEvent(TelemetryEvent):
    reason: str | None = None
