from pydantic import BaseModel, ConfigDict, Field


class TransportRules(BaseModel):
    base_url: str = "http://localhost:5000"
    timeout_seconds: float = Field(default=10.0, gt=0)
    auth_token: str | None = None


class CooldownRules(BaseModel):
    discovery_interaction_ms: int = Field(default=2000, ge=0)
    post_view_ms: int = Field(default=5000, ge=0)
    profile_view_ms: int = Field(default=10000, ge=0)


class ImpressionRules(BaseModel):
    flush_delay_ms: int = Field(default=500, ge=0)


class WatchRules(BaseModel):
    skip_threshold_ms: int = Field(default=3000, ge=0)


class ThresholdRules(BaseModel):
    min_watch_event_ms: int = Field(default=1000, ge=0)
    min_content_skip_ms: int = Field(default=500, ge=0)


class EndpointRules(BaseModel):
    # {post_id} / {profile_id} / {content_id} are filled per request
    post_view: str = "/api/posts/{post_id}/view"
    profile_view: str = "/api/studio/profile-view"
    watch_event: str = "/api/studio/watch-event"
    discovery_interaction: str = "/api/discover/interaction"
    not_interested_profile: str = "/api/discover/not-interested/profile/{profile_id}"
    not_interested_content: str = "/api/discover/not-interested/content/{content_id}"


class TelemetryRules(BaseModel):
    transport: TransportRules = Field(default_factory=TransportRules)
    cooldowns: CooldownRules = Field(default_factory=CooldownRules)
    impressions: ImpressionRules = Field(default_factory=ImpressionRules)
    watch: WatchRules = Field(default_factory=WatchRules)
    thresholds: ThresholdRules = Field(default_factory=ThresholdRules)
    endpoints: EndpointRules = Field(default_factory=EndpointRules)

    model_config = ConfigDict(extra="forbid")
