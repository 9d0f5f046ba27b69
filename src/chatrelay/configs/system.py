from datetime import timedelta

from pydantic import BaseModel, Field

DEFAULT_FALLBACK_REPLY = "Sorry, I could not process your request."


class ThirdPartyConfig(BaseModel):
    """Configuration for third-party integrations."""

    mongodb_uri: str = Field(
        default="",
        description="MongoDB connection URI (required at startup)",
    )
    mongodb_database: str = Field(
        default="chatrelay",
        description="Database holding the chat turn collection",
    )
    mongodb_collection: str = Field(
        default="messages",
        description="Collection storing one document per chat turn",
    )
    mongodb_ping_timeout: timedelta = Field(
        default=timedelta(seconds=2),
        description="Upper bound for the health-check ping",
    )
    webhook_url: str = Field(
        default="",
        description="Workflow-automation webhook URL; empty means degraded mode",
    )


class RelayConfig(BaseModel):
    """Outbound webhook call settings."""

    timeout: timedelta = Field(
        default=timedelta(seconds=30),
        description="Timeout for a single webhook call",
    )
    fallback_reply: str = Field(
        default=DEFAULT_FALLBACK_REPLY,
        description="Reply used when the webhook body carries no known field",
    )


class HistoryConfig(BaseModel):
    """Chat history read settings."""

    default_limit: int = Field(
        default=50, description="Turns returned when no usable limit is given"
    )


class APIConfig(BaseModel):
    """API configuration settings."""

    cors_origins: list[str] = Field(
        default_factory=lambda: ["*"],
        description="Origins allowed by the CORS middleware",
    )
    static_dir: str = Field(
        default="",
        description="Directory served at ``/``; empty uses the bundled page",
    )


class LoggingConfig(BaseModel):
    """Root logger settings."""

    level: str = Field(default="INFO", description="Root log level")
    json_output: bool = Field(
        default=False, description="Emit JSON lines instead of coloured text"
    )


class TracingConfig(BaseModel):
    """OpenTelemetry tracing settings (disabled by default)."""

    enabled: bool = Field(default=False, description="Enable OTLP export")
    service_name: str = Field(default="chatrelay", description="OTEL service.name")
    endpoint: str = Field(default="", description="OTLP HTTP traces endpoint")
    username: str = Field(default="", description="Basic-auth user for OTLP")
    password: str = Field(default="", description="Basic-auth password for OTLP")
    sample_rate: float = Field(
        default=1.0, description="Root sampling ratio between 0 and 1"
    )
    excluded_urls: list[str] = Field(
        default_factory=lambda: ["/api/health", "/metrics"],
        description="Paths left out of tracing and HTTP metrics",
    )


class ServerConfig(BaseModel):
    """Uvicorn bind settings."""

    host: str = Field(default="0.0.0.0", description="API server host")
    port: int = Field(default=3000, description="API server port")
