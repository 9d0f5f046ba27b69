"""Configuration management using pydantic-settings.

**Not a singleton** -- each call to ``get_app_config()`` re-reads config
so that edits to the YAML file or the environment are picked up by the
next request.

Priority order (highest first):

1. Environment variables (``CHATRELAY_`` prefix, ``__`` for nesting)
2. ``.env`` dotenv file
3. Static YAML (``configs/config.yaml``)
4. Init defaults / field defaults
5. File secrets

Example::

    CHATRELAY_THIRD_PARTY__MONGODB_URI=mongodb://localhost:27017
    CHATRELAY_THIRD_PARTY__WEBHOOK_URL=https://n8n.example.com/webhook/chat
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

from .system import (
    APIConfig,
    HistoryConfig,
    LoggingConfig,
    RelayConfig,
    ServerConfig,
    ThirdPartyConfig,
    TracingConfig,
)

# ---------------------------------------------------------------------------
# Path constants
# ---------------------------------------------------------------------------

CONFIG_PY_PATH = Path(__file__).resolve()
PROJECT_ROOT = CONFIG_PY_PATH.parent.parent.parent.parent
CONFIG_DIR = PROJECT_ROOT / "configs"

STATIC_CONFIG_FILE = CONFIG_DIR / "config.yaml"

DOTENV_FILE_PATH = PROJECT_ROOT / ".env"
ENV_DELIMITER = "__"
ENV_PREFIX = "CHATRELAY_"

DEFAULT_ENCODING = "utf-8"


class ConfigError(Exception):
    """Raised when required external configuration is missing."""


# ---------------------------------------------------------------------------
# Application config (re-created on every call -- not a singleton)
# ---------------------------------------------------------------------------


class AppConfig(BaseSettings):
    """Application configuration."""

    model_config = SettingsConfigDict(
        env_file=DOTENV_FILE_PATH,
        env_file_encoding=DEFAULT_ENCODING,
        env_nested_delimiter=ENV_DELIMITER,
        env_prefix=ENV_PREFIX,
        case_sensitive=False,
        extra="ignore",
        yaml_file=STATIC_CONFIG_FILE,
        yaml_file_encoding=DEFAULT_ENCODING,
    )

    third_party: ThirdPartyConfig = Field(
        default_factory=ThirdPartyConfig,
        description="MongoDB and webhook endpoints",
    )

    relay: RelayConfig = Field(
        default_factory=RelayConfig,
        description="Webhook relay settings",
    )

    history: HistoryConfig = Field(
        default_factory=HistoryConfig,
        description="History endpoint settings",
    )

    api: APIConfig = Field(
        default_factory=APIConfig,
        description="API configuration settings",
    )

    logging: LoggingConfig = Field(
        default_factory=LoggingConfig,
        description="Logging bootstrap settings",
    )

    tracing: TracingConfig = Field(
        default_factory=TracingConfig,
        description="OpenTelemetry settings",
    )

    server: ServerConfig = Field(
        default_factory=ServerConfig,
        description="Uvicorn bind address",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls),
            init_settings,
            file_secret_settings,
        )


def get_app_config() -> AppConfig:
    """Get the application configuration.

    Re-reads ``configs/config.yaml`` and the environment on every call.
    """
    return AppConfig()
