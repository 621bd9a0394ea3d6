"""
Centralized settings for the Read API client using Pydantic.

Environment variables (or a local .env file) are read once and validated.
The client itself only ever sees the immutable ReadClientConfig produced
from these settings.
"""

from functools import lru_cache

from pydantic import BaseModel, Field, SecretStr
from pydantic_settings import BaseSettings

from imagetext.core.config import (
    DEFAULT_CLIENT_TIMEOUT_SECONDS,
    DEFAULT_POLL_DELAY_SECONDS,
)


class ReadClientConfig(BaseModel):
    """Immutable connection settings handed to ReadAsyncClient."""

    endpoint: str
    subscription_key: SecretStr
    poll_delay_seconds: float = Field(default=DEFAULT_POLL_DELAY_SECONDS, ge=0.0)
    timeout_seconds: float = Field(default=DEFAULT_CLIENT_TIMEOUT_SECONDS, gt=0.0)
    verify_ssl: bool = True

    model_config = {"frozen": True}


class VisionSettings(BaseSettings):
    """Computer Vision service configuration."""

    VISION_ENDPOINT: str
    VISION_SUBSCRIPTION_KEY: SecretStr
    VISION_POLL_DELAY_SECONDS: float = Field(default=DEFAULT_POLL_DELAY_SECONDS, ge=0.0)
    VISION_CLIENT_TIMEOUT_SECONDS: float = Field(
        default=DEFAULT_CLIENT_TIMEOUT_SECONDS, gt=0.0
    )
    VISION_VERIFY_SSL: bool = True

    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True

    model_config = {"case_sensitive": True, "env_file": ".env", "extra": "ignore"}

    def to_client_config(self) -> ReadClientConfig:
        return ReadClientConfig(
            endpoint=self.VISION_ENDPOINT,
            subscription_key=self.VISION_SUBSCRIPTION_KEY,
            poll_delay_seconds=self.VISION_POLL_DELAY_SECONDS,
            timeout_seconds=self.VISION_CLIENT_TIMEOUT_SECONDS,
            verify_ssl=self.VISION_VERIFY_SSL,
        )


@lru_cache(maxsize=1)
def get_settings() -> VisionSettings:
    return VisionSettings()  # type: ignore[call-arg]
