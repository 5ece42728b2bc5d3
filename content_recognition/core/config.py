from dataclasses import dataclass
from typing import Any, List

from pydantic import field_validator
from pydantic_settings import BaseSettings

DEFAULT_PORT = 4000
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    """Application configuration settings"""

    # Application
    APP_NAME: str = "Content Recognition API"
    VERSION: str = "1.0.0"
    LOG_LEVEL: str = "INFO"

    # Server
    BACKEND_HOST: str = "0.0.0.0"
    BACKEND_PORT: Any = DEFAULT_PORT  # validated lazily, see backend_port

    # Vision provider
    AI_VISION_API_KEY: str = ""
    AI_VISION_PROVIDER_URL: str = ""
    VISION_MODEL: str = "gpt-4o-mini"
    VISION_IMAGE_DETAIL: str = "low"

    # Upload constraints
    MAX_UPLOAD_SIZE: int = 10 * 1024 * 1024  # 10MB
    UPLOAD_FIELD_NAME: str = "image"
    SUPPORTED_IMAGE_TYPES: List[str] = [
        "image/jpeg",
        "image/jpg",
        "image/png",
        "image/gif",
        "image/webp",
    ]

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def _normalize_log_level(cls, value: Any) -> str:
        level = str(value or "").strip().upper()
        return level if level in LOG_LEVELS else "INFO"

    @property
    def backend_port(self) -> int:
        """BACKEND_PORT as an int, or the default when it is not a positive number"""
        port = _parse_port(self.BACKEND_PORT)
        return port if port is not None else DEFAULT_PORT


class ClientSettings(BaseSettings):
    """Settings for the image submission client"""

    BACKEND_URL: str = "http://localhost:4000"
    CLIENT_TIMEOUT_SECONDS: float = 30.0

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


@dataclass(frozen=True)
class ConfigurationIssue:
    """A problem found while validating settings at startup"""
    setting: str
    message: str


def _parse_port(raw: Any):
    try:
        port = int(str(raw).strip())
    except (TypeError, ValueError):
        return None
    return port if port > 0 else None


def validate_settings(config: Settings) -> List[ConfigurationIssue]:
    """
    Check settings that would make recognition requests fail.

    Args:
        config: Loaded settings

    Returns:
        List of issues, empty when the configuration is complete
    """
    issues = []

    if not config.AI_VISION_API_KEY:
        issues.append(ConfigurationIssue(
            "AI_VISION_API_KEY",
            "AI_VISION_API_KEY is not defined. Image recognition requests will fail until it is provided."
        ))

    if not config.AI_VISION_PROVIDER_URL:
        issues.append(ConfigurationIssue(
            "AI_VISION_PROVIDER_URL",
            "AI_VISION_PROVIDER_URL is not defined. Image recognition requests will fail until it is provided."
        ))

    if _parse_port(config.BACKEND_PORT) is None:
        issues.append(ConfigurationIssue(
            "BACKEND_PORT",
            f"Invalid BACKEND_PORT value {config.BACKEND_PORT!r}, falling back to {DEFAULT_PORT}"
        ))

    return issues


settings = Settings()
