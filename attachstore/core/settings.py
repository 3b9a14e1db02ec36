"""Process-wide settings for attachstore."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Settings read from the environment (prefix ``ATTACHSTORE_``).

    Attributes:
        environment: Deployment environment used to pick a section of
            environment-scoped credential files (e.g. "production")
        default_region: Region used when fog_credentials names none
        retry_attempts: botocore retry attempts per request
        default_ttl: Default lifetime of expiring URLs, in seconds
    """

    model_config = SettingsConfigDict(
        env_prefix="ATTACHSTORE_",
        env_file=".env",
        extra="ignore",
    )

    environment: str | None = None
    default_region: str = "us-east-1"
    retry_attempts: int = Field(default=3, ge=1)
    default_ttl: int = Field(default=3600, gt=0)
