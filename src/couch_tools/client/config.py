"""Configuration for CouchDB client."""

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class CouchConfig(BaseSettings):
    """Configuration for CouchDB client.

    All settings can be configured via environment variables with COUCH_ prefix.

    Server:
        - COUCH_SERVER_URL (or COUCH_URL): base URL of the CouchDB server
        - COUCH_TIMEOUT: request timeout in seconds

    Authentication:
        - COUCH_USERNAME / COUCH_PASSWORD: basic-auth credentials, sent only
          when both are set
    """

    model_config = SettingsConfigDict(
        env_prefix="COUCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    server_url: str = Field(
        default="http://localhost:5984",
        validation_alias=AliasChoices("server_url", "COUCH_SERVER_URL", "COUCH_URL"),
    )
    timeout: float = Field(default=30.0, ge=1.0, le=300.0)

    username: str | None = Field(default=None)
    password: str | None = Field(default=None)

    follow_redirects: bool = Field(default=True)
    verify_ssl: bool = Field(default=True)

    @field_validator("server_url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Validate URL format and strip trailing slash."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("URL must start with http:// or https://")
        return v.rstrip("/")

    @property
    def auth(self) -> tuple[str, str] | None:
        """Basic-auth credentials, or None when not fully configured."""
        if self.username and self.password:
            return (self.username, self.password)
        return None
