"""
Notion Blog Sync Configuration System.

Type-safe settings built on Pydantic. Values are loaded from:
1. Environment variables (secrets use their conventional names,
   everything else is prefixed with NOTION_SYNC_)
2. A .env file in the working directory
3. Explicit constructor arguments (highest priority)

Example usage:
    from notion_blog_sync.config import Settings

    settings = Settings()
    errors = settings.validate_credentials()
"""

from __future__ import annotations

from pathlib import Path

from pydantic import AliasChoices, BaseModel, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from notion_blog_sync.errors import ConfigurationError


class NotionOptions(BaseModel):
    """Options for the public Notion API (database queries)."""

    api_url: str = Field(
        default="https://api.notion.com/v1",
        description="Notion REST API base URL",
    )
    api_version: str = Field(
        default="2022-06-28",
        description="Value of the Notion-Version header",
    )
    page_size: int = Field(
        default=100,
        ge=1,
        le=100,
        description="Entries requested per database query page",
    )
    timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="HTTP timeout for API requests",
    )


class ExportOptions(BaseModel):
    """Options for the zipped markdown export of single pages."""

    base_url: str = Field(
        default="https://www.notion.so/api/v3",
        description="Base URL of the private export API",
    )
    poll_interval_seconds: float = Field(
        default=0.5,
        ge=0,
        description="Delay between export task status polls",
    )
    max_wait_seconds: float = Field(
        default=300.0,
        gt=0,
        description="Give up on an export task after this many seconds",
    )
    time_zone: str = Field(
        default="UTC",
        description="Time zone Notion renders dates in",
    )
    locale: str = Field(
        default="en",
        description="Locale of the export",
    )
    timeout_seconds: float = Field(
        default=60.0,
        gt=0,
        description="HTTP timeout for export requests and downloads",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Log level",
    )
    file: Path | None = Field(
        default=None,
        description="Log file path (None = console only)",
    )
    format: str = Field(
        default="rich",
        pattern="^(rich|json|simple)$",
        description="Log format: rich (colored), json, or simple",
    )


class Settings(BaseSettings):
    """
    Main settings class for Notion Blog Sync.

    Secrets are read from NOTION_INTEGRATION_TOKEN (database queries) and
    NOTION_TOKEN (the session cookie used for page exports). Everything
    else uses the NOTION_SYNC_ prefix, nested values with "__":

        export NOTION_SYNC_DEV_MODE=true
        export NOTION_SYNC_EXPORT__POLL_INTERVAL_SECONDS=1
    """

    model_config = SettingsConfigDict(
        env_prefix="NOTION_SYNC_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )

    notion_integration_token: SecretStr = Field(
        default=SecretStr(""),
        validation_alias=AliasChoices(
            "NOTION_INTEGRATION_TOKEN", "notion_integration_token"
        ),
        description="Integration token shared with the blog database",
    )
    notion_token: SecretStr = Field(
        default=SecretStr(""),
        validation_alias=AliasChoices("NOTION_TOKEN", "notion_token"),
        description="token_v2 session cookie used for zipped page exports",
    )

    dev_mode: bool = Field(
        default=False,
        description="Include unpublished entries for local previews",
    )
    static_dir: Path = Field(
        default=Path("static"),
        description="Site directory the assets directory path is relative to",
    )

    notion: NotionOptions = Field(default_factory=NotionOptions)
    export: ExportOptions = Field(default_factory=ExportOptions)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @property
    def published_only(self) -> bool:
        """Whether unpublished entries are left out of the run."""
        return not self.dev_mode

    def validate_credentials(self) -> list[str]:
        """Validate that required secrets are present. Returns list of errors."""
        errors = []
        if not self.notion_integration_token.get_secret_value():
            errors.append(
                "Provide NOTION_INTEGRATION_TOKEN env variable. Create an "
                "integration and share your Notion database with it, see "
                "https://developers.notion.com/docs"
            )
        if not self.notion_token.get_secret_value():
            errors.append(
                "Provide NOTION_TOKEN env variable. It is the token_v2 cookie "
                "of a logged in notion.so browser session"
            )
        return errors

    def require_credentials(self) -> None:
        """Raise ConfigurationError listing every missing secret."""
        errors = self.validate_credentials()
        if errors:
            raise ConfigurationError(errors)
