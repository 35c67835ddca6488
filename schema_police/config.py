"""
Application configuration management.
"""

from pathlib import Path
from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Webhook
    webhook_secret: str = Field(
        validation_alias=AliasChoices("webhook_secret", "github_webhook_secret")
    )

    # GitHub App
    github_app_id: Optional[str] = None
    github_private_key: Optional[str] = None
    github_private_key_path: Optional[str] = None
    github_api_url: str = "https://api.github.com"
    github_bot_login: Optional[str] = None  # Discovered from GET /app if not set
    user_agent: str = "graphql-schema-police (+https://github.com/millingab/graphql-police)"
    request_timeout_seconds: float = 5.0

    # Analysis
    opt_in_config_path: str = ".github/graphql-schema-police.yml"
    comment_page_size: int = 50
    max_comment_pages: int = 20
    strict_classification: bool = False

    # Application
    log_level: str = "INFO"
    port: int = 7010

    class Config:
        env_file = ".env"
        case_sensitive = False
        populate_by_name = True

    def load_private_key(self) -> str:
        """
        Return the GitHub App private key in PEM form.

        Raises:
            ValueError: If neither the key nor a key path is configured
        """
        if self.github_private_key:
            # Keys passed through env files often carry escaped newlines
            return self.github_private_key.replace("\\n", "\n")
        if self.github_private_key_path:
            return Path(self.github_private_key_path).read_text(encoding="utf-8")
        raise ValueError("GITHUB_PRIVATE_KEY or GITHUB_PRIVATE_KEY_PATH must be set")


# Global settings instance
settings = Settings()
