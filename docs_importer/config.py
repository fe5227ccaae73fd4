"""Configuration for the docs importer."""
from pathlib import Path
from typing import Optional
from dotenv import load_dotenv
from pydantic_settings import BaseSettings
from pydantic import Field


class ImporterConfig(BaseSettings):
    """Docs importer configuration."""

    # GitHub
    github_owner: str = Field(
        default="npm",
        description="Owner of the repository holding the doc sources"
    )
    github_repo: str = Field(
        default="cli",
        description="Repository holding the doc sources"
    )
    github_api_url: str = Field(
        default="https://api.github.com",
        description="GitHub REST API base URL"
    )
    github_token: Optional[str] = Field(
        default=None,
        description="GitHub token (raises the API rate limit)"
    )

    # Registry
    registry_url: str = Field(
        default="https://registry.npmjs.org",
        description="Package registry used to resolve tarball specifiers"
    )

    # Output
    content_path: str = Field(
        default="content/cli",
        description="Root of the site content tree; each release lands in <content_path>/<id>"
    )

    # HTTP
    request_timeout: float = Field(
        default=30.0,
        description="HTTP request timeout in seconds"
    )
    max_concurrency: int = Field(
        default=8,
        ge=1,
        description="Maximum simultaneous file fetches against the GitHub API"
    )
    user_agent: str = Field(
        default="docs-importer/1.0 (Python)",
        description="User agent for HTTP requests"
    )

    verbose: bool = Field(
        default=False,
        description="Enable verbose logging"
    )

    @classmethod
    def from_env(cls, env_file: Optional[Path] = None) -> "ImporterConfig":
        """
        Load config from a .env file and environment variables.

        Args:
            env_file: Optional .env path (defaults to ./.env when present)

        Returns:
            ImporterConfig
        """
        load_dotenv(env_file)
        return cls()

    @property
    def github_repository(self) -> str:
        return f"{self.github_owner}/{self.github_repo}"

    class Config:
        env_prefix = "DOCS_IMPORT_"
        case_sensitive = False
