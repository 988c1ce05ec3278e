from __future__ import annotations

import os
from pathlib import Path

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_GITLAB_URL = "https://gitlab.com"
DEFAULT_GITHUB_API_URL = "https://api.github.com"


def load_environment() -> bool:
    """Load variables from the nearest `.env` file into the process environment.

    Existing environment variables win over the file.

    Returns:
        bool: True if a `.env` file was found and loaded
    """
    env_file = find_dotenv(usecwd=True)
    if not env_file:
        return False
    return load_dotenv(env_file, override=False)


def split_names(values: str | list[str] | None) -> list[str]:
    """Flatten comma separated names into a list of trimmed, non-empty names.

    Args:
        values: a comma separated string, a list of such strings, or None

    Returns:
        list[str]: the individual names, in order
    """
    if not values:
        return []
    if isinstance(values, str):
        values = [values]
    return [item.strip() for value in values for item in value.split(",") if item.strip()]


class Settings(BaseModel):
    """Configuration settings for the flatten_remote module."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    repo_url: str = Field(..., description="GitHub or GitLab repository URL.")
    specific_path: str = Field(default="", description="Directory to start from.")
    platform: str = Field(default="github", description="github or gitlab.")
    instructions: bool = Field(
        default=False,
        description="Prefix the output with the analysis prompt.",
    )
    base_url: str = Field(default=DEFAULT_GITLAB_URL, description="GitLab base URL.")
    github_api_url: str = Field(
        default=DEFAULT_GITHUB_API_URL,
        description="GitHub REST API root.",
    )
    skip_folders: list[str] = Field(
        default_factory=list,
        description="Folder names never descended into.",
    )
    skip_files: list[str] = Field(
        default_factory=list,
        description="File names never fetched.",
    )
    output: Path | None = Field(
        default=None,
        description="Output file. Defaults to '<repo>_contents.txt'.",
    )
    log_file: str = Field(default="", description="Log file path.")

    github_token: str | None = Field(
        default_factory=lambda: os.getenv("GITHUB_TOKEN"),
        description="GitHub token (GITHUB_TOKEN).",
    )
    gitlab_token: str | None = Field(
        default_factory=lambda: os.getenv("GITLAB_TOKEN"),
        description="GitLab private token (GITLAB_TOKEN).",
    )

    @field_validator("skip_folders", "skip_files", mode="before")
    @classmethod
    def _split_names(cls, value: str | list[str] | None) -> list[str]:
        return split_names(value)

    @field_validator("specific_path", mode="before")
    @classmethod
    def _default_path(cls, value: str | None) -> str:
        return value or ""

    @field_validator("base_url", "github_api_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")
