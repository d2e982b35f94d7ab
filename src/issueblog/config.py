"""Application configuration: settings schema and config.yaml loader"""

import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field


CONFIG_FILE = "config.yaml"
ENV_PREFIX = "ISSUEBLOG_"


class Settings(BaseModel):
    app_name:         str = "issueblog"
    site_title:       str = Field(default="BlogHub",        description="Blog name shown in page chrome and feeds")
    site_description: str = Field(default="A blog powered by GitHub Issues and GitHub Pages")
    site_url:         Optional[str] = Field(default=None,   description="Public base URL; derived from repository when unset")
    repository:       str = Field(default="",               description="owner/name of the GitHub repository")
    db_url:           str = "sqlite:///issueblog.db"
    output_dir:       str = Field(default="docs",           description="Directory the static site is written to")
    posts_per_page:   int = Field(default=10,  ge=1,        description="Posts per index page")
    feed_items:       int = Field(default=20,  ge=1,        description="Newest posts included in feed.xml")
    excerpt_length:   int = Field(default=200, ge=0,        description="Excerpt length in characters; 0 = no limit")
    max_versions:     int = Field(default=10,  ge=0,        description="Max stored versions per post; 0 disables")
    parser_config:    str = Field(default="gfm-like",       description="MarkdownIt preset used for excerpts")

    @property
    def base_url(self) -> str:
        """Absolute site URL without a trailing slash."""
        if self.site_url:
            return self.site_url.rstrip("/")
        if "/" in self.repository:
            owner, name = self.repository.split("/", 1)
            return f"https://{owner.lower()}.github.io/{name}"
        return ""

    @property
    def repository_url(self) -> str:
        return f"https://github.com/{self.repository}" if self.repository else ""


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from config.yaml, then ISSUEBLOG_<FIELD> env vars, then non-None CLI overrides.

    GITHUB_REPOSITORY (set by Actions) fills repository when no other source does.
    """
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text()) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Invalid {CONFIG_FILE}: expected a mapping, got {type(data).__name__}")

    for name in Settings.model_fields:
        if val := os.getenv(f"{ENV_PREFIX}{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})

    if not data.get("repository") and (repo := os.getenv("GITHUB_REPOSITORY")):
        data["repository"] = repo
    return Settings(**data)
