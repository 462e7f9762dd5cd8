"""Configuration management for ghchangelog."""

import json
import logging
import os
from pathlib import Path
from typing import Optional, Any, List

from pydantic import BaseModel, ConfigDict, field_validator

from ..exceptions import ConfigError


DEFAULT_LABEL_FILTER = ["impact/changelog", "impact/breaking"]
TOKEN_ENV_VAR = "GITHUB_TOKEN"

logger = logging.getLogger(__name__)


class Config(BaseModel):
    """Settings for one changelog run, built once at startup."""

    model_config = ConfigDict(frozen=True)

    from_tag: Optional[str] = None
    to_tag: Optional[str] = None
    owner: Optional[str] = None
    repos: List[str] = []
    git_directory: str = "."
    github_token: Optional[str] = None
    api_url: str = "https://api.github.com"
    all_prs: bool = False
    tab_output: bool = False
    contributors: bool = False
    label_filter: List[str] = DEFAULT_LABEL_FILTER

    @field_validator('repos', mode='before')
    @classmethod
    def split_repos(cls, v):
        """Accept a comma-separated string as well as a list."""
        if v is None:
            return []
        if isinstance(v, str):
            v = v.split(',')
        if not isinstance(v, (list, tuple)):
            return v
        return [r.strip() for r in v if isinstance(r, str) and r.strip()]

    @field_validator('api_url')
    @classmethod
    def normalize_api_url(cls, v):
        """Ensure the API URL has a protocol and no trailing slash."""
        if v and not v.startswith(('http://', 'https://')):
            v = f"https://{v}"
        return v.rstrip('/')

    @field_validator('git_directory')
    @classmethod
    def expand_git_directory(cls, v):
        return os.path.expanduser(v)

    @property
    def active_label_filter(self) -> Optional[List[str]]:
        """Label filter to apply, or None when every PR is wanted."""
        if self.all_prs:
            return None
        return list(self.label_filter)

    def git_directory_for(self, repo: str) -> str:
        """Working tree for `repo`.

        With several repositories, `git_directory` is treated as a root holding
        one checkout per repository; a missing checkout falls back to the root.
        """
        if len(self.repos) > 1:
            candidate = Path(self.git_directory) / repo
            if candidate.is_dir():
                return str(candidate)
        return self.git_directory


def load_json_config(config_path: str) -> dict:
    """Load configuration from JSON file.

    Args:
        config_path: Path to JSON configuration file

    Returns:
        Configuration dictionary
    """
    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Error loading config file {config_path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {config_path} must contain a JSON object")
    return data


def find_config_file() -> Optional[str]:
    """Find configuration file in common locations.

    Returns:
        Path to config file or None if not found
    """
    search_paths = [
        "ghchangelog.json",
        ".ghchangelog.json",
        "~/.ghchangelog.json",
        "~/.config/ghchangelog/config.json",
    ]

    for path_str in search_paths:
        path = Path(path_str).expanduser()
        if path.exists() and path.is_file():
            return str(path)

    return None


def get_config(config_file: Optional[str] = None, **overrides: Any) -> Config:
    """Build the run configuration.

    Precedence, lowest first: defaults, JSON config file, the GITHUB_TOKEN
    environment variable, then `overrides` (CLI flags). Overrides that are
    None are ignored.

    Args:
        config_file: Optional path to JSON config file; when given, failing to
            load it raises ConfigError
        **overrides: Values taken from the command line

    Returns:
        Configuration object
    """
    config_data = {}

    if config_file:
        config_data.update(load_json_config(config_file))
    else:
        found = find_config_file()
        if found:
            try:
                config_data.update(load_json_config(found))
            except ConfigError as e:
                logger.warning(f"Ignoring config file: {e}")

    token = os.getenv(TOKEN_ENV_VAR)
    if token:
        config_data['github_token'] = token

    config_data.update({k: v for k, v in overrides.items() if v is not None})

    return Config(**config_data)
