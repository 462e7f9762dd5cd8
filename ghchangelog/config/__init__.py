"""Configuration module."""

from .settings import (
    Config,
    DEFAULT_LABEL_FILTER,
    TOKEN_ENV_VAR,
    get_config,
    load_json_config,
    find_config_file,
)

__all__ = [
    "Config",
    "DEFAULT_LABEL_FILTER",
    "TOKEN_ENV_VAR",
    "get_config",
    "load_json_config",
    "find_config_file",
]
