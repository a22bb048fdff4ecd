"""Configuration management."""

from .loader import ConfigLoader, APP_NAME
from .schema import Config, AppConfig, LocatorConfig, ApiConfig
from .conf_file import load_conf_file, parse_conf_text, compile_regex_literal

__all__ = [
    "ConfigLoader",
    "APP_NAME",
    "Config",
    "AppConfig",
    "LocatorConfig",
    "ApiConfig",
    "load_conf_file",
    "parse_conf_text",
    "compile_regex_literal",
]
