"""Configuration for githistory."""

from .config_loader import ConfigError, ConfigFileNotFoundError, ConfigLoader, ConfigParsingError
from .config_schema import AppConfigSchema, GitConfigSchema, HistoryConfigSchema

__all__ = [
	"AppConfigSchema",
	"ConfigError",
	"ConfigFileNotFoundError",
	"ConfigLoader",
	"ConfigParsingError",
	"GitConfigSchema",
	"HistoryConfigSchema",
]
