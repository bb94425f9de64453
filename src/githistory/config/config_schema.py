"""Schemas for the githistory configuration file."""

from pydantic import BaseModel, Field


class HistoryConfigSchema(BaseModel):
	"""Settings for the history provider."""

	summary_label: str = "Changes"
	sort_by_author_date: bool = True


class GitConfigSchema(BaseModel):
	"""Settings for the repository access layer."""

	executable: str = "git"
	default_remote: str = "origin"


class AppConfigSchema(BaseModel):
	"""Top-level configuration."""

	history: HistoryConfigSchema = Field(default_factory=HistoryConfigSchema)
	git: GitConfigSchema = Field(default_factory=GitConfigSchema)
