"""Git access layer for githistory."""

from githistory.git.repository import (
	Branch,
	Change,
	ChangeStatus,
	Commit,
	CommitCount,
	GitError,
	RefType,
	Repository,
	UpstreamRef,
	run_git_command,
)
from githistory.git.uri import Uri, from_git_uri, to_git_uri

__all__ = [
	"Branch",
	"Change",
	"ChangeStatus",
	"Commit",
	"CommitCount",
	"GitError",
	"RefType",
	"Repository",
	"UpstreamRef",
	"Uri",
	"from_git_uri",
	"run_git_command",
	"to_git_uri",
]
