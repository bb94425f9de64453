"""Read-only access to a git repository for the history provider."""

from __future__ import annotations

import asyncio
import logging
import subprocess
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path

import pygit2

from githistory.config.config_schema import GitConfigSchema
from githistory.git.uri import Uri
from githistory.utils.events import EventEmitter

logger = logging.getLogger(__name__)

# Fields are newline separated, records NUL terminated by ``git log -z``
COMMIT_FORMAT = "%H%n%aN%n%aE%n%at%n%ct%n%P%n%B"
COMMIT_FIELD_COUNT = 7


class GitError(Exception):
	"""Custom exception for Git-related errors."""


class RefType(Enum):
	"""Kind of reference a branch descriptor points at."""

	HEAD = "head"
	REMOTE_HEAD = "remote_head"
	TAG = "tag"


class ChangeStatus(Enum):
	"""Status of a file between two revisions."""

	ADDED = "A"
	COPIED = "C"
	DELETED = "D"
	MODIFIED = "M"
	RENAMED = "R"
	TYPE_CHANGED = "T"


@dataclass
class UpstreamRef:
	"""The remote tracking branch configured for a local branch."""

	remote: str
	name: str


@dataclass
class Branch:
	"""A branch descriptor; ``name`` is None for a detached HEAD."""

	name: str | None
	commit: str | None
	type: RefType = RefType.HEAD
	remote: str | None = None
	upstream: UpstreamRef | None = None
	ahead: int | None = None
	behind: int | None = None


@dataclass
class Commit:
	"""A commit as reported by ``git log``."""

	hash: str
	message: str
	parents: list[str] = field(default_factory=list)
	author_name: str | None = None
	author_email: str | None = None
	author_date: datetime | None = None
	commit_date: datetime | None = None


@dataclass
class Change:
	"""A file changed between two revisions."""

	uri: Uri
	original_uri: Uri
	rename_uri: Uri | None
	status: ChangeStatus


@dataclass
class CommitCount:
	"""Commits unique to each side of a symmetric range."""

	ahead: int
	behind: int


def run_git_command(command: list[str], cwd: Path | None = None) -> str:
	"""
	Run a Git command and return its output.

	Args:
		command: Git command to run
		cwd: Working directory (optional)

	Returns:
		Command output as string

	Raises:
		GitError: If the command fails
	"""
	try:
		result = subprocess.run(  # noqa: S603
			command,
			cwd=cwd,
			capture_output=True,
			text=True,
			check=True,
		)
	except subprocess.CalledProcessError as e:
		error_msg = f"Git command failed: {' '.join(command)}\nError: {e.stderr}"
		logger.exception(error_msg)
		raise GitError(error_msg) from e
	except FileNotFoundError as e:
		error_msg = f"Git executable not found: {command[0]}"
		logger.exception(error_msg)
		raise GitError(error_msg) from e
	else:
		return result.stdout


def _parse_timestamp(value: str) -> datetime | None:
	if not value.strip():
		return None
	return datetime.fromtimestamp(int(value), tz=UTC)


def parse_log(output: str) -> list[Commit]:
	"""
	Parse ``git log -z`` output produced with ``COMMIT_FORMAT``.

	Args:
		output: Raw stdout of the log command

	Returns:
		Commits in the order git printed them
	"""
	commits: list[Commit] = []
	for record in output.split("\x00"):
		record = record.lstrip("\n")
		if not record:
			continue

		fields = record.split("\n", COMMIT_FIELD_COUNT - 1)
		if len(fields) < COMMIT_FIELD_COUNT:
			logger.warning("Skipping malformed log record: %r", record[:80])
			continue

		commit_hash, author_name, author_email, author_time, commit_time, parents, message = fields
		commits.append(
			Commit(
				hash=commit_hash,
				message=message.rstrip(),
				parents=parents.split(),
				author_name=author_name,
				author_email=author_email,
				author_date=_parse_timestamp(author_time),
				commit_date=_parse_timestamp(commit_time),
			)
		)
	return commits


def parse_name_status(output: str, root: Path) -> list[Change]:
	"""
	Parse ``git diff --name-status -z`` output.

	Args:
		output: Raw stdout of the diff command
		root: Work tree root the reported paths are relative to

	Returns:
		One change per reported file
	"""
	changes: list[Change] = []
	tokens = output.split("\x00")
	index = 0

	while index < len(tokens) and tokens[index]:
		status_code = tokens[index][0]
		index += 1

		if status_code in ("R", "C"):
			original_path, new_path = tokens[index], tokens[index + 1]
			index += 2
			new_uri = Uri.file(root / new_path)
			changes.append(
				Change(
					uri=new_uri,
					original_uri=Uri.file(root / original_path),
					rename_uri=new_uri,
					status=ChangeStatus(status_code),
				)
			)
			continue

		path = tokens[index]
		index += 1
		try:
			status = ChangeStatus(status_code)
		except ValueError:
			logger.warning("Skipping %s with unknown status %r", path, status_code)
			continue

		uri = Uri.file(root / path)
		changes.append(Change(uri=uri, original_uri=uri, rename_uri=None, status=status))

	return changes


class Repository:
	"""
	A git repository exposing the queries the history provider needs.

	Ref and graph lookups go through pygit2; log and diff output come from the
	git executable. Every query is a coroutine that runs its blocking work in a
	worker thread.

	"""

	def __init__(self, root: Path, config: GitConfigSchema | None = None) -> None:
		"""
		Open the repository.

		Args:
			root: Path inside the repository work tree
			config: Git settings (optional)

		Raises:
			GitError: If ``root`` is not inside a git repository
		"""
		self.config = config or GitConfigSchema()
		try:
			self._repo = pygit2.Repository(str(root))
		except (KeyError, pygit2.GitError) as e:
			msg = f"Not a git repository: {root}"
			logger.exception(msg)
			raise GitError(msg) from e

		workdir = self._repo.workdir
		self.root = Path(workdir) if workdir else Path(root)
		self.head: Branch | None = None

		self._on_did_run_git_status: EventEmitter[None] = EventEmitter()
		self.on_did_run_git_status = self._on_did_run_git_status.event

	@classmethod
	def discover(cls, path: Path | None = None, config: GitConfigSchema | None = None) -> Repository:
		"""Open the repository containing ``path`` (defaults to the current directory)."""
		git_dir = pygit2.discover_repository(str(path or Path.cwd()))
		if git_dir is None:
			msg = "Not a git repository"
			logger.error(msg)
			raise GitError(msg)
		return cls(Path(git_dir), config)

	async def _exec(self, *args: str) -> str:
		return await asyncio.to_thread(run_git_command, [self.config.executable, *args], self.root)

	async def status(self) -> None:
		"""Re-read HEAD and notify status listeners."""
		self.head = await asyncio.to_thread(self._read_head)
		logger.debug("Status refreshed for %s: HEAD=%s", self.root, self.head)
		self._on_did_run_git_status.fire(None)

	def _read_head(self) -> Branch | None:
		repo = self._repo

		if repo.head_is_unborn:
			target = repo.references["HEAD"].target
			name = target.removeprefix("refs/heads/") if isinstance(target, str) else None
			return Branch(name=name, commit=None)

		if repo.head_is_detached:
			return Branch(name=None, commit=str(repo.head.target))

		head = repo.head
		name = head.shorthand
		commit = str(head.target)
		upstream, ahead, behind = self._read_upstream(name, head.target)
		return Branch(name=name, commit=commit, upstream=upstream, ahead=ahead, behind=behind)

	def _read_upstream(self, name: str, target: pygit2.Oid) -> tuple[UpstreamRef | None, int | None, int | None]:
		branch = self._repo.branches.local.get(name)
		if branch is None:
			return None, None, None

		try:
			tracking = branch.upstream
		except (KeyError, pygit2.GitError):
			logger.debug("Upstream of %s is configured but cannot be resolved", name)
			return None, None, None
		if tracking is None:
			return None, None, None

		remote = tracking.remote_name
		upstream_name = tracking.branch_name.removeprefix(f"{remote}/")
		ahead, behind = self._repo.ahead_behind(target, tracking.target)
		return UpstreamRef(remote=remote, name=upstream_name), ahead, behind

	async def log(
		self, range: str | None = None, sort_by_author_date: bool = False, max_entries: int | None = None
	) -> list[Commit]:
		"""
		List commits.

		Args:
			range: Revision range such as ``main..feature`` (defaults to HEAD)
			sort_by_author_date: Order by author date instead of commit date
			max_entries: Maximum number of commits to return

		Returns:
			Commits, newest first
		"""
		args = ["log", f"--format={COMMIT_FORMAT}", "-z"]
		if sort_by_author_date:
			args.append("--author-date-order")
		if max_entries is not None:
			args.append(f"-n{max_entries}")
		args.extend([range or "HEAD", "--"])
		return parse_log(await self._exec(*args))

	async def diff_between(self, ref1: str, ref2: str) -> list[Change]:
		"""Files changed on ``ref2`` since it diverged from ``ref1``."""
		output = await self._exec("diff", "--name-status", "-z", "--find-renames", f"{ref1}...{ref2}", "--")
		return parse_name_status(output, self.root)

	async def diff_between_short_stat(self, ref1: str, ref2: str) -> str:
		"""Short diff statistics such as ``2 files changed, 3 insertions(+)``."""
		output = await self._exec("diff", "--shortstat", f"{ref1}...{ref2}", "--")
		return output.strip()

	async def get_default_branch(self) -> Branch:
		"""
		Resolve the default branch of the default remote.

		Raises:
			GitError: If the remote has no ``HEAD`` reference
		"""
		return await asyncio.to_thread(self._read_default_branch)

	def _read_default_branch(self) -> Branch:
		remote = self.config.default_remote
		reference = self._repo.references.get(f"refs/remotes/{remote}/HEAD")
		if reference is None or not isinstance(reference.target, str):
			msg = f"No default branch for remote {remote}"
			raise GitError(msg)

		try:
			commit = str(reference.resolve().target)
		except (KeyError, pygit2.GitError) as e:
			msg = f"Default branch of {remote} points at a missing reference"
			raise GitError(msg) from e

		return Branch(
			name=reference.target.removeprefix("refs/remotes/"),
			commit=commit,
			type=RefType.REMOTE_HEAD,
			remote=remote,
		)

	def _resolve_commit(self, ref: str) -> pygit2.Oid:
		try:
			return self._repo.revparse_single(ref).peel(pygit2.Commit).id
		except (KeyError, ValueError, pygit2.GitError) as e:
			msg = f"Cannot resolve revision: {ref}"
			logger.exception(msg)
			raise GitError(msg) from e

	async def get_merge_base(self, ref1: str, ref2: str) -> str:
		"""Best common ancestor of two revisions, or an empty string when none exists."""

		def _merge_base() -> str:
			base = self._repo.merge_base(self._resolve_commit(ref1), self._resolve_commit(ref2))
			return str(base) if base is not None else ""

		return await asyncio.to_thread(_merge_base)

	async def get_commit_count(self, range: str) -> CommitCount:
		"""
		Count commits on each side of a symmetric range.

		Args:
			range: Range in ``left...right`` form

		Returns:
			Commits only on the left side as ``ahead`` and only on the right as ``behind``
		"""
		left, sep, right = range.partition("...")
		if not sep:
			msg = f"Expected a symmetric range (a...b), got {range!r}"
			raise ValueError(msg)

		def _count() -> CommitCount:
			ahead, behind = self._repo.ahead_behind(self._resolve_commit(left), self._resolve_commit(right))
			return CommitCount(ahead=ahead, behind=behind)

		return await asyncio.to_thread(_count)

	def dispose(self) -> None:
		"""Stop delivering status events."""
		self._on_did_run_git_status.dispose()
