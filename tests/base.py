"""Shared test doubles."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock

import pygit2

from githistory.git.repository import Branch, CommitCount
from githistory.utils.events import EventEmitter


class FakeRepository:
	"""In-memory stand-in for ``Repository`` with mocked queries."""

	def __init__(self, head: Branch | None = None) -> None:
		self.head = head
		self.root = Path("/repo")

		self._on_did_run_git_status: EventEmitter[None] = EventEmitter()
		self.on_did_run_git_status = self._on_did_run_git_status.event

		self.log = AsyncMock(return_value=[])
		self.diff_between = AsyncMock(return_value=[])
		self.diff_between_short_stat = AsyncMock(return_value="")
		self.get_default_branch = AsyncMock(return_value=Branch(name="origin/main", commit="f00"))
		self.get_merge_base = AsyncMock(return_value="")
		self.get_commit_count = AsyncMock(return_value=CommitCount(ahead=0, behind=0))

	def refresh(self, head: Branch | None) -> None:
		"""Simulate a status poll reporting ``head``."""
		self.head = head
		self._on_did_run_git_status.fire(None)

	@property
	def status_listener_count(self) -> int:
		return self._on_did_run_git_status.listener_count


SIGNATURE = pygit2.Signature("Test User", "test@example.com")


def make_commit(
	repo: pygit2.Repository,
	message: str,
	parents: list[pygit2.Oid],
	ref: str = "HEAD",
	filename: str = "file.txt",
) -> pygit2.Oid:
	"""Write ``filename`` with ``message`` as content and commit it to ``ref``."""
	(Path(repo.workdir) / filename).write_text(message, encoding="utf-8")
	repo.index.add(filename)
	repo.index.write()
	tree = repo.index.write_tree()
	return repo.create_commit(ref, SIGNATURE, SIGNATURE, message, tree, parents)
