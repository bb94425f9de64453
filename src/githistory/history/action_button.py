"""Sync/publish button shown above the history panel."""

from __future__ import annotations

import logging

from githistory.git.repository import Branch, Repository
from githistory.history.models import ActionButton, Command
from githistory.utils.events import Disposable, EventEmitter

logger = logging.getLogger(__name__)

SYNC_COMMAND = "git.sync"
PUBLISH_COMMAND = "git.publish"


def compute_sync_button(head: Branch | None) -> ActionButton | None:
	"""
	Decide which button, if any, the current HEAD calls for.

	Args:
		head: Current HEAD descriptor

	Returns:
		A publish button for branches without upstream, a sync button for
		branches that diverged from their upstream, None otherwise
	"""
	if head is None or not head.name or not head.commit:
		return None

	if head.upstream is None:
		return ActionButton(
			command=Command(
				command=PUBLISH_COMMAND,
				title="Publish Branch",
				tooltip=f"Publish branch {head.name}",
			),
		)

	ahead = head.ahead or 0
	behind = head.behind or 0
	if ahead == 0 and behind == 0:
		return None

	upstream = f"{head.upstream.remote}/{head.upstream.name}"
	return ActionButton(
		command=Command(
			command=SYNC_COMMAND,
			title="Sync Changes",
			tooltip=f"Pull {behind} and push {ahead} commits between {head.name} and {upstream}",
		),
		description=f"{behind}↓ {ahead}↑",
	)


class SyncActionButton:
	"""Keeps ``button`` in step with the repository's HEAD."""

	def __init__(self, repository: Repository) -> None:
		"""
		Initialize the controller.

		Args:
			repository: Repository whose status refreshes drive the button
		"""
		self.repository = repository
		self._button = compute_sync_button(repository.head)

		self._on_did_change: EventEmitter[None] = EventEmitter()
		self.on_did_change = self._on_did_change.event

		self._disposables: list[Disposable] = [repository.on_did_run_git_status(self._on_did_run_git_status)]

	@property
	def button(self) -> ActionButton | None:
		"""The button to render, or None to hide it."""
		return self._button

	def _on_did_run_git_status(self, _: None) -> None:
		button = compute_sync_button(self.repository.head)
		if button == self._button:
			return

		logger.debug("Action button changed: %s", button)
		self._button = button
		self._on_did_change.fire(None)

	def dispose(self) -> None:
		"""Unsubscribe from the repository and drop listeners."""
		for disposable in self._disposables:
			disposable.dispose()
		self._on_did_change.dispose()
