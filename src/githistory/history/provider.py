"""History provider bridging a git repository to a source-control history panel."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping

from githistory.config.config_schema import HistoryConfigSchema
from githistory.git.repository import Commit, GitError, Repository
from githistory.git.uri import to_git_uri
from githistory.history.action_button import SyncActionButton
from githistory.history.models import (
	ActionButton,
	CommonAncestor,
	HistoryItem,
	HistoryItemChange,
	HistoryItemGroup,
	HistoryItemGroupRef,
	HistoryOptions,
)
from githistory.utils.events import EventEmitter, IDisposable

logger = logging.getLogger(__name__)

COMMIT_ICON = "account"
SUMMARY_ICON = "files"


class HistoryError(Exception):
	"""Base exception for history provider errors."""


class UnsupportedOptionsError(HistoryError, ValueError):
	"""Raised when history paging options cannot be honoured."""


def _limit_ref(options: HistoryOptions) -> str:
	"""Return the ref id ``options.limit`` stops at."""
	limit = options.limit
	if isinstance(limit, int):
		msg = "Unsupported options."
		raise UnsupportedOptionsError(msg)

	ref = limit.get("id") if isinstance(limit, Mapping) else getattr(limit, "id", None)
	if not isinstance(ref, str):
		msg = "Unsupported options."
		raise UnsupportedOptionsError(msg)
	return ref


def _subject(message: str) -> str:
	return message.split("\n", 1)[0]


def _to_history_item(commit: Commit) -> HistoryItem:
	return HistoryItem(
		id=commit.hash,
		parent_ids=commit.parents,
		label=_subject(commit.message),
		description=commit.author_name,
		icon=COMMIT_ICON,
		timestamp=int(commit.author_date.timestamp() * 1000) if commit.author_date else None,
	)


class HistoryProvider:
	"""
	Exposes a repository's history as history item groups and items.

	Two observable cells, ``action_button`` and ``current_history_item_group``,
	fire their change events on every assignment. The current group follows
	the repository's HEAD across status refreshes.

	"""

	def __init__(self, repository: Repository, config: HistoryConfigSchema | None = None) -> None:
		"""
		Initialize the provider.

		Args:
			repository: Repository to read history from
			config: History settings (optional)
		"""
		self.repository = repository
		self.config = config or HistoryConfigSchema()

		self._on_did_change_action_button: EventEmitter[None] = EventEmitter()
		self.on_did_change_action_button = self._on_did_change_action_button.event

		self._on_did_change_current_history_item_group: EventEmitter[None] = EventEmitter()
		self.on_did_change_current_history_item_group = self._on_did_change_current_history_item_group.event

		self._action_button: ActionButton | None = None
		self._current_history_item_group: HistoryItemGroup | None = None
		self._disposables: list[IDisposable] = []

		action_button = SyncActionButton(repository)
		self.action_button = action_button.button
		self._disposables.append(action_button)

		self._disposables.append(repository.on_did_run_git_status(self._on_did_run_git_status))
		self._disposables.append(action_button.on_did_change(lambda _: self._adopt_action_button(action_button)))

	@property
	def action_button(self) -> ActionButton | None:
		"""Button rendered above the history panel."""
		return self._action_button

	@action_button.setter
	def action_button(self, button: ActionButton | None) -> None:
		self._action_button = button
		self._on_did_change_action_button.fire(None)

	@property
	def current_history_item_group(self) -> HistoryItemGroup | None:
		"""The checked out branch and its upstream, None until HEAD is known."""
		return self._current_history_item_group

	@current_history_item_group.setter
	def current_history_item_group(self, value: HistoryItemGroup | None) -> None:
		self._current_history_item_group = value
		self._on_did_change_current_history_item_group.fire(None)

	def _adopt_action_button(self, action_button: SyncActionButton) -> None:
		self.action_button = action_button.button

	def _on_did_run_git_status(self, _: None) -> None:
		head = self.repository.head
		if head is None or not head.name or not head.commit:
			return

		upstream = None
		if head.upstream is not None:
			upstream = HistoryItemGroupRef(
				id=f"refs/remotes/{head.upstream.remote}/{head.upstream.name}",
				label=f"{head.upstream.remote}/{head.upstream.name}",
			)

		self.current_history_item_group = HistoryItemGroup(
			id=f"refs/heads/{head.name}",
			label=head.name,
			upstream=upstream,
		)
		logger.debug("Current history item group: %s", self.current_history_item_group)

	async def provide_history_items(self, history_item_group_id: str, options: HistoryOptions) -> list[HistoryItem]:
		"""
		List the commits of a group that are not reachable from ``options.limit``.

		Args:
			history_item_group_id: Ref whose history is listed
			options: Paging options; ``limit`` must be a ref such as ``{"id": "origin/main"}``

		Returns:
			A summary item followed by one item per commit, or an empty list
			when the range holds no commits

		Raises:
			UnsupportedOptionsError: If ``limit`` is numeric or not a ref
		"""
		# TODO: support numeric limits and cursors once the log can page
		options_ref = _limit_ref(options)

		commits, summary = await asyncio.gather(
			self.repository.log(
				range=f"{options_ref}..{history_item_group_id}",
				sort_by_author_date=self.config.sort_by_author_date,
			),
			self.get_summary_history_item(options_ref, history_item_group_id),
		)

		if not commits:
			return []
		return [summary, *(_to_history_item(commit) for commit in commits)]

	async def provide_history_item_changes(self, history_item_id: str) -> list[HistoryItemChange]:
		"""
		List the files changed by a commit or a summary item.

		Args:
			history_item_id: A commit hash, or ``ref1..ref2`` for a summary item

		Returns:
			Changes with URIs addressing both sides of the diff
		"""
		if ".." in history_item_id:
			ref1, ref2 = history_item_id.split("..", 1)
		else:
			ref1, ref2 = f"{history_item_id}^", history_item_id

		changes = await self.repository.diff_between(ref1, ref2)

		return [
			HistoryItemChange(
				uri=change.uri.with_(query=f"ref={history_item_id}"),
				original_uri=to_git_uri(change.original_uri, ref1),
				modified_uri=to_git_uri(change.uri, ref2),
				rename_uri=change.rename_uri,
			)
			for change in changes
		]

	async def resolve_history_item_group_common_ancestor(
		self, ref_id1: str, ref_id2: str | None = None
	) -> CommonAncestor | None:
		"""
		Find the merge base of two refs and how far each has moved past it.

		Args:
			ref_id1: First ref
			ref_id2: Second ref, defaults to the repository's default branch

		Returns:
			The ancestor with ahead/behind counts, or None when there is no
			default branch or no common ancestor
		"""
		if ref_id2 is None:
			try:
				ref_id2 = (await self.repository.get_default_branch()).name or ""
			except GitError:
				logger.debug("No default branch to compare %s against", ref_id1)
				ref_id2 = ""
		if ref_id2 == "":
			return None

		ancestor = await self.repository.get_merge_base(ref_id1, ref_id2)
		if ancestor == "":
			return None

		commit_count = await self.repository.get_commit_count(f"{ref_id1}...{ref_id2}")
		return CommonAncestor(id=ancestor, ahead=commit_count.ahead, behind=commit_count.behind)

	async def get_summary_history_item(self, ref1: str, ref2: str) -> HistoryItem:
		"""Summarize every change between two refs as a single item."""
		diff_short_stat = await self.repository.diff_between_short_stat(ref1, ref2)
		return HistoryItem(
			id=f"{ref1}..{ref2}",
			parent_ids=[],
			label=self.config.summary_label,
			description=diff_short_stat,
			icon=SUMMARY_ICON,
		)

	def dispose(self) -> None:
		"""Release subscriptions and the action button controller, in acquisition order."""
		for disposable in self._disposables:
			disposable.dispose()
