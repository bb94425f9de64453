"""The capability set a source-control history panel expects from a provider."""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol, runtime_checkable

from githistory.history.models import (
	ActionButton,
	CommonAncestor,
	HistoryItem,
	HistoryItemChange,
	HistoryItemGroup,
	HistoryOptions,
)
from githistory.utils.events import Disposable


@runtime_checkable
class SourceControlHistoryProvider(Protocol):
	"""
	Interface implemented by history providers.

	``provide_history_items`` may raise when given options it cannot honour.
	``resolve_history_item_group_common_ancestor`` returns None when the
	ancestor or the counts are undefined; that is not an error.
	"""

	action_button: ActionButton | None
	current_history_item_group: HistoryItemGroup | None

	on_did_change_action_button: Callable[[Callable[[None], None]], Disposable]
	on_did_change_current_history_item_group: Callable[[Callable[[None], None]], Disposable]

	async def provide_history_items(self, history_item_group_id: str, options: HistoryOptions) -> list[HistoryItem]:
		"""List history items of a group."""
		...

	async def provide_history_item_changes(self, history_item_id: str) -> list[HistoryItemChange]:
		"""List the files changed by a history item."""
		...

	async def resolve_history_item_group_common_ancestor(
		self, ref_id1: str, ref_id2: str | None
	) -> CommonAncestor | None:
		"""Find the common ancestor of two refs."""
		...
