"""Host-facing history model: groups, items, changes and action buttons."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from githistory.git.uri import Uri


@dataclass(frozen=True)
class HistoryItemGroupRef:
	"""A reference to a branch, as shown in the history panel."""

	id: str
	label: str


@dataclass(frozen=True)
class HistoryItemGroup:
	"""The current branch and, when configured, its upstream."""

	id: str
	label: str
	upstream: HistoryItemGroupRef | None = None


@dataclass(frozen=True)
class HistoryItem:
	"""
	One entry of the history panel.

	Either a commit or a summary of all changes between two refs. Timestamps
	are milliseconds since the epoch.
	"""

	id: str
	parent_ids: list[str]
	label: str
	description: str | None = None
	icon: str | None = None
	timestamp: int | None = None


@dataclass(frozen=True)
class HistoryItemChange:
	"""A file changed by a history item."""

	uri: Uri
	original_uri: Uri
	modified_uri: Uri
	rename_uri: Uri | None = None


@dataclass
class HistoryOptions:
	"""
	Paging options for ``provide_history_items``.

	Only ``limit`` given as a reference (anything with a string ``id``) is
	supported.
	"""

	cursor: str | None = None
	limit: int | HistoryItemGroupRef | Mapping[str, Any] | None = None


@dataclass(frozen=True)
class CommonAncestor:
	"""Merge base of two refs with the commit counts on either side."""

	id: str
	ahead: int
	behind: int


@dataclass(frozen=True)
class Command:
	"""A host command bound to a UI affordance."""

	command: str
	title: str
	tooltip: str | None = None
	arguments: tuple[Any, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class ActionButton:
	"""A button rendered above the history panel."""

	command: Command
	description: str | None = None
	enabled: bool = True
