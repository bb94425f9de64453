"""Source-control history provider."""

from githistory.history.action_button import SyncActionButton, compute_sync_button
from githistory.history.models import (
	ActionButton,
	Command,
	CommonAncestor,
	HistoryItem,
	HistoryItemChange,
	HistoryItemGroup,
	HistoryItemGroupRef,
	HistoryOptions,
)
from githistory.history.protocol import SourceControlHistoryProvider
from githistory.history.provider import HistoryError, HistoryProvider, UnsupportedOptionsError

__all__ = [
	"ActionButton",
	"Command",
	"CommonAncestor",
	"HistoryError",
	"HistoryItem",
	"HistoryItemChange",
	"HistoryItemGroup",
	"HistoryItemGroupRef",
	"HistoryOptions",
	"HistoryProvider",
	"SourceControlHistoryProvider",
	"SyncActionButton",
	"UnsupportedOptionsError",
	"compute_sync_button",
]
