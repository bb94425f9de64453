"""Tests for the sync action button."""

from __future__ import annotations

import pytest

from githistory.git.repository import Branch, UpstreamRef
from githistory.history.action_button import PUBLISH_COMMAND, SYNC_COMMAND, SyncActionButton, compute_sync_button
from tests.base import FakeRepository

UPSTREAM = UpstreamRef(remote="origin", name="main")


@pytest.mark.unit
@pytest.mark.parametrize(
	"head",
	[
		None,
		Branch(name=None, commit="abc"),
		Branch(name="main", commit=None),
		Branch(name="main", commit="abc", upstream=UPSTREAM, ahead=0, behind=0),
	],
)
def test_no_button(head: Branch | None) -> None:
	"""Nothing to sync or publish hides the button."""
	assert compute_sync_button(head) is None


@pytest.mark.unit
def test_publish_button_without_upstream() -> None:
	"""A branch without upstream can be published."""
	button = compute_sync_button(Branch(name="topic", commit="abc"))

	assert button is not None
	assert button.command.command == PUBLISH_COMMAND
	assert button.description is None


@pytest.mark.unit
def test_sync_button_shows_counts() -> None:
	"""A diverged branch offers to sync and shows both counts."""
	button = compute_sync_button(Branch(name="main", commit="abc", upstream=UPSTREAM, ahead=1, behind=4))

	assert button is not None
	assert button.command.command == SYNC_COMMAND
	assert button.command.title == "Sync Changes"
	assert button.description == "4↓ 1↑"


@pytest.mark.unit
class TestSyncActionButton:
	"""Test cases for the SyncActionButton controller."""

	def test_fires_only_when_button_changes(self) -> None:
		"""Refreshes that keep the same button stay silent."""
		repository = FakeRepository()
		controller = SyncActionButton(repository)  # type: ignore[arg-type]
		calls: list[None] = []
		controller.on_did_change(calls.append)

		diverged = Branch(name="main", commit="abc", upstream=UPSTREAM, ahead=1, behind=0)
		repository.refresh(diverged)
		repository.refresh(diverged)
		repository.refresh(Branch(name="main", commit="def", upstream=UPSTREAM, ahead=0, behind=0))

		assert len(calls) == 2
		assert controller.button is None

	def test_dispose_unsubscribes(self) -> None:
		"""A disposed controller ignores status refreshes."""
		repository = FakeRepository()
		controller = SyncActionButton(repository)  # type: ignore[arg-type]

		controller.dispose()
		repository.refresh(Branch(name="topic", commit="abc"))

		assert repository.status_listener_count == 0
		assert controller.button is None
