"""Tests for the history CLI commands."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pygit2
import pytest
from typer.testing import CliRunner

from githistory import __version__
from githistory.cli import app
from tests.base import make_commit
from tests.git.test_repository import LOG_OUTPUT

runner = CliRunner()


def _fake_git(command: list[str], cwd: Path | None = None) -> str:
	if command[1] == "log":
		return LOG_OUTPUT
	return " 1 file changed, 1 insertion(+)\n"


@pytest.mark.cli
@pytest.mark.unit
def test_version() -> None:
	"""--version prints the package version."""
	result = runner.invoke(app, ["--version"])

	assert result.exit_code == 0
	assert __version__ in result.output


@pytest.mark.cli
@pytest.mark.git
class TestHistoryCommands:
	"""Test cases for the history commands against a real repository."""

	def test_group_shows_current_branch(self, git_repo: pygit2.Repository) -> None:
		"""The current branch and its ref are printed."""
		make_commit(git_repo, "first", [])

		result = runner.invoke(app, ["--repo", git_repo.workdir, "group"])

		assert result.exit_code == 0, result.output
		assert "refs/heads/main" in result.output
		assert "Publish Branch" in result.output

	def test_group_on_empty_repository(self, git_repo: pygit2.Repository) -> None:
		"""An unborn HEAD has no group."""
		result = runner.invoke(app, ["--repo", git_repo.workdir, "group"])

		assert result.exit_code == 0, result.output
		assert "no commits" in result.output

	def test_ancestor_of_diverged_branches(self, git_repo: pygit2.Repository) -> None:
		"""The fork point and counts are printed."""
		base = make_commit(git_repo, "base", [])
		git_repo.branches.local.create("feature", git_repo[base])
		make_commit(git_repo, "feature work", [base], ref="refs/heads/feature", filename="f.txt")

		result = runner.invoke(app, ["--repo", git_repo.workdir, "ancestor", "feature", "main"])

		assert result.exit_code == 0, result.output
		assert str(base) in result.output
		assert "ahead 1, behind 0" in result.output

	def test_ancestor_without_default_branch(self, git_repo: pygit2.Repository) -> None:
		"""A missing default branch is reported, not raised."""
		make_commit(git_repo, "base", [])

		result = runner.invoke(app, ["--repo", git_repo.workdir, "ancestor", "main"])

		assert result.exit_code == 0, result.output
		assert "No common ancestor" in result.output

	def test_items_lists_summary_and_commits(self, git_repo: pygit2.Repository) -> None:
		"""Items are rendered with the summary first."""
		make_commit(git_repo, "first", [])

		with patch("githistory.git.repository.run_git_command", side_effect=_fake_git):
			result = runner.invoke(app, ["--repo", git_repo.workdir, "items", "main", "--base", "origin/main"])

		assert result.exit_code == 0, result.output
		assert "Changes" in result.output
		assert "Merge" in result.output
		assert "Initial" in result.output

	def test_items_without_refs_fails(self, git_repo: pygit2.Repository) -> None:
		"""Without an upstream the base ref cannot be inferred."""
		make_commit(git_repo, "first", [])

		result = runner.invoke(app, ["--repo", git_repo.workdir, "items"])

		assert result.exit_code == 1

	def test_outside_repository_fails(self, tmp_path: Path) -> None:
		"""Running outside a repository exits with an error."""
		plain = tmp_path / "plain"
		plain.mkdir()

		result = runner.invoke(app, ["--repo", str(plain), "group"])

		assert result.exit_code == 1
