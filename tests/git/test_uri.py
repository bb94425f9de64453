"""Tests for URI helpers."""

from __future__ import annotations

import json

import pytest

from githistory.git.uri import Uri, from_git_uri, to_git_uri


@pytest.mark.unit
class TestUri:
	"""Test cases for the Uri value type."""

	def test_file_uri_renders_with_empty_authority(self) -> None:
		"""File URIs render with three slashes and percent-encoded paths."""
		uri = Uri.file("/repo/src/a b.py")

		assert uri.scheme == "file"
		assert uri.path == "/repo/src/a b.py"
		assert str(uri) == "file:///repo/src/a%20b.py"

	def test_parse_decodes_components(self) -> None:
		"""Parsing splits and decodes the components."""
		uri = Uri.parse("file:///repo/a%20b.py?ref=abc123")

		assert uri == Uri(scheme="file", path="/repo/a b.py", query="ref=abc123")

	def test_parse_requires_scheme(self) -> None:
		"""Strings without a scheme are rejected."""
		with pytest.raises(ValueError, match="no scheme"):
			Uri.parse("/repo/a.py")

	def test_with_replaces_only_given_components(self) -> None:
		"""with_ returns a modified copy and leaves the original intact."""
		uri = Uri.file("/repo/a.py")
		changed = uri.with_(query="ref=HEAD")

		assert changed.query == "ref=HEAD"
		assert changed.path == uri.path
		assert uri.query == ""


@pytest.mark.unit
@pytest.mark.git
class TestGitUri:
	"""Test cases for git blob URIs."""

	def test_to_git_uri_encodes_path_and_ref(self) -> None:
		"""The git URI keeps the path and stores path and ref as JSON."""
		uri = to_git_uri(Uri.file("/repo/a.py"), "abc123^")

		assert uri.scheme == "git"
		assert uri.path == "/repo/a.py"
		assert json.loads(uri.query) == {"path": "/repo/a.py", "ref": "abc123^"}

	def test_from_git_uri_reverses_to_git_uri(self) -> None:
		"""Decoding a git URI yields the original path and ref."""
		uri = to_git_uri(Uri.file("/repo/a.py"), "main")

		assert from_git_uri(uri) == ("/repo/a.py", "main")

	def test_from_git_uri_rejects_other_schemes(self) -> None:
		"""Only git URIs can be decoded."""
		with pytest.raises(ValueError, match="Not a git URI"):
			from_git_uri(Uri.file("/repo/a.py"))

	def test_from_git_uri_rejects_malformed_query(self) -> None:
		"""A git URI without a JSON query is malformed."""
		with pytest.raises(ValueError, match="Malformed"):
			from_git_uri(Uri(scheme="git", path="/repo/a.py", query="ref=main"))
