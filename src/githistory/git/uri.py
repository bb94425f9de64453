"""URI values used to address working-tree files and git blobs."""

from __future__ import annotations

import json
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any
from urllib.parse import quote, unquote, urlsplit, urlunsplit

GIT_SCHEME = "git"


@dataclass(frozen=True)
class Uri:
	"""An immutable URI split into its components."""

	scheme: str
	authority: str = ""
	path: str = ""
	query: str = ""
	fragment: str = ""

	@classmethod
	def file(cls, path: str | Path) -> Uri:
		"""Create a ``file`` URI from a filesystem path."""
		return cls(scheme="file", path=Path(path).as_posix())

	@classmethod
	def parse(cls, value: str) -> Uri:
		"""
		Parse a URI string.

		Args:
			value: URI such as ``file:///repo/a.py`` or ``git:/repo/a.py?...``

		Returns:
			Parsed Uri with percent-decoded path, query and fragment

		Raises:
			ValueError: If the string has no scheme
		"""
		parts = urlsplit(value)
		if not parts.scheme:
			msg = f"URI has no scheme: {value}"
			raise ValueError(msg)
		return cls(
			scheme=parts.scheme,
			authority=parts.netloc,
			path=unquote(parts.path),
			query=unquote(parts.query),
			fragment=unquote(parts.fragment),
		)

	def with_(self, **changes: Any) -> Uri:
		"""Return a copy with the given components replaced."""
		return replace(self, **changes)

	@property
	def fs_path(self) -> Path:
		"""The path component as a filesystem path."""
		return Path(self.path)

	def __str__(self) -> str:
		"""Render the URI with its components percent-encoded."""
		return urlunsplit(
			(
				self.scheme,
				self.authority,
				quote(self.path),
				quote(self.query, safe="=&"),
				quote(self.fragment),
			)
		)


def to_git_uri(uri: Uri, ref: str) -> Uri:
	"""
	Build the URI of a file as it exists at ``ref``.

	Args:
		uri: Working-tree URI of the file
		ref: Commit, branch or other revision

	Returns:
		A ``git`` scheme URI carrying path and ref in a JSON query
	"""
	return uri.with_(scheme=GIT_SCHEME, query=json.dumps({"path": uri.path, "ref": ref}))


def from_git_uri(uri: Uri) -> tuple[str, str]:
	"""
	Decode a URI produced by ``to_git_uri``.

	Returns:
		Tuple of (path, ref)

	Raises:
		ValueError: If the URI is not a git URI or its query is malformed
	"""
	if uri.scheme != GIT_SCHEME:
		msg = f"Not a git URI: {uri}"
		raise ValueError(msg)
	try:
		params = json.loads(uri.query)
		return params["path"], params["ref"]
	except (json.JSONDecodeError, KeyError, TypeError) as e:
		msg = f"Malformed git URI query: {uri.query}"
		raise ValueError(msg) from e
