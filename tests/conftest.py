"""Global test fixtures and configuration."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pygit2
import pytest

from githistory.config import ConfigLoader


@pytest.fixture(autouse=True)
def reset_config_loader(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
	"""Isolate tests from user configuration and the cached loader."""
	monkeypatch.setattr("githistory.config.config_loader.xdg_config_home", str(tmp_path / "xdg"))
	ConfigLoader.reset_instance()
	yield
	ConfigLoader.reset_instance()


@pytest.fixture
def git_repo(tmp_path: Path) -> pygit2.Repository:
	"""An empty repository whose HEAD points at ``main``."""
	return pygit2.init_repository(str(tmp_path / "repo"), initial_head="main")
