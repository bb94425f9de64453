"""Commands that drive the history provider from the terminal."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Annotated

import asyncer
import typer
from rich.table import Table

from githistory.config import ConfigError, ConfigLoader
from githistory.git.repository import GitError, Repository
from githistory.history.models import HistoryItemGroupRef, HistoryOptions
from githistory.history.provider import HistoryError, HistoryProvider
from githistory.utils.cli_utils import console, exit_with_error, format_timestamp, handle_keyboard_interrupt

logger = logging.getLogger(__name__)

GroupArg = Annotated[
	str | None,
	typer.Argument(help="Ref whose history to list. Defaults to the current branch."),
]

BaseOption = Annotated[
	str | None,
	typer.Option("--base", "-b", help="Ref the history stops at. Defaults to the upstream of the current branch."),
]

ItemArg = Annotated[str, typer.Argument(help="Commit hash, or ref1..ref2 for a summary item.")]

Ref1Arg = Annotated[str, typer.Argument(help="First ref.")]

Ref2Arg = Annotated[
	str | None,
	typer.Argument(help="Second ref. Defaults to the default branch of the default remote."),
]


@asynccontextmanager
async def open_provider(ctx: typer.Context) -> AsyncIterator[HistoryProvider]:
	"""
	Open the repository, refresh its status and yield a provider for it.

	Both are disposed on exit.

	Args:
		ctx: Typer context carrying the global options
	"""
	repo_path: Path | None = ctx.meta.get("repo_path")
	config_file: Path | None = ctx.meta.get("config_file")

	config = ConfigLoader.get_instance(config_file=config_file, repo_root=repo_path).get
	repository = Repository.discover(repo_path, config.git)

	provider = HistoryProvider(repository, config.history)
	try:
		await repository.status()
		yield provider
	finally:
		provider.dispose()
		repository.dispose()


def _fail(e: Exception) -> None:
	exit_with_error(str(e), exception=e)


def register_command(app: typer.Typer) -> None:
	"""Register the history commands with the CLI app."""

	@app.command(name="group")
	@asyncer.runnify
	async def group_command(ctx: typer.Context) -> None:
		"""Show the current branch, its upstream and the pending sync action."""
		try:
			async with open_provider(ctx) as provider:
				group = provider.current_history_item_group
				if group is None:
					console.print("[yellow]HEAD is detached or has no commits.[/yellow]")
					return

				console.print(f"[bold]{group.label}[/bold] ({group.id})")
				if group.upstream is not None:
					console.print(f"  upstream: {group.upstream.label} ({group.upstream.id})")
				if provider.action_button is not None:
					button = provider.action_button
					console.print(f"  action: {button.command.title} {button.description or ''}".rstrip())
		except KeyboardInterrupt:
			handle_keyboard_interrupt()
		except (GitError, HistoryError, ConfigError) as e:
			_fail(e)

	@app.command(name="items")
	@asyncer.runnify
	async def items_command(ctx: typer.Context, group: GroupArg = None, base: BaseOption = None) -> None:
		"""List the commits of GROUP that are not on the base ref."""
		try:
			async with open_provider(ctx) as provider:
				current = provider.current_history_item_group
				group_id = group or (current.id if current else None)
				base_id = base or (current.upstream.id if current and current.upstream else None)
				if group_id is None or base_id is None:
					exit_with_error("Cannot infer refs from HEAD; pass GROUP and --base explicitly.")

				items = await provider.provide_history_items(
					group_id, HistoryOptions(limit=HistoryItemGroupRef(id=base_id, label=base_id))
				)
		except KeyboardInterrupt:
			handle_keyboard_interrupt()
		except (GitError, HistoryError, ConfigError) as e:
			_fail(e)
			return

		if not items:
			console.print(f"No commits between {base_id} and {group_id}.")
			return

		table = Table(title=f"{base_id}..{group_id}")
		table.add_column("Id", style="cyan", no_wrap=True)
		table.add_column("Label")
		table.add_column("Description", style="green")
		table.add_column("Date", style="dim")
		for item in items:
			item_id = item.id if ".." in item.id else item.id[:12]
			table.add_row(item_id, item.label, item.description or "", format_timestamp(item.timestamp))
		console.print(table)

	@app.command(name="changes")
	@asyncer.runnify
	async def changes_command(ctx: typer.Context, item: ItemArg) -> None:
		"""List the files changed by ITEM."""
		try:
			async with open_provider(ctx) as provider:
				changes = await provider.provide_history_item_changes(item)
				root = provider.repository.root
		except KeyboardInterrupt:
			handle_keyboard_interrupt()
		except (GitError, HistoryError, ConfigError) as e:
			_fail(e)
			return

		table = Table(title=item)
		table.add_column("File", style="cyan")
		table.add_column("Renamed from", style="dim")
		for change in changes:
			path = change.uri.fs_path.relative_to(root).as_posix()
			renamed_from = ""
			if change.rename_uri is not None:
				renamed_from = Path(change.original_uri.path).relative_to(root).as_posix()
			table.add_row(path, renamed_from)
		console.print(table)

	@app.command(name="ancestor")
	@asyncer.runnify
	async def ancestor_command(ctx: typer.Context, ref1: Ref1Arg, ref2: Ref2Arg = None) -> None:
		"""Show the common ancestor of two refs and the commits on either side."""
		try:
			async with open_provider(ctx) as provider:
				ancestor = await provider.resolve_history_item_group_common_ancestor(ref1, ref2)
		except KeyboardInterrupt:
			handle_keyboard_interrupt()
		except (GitError, HistoryError, ConfigError) as e:
			_fail(e)
			return

		if ancestor is None:
			console.print("[yellow]No common ancestor.[/yellow]")
			return
		console.print(f"{ancestor.id}  ahead {ancestor.ahead}, behind {ancestor.behind}")
