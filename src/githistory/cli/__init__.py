"""Command-line interface package for githistory."""

import datetime
import logging
import sys
from pathlib import Path
from typing import Annotated

import typer

from githistory import __version__
from githistory.utils.log_setup import setup_logging

from .history_cmd import register_command as register_history_command

logger = logging.getLogger(__name__)

app = typer.Typer(
	help=f"githistory - Browse branch history the way a source-control panel does\n\nVersion: {__version__}",
	no_args_is_help=True,
	context_settings={"help_option_names": ["-h", "--help"]},
)


def _version_callback(value: bool) -> None:
	"""Callback for --version option."""
	if value:
		typer.echo(f"githistory version: {__version__}")
		raise typer.Exit


@app.callback(invoke_without_command=True)
def global_options(
	ctx: typer.Context,
	repo_path: Annotated[
		Path | None,
		typer.Option("--repo", "-C", help="Path inside the repository. Defaults to the current directory."),
	] = None,
	config_file: Annotated[
		Path | None,
		typer.Option("--config", "-c", help="Configuration file to use instead of the discovered one."),
	] = None,
	is_verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable verbose logging.")] = False,
	is_output_log: Annotated[
		bool,
		typer.Option(
			"--save-log",
			help="Enable logging to a file. Logs to logs/githistory_{datetime}.log.",
		),
	] = False,
	_version: Annotated[
		bool | None,
		typer.Option("--version", help="Show version and exit.", callback=_version_callback, is_eager=True),
	] = None,
) -> None:
	"""Global CLI options and logging setup."""
	ctx.meta["repo_path"] = repo_path
	ctx.meta["config_file"] = config_file
	ctx.meta["is_verbose"] = is_verbose

	log_file_path_to_use: Path | None = None
	if is_output_log:
		current_time = datetime.datetime.now(tz=datetime.UTC).strftime("%Y-%m-%d_%H-%M-%S")
		log_file_path_to_use = Path("logs") / f"githistory_{current_time}.log"

	setup_logging(is_verbose=is_verbose or is_output_log, log_file_path=log_file_path_to_use)


register_history_command(app)


def main() -> int:
	"""Run the CLI application."""
	return app()


if __name__ == "__main__":
	sys.exit(main())
