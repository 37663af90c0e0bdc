"""plastic-shell CLI entrypoint.

Command-line interface driving the Plastic SCM tool through a persistent
cm shell.
"""

from __future__ import annotations

import functools
import logging
import os
import sys
from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path

import click

from plastic_shell.core.commands import remove_redundant_errors
from plastic_shell.core.errors import (
    PlasticCliError,
    command_failed_error,
    workspace_not_found_error,
)
from plastic_shell.core.progress import progress_context
from plastic_shell.core.provider import SourceControlProvider
from plastic_shell.core.workspace import find_root_directory
from plastic_shell.domain.config import PlasticConfig
from plastic_shell.domain.entities import FileState, Revision
from plastic_shell.domain.exceptions import PlasticDomainError, ShellUnavailableError
from plastic_shell.ports.config import ConfigProvider
from plastic_shell.version import __version__

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

logger = logging.getLogger(__name__)


def handle_cli_errors(command_name: str):
    """Decorator to handle common CLI errors.

    PlasticCliError exceptions are re-raised to use their built-in
    formatting, domain errors are converted with their hint, anything else
    is reported as unexpected (with a traceback in verbose mode).

    Args:
        command_name: Name of the command for error messages.

    Returns:
        Decorated function with error handling.
    """

    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except PlasticCliError:
                raise
            except PlasticDomainError as e:
                raise PlasticCliError(e.message, hint=e.hint) from e
            except Exception as e:
                ctx = click.get_current_context()
                if ctx.obj.get("verbose", False):
                    import traceback

                    traceback.print_exc()
                raise PlasticCliError(
                    f"Unexpected error in {command_name}: {e}",
                    hint="Run with --verbose for more details",
                ) from e

        return wrapper

    return decorator


def _configure_logging(verbose: bool, quiet: bool) -> None:
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format=LOG_FORMAT)


def _load_config(start_path: str) -> PlasticConfig:
    """Load configuration for the workspace containing start_path.

    Args:
        start_path: Directory the workspace search starts from.

    Returns:
        PlasticConfig with merged global and local settings.
    """
    from plastic_shell.adapters.config.toml_config_provider import TomlConfigProvider

    config_provider: ConfigProvider = TomlConfigProvider()
    found, root = find_root_directory(start_path)
    return config_provider.load(Path(root) if found else None)


@contextmanager
def _connected_provider(
    ctx: click.Context, require_workspace: bool = True
) -> Generator[SourceControlProvider, None, None]:
    """Create a provider, start its cm shell and stop it on exit.

    Args:
        ctx: Click context holding the global options.
        require_workspace: Fail if no workspace contains the start directory.

    Yields:
        Connected SourceControlProvider.

    Raises:
        PlasticCliError: If no workspace is found and one is required.
        ShellUnavailableError: If the cm shell cannot be started.
    """
    start_path = ctx.obj["directory"]
    config = _load_config(start_path)
    provider = SourceControlProvider(config, start_path)
    if require_workspace and not provider.workspace_found:
        workspace_not_found_error(start_path)

    with provider:
        if not provider.launch_session():
            raise ShellUnavailableError(
                f"Could not start '{provider.binary_path} shell'",
                hint="Install the Plastic SCM client or set 'binary_path' in the [shell] config section",
            )
        if require_workspace and not provider.connect():
            logger.warning(
                f"Workspace information incomplete for {provider.workspace_root}"
            )
        yield provider


def _format_state(state: FileState) -> str:
    line = (
        f"{state.workspace_state.value:<14} "
        f"{state.local_revision_changeset}/{state.depot_revision_changeset} "
        f"{state.local_filename}"
    )
    if state.is_locked():
        line += f" (locked by {state.lock_owner_user} in {state.lock_owner_workspace})"
    return line


def _format_revision(revision: Revision) -> str:
    date = revision.date.strftime("%Y-%m-%d %H:%M:%S") if revision.date else "-"
    line = (
        f"cs:{revision.changeset_number} #{revision.revision_number} "
        f"{revision.action:<6} {date} {revision.author}: {revision.description}"
    )
    if revision.renamed_from is not None:
        line += f" (from {revision.renamed_from.filename})"
    return line


@click.group()
@click.version_option(version=__version__, prog_name="plastic-shell")
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output (log every command sent to cm).",
)
@click.option(
    "--quiet",
    "-q",
    is_flag=True,
    help="Suppress non-essential output.",
)
@click.option(
    "--directory",
    "-C",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory to look for the workspace from (default: current directory).",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, quiet: bool, directory: str | None) -> None:
    """plastic-shell - Plastic SCM through a persistent cm shell.

    Keeps one 'cm shell' process alive for the whole command and turns its
    output into workspace states and file histories.
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["directory"] = os.path.abspath(directory or os.getcwd())
    _configure_logging(verbose, quiet)


@cli.command()
@click.argument("path", type=str, required=False, default=None)
@click.pass_context
@handle_cli_errors("root")
def root(ctx: click.Context, path: str | None) -> None:
    """Print the root of the workspace containing PATH."""
    start_path = os.path.abspath(path) if path else ctx.obj["directory"]
    found, workspace_root = find_root_directory(start_path)
    if not found:
        workspace_not_found_error(start_path)
    click.echo(workspace_root)


@cli.command()
@click.pass_context
@handle_cli_errors("info")
def info(ctx: click.Context) -> None:
    """Show the cm version, user, workspace, branch and repository."""
    with _connected_provider(ctx) as provider:
        click.echo(f"cm version:  {provider.version}")
        click.echo(f"User:        {provider.user_name}")
        click.echo(f"Workspace:   {provider.workspace_name} ({provider.workspace_root})")
        click.echo(f"Branch:      {provider.branch_name}")
        if provider.repository is not None:
            click.echo(
                f"Repository:  {provider.repository.repository_name}"
                f"@{provider.repository.server_url}"
            )
            click.echo(f"Changeset:   {provider.repository.changeset}")


@cli.command()
@click.argument("files", nargs=-1, required=True, type=str)
@click.pass_context
@handle_cli_errors("status")
def status(ctx: click.Context, files: tuple[str, ...]) -> None:
    """Show the workspace state, revisions and locks of FILES."""
    paths = [os.path.abspath(file) for file in files]
    quiet = ctx.obj.get("quiet", False)

    with _connected_provider(ctx) as provider:
        with progress_context(quiet_mode=quiet) as progress:
            states, errors, success = provider.run_update_status(paths, progress)
        provider.update_cached_states(states)

    for state in states:
        click.echo(_format_state(state))

    if errors:
        command_failed_error("status", errors)
    if not success and not quiet:
        click.echo("Warning: some files could not be queried", err=True)


@cli.command()
@click.argument("file", type=str)
@click.pass_context
@handle_cli_errors("history")
def history(ctx: click.Context, file: str) -> None:
    """Show the history of FILE, oldest revision first."""
    with _connected_provider(ctx) as provider:
        revisions, errors, success = provider.run_get_history(os.path.abspath(file))

    for revision in revisions:
        click.echo(_format_revision(revision))

    if not success:
        command_failed_error("history", errors)


@cli.command()
@click.argument("revision_spec", type=str)
@click.argument("output_path", type=click.Path(dir_okay=False))
@click.pass_context
@handle_cli_errors("cat")
def cat(ctx: click.Context, revision_spec: str, output_path: str) -> None:
    """Write the raw content of REVISION_SPEC to OUTPUT_PATH.

    Runs a standalone 'cm cat' rather than going through the shell.
    """
    start_path = ctx.obj["directory"]
    provider = SourceControlProvider(_load_config(start_path), start_path)
    if not provider.run_dump_to_file(revision_spec, os.path.abspath(output_path)):
        raise PlasticCliError(
            f"Could not dump {revision_spec}",
            hint="Check the revision specification, e.g. 'rev:Content/Map.umap#cs:12'",
        )
    if not ctx.obj.get("quiet", False):
        click.echo(f"✓ Wrote {output_path}", err=True)


@cli.command(context_settings={"ignore_unknown_options": True})
@click.argument("command", type=str)
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
@click.pass_context
@handle_cli_errors("run")
def run(ctx: click.Context, command: str, args: tuple[str, ...]) -> None:
    """Run any cm COMMAND with ARGS through the shell."""
    with _connected_provider(ctx, require_workspace=False) as provider:
        reply = provider.run_command(command, list(args))

    for line in reply.results:
        click.echo(line)

    if not reply.success:
        command_failed_error(command, reply.errors)


@cli.command()
@click.argument("files", nargs=-1, required=True, type=str)
@click.option("--message", "-m", required=True, help="Check-in comment.")
@click.option(
    "--ignore-error",
    "ignore_errors",
    multiple=True,
    help="Treat errors containing this text as informational (repeatable).",
)
@click.pass_context
@handle_cli_errors("checkin")
def checkin(
    ctx: click.Context, files: tuple[str, ...], message: str, ignore_errors: tuple[str, ...]
) -> None:
    """Check in FILES with a comment."""
    with _connected_provider(ctx) as provider:
        command = provider.checkin([os.path.abspath(file) for file in files], message)

    for filter_text in ignore_errors:
        remove_redundant_errors(command, filter_text)

    if not ctx.obj.get("quiet", False):
        for line in command.info_messages:
            click.echo(line)

    if not command.success:
        command_failed_error(command.name, command.error_messages)


@cli.group()
def config() -> None:
    """Manage plastic-shell configuration."""
    pass


@config.command("init")
@click.option(
    "--global",
    "init_global",
    is_flag=True,
    help="Write the global config instead of the workspace one.",
)
@click.option(
    "--force",
    "-f",
    is_flag=True,
    help="Overwrite an existing config file.",
)
@click.pass_context
@handle_cli_errors("config init")
def config_init(ctx: click.Context, init_global: bool, force: bool) -> None:
    """Write a config file with the default settings."""
    from plastic_shell.shared.config_io import (
        get_global_config_path,
        get_local_config_path,
        save_config,
    )

    if init_global:
        path = get_global_config_path()
    else:
        found, workspace_root = find_root_directory(ctx.obj["directory"])
        if not found:
            workspace_not_found_error(ctx.obj["directory"])
        path = get_local_config_path(Path(workspace_root))

    if path.exists() and not force:
        raise PlasticCliError(
            f"Config file already exists: {path}",
            hint="Use 'plastic-shell config init --force' to overwrite it",
        )

    save_config(PlasticConfig.default(), path)
    if not ctx.obj.get("quiet", False):
        click.echo(f"✓ Wrote {path}")


def main() -> int:
    """Main entrypoint for the CLI."""
    try:
        cli(obj={})
        return 0
    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
