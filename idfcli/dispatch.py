"""Routing of parsed commands to their handlers."""

from __future__ import annotations

from typing import Callable

import click

from idfcli.chain import CommandSequence, ParsedCommand, SharedOptions
from idfcli.commands import build, config, flash, monitor, project, size
from idfcli.errors import IdfError, MissingRequiredArgument, ProjectError, UnrecognizedCommand


def _set_target(opts: SharedOptions, args: list[str]) -> None:
    if not args:
        raise MissingRequiredArgument("set-target requires a target argument")
    config.execute_set_target(opts, args[0])


def _create_project(opts: SharedOptions, args: list[str]) -> None:
    if not args:
        raise MissingRequiredArgument("create-project requires a project name")
    project.create_project(opts, args[0])


HANDLERS: dict[str, Callable[[SharedOptions, list[str]], None]] = {
    "build": build.execute,
    "all": build.execute,
    "app": build.execute_app,
    "bootloader": build.execute_bootloader,
    "clean": build.execute_clean,
    "fullclean": build.execute_fullclean,
    "flash": flash.execute,
    "app-flash": flash.execute_app,
    "bootloader-flash": flash.execute_bootloader,
    "monitor": monitor.execute,
    "menuconfig": config.execute_menuconfig,
    "set-target": _set_target,
    "erase-flash": flash.execute_erase,
    "size": size.execute,
    "size-components": size.execute_components,
    "size-files": size.execute_files,
    "reconfigure": build.execute_reconfigure,
    "create-project": _create_project,
    "build-system-targets": build.list_build_targets,
}


def execute_command(opts: SharedOptions, cmd: ParsedCommand) -> None:
    handler = HANDLERS.get(cmd.name)
    if handler is None:
        raise UnrecognizedCommand(f"Unknown command: {cmd.name}")
    try:
        handler(opts, cmd.args)
    except OSError as e:
        raise ProjectError(f"{cmd.name}: {e}") from e


def execute_sequence(sequence: CommandSequence) -> None:
    """Run chained commands in order, stopping at the first failure.

    Steps that already ran are not undone when a later one fails.
    """
    for option in sequence.dropped_options:
        click.echo(
            f"Warning: option '{option}' is ignored when chaining commands; "
            "pass it to a single command or set it in idfcli.toml.",
            err=True,
        )

    total = len(sequence.commands)
    click.echo(f"Executing {total} commands in sequence...")

    for i, cmd in enumerate(sequence.commands, 1):
        click.echo(f"[{i}/{total}] Executing command: {cmd.name}")
        try:
            execute_command(sequence.shared_options, cmd)
        except IdfError as e:
            e.sequence_index = i
            click.echo(f"[{i}/{total}] Command '{cmd.name}' failed: {e.message}", err=True)
            raise
        click.echo(f"[{i}/{total}] Command '{cmd.name}' completed successfully")

    click.echo("All commands completed successfully!")
