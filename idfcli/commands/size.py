"""Binary size reports via idf_size.py."""

from __future__ import annotations

import click

from idfcli.chain import SharedOptions
from idfcli.env import (
    find_elf_file, get_build_dir, get_idf_path, get_project_dir, get_python_executable,
    run_command, setup_idf_environment,
)
from idfcli.errors import ProjectError


def _run_size(opts: SharedOptions, extra: list[str]) -> None:
    setup_idf_environment()
    project_dir = get_project_dir(opts.project_dir)
    build_dir = get_build_dir(opts.build_dir, project_dir)

    if not build_dir.exists():
        raise ProjectError("Build directory doesn't exist. Run 'build' command first.")

    elf = find_elf_file(build_dir)
    if elf is None:
        raise ProjectError("No ELF files found in build directory. Build the project first.")

    size_tool = get_idf_path() / "tools" / "idf_size.py"
    run_command(
        [get_python_executable(), str(size_tool), *extra, str(elf)],
        cwd=project_dir, verbose=opts.verbose,
    )


def execute(opts: SharedOptions, args: list[str] | None = None) -> None:
    click.echo("Getting project size information...")
    _run_size(opts, [])


def execute_components(opts: SharedOptions, args: list[str] | None = None) -> None:
    click.echo("Getting per-component size information...")
    _run_size(opts, ["--archives"])


def execute_files(opts: SharedOptions, args: list[str] | None = None) -> None:
    click.echo("Getting per-source-file size information...")
    _run_size(opts, ["--files"])
