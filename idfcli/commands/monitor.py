"""Serial monitor command."""

from __future__ import annotations

import click

from idfcli.chain import SharedOptions
from idfcli.env import (
    find_elf_file, get_build_dir, get_idf_path, get_project_dir, get_python_executable,
    run_command, setup_idf_environment,
)
from idfcli.ports import resolve_port

DEFAULT_MONITOR_BAUD = 115200


def execute(opts: SharedOptions, args: list[str]) -> None:
    """Run idf_monitor.py against the board."""
    setup_idf_environment()
    project_dir = get_project_dir(opts.project_dir)
    build_dir = get_build_dir(opts.build_dir, project_dir)

    click.echo("Starting monitor...")

    monitor = get_idf_path() / "tools" / "idf_monitor.py"
    monitor_args = [get_python_executable(), str(monitor)]

    port = resolve_port(opts.port)
    if port:
        if port != opts.port:
            click.echo(f"Using port: {port}")
        monitor_args.extend(["--port", port])

    monitor_args.extend(["--baud", str(opts.baud or DEFAULT_MONITOR_BAUD)])

    # ELF enables address-to-symbol decoding of panics.
    elf = find_elf_file(build_dir) if build_dir.exists() else None
    if elf:
        monitor_args.append(str(elf))

    monitor_args.extend(args)
    run_command(monitor_args, cwd=project_dir, verbose=opts.verbose)
