"""menuconfig and set-target commands."""

from __future__ import annotations

import click

from idfcli.chain import SharedOptions
from idfcli.commands import build
from idfcli.config import load_sdkconfig, save_sdkconfig
from idfcli.env import get_build_dir, get_project_dir, get_targets, run_command, setup_idf_environment
from idfcli.errors import ProjectError


def execute_menuconfig(opts: SharedOptions, args: list[str] | None = None) -> None:
    setup_idf_environment()
    project_dir = get_project_dir(opts.project_dir)
    build_dir = get_build_dir(opts.build_dir, project_dir)

    click.echo("Starting menuconfig...")

    if not build_dir.exists():
        click.echo("Build directory doesn't exist. Configuring project first...")
        build.execute_reconfigure(opts)

    run_command(
        ["cmake", "--build", str(build_dir), "--target", "menuconfig"],
        cwd=project_dir, verbose=opts.verbose,
    )
    click.echo("Menuconfig completed!")


def execute_set_target(opts: SharedOptions, target: str) -> None:
    """Record the target chip in the project's sdkconfig."""
    project_dir = get_project_dir(opts.project_dir)
    click.echo(f"Setting target to: {target}")

    targets = get_targets(opts.preview)
    if target not in targets:
        raise ProjectError(
            f"Unsupported target: {target}. Supported targets: {', '.join(targets)}",
            exit_code=2,
        )

    sdk_config = load_sdkconfig(project_dir)
    sdk_config.set_target(target)
    save_sdkconfig(project_dir, sdk_config)

    click.echo(f"Target set to {target} successfully!")
    click.echo("You may need to run 'reconfigure' or 'fullclean' if you are changing from a different target.")
