"""Configure/build/clean commands."""

from __future__ import annotations

import shutil

import click

from idfcli.chain import SharedOptions
from idfcli.env import (
    get_build_dir, get_project_dir, run_command, run_command_with_output, setup_idf_environment,
)
from idfcli.generators import CACHE_FILE, resolve_generator


def _dirs(opts: SharedOptions):
    project_dir = get_project_dir(opts.project_dir)
    return project_dir, get_build_dir(opts.build_dir, project_dir)


def configure_args(opts: SharedOptions, project_dir, build_dir, generator: str) -> list[str]:
    """Return the cmake argv for the configure step."""
    args = ["cmake", "-B", str(build_dir), "-S", str(project_dir), "-G", generator]
    if opts.define_cache_entry:
        args.extend(["-D", opts.define_cache_entry])
    if opts.ccache:
        args.append("-DCCACHE_ENABLE=1")
    elif opts.no_ccache:
        args.append("-DCCACHE_ENABLE=0")
    return args


def execute(opts: SharedOptions, args: list[str]) -> None:
    """Configure the project with CMake and build it."""
    setup_idf_environment()
    project_dir, build_dir = _dirs(opts)

    click.echo(f"Building project in: {project_dir}")
    click.echo(f"Build directory: {build_dir}")

    generator = resolve_generator(opts.generator, build_dir)
    click.echo(f"Using generator: {generator}")

    run_command(configure_args(opts, project_dir, build_dir, generator), cwd=project_dir, verbose=opts.verbose)

    build_args = ["cmake", "--build", str(build_dir)]
    if opts.verbose:
        build_args.append("--verbose")
    if args:
        build_args.append("--")
        build_args.extend(args)

    run_command(build_args, cwd=project_dir, verbose=opts.verbose)
    click.echo("Build completed successfully!")


def _build_target(opts: SharedOptions, target: str) -> None:
    project_dir, build_dir = _dirs(opts)
    run_command(
        ["cmake", "--build", str(build_dir), "--target", target],
        cwd=project_dir, verbose=opts.verbose,
    )


def execute_app(opts: SharedOptions, args: list[str] | None = None) -> None:
    setup_idf_environment()
    click.echo("Building app only...")
    _build_target(opts, "app")
    click.echo("App build completed successfully!")


def execute_bootloader(opts: SharedOptions, args: list[str] | None = None) -> None:
    setup_idf_environment()
    click.echo("Building bootloader only...")
    _build_target(opts, "bootloader")
    click.echo("Bootloader build completed successfully!")


def execute_clean(opts: SharedOptions, args: list[str] | None = None) -> None:
    """Delete build outputs, keeping the CMake configuration."""
    _, build_dir = _dirs(opts)
    click.echo(f"Cleaning build directory: {build_dir}")
    if not build_dir.exists():
        click.echo("Build directory doesn't exist, nothing to clean.")
        return
    _build_target(opts, "clean")
    click.echo("Clean completed successfully!")


def execute_fullclean(opts: SharedOptions, args: list[str] | None = None) -> None:
    """Remove the whole build directory."""
    _, build_dir = _dirs(opts)
    click.echo(f"Removing entire build directory: {build_dir}")
    if not build_dir.exists():
        click.echo("Build directory doesn't exist, nothing to remove.")
        return
    shutil.rmtree(build_dir)
    click.echo("Build directory removed successfully!")


def execute_reconfigure(opts: SharedOptions, args: list[str] | None = None) -> None:
    """Drop the CMake cache and run the configure step again."""
    setup_idf_environment()
    project_dir, build_dir = _dirs(opts)
    click.echo("Reconfiguring project...")

    cache = build_dir / CACHE_FILE
    if cache.exists():
        cache.unlink()

    # With the cache gone this is either explicit or auto-detected.
    generator = resolve_generator(opts.generator, build_dir)
    click.echo(f"Using generator: {generator}")

    run_command(configure_args(opts, project_dir, build_dir, generator), cwd=project_dir, verbose=opts.verbose)
    click.echo("Reconfigure completed successfully!")


def list_build_targets(opts: SharedOptions, args: list[str] | None = None) -> None:
    setup_idf_environment()
    project_dir, build_dir = _dirs(opts)
    if not build_dir.exists():
        click.echo("Build directory doesn't exist. Run 'build' command first.")
        return

    click.echo("Available build system targets:")
    output = run_command_with_output(
        ["cmake", "--build", str(build_dir), "--target", "help"], cwd=project_dir,
    )
    click.echo(output)
