"""Flash and erase commands."""

from __future__ import annotations

import click

from idfcli.chain import SharedOptions
from idfcli.commands import build
from idfcli.env import (
    get_build_dir, get_idf_path, get_project_dir, get_python_executable, run_command,
    scoped_env, setup_idf_environment,
)

DEFAULT_FLASH_BAUD = 460800
APP_OFFSET = "0x10000"
BOOTLOADER_OFFSET = "0x1000"


def _esptool_args(opts: SharedOptions) -> list[str]:
    """Return the python + esptool.py prefix shared by all direct esptool calls."""
    esptool = get_idf_path() / "components" / "esptool_py" / "esptool" / "esptool.py"
    baud = opts.baud or DEFAULT_FLASH_BAUD
    args = [get_python_executable(), str(esptool), "--chip", "auto", "--baud", str(baud)]
    if opts.port:
        args.extend(["--port", opts.port])
    return args


def execute(
    opts: SharedOptions,
    args: list[str],
    extra_args: str | None = None,
    force: bool = False,
    trace: bool = False,
) -> None:
    """Flash the whole project through the CMake flash target."""
    setup_idf_environment()
    project_dir = get_project_dir(opts.project_dir)
    build_dir = get_build_dir(opts.build_dir, project_dir)

    click.echo("Flashing project...")
    if extra_args:
        click.echo(f"Using extra args: {extra_args}")
    if force:
        click.echo("Force mode enabled")
    if trace:
        click.echo("Trace mode enabled")
    if args:
        click.echo(f"Warning: flash ignores extra arguments: {' '.join(args)}", err=True)

    if not build_dir.exists():
        click.echo("Build directory doesn't exist. Building project first...")
        build.execute(opts, [])

    # The flash target's esptool invocation reads port and baud from these.
    with scoped_env(ESPPORT=opts.port, ESPBAUD=opts.baud):
        run_command(
            ["cmake", "--build", str(build_dir), "--target", "flash"],
            cwd=project_dir, verbose=opts.verbose,
        )

    click.echo("Flash completed successfully!")


def execute_app(
    opts: SharedOptions,
    args: list[str] | None = None,
    extra_args: str | None = None,
    force: bool = False,
    trace: bool = False,
) -> None:
    """Write only the application binary."""
    setup_idf_environment()
    project_dir = get_project_dir(opts.project_dir)
    build_dir = get_build_dir(opts.build_dir, project_dir)

    click.echo("Flashing app only...")

    project_name = project_dir.resolve().name or "app"
    app_bin = build_dir / f"{project_name}.bin"
    if not app_bin.exists():
        click.echo("App binary doesn't exist. Building app first...")
        build.execute_app(opts)

    flash_args = _esptool_args(opts) + ["write_flash"]
    if force:
        flash_args.append("--force")
    if trace:
        flash_args.append("--trace")
    if extra_args:
        flash_args.extend(extra_args.split())
    flash_args.extend([APP_OFFSET, str(app_bin)])

    run_command(flash_args, cwd=project_dir, verbose=opts.verbose or trace)
    click.echo("App flash completed successfully!")


def execute_bootloader(opts: SharedOptions, args: list[str] | None = None) -> None:
    """Write only the bootloader binary."""
    setup_idf_environment()
    project_dir = get_project_dir(opts.project_dir)
    build_dir = get_build_dir(opts.build_dir, project_dir)

    click.echo("Flashing bootloader only...")

    bootloader_bin = build_dir / "bootloader" / "bootloader.bin"
    if not bootloader_bin.exists():
        click.echo("Bootloader binary doesn't exist. Building bootloader first...")
        build.execute_bootloader(opts)

    flash_args = _esptool_args(opts) + ["write_flash", BOOTLOADER_OFFSET, str(bootloader_bin)]
    run_command(flash_args, cwd=project_dir, verbose=opts.verbose)
    click.echo("Bootloader flash completed successfully!")


def execute_erase(opts: SharedOptions, args: list[str] | None = None) -> None:
    """Erase the entire flash chip."""
    setup_idf_environment()
    project_dir = get_project_dir(opts.project_dir)

    click.echo("Erasing flash...")
    run_command(_esptool_args(opts) + ["erase_flash"], cwd=project_dir, verbose=opts.verbose)
    click.echo("Flash erase completed successfully!")
