"""CLI entry point for idfcli."""

import sys
from pathlib import Path

import click

from idfcli import __version__
from idfcli.chain import SharedOptions, tokenize
from idfcli.commands import build as build_cmds
from idfcli.commands import config as config_cmds
from idfcli.commands import flash as flash_cmds
from idfcli.commands import monitor as monitor_cmds
from idfcli.commands import project as project_cmds
from idfcli.commands import size as size_cmds
from idfcli.config import apply_project_defaults
from idfcli.dispatch import execute_sequence
from idfcli.env import get_project_dir, list_targets as print_targets
from idfcli.errors import IdfError, ProjectError


def _fail(e: IdfError, no_hints: bool = False):
    # A failed chain step has already printed its message.
    if e.sequence_index is None:
        click.echo(f"Error: {e.message}", err=True)
    if e.hint and not no_hints:
        click.echo(f"Hint: {e.hint}", err=True)
    raise SystemExit(e.exit_code)


def _run(opts: SharedOptions, func, *args, **kwargs):
    """Call a command handler, turning idfcli and OS errors into a clean exit."""
    try:
        func(opts, *args, **kwargs)
    except IdfError as e:
        _fail(e, opts.no_hints)
    except OSError as e:
        _fail(ProjectError(str(e)), opts.no_hints)


class ChainedGroup(click.Group):
    """Group that runs ``build flash monitor`` style invocations in order.

    Arguments naming two or more commands bypass click parsing and run as a
    sequence; anything else is parsed as a single subcommand.
    """

    def main(self, args=None, *pargs, **kwargs):
        if args is None:
            args = sys.argv[1:]
        args = list(args)
        sequence = tokenize(args)
        if sequence is None:
            return super().main(args, *pargs, **kwargs)

        opts = sequence.shared_options
        try:
            apply_project_defaults(opts, get_project_dir(opts.project_dir))
            execute_sequence(sequence)
        except IdfError as e:
            _fail(e, opts.no_hints)


@click.group(cls=ChainedGroup, invoke_without_command=True)
@click.option("--idf-version", is_flag=True, help="Show idfcli version and exit.")
@click.option("--list-targets", "show_targets", is_flag=True, help="Print list of supported targets and exit.")
@click.option("-C", "--project-dir", type=click.Path(file_okay=False, path_type=Path), help="Project directory.")
@click.option("-B", "--build-dir", type=click.Path(file_okay=False, path_type=Path), help="Build directory.")
@click.option("-v", "--verbose", is_flag=True, help="Verbose build output.")
@click.option("--preview", is_flag=True, help="Enable IDF features that are still in preview.")
@click.option("--ccache", is_flag=True, help="Use ccache in build.")
@click.option("--no-ccache", is_flag=True, help="Disable ccache in build.")
@click.option("-G", "--generator", type=str, help="CMake generator.")
@click.option("--no-hints", is_flag=True, help="Disable hints on how to resolve errors.")
@click.option("-D", "--define-cache-entry", type=str, help="Create a cmake cache entry.")
@click.option("-p", "--port", type=str, help="Serial port.")
@click.option("-b", "--baud", type=int, help="Global baud rate.")
@click.pass_context
def main(ctx, idf_version, show_targets, project_dir, build_dir, verbose, preview, ccache,
         no_ccache, generator, no_hints, define_cache_entry, port, baud):
    """ESP-IDF build front end. Chain commands: idfcli build flash monitor."""
    if idf_version:
        click.echo(f"idfcli v{__version__}")
        ctx.exit()

    if show_targets:
        print_targets(preview)
        ctx.exit()

    opts = SharedOptions(
        project_dir=project_dir,
        build_dir=build_dir,
        verbose=verbose,
        preview=preview,
        ccache=ccache,
        no_ccache=no_ccache,
        generator=generator,
        no_hints=no_hints,
        define_cache_entry=define_cache_entry,
        port=port,
        baud=baud,
    )
    try:
        apply_project_defaults(opts, get_project_dir(project_dir))
    except IdfError as e:
        _fail(e, no_hints)
    ctx.obj = opts

    if ctx.invoked_subcommand is None:
        click.echo("No command specified. Use --help for available commands.")


_PASSTHROUGH = {"ignore_unknown_options": True, "allow_interspersed_args": False}


# ---------------------------------------------------------------------------
# Build commands
# ---------------------------------------------------------------------------

@main.command("build", context_settings=_PASSTHROUGH)
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
@click.pass_obj
def build_cmd(opts, args):
    """Build the project."""
    _run(opts, build_cmds.execute, list(args))


main.add_command(build_cmd, "all")


@main.command("app")
@click.pass_obj
def app_cmd(opts):
    """Build only the app."""
    _run(opts, build_cmds.execute_app)


@main.command("bootloader")
@click.pass_obj
def bootloader_cmd(opts):
    """Build only the bootloader."""
    _run(opts, build_cmds.execute_bootloader)


@main.command("clean")
@click.pass_obj
def clean_cmd(opts):
    """Delete build output files from the build directory."""
    _run(opts, build_cmds.execute_clean)


@main.command("fullclean")
@click.pass_obj
def fullclean_cmd(opts):
    """Delete the entire build directory contents."""
    _run(opts, build_cmds.execute_fullclean)


@main.command("reconfigure")
@click.pass_obj
def reconfigure_cmd(opts):
    """Re-run CMake."""
    _run(opts, build_cmds.execute_reconfigure)


@main.command("build-system-targets")
@click.pass_obj
def build_system_targets_cmd(opts):
    """Print list of build system targets."""
    _run(opts, build_cmds.list_build_targets)


# ---------------------------------------------------------------------------
# Flash / monitor
# ---------------------------------------------------------------------------

@main.command("flash", context_settings={"ignore_unknown_options": True})
@click.option("--extra-args", type=str, help="Extra arguments to pass to esptool.")
@click.option("--force", is_flag=True, help="Force write, skip security and compatibility checks.")
@click.option("--trace", is_flag=True, help="Enable trace-level output of flasher tool interactions.")
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
@click.pass_obj
def flash_cmd(opts, extra_args, force, trace, args):
    """Flash the project."""
    _run(opts, flash_cmds.execute, list(args), extra_args=extra_args, force=force, trace=trace)


@main.command("app-flash")
@click.option("--extra-args", type=str, help="Extra arguments to pass to esptool.")
@click.option("--force", is_flag=True, help="Force write, skip security and compatibility checks.")
@click.option("--trace", is_flag=True, help="Enable trace-level output of flasher tool interactions.")
@click.pass_obj
def app_flash_cmd(opts, extra_args, force, trace):
    """Flash the app only."""
    _run(opts, flash_cmds.execute_app, extra_args=extra_args, force=force, trace=trace)


@main.command("bootloader-flash")
@click.pass_obj
def bootloader_flash_cmd(opts):
    """Flash the bootloader only."""
    _run(opts, flash_cmds.execute_bootloader)


@main.command("erase-flash")
@click.pass_obj
def erase_flash_cmd(opts):
    """Erase entire flash chip."""
    _run(opts, flash_cmds.execute_erase)


@main.command("monitor", context_settings=_PASSTHROUGH)
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
@click.pass_obj
def monitor_cmd(opts, args):
    """Display serial output."""
    _run(opts, monitor_cmds.execute, list(args))


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

@main.command("menuconfig")
@click.pass_obj
def menuconfig_cmd(opts):
    """Run "menuconfig" project configuration tool."""
    _run(opts, config_cmds.execute_menuconfig)


@main.command("set-target")
@click.argument("target")
@click.pass_obj
def set_target_cmd(opts, target):
    """Set the chip target to build."""
    _run(opts, config_cmds.execute_set_target, target)


# ---------------------------------------------------------------------------
# Size reports
# ---------------------------------------------------------------------------

@main.command("size")
@click.pass_obj
def size_cmd(opts):
    """Print basic size information about the app."""
    _run(opts, size_cmds.execute)


@main.command("size-components")
@click.pass_obj
def size_components_cmd(opts):
    """Print per-component size information."""
    _run(opts, size_cmds.execute_components)


@main.command("size-files")
@click.pass_obj
def size_files_cmd(opts):
    """Print per-source-file size information."""
    _run(opts, size_cmds.execute_files)


# ---------------------------------------------------------------------------
# Project scaffolding
# ---------------------------------------------------------------------------

@main.command("create-project")
@click.argument("name")
@click.option("-p", "--path", type=click.Path(file_okay=False, path_type=Path), help="Parent directory for the project.")
@click.pass_obj
def create_project_cmd(opts, name, path):
    """Create a new project."""
    _run(opts, project_cmds.create_project, name, path)
