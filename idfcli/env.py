"""Environment, path and subprocess helpers for idfcli."""

from __future__ import annotations

import os
import subprocess
from contextlib import contextmanager
from pathlib import Path

import click

from idfcli.errors import EnvironmentNotConfigured, ExternalToolFailure

SUPPORTED_TARGETS = [
    "esp32", "esp32s2", "esp32s3", "esp32c2", "esp32c3", "esp32c6", "esp32h2", "esp32p4",
]
# Only accepted with --preview.
PREVIEW_TARGETS = ["esp32c5", "esp32c61"]

_IDF_HINT = "Set up ESP-IDF first: `source $IDF_PATH/export.sh` (or export.bat on Windows)"


def list_targets(preview: bool = False) -> None:
    click.echo("Supported targets:")
    for target in get_targets(preview):
        click.echo(f"  {target}")


def get_targets(preview: bool = False) -> list[str]:
    if preview:
        return SUPPORTED_TARGETS + PREVIEW_TARGETS
    return list(SUPPORTED_TARGETS)


def get_idf_path() -> Path:
    idf_path = os.environ.get("IDF_PATH")
    if not idf_path:
        raise EnvironmentNotConfigured("IDF_PATH environment variable not set", hint=_IDF_HINT)
    return Path(idf_path)


def setup_idf_environment() -> None:
    """Fail early when the ESP-IDF environment has not been exported."""
    if not os.environ.get("IDF_PATH"):
        raise EnvironmentNotConfigured(
            "IDF_PATH environment variable is not set. Please set up ESP-IDF environment first.",
            hint=_IDF_HINT,
        )


def get_project_dir(project_dir: Path | str | None = None) -> Path:
    if project_dir:
        return Path(project_dir)
    return Path.cwd()


def get_build_dir(build_dir: Path | str | None, project_dir: Path) -> Path:
    if build_dir:
        return Path(build_dir)
    return project_dir / "build"


def get_python_executable() -> str:
    """Return the ESP-IDF virtualenv Python, falling back to python3."""
    env_path = os.environ.get("IDF_PYTHON_ENV_PATH")
    if env_path:
        python_path = Path(env_path) / "bin" / "python"
        if python_path.exists():
            return str(python_path)
    return "python3"


def find_elf_file(build_dir: Path) -> Path | None:
    """Return the first .elf file directly inside build_dir."""
    elf_files = sorted(build_dir.glob("*.elf"))
    return elf_files[0] if elf_files else None


@contextmanager
def scoped_env(**values):
    """Set environment variables for the duration of the block.

    ``None`` values are skipped. Previous values are restored on exit,
    including when the block raises.
    """
    saved: dict[str, str | None] = {}
    try:
        for key, value in values.items():
            if value is None:
                continue
            saved[key] = os.environ.get(key)
            os.environ[key] = str(value)
        yield
    finally:
        for key, old in saved.items():
            if old is None:
                os.environ.pop(key, None)
            else:
                os.environ[key] = old


def run_command(args: list[str], cwd: Path | None = None, verbose: bool = False) -> None:
    """Run an external tool with inherited stdio; raise on failure."""
    args = [str(a) for a in args]
    if verbose:
        click.echo(f"Running: {' '.join(args)}")
    try:
        result = subprocess.run(args, cwd=cwd)
    except OSError as e:
        raise ExternalToolFailure(f"Failed to run {args[0]}: {e}", command=args) from e
    if result.returncode != 0:
        raise ExternalToolFailure(
            f"Command failed with exit code: {result.returncode}",
            command=args,
            returncode=result.returncode,
        )


def run_command_with_output(args: list[str], cwd: Path | None = None) -> str:
    """Run an external tool and return its stdout."""
    args = [str(a) for a in args]
    try:
        result = subprocess.run(args, cwd=cwd, capture_output=True, text=True)
    except OSError as e:
        raise ExternalToolFailure(f"Failed to run {args[0]}: {e}", command=args) from e
    if result.returncode != 0:
        raise ExternalToolFailure(
            f"Command failed: {result.stderr.strip()}",
            command=args,
            returncode=result.returncode,
        )
    return result.stdout
