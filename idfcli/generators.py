"""CMake generator registry and selection for idfcli."""

from __future__ import annotations

import os
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path

from idfcli.errors import NoGeneratorFound

CACHE_FILE = "CMakeCache.txt"
_CACHE_KEY = "CMAKE_GENERATOR:INTERNAL="


@dataclass(frozen=True)
class GeneratorDescriptor:
    """A build-system backend CMake can generate for."""
    name: str
    command: tuple[str, ...]
    probe_command: tuple[str, ...]
    dry_run_command: tuple[str, ...]
    verbose_flag: str
    supports_forced_progression: bool = False


def build_registry(platform: str | None = None) -> tuple[GeneratorDescriptor, ...]:
    """Return the known generators in preference order.

    Ninja always comes first. Unix Makefiles is appended as a fallback
    everywhere except Windows; FreeBSD needs GNU make as ``gmake``.
    """
    platform = platform or sys.platform
    generators = [
        GeneratorDescriptor(
            name="Ninja",
            command=("ninja",),
            probe_command=("ninja", "--version"),
            dry_run_command=("ninja", "-n"),
            verbose_flag="-v",
            supports_forced_progression=True,
        ),
    ]

    if not platform.startswith("win"):
        make_cmd = "gmake" if platform.startswith("freebsd") else "make"
        jobs = (os.cpu_count() or 1) + 2
        generators.append(GeneratorDescriptor(
            name="Unix Makefiles",
            command=(make_cmd, "-j", str(jobs)),
            probe_command=(make_cmd, "--version"),
            dry_run_command=(make_cmd, "-n"),
            verbose_flag="VERBOSE=1",
            supports_forced_progression=False,
        ))

    return tuple(generators)


def get_generator(name: str, registry: tuple[GeneratorDescriptor, ...]) -> GeneratorDescriptor | None:
    for gen in registry:
        if gen.name == name:
            return gen
    return None


def executable_exists(args) -> bool:
    """Probe a tool by running its version command.

    A missing executable counts the same as a non-zero exit status.
    """
    if not args:
        return False
    try:
        result = subprocess.run(list(args), capture_output=True)
    except OSError:
        return False
    return result.returncode == 0


def get_generator_from_cache(build_dir: Path | str) -> str | None:
    """Return the generator recorded in a previous CMake configure, if any."""
    cache_path = Path(build_dir) / CACHE_FILE
    if not cache_path.exists():
        return None
    try:
        content = cache_path.read_text(errors="ignore")
    except OSError:
        return None

    for line in content.splitlines():
        if line.startswith(_CACHE_KEY):
            return line.split("=")[1]
    return None


def detect_generator(registry: tuple[GeneratorDescriptor, ...]) -> str:
    """Return the first generator in ``registry`` whose tool is installed."""
    for gen in registry:
        if executable_exists(gen.probe_command):
            return gen.name

    raise NoGeneratorFound(
        "To use idfcli, either the 'ninja' or 'make' build tool must be available in the PATH",
        hint="Install Ninja: https://ninja-build.org/ (or your package manager's 'ninja-build')",
    )


def resolve_generator(
    explicit: str | None,
    build_dir: Path | str,
    registry: tuple[GeneratorDescriptor, ...] | None = None,
) -> str:
    """Pick the generator for a configure step.

    Resolution order: explicit choice > CMakeCache.txt in build_dir >
    first installed generator in the registry.
    """
    if explicit is not None:
        return explicit

    cached = get_generator_from_cache(build_dir)
    if cached:
        return cached

    if registry is None:
        registry = build_registry()
    return detect_generator(registry)
