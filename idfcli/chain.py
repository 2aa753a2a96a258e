"""Chained-command tokenization (e.g. ``idfcli build flash monitor``)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

# Commands that can appear in a chained invocation. A token matching one of
# these always starts a new command, even where it was meant as an argument
# to the previous one (``build monitor`` can never pass "monitor" to build).
KNOWN_COMMANDS = frozenset({
    "build",
    "all",
    "app",
    "bootloader",
    "clean",
    "fullclean",
    "flash",
    "app-flash",
    "bootloader-flash",
    "monitor",
    "menuconfig",
    "set-target",
    "erase-flash",
    "size",
    "size-components",
    "size-files",
    "reconfigure",
    "create-project",
    "build-system-targets",
})

GLOBAL_FLAGS = frozenset({"-v", "--verbose", "--preview", "--ccache", "--no-ccache", "--no-hints"})

# Global options that take a value. The chained parser does not capture them.
VALUE_OPTIONS = frozenset({
    "-G", "--generator",
    "-D", "--define-cache-entry",
    "-p", "--port",
    "-b", "--baud",
    "-C", "--project-dir",
    "-B", "--build-dir",
})


@dataclass
class SharedOptions:
    """Global options shared by every command of an invocation."""
    project_dir: Path | None = None
    build_dir: Path | None = None
    verbose: bool = False
    preview: bool = False
    ccache: bool = False
    no_ccache: bool = False
    generator: str | None = None
    no_hints: bool = False
    define_cache_entry: str | None = None
    port: str | None = None
    baud: int | None = None


@dataclass
class ParsedCommand:
    name: str
    args: list[str] = field(default_factory=list)


@dataclass
class CommandSequence:
    shared_options: SharedOptions
    commands: list[ParsedCommand]
    dropped_options: list[str] = field(default_factory=list)


def _option_name(token: str) -> str:
    if token.startswith("--"):
        return token.split("=", 1)[0]
    if token.startswith("-") and len(token) > 2:
        # -Gninja, -DFOO=1
        return token[:2]
    return token


def find_value_options(tokens: list[str]) -> list[str]:
    """Return the value-taking options present in ``tokens``, in order."""
    return [t for t in tokens if _option_name(t) in VALUE_OPTIONS]


def shared_options_from_tokens(tokens: list[str]) -> SharedOptions:
    """Build SharedOptions from exact-match boolean flags only."""
    return SharedOptions(
        verbose="-v" in tokens or "--verbose" in tokens,
        preview="--preview" in tokens,
        ccache="--ccache" in tokens,
        no_ccache="--no-ccache" in tokens,
        no_hints="--no-hints" in tokens,
    )


def tokenize(args: list[str], known_commands=KNOWN_COMMANDS) -> CommandSequence | None:
    """Split a flat argument list into a sequence of commands.

    ``args`` excludes the program name. Returns None when the arguments hold
    fewer than two commands; the caller should then fall back to ordinary
    single-command parsing.
    """
    commands: list[ParsedCommand] = []
    global_tokens: list[str] = []
    current: ParsedCommand | None = None

    for token in args:
        if token in known_commands:
            if current is not None:
                commands.append(current)
            current = ParsedCommand(name=token)
        elif current is not None:
            current.args.append(token)
        else:
            global_tokens.append(token)

    if current is not None:
        commands.append(current)

    if len(commands) > 1:
        return CommandSequence(
            shared_options=shared_options_from_tokens(global_tokens),
            commands=commands,
            dropped_options=find_value_options(global_tokens),
        )
    return None
