"""Error kinds raised by idfcli."""

from __future__ import annotations


class IdfError(Exception):
    """Structured error with exit code and optional hint."""

    exit_code = 1

    def __init__(self, message: str, exit_code: int | None = None, hint: str | None = None):
        super().__init__(message)
        self.message = message
        if exit_code is not None:
            self.exit_code = exit_code
        self.hint = hint
        # Set by the dispatcher when the error aborts a chained invocation.
        self.sequence_index: int | None = None


class NoGeneratorFound(IdfError):
    exit_code = 4


class UnrecognizedCommand(IdfError):
    exit_code = 2


class MissingRequiredArgument(IdfError):
    exit_code = 2


class EnvironmentNotConfigured(IdfError):
    exit_code = 3


class ProjectError(IdfError):
    """A precondition on the project tree does not hold."""


class ExternalToolFailure(IdfError):
    """A spawned process failed to start or exited non-zero."""

    def __init__(self, message: str, command: list[str] | None = None, returncode: int | None = None):
        super().__init__(message)
        self.command = command or []
        self.returncode = returncode
        if returncode and returncode > 0:
            self.exit_code = returncode
