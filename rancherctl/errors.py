"""Exceptions raised by rancherctl.

Every fatal condition is a ``SetupError``. The CLI turns these into an
``[ERROR]`` line on stderr and in the audit log, then exits with code 1.
"""
from typing import Optional


class SetupError(Exception):
    """Base class for all rancherctl errors."""


class ConfigurationError(SetupError):
    """An option has an invalid value."""


class UnsupportedEnvironmentError(SetupError):
    """The host OS, architecture or privileges are not supported."""


class DependencyError(SetupError):
    """A required tool is missing and cannot be provided."""


class CommandError(SetupError):
    """An external command exited with a non-zero status."""

    def __init__(self, cmd: str, returncode: int, stderr: str = ""):
        self.cmd = cmd
        self.returncode = returncode
        self.stderr = stderr
        message = f"Command failed: {cmd} (exit code: {returncode})"
        if stderr:
            message += f"\n{stderr.strip()}"
        super().__init__(message)


class ReadinessTimeoutError(SetupError):
    """A bounded wait expired before the target became ready."""

    def __init__(self, message: str, hint: Optional[str] = None):
        self.hint = hint
        if hint:
            message = f"{message} {hint}"
        super().__init__(message)


class MarkerNotFoundError(SetupError):
    """The install marker does not exist."""


class MarkerFormatError(SetupError):
    """The install marker exists but cannot be parsed."""
