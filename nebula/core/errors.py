"""Error kinds raised by nebula core.

Every failure that crosses a module boundary is a NebulaError carrying a
closed ErrorKind, so callers branch on the kind instead of parsing messages.
"""

from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    """Closed set of failure kinds."""
    EXTERNAL_TOOL = "external-tool"        # Tool missing or could not be launched
    NON_ZERO_EXIT = "non-zero-exit"        # Tool ran and reported failure
    PARSE_AMBIGUITY = "parse-ambiguity"    # Unexpected line shape (dropped, never raised)
    CACHE_READ = "cache-read"
    CACHE_WRITE = "cache-write"
    TASK_FAILURE = "task-failure"          # A fetch unit crashed


class NebulaError(Exception):
    """Base error with a kind, a message and optional captured output."""

    kind = ErrorKind.TASK_FAILURE

    def __init__(self, message: str, output: Optional[str] = None,
                 kind: Optional[ErrorKind] = None):
        if kind is not None:
            self.kind = kind
        self.message = message
        self.output = output
        super().__init__(message)


class ExternalToolError(NebulaError):
    """Raised when an external program cannot be started."""

    kind = ErrorKind.EXTERNAL_TOOL

    def __init__(self, program: str, reason: str):
        self.program = program
        super().__init__(f"Failed to execute {program}: {reason}")


class ExternalToolNonZeroExit(NebulaError):
    """Raised when an external program exits with a failure status."""

    kind = ErrorKind.NON_ZERO_EXIT

    def __init__(self, command: str, returncode: int, output: str = ""):
        self.command = command
        self.returncode = returncode
        detail = output.strip()
        message = f"{command} failed with status {returncode}"
        if detail:
            message += f": {detail}"
        super().__init__(message, output=output)


class CacheReadError(NebulaError):
    """Cache file exists but cannot be read or decoded."""

    kind = ErrorKind.CACHE_READ


class CacheWriteError(NebulaError):
    """Cache file or its directory cannot be written or removed."""

    kind = ErrorKind.CACHE_WRITE
