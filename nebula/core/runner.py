"""
External command execution.

All dnf/rpm invocations go through CommandRunner so that launch failures
(program missing, permission denied, timeout) become ExternalToolError
while a non-zero exit stays a normal CommandResult for the caller to judge.
"""

import logging
import shlex
import subprocess
from dataclasses import dataclass
from typing import List, Optional, Sequence

from .errors import ExternalToolError

logger = logging.getLogger(__name__)


@dataclass
class CommandResult:
    """Exit status and decoded output of one command."""
    argv: List[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def command_line(self) -> str:
        return shlex.join(self.argv)

    def transcript(self) -> str:
        """Command line followed by its captured output."""
        parts = [f"$ {self.command_line}"]
        if self.stdout.strip():
            parts.append(self.stdout.rstrip())
        if self.stderr.strip():
            parts.append(self.stderr.rstrip())
        return "\n".join(parts)


class CommandRunner:
    """Runs external programs and captures their output."""

    def __init__(self, escalation: Sequence[str] = ("pkexec",),
                 timeout: Optional[int] = None):
        """Initialize runner.

        Args:
            escalation: Command prefix used by run_privileged()
            timeout: Seconds before a command is killed (None = no limit)
        """
        self.escalation = list(escalation)
        self.timeout = timeout

    def run(self, program: str, args: Sequence[str] = ()) -> CommandResult:
        """Run program with args.

        Raises:
            ExternalToolError: program could not be started or timed out
        """
        argv = [program, *args]
        logger.debug(f"Running: {shlex.join(argv)}")
        try:
            proc = subprocess.run(
                argv,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                timeout=self.timeout,
                check=False,
            )
        except FileNotFoundError:
            raise ExternalToolError(program, "command not found")
        except PermissionError as e:
            raise ExternalToolError(program, f"permission denied ({e})")
        except subprocess.TimeoutExpired:
            raise ExternalToolError(program, f"timed out after {self.timeout}s")
        except OSError as e:
            raise ExternalToolError(program, str(e))

        result = CommandResult(
            argv=argv,
            returncode=proc.returncode,
            stdout=proc.stdout.decode('utf-8', errors='replace'),
            stderr=proc.stderr.decode('utf-8', errors='replace'),
        )
        if not result.ok:
            logger.debug(f"{program} exited with status {result.returncode}")
        return result

    def run_privileged(self, program: str, args: Sequence[str] = ()) -> CommandResult:
        """Run program elevated through the escalation prefix.

        A cancelled or failed authentication shows up as a non-zero exit.
        """
        if not self.escalation:
            return self.run(program, args)
        return self.run(self.escalation[0], [*self.escalation[1:], program, *args])
