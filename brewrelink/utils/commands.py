"""Subprocess helpers shared by version probes and the Homebrew wrapper."""

import logging
import subprocess
from dataclasses import dataclass
from typing import Optional, Sequence

logger = logging.getLogger(__name__)

# Exit codes reported when the command never produced one
EXIT_NOT_FOUND = 127
EXIT_TIMEOUT = 124


@dataclass
class CommandResult:
    """Outcome of a finished (or failed to start) command."""

    cmd: list[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def not_found(self) -> bool:
        return self.returncode == EXIT_NOT_FOUND

    def describe(self) -> str:
        """One-line description for error messages."""
        detail = self.stderr.strip() or self.stdout.strip()
        text = f"'{' '.join(self.cmd)}' exited with status {self.returncode}"
        if detail:
            text += f": {detail.splitlines()[-1]}"
        return text


def run_command(cmd: Sequence[str], timeout: Optional[int] = None) -> CommandResult:
    """Run a command and capture its output.

    Never raises for a missing program, a timeout or a non-zero exit; those
    are reported through the returned ``CommandResult`` so callers decide
    whether the failure is fatal.

    Args:
        cmd: Command and arguments as a list
        timeout: Timeout in seconds, or None to wait indefinitely

    Returns:
        CommandResult with exit status, stdout and stderr
    """
    cmd = [str(part) for part in cmd]
    logger.debug("Running: %s", " ".join(cmd))
    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except FileNotFoundError:
        return CommandResult(cmd, EXIT_NOT_FOUND, stderr=f"{cmd[0]}: command not found")
    except subprocess.TimeoutExpired:
        return CommandResult(cmd, EXIT_TIMEOUT, stderr=f"timed out after {timeout}s")
    except OSError as e:
        return CommandResult(cmd, EXIT_NOT_FOUND, stderr=f"{cmd[0]}: {e}")

    return CommandResult(cmd, result.returncode, result.stdout, result.stderr)
