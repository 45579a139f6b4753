"""External tool invocation.

Every call to ``cargo`` (metadata, outdated, audit, machete) goes through a
:class:`ToolRunner` so that callers can inject a fake in tests.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from typing import Protocol

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 120.0


class ToolInvocationError(Exception):
    """The tool could not be run at all (missing, timed out, OS error)."""

    def __init__(self, name: str, reason: str):
        super().__init__(f"{name}: {reason}")
        self.name = name
        self.reason = reason


@dataclass
class ToolOutput:
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class ToolRunner(Protocol):
    def run(self, name: str, args: list[str]) -> ToolOutput:
        ...


class SubprocessToolRunner:
    """Run tools as blocking child processes with a bounded timeout."""

    def __init__(self, timeout: float | None = DEFAULT_TIMEOUT, cwd: str | None = None):
        self.timeout = timeout
        self.cwd = cwd

    def run(self, name: str, args: list[str]) -> ToolOutput:
        cmd = [name, *args]
        logger.debug("running %s", " ".join(cmd))
        try:
            proc = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                cwd=self.cwd,
            )
        except FileNotFoundError as e:
            raise ToolInvocationError(name, "executable not found") from e
        except subprocess.TimeoutExpired as e:
            raise ToolInvocationError(name, f"timed out after {self.timeout}s") from e
        except OSError as e:
            raise ToolInvocationError(name, str(e)) from e

        if proc.returncode != 0:
            logger.debug("%s exited with status %d", name, proc.returncode)
        return ToolOutput(
            returncode=proc.returncode,
            stdout=proc.stdout or "",
            stderr=proc.stderr or "",
        )
