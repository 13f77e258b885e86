"""Process invocation boundary for engine executables."""

from dataclasses import dataclass
from typing import List, Protocol, Sequence
import logging
import subprocess


logger = logging.getLogger(__name__)


@dataclass
class ProcessOutput:
    """Captured result of running an engine executable."""

    executable: str
    args: List[str]
    stdout: bytes
    stderr: bytes
    returncode: int

    def is_success(self) -> bool:
        return self.returncode == 0


class ProcessRunner(Protocol):
    """Protocol for components that can spawn an executable with arguments."""

    def run(self, executable: str, args: Sequence[str]) -> ProcessOutput:
        """
        Run ``executable`` with ``args`` and wait for it to exit.

        Implementations raise ``OSError`` when the executable cannot be
        launched and return a ProcessOutput otherwise, whatever the status.
        """
        ...


class SubprocessRunner:
    """ProcessRunner backed by :func:`subprocess.run`.

    Arguments are passed as a list, never through a shell. Standard input is
    not supplied and the working directory and environment are inherited.
    """

    def run(self, executable: str, args: Sequence[str]) -> ProcessOutput:
        argv = [executable, *args]
        logger.debug(f"Spawning process: {argv}")

        try:
            completed = subprocess.run(
                argv,
                stdin=subprocess.DEVNULL,
                capture_output=True,
                check=False,
            )
        except ValueError as e:
            # argv that exec cannot accept, e.g. an embedded null byte
            raise OSError(f"Cannot launch {executable!r}: {e}") from e

        logger.debug(f"Process {executable} exited with status {completed.returncode}")
        return ProcessOutput(
            executable=executable,
            args=list(args),
            stdout=completed.stdout,
            stderr=completed.stderr,
            returncode=completed.returncode,
        )
