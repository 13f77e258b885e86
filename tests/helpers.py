"""Shared helpers for engine tests."""

import stat
import sys
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import pytest

from engines_manager.engine.process import ProcessOutput


posix_only = pytest.mark.skipif(
    sys.platform.startswith("win"), reason="spawns POSIX shell scripts"
)


def write_executable(path: Path, body: str) -> Path:
    """Write a /bin/sh script and mark it executable"""
    path.write_text(f"#!/bin/sh\n{body}\n", encoding="utf-8")
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


class FakeRunner:
    """Process runner that records calls instead of spawning anything"""

    def __init__(
        self,
        stdout: bytes = b"fake output\n",
        stderr: bytes = b"",
        returncode: int = 0,
        error: Optional[OSError] = None,
    ) -> None:
        self.stdout = stdout
        self.stderr = stderr
        self.returncode = returncode
        self.error = error
        self.calls: List[Tuple[str, List[str]]] = []

    def run(self, executable: str, args: Sequence[str]) -> ProcessOutput:
        self.calls.append((executable, list(args)))
        if self.error is not None:
            raise self.error
        return ProcessOutput(
            executable=executable,
            args=list(args),
            stdout=self.stdout,
            stderr=self.stderr,
            returncode=self.returncode,
        )
