import json
import os
from pathlib import Path
from typing import Any, Dict

import pytest

from tests.helpers import FakeRunner, write_executable


@pytest.fixture
def fake_runner() -> FakeRunner:
    """Fake process runner returning a successful result"""
    return FakeRunner()


@pytest.fixture
def test_output_executable(tmp_path: Path) -> str:
    """Executable that prints 'test output' and exits 0"""
    return os.fspath(write_executable(tmp_path / "engine", 'echo "test output"'))


@pytest.fixture
def echo_args_executable(tmp_path: Path) -> str:
    """Executable that prints each argument it receives on its own line"""
    return os.fspath(
        write_executable(
            tmp_path / "echo_args", 'for arg in "$@"; do printf "%s\\n" "$arg"; done'
        )
    )


@pytest.fixture
def failing_executable(tmp_path: Path) -> str:
    """Executable that writes to stderr and exits with status 3"""
    return os.fspath(
        write_executable(tmp_path / "failing", 'echo "search backend down" >&2\nexit 3')
    )


@pytest.fixture
def facebook_config_data() -> Dict[str, Any]:
    """Engine document with two commands"""
    return {
        "name": "facebook",
        "description": "Search stuff on Facebook.",
        "commands": [
            {
                "name": "user",
                "args": "-search_user=$query",
                "description": "search a user",
            },
            {
                "name": "group",
                "args": "-g $query",
                "description": "search a group",
            },
        ],
    }


@pytest.fixture
def engines_dir(tmp_path: Path, facebook_config_data: Dict[str, Any]) -> Path:
    """Engines directory holding a facebook and a google engine"""
    root = tmp_path / "engines"

    facebook_dir = root / "facebook_engine"
    facebook_dir.mkdir(parents=True)
    (facebook_dir / "config.json").write_text(
        json.dumps(facebook_config_data), encoding="utf-8"
    )
    write_executable(facebook_dir / "engine", 'echo "test output"')

    google_dir = root / "google_engine"
    google_dir.mkdir()
    (google_dir / "config.json").write_text(
        json.dumps(
            {
                "name": "google",
                "description": "google search engine",
                "commands": [{"name": "search", "args": "-q $query"}],
            }
        ),
        encoding="utf-8",
    )
    write_executable(google_dir / "engine", 'echo "google: $2"')

    return root
