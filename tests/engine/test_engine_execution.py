"""
Execution tests that spawn real engine executables.
"""

import json
import os
from pathlib import Path
from typing import Any, Dict

import pytest

from engines_manager.engine.command import Command
from engines_manager.engine.engine import Engine
from engines_manager.engine.errors import ExecutionFailed, UnknownCommand
from tests.helpers import posix_only, write_executable


pytestmark = posix_only


class TestEngineExecution:
    """Test suite for execute with SubprocessRunner"""

    def test_check_new_command(self, test_output_executable: str) -> None:
        """Test executing a command created with new_command"""
        engine = Engine("Engine", test_output_executable)
        engine.new_command("search", "-search=$query")

        assert engine.execute("search", "test123") == "test output\n"

    def test_check_add_command(self, test_output_executable: str) -> None:
        """Test executing a command added with add_command"""
        engine = Engine("Engine", test_output_executable)
        engine.add_command(Command("search", "-s $query"))

        assert engine.execute("search", "test123") == "test output\n"

    def test_execute_command_from_config(
        self, tmp_path: Path, facebook_config_data: Dict[str, Any]
    ) -> None:
        """Test the executable next to a config document"""
        engine_dir = tmp_path / "facebook_engine"
        engine_dir.mkdir()
        write_executable(engine_dir / "engine", 'echo "test output"')
        config_file = engine_dir / "config.json"
        config_file.write_text(json.dumps(facebook_config_data), encoding="utf-8")

        with open(config_file, "r", encoding="utf-8") as fd:
            engine = Engine.from_json(fd, base_dir=engine_dir)

        assert engine.execute("user", "user123") == "test output\n"
        with pytest.raises(UnknownCommand):
            engine.execute("search", "user123")

    def test_arguments_reach_the_executable_unsplit(
        self, echo_args_executable: str
    ) -> None:
        """Test that queries with spaces and shell syntax stay one argument"""
        engine = Engine("Engine", echo_args_executable)
        engine.new_command("search", "-v --user=$query")

        output = engine.execute("search", "john doe; echo $HOME")

        assert output.splitlines() == ["-v", "--user=john doe; echo $HOME"]

    def test_non_zero_exit(self, failing_executable: str) -> None:
        """Test that a non-zero exit status raises ExecutionFailed"""
        engine = Engine("Engine", failing_executable)
        engine.new_command("search", "$query")

        with pytest.raises(ExecutionFailed) as exc_info:
            engine.execute("search", "user123")

        assert exc_info.value.reason == ExecutionFailed.EXIT_STATUS
        assert exc_info.value.returncode == 3
        assert "search backend down" in exc_info.value.stderr

    def test_missing_executable(self, tmp_path: Path) -> None:
        """Test that a missing executable raises ExecutionFailed"""
        engine = Engine("Engine", os.fspath(tmp_path / "does_not_exist"))
        engine.new_command("search", "$query")

        with pytest.raises(ExecutionFailed) as exc_info:
            engine.execute("search", "user123")

        assert exc_info.value.reason == ExecutionFailed.LAUNCH
        assert isinstance(exc_info.value.__cause__, FileNotFoundError)

    def test_not_executable(self, tmp_path: Path) -> None:
        """Test that a file without execute permission raises ExecutionFailed"""
        script = tmp_path / "engine"
        script.write_text("#!/bin/sh\necho nope\n", encoding="utf-8")
        script.chmod(0o644)
        engine = Engine("Engine", os.fspath(script))
        engine.new_command("search", "$query")

        with pytest.raises(ExecutionFailed) as exc_info:
            engine.execute("search", "user123")

        assert exc_info.value.reason == ExecutionFailed.LAUNCH
        assert isinstance(exc_info.value.__cause__, PermissionError)

    def test_null_byte_in_query(self, echo_args_executable: str) -> None:
        """Test that a query exec cannot accept fails as a launch error"""
        engine = Engine("Engine", echo_args_executable)
        engine.new_command("search", "-s $query")

        with pytest.raises(ExecutionFailed) as exc_info:
            engine.execute("search", "a\x00b")

        assert exc_info.value.reason == ExecutionFailed.LAUNCH
        assert isinstance(exc_info.value.__cause__, OSError)
        assert isinstance(exc_info.value.__cause__.__cause__, ValueError)

    def test_null_byte_in_executable_path(self, echo_args_executable: str) -> None:
        """Test that an executable path exec cannot accept fails as a launch error"""
        engine = Engine("Engine", echo_args_executable + "\x00")
        engine.new_command("search", "-s $query")

        with pytest.raises(ExecutionFailed) as exc_info:
            engine.execute("search", "user123")

        assert exc_info.value.reason == ExecutionFailed.LAUNCH
        assert exc_info.value.returncode is None
        assert isinstance(exc_info.value.__cause__, OSError)
