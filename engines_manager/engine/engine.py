import os
from pathlib import Path
from typing import IO, Any, Dict, Iterable, List, Mapping, Optional, Union
import logging
from pydantic import ValidationError as DocumentValidationError
from engines_manager.config.constants import ENGINE_EXECUTABLE_NAME, STDOUT_ENCODING
from engines_manager.engine.command import Command, validate_name
from engines_manager.engine.errors import (
    ConfigurationInvalid,
    DuplicateCommand,
    EnginesManagerError,
    ExecutionFailed,
    UnknownCommand,
)
from engines_manager.engine.process import ProcessRunner, SubprocessRunner
from engines_manager.models.documents import EngineDocument


logger = logging.getLogger(__name__)

PathType = Union[str, "os.PathLike[str]"]


class Engine:
    """
    A named set of commands bound to one external executable.

    Every command of an engine runs the same executable; the command only
    decides which arguments it receives. Command names are unique within an
    engine and commands can be added but never replaced or removed.

    Usage:
        engine = Engine("facebook", "./engines/facebook/engine")
        engine.new_command("user", "-u $query", "search a user")
        output = engine.execute("user", "user123")

    The engine holds no locks. All ``add_command`` calls should happen before
    the engine is shared for concurrent ``execute``/``list_commands`` calls.
    """

    def __init__(
        self,
        name: str,
        executable_path: PathType,
        description: Optional[str] = None,
        commands: Optional[Iterable[Command]] = None,
        runner: Optional[ProcessRunner] = None,
    ):
        """
        Initialize an engine, optionally seeded with commands.

        A seed list holding the same command name twice keeps the last one
        and logs a warning; use ``add_command`` for strict insertion.

        Args:
            name: Name of the engine
            executable_path: Executable invoked for every command
            description: Optional human readable description
            commands: Commands to register up front
            runner: Process runner used by ``execute`` (subprocess by default)
        """
        self._name = name
        self._executable_path = os.fspath(executable_path)
        self._description = description
        self._runner: ProcessRunner = runner if runner is not None else SubprocessRunner()

        # Registry of commands keyed by command name
        self._commands: Dict[str, Command] = {}

        for command in commands or []:
            if command.name in self._commands:
                logger.warning(
                    f"Command '{command.name}' already registered in engine "
                    f"'{name}', overriding"
                )
            self._commands[command.name] = command

        logger.info(
            f"Created engine '{name}' ({self._executable_path}) with "
            f"{len(self._commands)} commands: {list(self._commands.keys())}"
        )

    @classmethod
    def from_document(
        cls,
        document: EngineDocument,
        base_dir: Optional[PathType] = None,
        runner: Optional[ProcessRunner] = None,
        source: Optional[str] = None,
    ) -> "Engine":
        """
        Build an engine from a parsed EngineDocument.

        Construction is all or nothing: the first invalid command document
        aborts it and no engine is returned.

        Args:
            document: Parsed engine document
            base_dir: Directory holding the engine executable, used when the
                document has no ``executable_path``
            runner: Process runner for the engine
            source: Where the document came from, for error messages

        Raises:
            ConfigurationInvalid: Wrapping the first underlying failure
        """
        try:
            validate_name(document.name, kind="engine")
        except EnginesManagerError as e:
            raise ConfigurationInvalid(str(e), error=e, source=source) from e

        if document.executable_path is not None:
            executable_path = document.executable_path
        elif base_dir is not None:
            executable_path = os.fspath(Path(base_dir) / ENGINE_EXECUTABLE_NAME)
        else:
            raise ConfigurationInvalid(
                f"Engine '{document.name}' has no executable_path and no base "
                f"directory to find '{ENGINE_EXECUTABLE_NAME}' in",
                source=source,
            )

        engine = cls(
            name=document.name,
            executable_path=executable_path,
            description=document.description,
            runner=runner,
        )

        for index, command_document in enumerate(document.commands):
            try:
                engine.add_command(Command.from_document(command_document))
            except EnginesManagerError as e:
                logger.error(
                    f"Invalid command at index {index} in engine '{document.name}': {e}"
                )
                raise ConfigurationInvalid(
                    f"Invalid command at index {index} in engine "
                    f"'{document.name}': {e}",
                    error=e,
                    source=source,
                ) from e

        return engine

    @classmethod
    def from_dict(
        cls,
        data: Mapping[str, Any],
        base_dir: Optional[PathType] = None,
        runner: Optional[ProcessRunner] = None,
        source: Optional[str] = None,
    ) -> "Engine":
        """Build an engine from a parsed config mapping, see ``from_document``"""
        try:
            document = EngineDocument.model_validate(data)
        except DocumentValidationError as e:
            raise ConfigurationInvalid(
                f"Invalid engine document: {e}", error=e, source=source
            ) from e
        return cls.from_document(document, base_dir=base_dir, runner=runner, source=source)

    @classmethod
    def from_json(
        cls,
        data: Union[str, bytes, IO[str], IO[bytes]],
        base_dir: Optional[PathType] = None,
        runner: Optional[ProcessRunner] = None,
        source: Optional[str] = None,
    ) -> "Engine":
        """
        Build an engine from JSON text or a readable file object.

        Raises:
            ConfigurationInvalid: If the JSON is malformed or the document is invalid
        """
        text = data.read() if hasattr(data, "read") else data
        try:
            document = EngineDocument.model_validate_json(text)
        except DocumentValidationError as e:
            raise ConfigurationInvalid(
                f"Invalid engine document: {e}", error=e, source=source
            ) from e
        return cls.from_document(document, base_dir=base_dir, runner=runner, source=source)

    def add_command(self, command: Command) -> None:
        """
        Register a command on this engine.

        Args:
            command: Command to add

        Raises:
            DuplicateCommand: If a command with the same name already exists
        """
        if command.name in self._commands:
            raise DuplicateCommand(self._name, command.name)

        self._commands[command.name] = command
        logger.info(f"Added command '{command.name}' to engine '{self._name}'")

    def new_command(
        self, name: str, args: str, description: Optional[str] = None
    ) -> Command:
        """
        Create a command and register it on this engine.

        Returns:
            The registered command

        Raises:
            InvalidName: If the name is empty
            InvalidTemplate: If the template breaks the placeholder rule
            DuplicateCommand: If the name is already registered
        """
        command = Command(name=name, args=args, description=description)
        self.add_command(command)
        return command

    def get_command(self, command_name: str) -> Command:
        """
        Get a registered command by name.

        Raises:
            UnknownCommand: If no command has that name
        """
        command = self._commands.get(command_name)
        if command is None:
            raise UnknownCommand(
                self._name, command_name, available=list(self._commands.keys())
            )
        return command

    def has_command(self, command_name: str) -> bool:
        return command_name in self._commands

    def list_commands(self) -> Dict[str, Optional[str]]:
        """
        Get a snapshot of command names mapped to their descriptions.

        Returns:
            Dictionary of command name to description (None when unset)
        """
        return {name: command.description for name, command in self._commands.items()}

    def execute(self, command_name: str, query: str) -> str:
        """
        Run a command against ``query`` and return the executable's output.

        The command's template is rendered into an argument list and the
        engine executable is run with it, blocking until it exits. There is
        no timeout: a hung executable blocks the caller.

        Args:
            command_name: Name of a registered command
            query: Text substituted for the placeholder

        Returns:
            Captured standard output, decoded as UTF-8

        Raises:
            UnknownCommand: If the command is not registered (nothing is spawned)
            ExecutionFailed: If the executable cannot launch or exits non-zero
        """
        command = self.get_command(command_name)
        args = command.render(query)

        logger.debug(
            f"Executing command '{command_name}' of engine '{self._name}': "
            f"{self._executable_path} {args}"
        )

        try:
            output = self._runner.run(self._executable_path, args)
        except OSError as e:
            logger.error(
                f"Failed to launch '{self._executable_path}' for command "
                f"'{command_name}' of engine '{self._name}': {e}"
            )
            raise ExecutionFailed(
                self._name,
                command_name,
                self._executable_path,
                reason=ExecutionFailed.LAUNCH,
                detail=str(e),
            ) from e

        if not output.is_success():
            stderr = output.stderr.decode(STDOUT_ENCODING, errors="replace")
            logger.error(
                f"Command '{command_name}' of engine '{self._name}' exited with "
                f"status {output.returncode}"
            )
            raise ExecutionFailed(
                self._name,
                command_name,
                self._executable_path,
                reason=ExecutionFailed.EXIT_STATUS,
                returncode=output.returncode,
                stderr=stderr,
            )

        return output.stdout.decode(STDOUT_ENCODING, errors="replace")

    def get_name(self) -> str:
        return self._name

    def get_description(self) -> Optional[str]:
        return self._description

    def get_executable_path(self) -> str:
        return self._executable_path

    def get_command_names(self) -> List[str]:
        return list(self._commands.keys())

    def __contains__(self, command_name: object) -> bool:
        return command_name in self._commands

    def __len__(self) -> int:
        return len(self._commands)

    def __str__(self) -> str:
        return f"Engine(name='{self._name}')"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"name='{self._name}', "
            f"executable_path='{self._executable_path}', "
            f"commands={list(self._commands.keys())}"
            f")"
        )
