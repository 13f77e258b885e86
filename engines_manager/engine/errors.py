"""
Error taxonomy for commands and engines.

Validation errors are raised at construction time, engine errors at
registration or execution time. Every error is raised synchronously to the
caller; nothing is deferred or downgraded to a log line.
"""

from typing import List, Optional, Sequence


class EnginesManagerError(Exception):
    """Base class for all engines manager errors"""


class ValidationError(EnginesManagerError, ValueError):
    """A command or engine failed validation"""


class InvalidName(ValidationError):
    """Raised when a command or engine name is empty"""

    def __init__(self, name: object, kind: str = "command"):
        self.name = name
        self.kind = kind
        super().__init__(f"Invalid {kind} name: {name!r} (must be a non-empty string)")


class InvalidTemplate(ValidationError):
    """Raised when an argument template does not hold exactly one placeholder"""

    def __init__(self, template: object, placeholder: str, occurrences: int):
        self.template = template
        self.placeholder = placeholder
        self.occurrences = occurrences
        super().__init__(
            f"Invalid argument template {template!r}: expected exactly one "
            f"'{placeholder}', found {occurrences}"
        )


class EngineError(EnginesManagerError):
    """Raised by engine registration and execution"""


class DuplicateCommand(EngineError):
    """Raised when a command name is already registered on an engine"""

    def __init__(self, engine_name: str, command_name: str):
        self.engine_name = engine_name
        self.command_name = command_name
        super().__init__(
            f"Command '{command_name}' already exists in engine '{engine_name}'"
        )


class UnknownCommand(EngineError, LookupError):
    """Raised when a command name is not registered on an engine"""

    def __init__(
        self,
        engine_name: str,
        command_name: str,
        available: Optional[Sequence[str]] = None,
    ):
        self.engine_name = engine_name
        self.command_name = command_name
        self.available: List[str] = list(available or [])
        super().__init__(
            f"Command '{command_name}' not found in engine '{engine_name}'. "
            f"Available commands: {self.available}"
        )


class ExecutionFailed(EngineError):
    """
    Raised when an engine executable cannot be launched or exits non-zero.

    Both cases share this one error kind. ``reason`` tells them apart:
    ``"launch"`` when the process never started (``returncode`` is None and
    the ``OSError`` is chained as ``__cause__``) and ``"exit_status"`` when it
    ran and failed.
    """

    LAUNCH = "launch"
    EXIT_STATUS = "exit_status"

    def __init__(
        self,
        engine_name: str,
        command_name: str,
        executable_path: str,
        reason: str,
        returncode: Optional[int] = None,
        stderr: str = "",
        detail: str = "",
    ):
        self.engine_name = engine_name
        self.command_name = command_name
        self.executable_path = executable_path
        self.reason = reason
        self.returncode = returncode
        self.stderr = stderr

        if reason == self.LAUNCH:
            message = (
                f"Command '{command_name}' of engine '{engine_name}' could not "
                f"launch '{executable_path}': {detail}"
            )
        else:
            message = (
                f"Command '{command_name}' of engine '{engine_name}' exited with "
                f"status {returncode}"
            )
            if stderr.strip():
                message += f": {stderr.strip()}"
        super().__init__(message)

    @property
    def launched(self) -> bool:
        """True when the executable started but exited with a failure status"""
        return self.reason == self.EXIT_STATUS


class ConfigurationInvalid(EnginesManagerError):
    """
    Raised when a structured engine or command document is malformed or
    semantically invalid. The first underlying failure is kept in ``error``
    and chained as ``__cause__``.
    """

    def __init__(
        self,
        message: str,
        error: Optional[BaseException] = None,
        source: Optional[str] = None,
    ):
        self.error = error
        self.source = source
        if source:
            message = f"{source}: {message}"
        super().__init__(message)


class UnknownEngine(EnginesManagerError, LookupError):
    """Raised when an engine name is not known to a loader"""

    def __init__(self, engine_name: str, available: Optional[Sequence[str]] = None):
        self.engine_name = engine_name
        self.available: List[str] = list(available or [])
        super().__init__(
            f"Engine '{engine_name}' not found. Available engines: "
            f"{', '.join(self.available)}"
        )
