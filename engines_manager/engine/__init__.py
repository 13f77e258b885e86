"""
Command and engine model: validated argument templates, engines binding
them to an executable, and the errors both can raise.
"""

from .command import Command
from .engine import Engine
from .errors import (
    ConfigurationInvalid,
    DuplicateCommand,
    EngineError,
    EnginesManagerError,
    ExecutionFailed,
    InvalidName,
    InvalidTemplate,
    UnknownCommand,
    UnknownEngine,
    ValidationError,
)
from .process import ProcessOutput, ProcessRunner, SubprocessRunner

__all__ = [
    "Command",
    "ConfigurationInvalid",
    "DuplicateCommand",
    "Engine",
    "EngineError",
    "EnginesManagerError",
    "ExecutionFailed",
    "InvalidName",
    "InvalidTemplate",
    "ProcessOutput",
    "ProcessRunner",
    "SubprocessRunner",
    "UnknownCommand",
    "UnknownEngine",
    "ValidationError",
]
