from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Union
import logging
from pydantic import ValidationError as DocumentValidationError
from engines_manager.config.constants import QUERY_PLACEHOLDER
from engines_manager.engine.errors import (
    ConfigurationInvalid,
    InvalidName,
    InvalidTemplate,
)
from engines_manager.models.documents import CommandDocument


logger = logging.getLogger(__name__)


def validate_name(name: Any, kind: str = "command") -> str:
    """Return ``name`` if it is a non-blank string, raise InvalidName otherwise"""
    if not isinstance(name, str) or not name.strip():
        raise InvalidName(name, kind=kind)
    return name


def validate_template(template: Any) -> str:
    """
    Check that an argument template holds the placeholder exactly once.

    The placeholder may sit anywhere, including inside a larger token such
    as ``-u$query`` or ``-db=$query``.

    Args:
        template: Argument template to check

    Returns:
        The template, unchanged

    Raises:
        InvalidTemplate: If the placeholder occurs zero or several times
    """
    if not isinstance(template, str):
        raise InvalidTemplate(template, QUERY_PLACEHOLDER, 0)

    occurrences = template.count(QUERY_PLACEHOLDER)
    if occurrences != 1:
        raise InvalidTemplate(template, QUERY_PLACEHOLDER, occurrences)
    return template


@dataclass(frozen=True)
class Command:
    """
    A named argument template bound to a query placeholder.

    Commands are validated on construction and immutable afterwards, so an
    instance always holds a template with exactly one placeholder.

    Usage:
        command = Command("user", "-search_user=$query", "search a user")
        command.render("user123")  # ['-search_user=user123']
    """

    name: str
    args: str
    description: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate command after initialization"""
        validate_name(self.name)
        validate_template(self.args)

    @classmethod
    def from_document(cls, document: CommandDocument) -> "Command":
        """Build a command from an already parsed CommandDocument"""
        return cls(
            name=document.name, args=document.args, description=document.description
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Command":
        """
        Build a command from a mapping with ``name``, ``args`` and ``description``.

        Raises:
            ConfigurationInvalid: If the mapping is structurally malformed
            InvalidName: If the name is empty
            InvalidTemplate: If ``args`` breaks the placeholder rule
        """
        try:
            document = CommandDocument.model_validate(data)
        except DocumentValidationError as e:
            raise ConfigurationInvalid(f"Invalid command document: {e}", error=e) from e
        return cls.from_document(document)

    @classmethod
    def from_json(cls, text: Union[str, bytes]) -> "Command":
        """Build a command from a JSON object string, see ``from_dict``"""
        try:
            document = CommandDocument.model_validate_json(text)
        except DocumentValidationError as e:
            raise ConfigurationInvalid(f"Invalid command document: {e}", error=e) from e
        return cls.from_document(document)

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {"name": self.name, "args": self.args, "description": self.description}

    def render(self, query: str) -> List[str]:
        """
        Substitute ``query`` into the template and split it into arguments.

        The template is split on whitespace and the placeholder is replaced
        inside whichever token holds it. The query is inserted literally: it
        is never split, escaped or handed to a shell.

        Args:
            query: Text to substitute for the placeholder

        Returns:
            Ordered argument list for direct process invocation
        """
        return [token.replace(QUERY_PLACEHOLDER, query) for token in self.args.split()]

    def get_name(self) -> str:
        return self.name

    def get_description(self) -> Optional[str]:
        return self.description

    def __str__(self) -> str:
        return f"Command(name='{self.name}')"
