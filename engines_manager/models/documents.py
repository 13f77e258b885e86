from typing import List, Optional
from pydantic import BaseModel, Field


class CommandDocument(BaseModel):
    """Structural form of a command as found in an engine config file.

    Only shape and types are checked here; the placeholder rule is enforced
    by ``Command`` itself so direct and structured construction share it.
    """

    name: str = Field(..., description="Command name, unique within its engine")
    args: str = Field(
        ...,
        description="Argument template holding exactly one '$query' (e.g. '-u $query')",
    )
    description: Optional[str] = Field(
        None, description="Human readable description of the command"
    )


class EngineDocument(BaseModel):
    """Structural form of an engine config file."""

    name: str = Field(..., description="Name of the engine")
    executable_path: Optional[str] = Field(
        None,
        description="Path to the engine executable. If not provided, the "
        "executable next to the config file is used.",
    )
    description: Optional[str] = Field(
        None, description="Human readable description of the engine"
    )
    commands: List[CommandDocument] = Field(
        default_factory=list, description="Ordered list of command documents"
    )
