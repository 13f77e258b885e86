"""
Environment driven settings for the engines manager.

Values come from the process environment, optionally seeded from a
``.env`` file loaded with python-dotenv.
"""

import logging
import os
from pathlib import Path
from typing import Optional
from dotenv import load_dotenv
from pydantic import BaseModel, Field

from engines_manager.config.constants import (
    DEFAULT_ENGINES_DIR,
    DEFAULT_LOG_LEVEL,
    ENGINES_DIR_ENV_VAR,
    LOG_LEVEL_ENV_VAR,
)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class Settings(BaseModel):
    engines_dir: str = Field(
        DEFAULT_ENGINES_DIR, description="Directory holding one subdirectory per engine"
    )
    log_level: str = Field(DEFAULT_LOG_LEVEL, description="Level for engines_manager loggers")


def get_settings(env_file: Optional[str] = None) -> Settings:
    """
    Read settings from the environment.

    Args:
        env_file: Optional .env file to load first. Variables already set in
            the environment take precedence over the file.

    Returns:
        Settings instance
    """
    if env_file and Path(env_file).exists():
        load_dotenv(env_file)

    return Settings(
        engines_dir=os.environ.get(ENGINES_DIR_ENV_VAR) or DEFAULT_ENGINES_DIR,
        log_level=(os.environ.get(LOG_LEVEL_ENV_VAR) or DEFAULT_LOG_LEVEL).upper(),
    )


def configure_logging(level: str = DEFAULT_LOG_LEVEL) -> None:
    """Install a stream handler and set the engines_manager logger level"""
    logging.basicConfig(
        level=logging.WARNING,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler()],
    )
    logging.getLogger("engines_manager").setLevel(level.upper())
