"""
Engine config loader for discovering engines on disk.

Each engine lives in its own directory holding a ``config.json`` document
and, unless the document names another ``executable_path``, an executable
called ``engine``:

    engines/
      facebook_engine/
        config.json
        engine

The loader builds an Engine from every such directory and keeps them in a
thread-safe cache keyed by engine name.
"""

import logging
import threading
from pathlib import Path
from typing import Dict, List, Optional, Union

from engines_manager.config.constants import DEFAULT_ENV_FILE, ENGINE_CONFIG_FILENAME
from engines_manager.config.settings import get_settings
from engines_manager.engine.engine import Engine
from engines_manager.engine.errors import ConfigurationInvalid, UnknownEngine
from engines_manager.engine.process import ProcessRunner

logger = logging.getLogger(__name__)


def load_engine_file(
    filepath: Union[str, Path], runner: Optional[ProcessRunner] = None
) -> Engine:
    """
    Load a single engine from a config file.

    The executable defaults to ``engine`` in the same directory as the file.

    Args:
        filepath: Path to the engine's config.json
        runner: Process runner for the engine

    Returns:
        Engine built from the file

    Raises:
        FileNotFoundError: If the configuration file is not found
        ConfigurationInvalid: If the document is malformed or invalid
    """
    file_path = Path(filepath)

    if not file_path.is_file():
        raise FileNotFoundError(f"Configuration file {filepath} not found.")

    with open(file_path, "r", encoding="utf-8") as f:
        engine = Engine.from_json(
            f, base_dir=file_path.parent, runner=runner, source=str(file_path)
        )

    logger.info(
        f"Successfully loaded engine '{engine.get_name()}' with "
        f"{len(engine)} commands from {file_path}"
    )
    return engine


class EngineConfigLoader:
    """
    Thread-safe loader for engine directories.

    Engines are discovered lazily on first access and cached until
    ``reload`` is called.
    """

    _instance: Optional["EngineConfigLoader"] = None
    _lock = threading.Lock()

    def __init__(
        self,
        engines_dir: Union[str, Path],
        runner: Optional[ProcessRunner] = None,
    ) -> None:
        """
        Initialize the engine config loader.

        Args:
            engines_dir: Directory holding one subdirectory per engine
            runner: Process runner handed to every loaded engine
        """
        self._engines_dir = Path(engines_dir)
        self._runner = runner
        self._engines_cache: Optional[Dict[str, Engine]] = None
        self._cache_lock = threading.Lock()

        logger.debug(f"EngineConfigLoader initialized with engines dir: {engines_dir}")

    @classmethod
    def get_instance(
        cls, engines_dir: Optional[Union[str, Path]] = None
    ) -> "EngineConfigLoader":
        """
        Get singleton instance of EngineConfigLoader.

        Args:
            engines_dir: Engines directory, defaults to ENGINES_DIR from the
                environment or the .env file

        Returns:
            EngineConfigLoader singleton instance
        """
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = cls(
                        engines_dir or get_settings(DEFAULT_ENV_FILE).engines_dir
                    )
        return cls._instance

    def discover_config_files(self) -> List[Path]:
        """
        Find the config file of every engine directory.

        Returns:
            Config file paths, in sorted directory order

        Raises:
            FileNotFoundError: If the engines directory does not exist
        """
        if not self._engines_dir.is_dir():
            raise FileNotFoundError(f"Engines directory {self._engines_dir} not found.")

        config_files = []
        for entry in sorted(self._engines_dir.iterdir()):
            config_file = entry / ENGINE_CONFIG_FILENAME
            if entry.is_dir() and config_file.is_file():
                config_files.append(config_file)
            else:
                logger.debug(f"Skipping {entry}: no {ENGINE_CONFIG_FILENAME}")
        return config_files

    def _load_engines(self) -> Dict[str, Engine]:
        engines: Dict[str, Engine] = {}

        try:
            for config_file in self.discover_config_files():
                engine = load_engine_file(config_file, runner=self._runner)
                engine_name = engine.get_name()

                if engine_name in engines:
                    logger.warning(
                        f"Engine '{engine_name}' already loaded, overriding with {config_file}"
                    )
                engines[engine_name] = engine
        except (FileNotFoundError, ConfigurationInvalid) as e:
            logger.error(f"Failed to load engines from {self._engines_dir}: {str(e)}")
            raise

        logger.info(f"Successfully loaded {len(engines)} engines from {self._engines_dir}")
        return engines

    def _get_engines_cache(self) -> Dict[str, Engine]:
        if self._engines_cache is None:
            with self._cache_lock:
                if self._engines_cache is None:
                    self._engines_cache = self._load_engines()
        return self._engines_cache

    def get_engine(self, engine_name: str) -> Engine:
        """
        Get a loaded engine by name.

        Raises:
            UnknownEngine: If no engine has that name
        """
        engines = self._get_engines_cache()

        if engine_name not in engines:
            available_engines = list(engines.keys())
            logger.error(
                f"Engine '{engine_name}' not found. Available engines: {available_engines}"
            )
            raise UnknownEngine(engine_name, available_engines)

        return engines[engine_name]

    def list_engines(self) -> Dict[str, Optional[str]]:
        """
        Get loaded engine names mapped to their descriptions.
        """
        engines = self._get_engines_cache()
        return {name: engine.get_description() for name, engine in engines.items()}

    def has_engine(self, engine_name: str) -> bool:
        if not engine_name or not isinstance(engine_name, str):
            return False
        return engine_name in self._get_engines_cache()

    def reload(self) -> None:
        """
        Clear the cache so engines are rediscovered on next access.
        """
        with self._cache_lock:
            self._engines_cache = None
            logger.info("Engines cache cleared, will reload on next access")
