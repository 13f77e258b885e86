# Constants
QUERY_PLACEHOLDER = "$query"

ENGINE_CONFIG_FILENAME = "config.json"
ENGINE_EXECUTABLE_NAME = "engine"
DEFAULT_ENGINES_DIR = "engines"
DEFAULT_ENV_FILE = ".env"

ENGINES_DIR_ENV_VAR = "ENGINES_DIR"
LOG_LEVEL_ENV_VAR = "ENGINES_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "INFO"

STDOUT_ENCODING = "utf-8"
