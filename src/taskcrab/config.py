"""
Settings for TaskCrab.

Values are layered: built-in defaults, then an optional YAML file, then
TASKCRAB_* environment variables.

    tasks_file: tasks.json
    log_level: WARNING
    log_dir: ~/.local/share/taskcrab/logs
"""
import logging
import os
import yaml
from pathlib import Path
from typing import Any, Dict, Union
from pydantic import BaseModel, Field, ValidationError, field_validator
from taskcrab.recovery import FatalError
from taskcrab.logs import DEFAULT_LOG_DIR, get_logger

log = get_logger("config")

ENV_PREFIX = "TASKCRAB"
DEFAULT_CONFIG_FILE = Path("taskcrab.yml")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

def _k(suffix: str) -> str:
    return f"{ENV_PREFIX}_{suffix}"

class Settings(BaseModel):
    tasks_file: Path = Field(default=Path("tasks.json"), description="JSON file holding the task list")
    log_level: str = Field(default="WARNING", description="Console log level")
    debug: bool = Field(default=False, description="Verbose console logging")
    log_dir: Path = Field(default=DEFAULT_LOG_DIR, description="Directory for taskcrab.log")

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v):
        v = v.upper()
        if v not in LOG_LEVELS:
            raise ValueError(f"Invalid log level: {v}")
        return v

    @field_validator('tasks_file', 'log_dir')
    @classmethod
    def expand_user(cls, v):
        return v.expanduser()

def _read_config_file(config_path: Path) -> Dict[str, Any]:
    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise FatalError(f"YAML syntax error in {config_path}: {e}") from e
    except OSError as e:
        raise FatalError(f"Cannot read config file {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise FatalError(f"Config file {config_path} must contain a mapping")
    return data

def _env_overrides() -> Dict[str, Any]:
    overrides = {}
    env_map = {
        'tasks_file': _k("FILE"),
        'log_level': _k("LOG_LEVEL"),
        'log_dir': _k("LOG_DIR"),
    }
    for key, name in env_map.items():
        raw = os.getenv(name)
        if raw is not None and raw.strip() != "":
            overrides[key] = raw.strip()

    raw_debug = os.getenv(_k("DEBUG"))
    if raw_debug is not None and raw_debug.strip() != "":
        overrides['debug'] = raw_debug.strip().lower() in ('1', 'true', 'yes', 'on')
    return overrides

def load_settings(config_path: Union[Path, str, None] = None) -> Settings:
    """
    Build Settings from defaults, a YAML config file and the environment.

    Args:
        config_path: explicit config file; otherwise TASKCRAB_CONFIG, otherwise
            taskcrab.yml in the working directory when it exists

    Raises:
        FatalError: the config file is unreadable or holds invalid values
    """
    values: Dict[str, Any] = {}

    explicit = config_path or os.getenv(_k("CONFIG"))
    if explicit:
        path = Path(explicit).expanduser()
        if not path.exists():
            raise FatalError(f"Config file not found: {path}")
        values.update(_read_config_file(path))
    elif DEFAULT_CONFIG_FILE.exists():
        values.update(_read_config_file(DEFAULT_CONFIG_FILE))

    values.update(_env_overrides())

    try:
        settings = Settings(**values)
    except ValidationError as e:
        raise FatalError(f"Invalid configuration: {e}") from e

    log.debug(f"Settings: {settings}")
    return settings

def log_level_for(settings: Settings) -> int:
    if settings.debug:
        return logging.DEBUG
    return getattr(logging, settings.log_level)
