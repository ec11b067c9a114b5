# pngtoico/config/config_manager.py
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

from pngtoico.errors import ArgumentError, NotFoundError
from pngtoico.ico.directory import MAX_DIMENSION, MAX_ENTRIES
from pngtoico.ico.packer import DEFAULT_SIZES
from pngtoico.imaging import RESAMPLE_FILTERS

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def default_output_dir() -> Path:
    return Path.home() / "Pictures" / "PngToIcon"


class IconSettings(BaseModel):
    sizes: List[int] = Field(default_factory=lambda: list(DEFAULT_SIZES))
    output_dir: Path = Field(default_factory=default_output_dir)
    resample: str = "lanczos"
    strict_image_type: bool = True
    log_level: str = "INFO"
    log_file: Optional[str] = None

    @field_validator("sizes", mode="before")
    @classmethod
    def split_sizes(cls, value):
        if isinstance(value, str):
            return [part.strip() for part in value.split(",") if part.strip()]
        return value

    @field_validator("sizes")
    @classmethod
    def check_sizes(cls, value: List[int]) -> List[int]:
        if not value:
            raise ValueError("at least one icon size is required")
        if len(value) > MAX_ENTRIES:
            raise ValueError(f"at most {MAX_ENTRIES} icon sizes are supported")
        bad = [s for s in value if not 1 <= s <= MAX_DIMENSION]
        if bad:
            raise ValueError(f"icon sizes must be between 1 and {MAX_DIMENSION}, got {bad}")
        return value

    @field_validator("output_dir")
    @classmethod
    def expand_output_dir(cls, value: Path) -> Path:
        return value.expanduser()

    @field_validator("resample")
    @classmethod
    def check_resample(cls, value: str) -> str:
        value = value.lower()
        if value not in RESAMPLE_FILTERS:
            raise ValueError(f"unknown resample filter '{value}'")
        return value

    @field_validator("log_level")
    @classmethod
    def check_log_level(cls, value: str) -> str:
        value = value.upper()
        if value not in LOG_LEVELS:
            raise ValueError(f"unknown log level '{value}'")
        return value


class ConfigManager:
    """Resolves settings from defaults, a YAML file, the environment and overrides.

    Later sources win: defaults < YAML file < environment (.env included)
    < explicit overrides such as command line flags.
    """
    CONFIG_FILE = Path("config") / "pngtoico.yaml"
    CONFIG_ENV = "PNGTOICO_CONFIG"
    ENV_PREFIX = "PNGTOICO_"

    def __init__(self, config_path=None, overrides: Optional[Dict[str, Any]] = None,
                 use_dotenv: bool = True):
        if use_dotenv:
            load_dotenv()
        self.config_path, explicit = self._resolve_path(config_path)
        raw = self._load_file(self.config_path, explicit)
        raw.update(self._load_env())
        raw.update({k: v for k, v in (overrides or {}).items() if v is not None})
        try:
            self.settings = IconSettings(**raw)
        except ValidationError as e:
            raise ArgumentError(f"Invalid configuration: {e}") from e

    def _resolve_path(self, config_path):
        if config_path:
            return Path(config_path), True
        env_path = os.getenv(self.CONFIG_ENV)
        if env_path:
            return Path(env_path), True
        return self.CONFIG_FILE, False

    def _load_file(self, path: Path, explicit: bool) -> Dict[str, Any]:
        """Load settings from a YAML file; a missing default file means no settings"""
        if not path.exists():
            if explicit:
                raise NotFoundError(f"Config file '{path}' does not exist.")
            return {}
        try:
            with open(path, 'r') as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Error loading config {path}: {e}. Using defaults.")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Config {path} is not a mapping. Using defaults.")
            return {}
        known = {k: v for k, v in data.items() if k in IconSettings.model_fields}
        for key in data.keys() - known.keys():
            logger.warning(f"Ignoring unknown config key '{key}' in {path}")
        logger.debug(f"Loaded config from {path}")
        return known

    def _load_env(self) -> Dict[str, Any]:
        values = {}
        for name in IconSettings.model_fields:
            value = os.getenv(self.ENV_PREFIX + name.upper())
            if value is not None and value.strip():
                values[name] = value
        return values

    def get_config(self) -> Dict[str, Any]:
        """Get current configuration"""
        return self.settings.model_dump()
