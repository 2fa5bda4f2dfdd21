"""
Analysis configuration.

Assignment settings come from a YAML file with kebab-case keys, the same
way course configs are written; a few values can be overridden from the
environment (.env is honoured).
"""
import logging
import os
from pathlib import Path
from typing import Any, List, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

from .exceptions import ConfigError
from .models import FileSpec

logger = logging.getLogger(__name__)

DEFAULT_FUNCTION_NAMES = [
    "drawSquare",
    "chordLength",
    "drawApproximateCircle",
    "distance",
    "findPath",
    "drawPersonalArt",
]

ENV_OVERRIDES = {
    "SIMILARITY_THRESHOLD": "threshold",
    "SIMILARITY_BATCH_SIZE": "batch_size",
}


class AnalysisConfig(BaseModel):
    threshold: int = Field(default=80, ge=1, le=100)          # High-similarity cutoff
    batch_size: int = Field(default=50, ge=1)                 # Pairs per batch
    files: List[FileSpec] = Field(default_factory=lambda: [FileSpec(path="src/turtlesoup.ts")])
    reference_file: str = "src/turtlesoup.ts"                 # File checked against the reference
    function_names: List[str] = Field(default_factory=lambda: list(DEFAULT_FUNCTION_NAMES))
    whole_file_threshold: int = Field(default=95, ge=0, le=100)
    function_threshold: int = Field(default=90, ge=0, le=100)
    integrity_threshold: int = Field(default=95, ge=0, le=100)

    @property
    def paths(self) -> List[str]:
        """Every file path a submission must provide for this analysis."""
        return list(dict.fromkeys([f.path for f in self.files] + [self.reference_file]))


def _from_yaml_keys(data: dict[str, Any]) -> dict[str, Any]:
    """Convert kebab-case YAML keys to model field names."""
    converted = {key.replace("-", "_"): value for key, value in data.items()}
    files = converted.get("files")
    if isinstance(files, list):
        converted["files"] = [
            {"path": item} if isinstance(item, str) else item
            for item in files
        ]
    return converted


def load_config(path: Optional[Path | str] = None) -> AnalysisConfig:
    """
    Load analysis configuration.

    Args:
        path: YAML file; defaults are used when None

    Returns:
        AnalysisConfig with environment overrides applied

    Raises:
        ConfigError: If the file is missing, not valid YAML, or has invalid values
    """
    load_dotenv()
    data: dict[str, Any] = {}

    if path is not None:
        config_path = Path(path)
        if not config_path.exists():
            raise ConfigError(f"Config file not found: {config_path}")
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                loaded = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e
        if not isinstance(loaded, dict):
            raise ConfigError(f"Invalid config structure in {config_path}: expected a mapping")
        data = _from_yaml_keys(loaded)

    for env_var, field_name in ENV_OVERRIDES.items():
        value = os.getenv(env_var)
        if value:
            logger.info(f"Overriding {field_name} from {env_var}={value}")
            data[field_name] = value

    try:
        return AnalysisConfig(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid analysis configuration: {e}") from e


def parse_threshold_arg(args: List[str], default: int = 80) -> int:
    """
    Read a --threshold=N argument.

    Examples:
        >>> parse_threshold_arg(["--threshold=70"])
        70
        >>> parse_threshold_arg(["--threshold=0"])
        80
        >>> parse_threshold_arg([])
        80
    """
    threshold_arg = next((arg for arg in args if arg.startswith("--threshold=")), None)
    if threshold_arg is None:
        return default

    try:
        value = int(threshold_arg.split("=", 1)[1])
    except ValueError:
        value = None

    if value is None or not 0 < value <= 100:
        logger.warning(f"Invalid threshold value. Using default threshold of {default}%.")
        return default
    return value
