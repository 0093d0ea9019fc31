"""
DiffLens settings.

Values come from defaults, then an optional YAML file, then ``DIFFLENS_*``
environment variables, later sources winning:

```yaml
context_lines: 10
exclude_deletes: false
file_extensions: "py, ts"
max_file_size: 1048576
```
"""

import logging
import os
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from difflens.diff.differ import DEFAULT_MAX_EDIT_DISTANCE
from difflens.errors import InvalidConfigError
from difflens.filters.extensions import parse_extension_filter
from difflens.filters.models import (
    DEFAULT_BINARY_EXTENSIONS,
    DEFAULT_MAX_FILE_SIZE,
    DEFAULT_TEXT_EXTENSIONS,
    BinaryDetection,
    ExclusionRule,
)

logger = logging.getLogger(__name__)

ENV_PREFIX = "DIFFLENS_"
DEFAULT_CONFIG_FILENAME = ".difflens.yaml"


class DiffLensConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    context_lines: int = Field(default=50, ge=0, le=100)
    exclude_deletes: bool = True
    file_extensions: str = ""
    max_file_size: int = Field(default=DEFAULT_MAX_FILE_SIZE, ge=0)
    exclude_binary_files: bool = True
    binary_detection: BinaryDetection = BinaryDetection.BOTH
    binary_file_extensions: str = DEFAULT_BINARY_EXTENSIONS
    text_file_extensions: str = DEFAULT_TEXT_EXTENSIONS
    binary_content_threshold: float = Field(default=0.3, ge=0.0, le=1.0)
    excluded_file_limit: int = Field(default=20, ge=0)
    max_edit_distance: int = Field(default=DEFAULT_MAX_EDIT_DISTANCE, ge=1)

    def to_exclusion_rule(self) -> ExclusionRule:
        return ExclusionRule(
            exclude_deletes=self.exclude_deletes,
            extension_patterns=parse_extension_filter(self.file_extensions),
            max_file_size=self.max_file_size,
            exclude_binary_files=self.exclude_binary_files,
            binary_detection=self.binary_detection,
            binary_extensions=self.binary_file_extensions,
            text_extensions=self.text_file_extensions,
            binary_content_threshold=self.binary_content_threshold,
        )


def _env_overrides() -> dict[str, str]:
    # pydantic coerces "true"/"0"/"12" for bool and int fields
    overrides = {}
    for name in DiffLensConfig.model_fields:
        value = os.getenv(f"{ENV_PREFIX}{name.upper()}")
        if value is not None and value != "":
            overrides[name] = value
    return overrides


def _read_yaml(path: Path) -> dict:
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise TypeError(f"top level must be a mapping, got {type(data).__name__}")
    return data


def load_config(path: Path | None = None) -> DiffLensConfig:
    """
    Build the effective configuration.

    Without ``path`` a ``.difflens.yaml`` in the current directory is used
    when present.

    Raises:
        InvalidConfigError: the file is missing, not valid YAML, or a value
            fails validation
    """
    if path is None:
        default = Path.cwd() / DEFAULT_CONFIG_FILENAME
        path = default if default.is_file() else None

    data: dict = {}
    if path is not None:
        try:
            data = _read_yaml(Path(path))
        except (OSError, yaml.YAMLError, TypeError) as e:
            logger.error("Failed to read config %s: %s", path, e)
            raise InvalidConfigError(path, e) from e

    overrides = _env_overrides()
    if overrides:
        logger.debug("Applying environment overrides: %s", sorted(overrides))
    data.update(overrides)

    try:
        config = DiffLensConfig.model_validate(data)
    except ValidationError as e:
        logger.error("Invalid configuration: %s", e)
        raise InvalidConfigError(path, e) from e

    logger.debug("Loaded configuration from %s", path or "defaults")
    return config
