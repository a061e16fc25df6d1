"""YAML run configurations validated against the pydantic schemas.

>>> from mtsp_ga.config import SolverConfig, load_config
>>> load_config("configs/multi_depot.yaml", SolverConfig).problem.variant
'multi_depot'
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Type, TypeVar

import yaml
from pydantic import BaseModel, ValidationError

__all__ = ["load_config", "save_config", "ConfigError"]

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class ConfigError(ValueError):
    """A configuration file is missing, unparsable or fails validation."""


def _anchor(file_path: str | Path, base_dir: Path | None) -> Path:
    path = Path(file_path).expanduser()
    if base_dir is not None and not path.is_absolute():
        path = base_dir / path
    return path


def _read_yaml(path: Path) -> Any:
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise ConfigError(f"Configuration file not found: {path}") from exc
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML syntax in {path}: {exc}") from exc


def load_config(
    file_path: str | Path, schema: Type[ModelT], *, base_dir: Path | None = None
) -> ModelT:
    """Parse ``file_path`` and validate it as ``schema``.

    Relative paths are taken from ``base_dir`` when given, else from the
    working directory. Every failure surfaces as :class:`ConfigError`.
    """

    path = _anchor(file_path, base_dir)
    data = _read_yaml(path)
    if data is None:
        raise ConfigError(f"Empty configuration file: {path}")
    try:
        config = schema.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Configuration validation failed for {path}:\n{exc}") from exc
    logger.info("Loaded %s from %s", schema.__name__, path)
    return config


def save_config(
    config: BaseModel, file_path: str | Path, *, base_dir: Path | None = None
) -> Path:
    """Write ``config`` as YAML, omitting unset fields, and return the path."""

    path = _anchor(file_path, base_dir)
    path.parent.mkdir(parents=True, exist_ok=True)
    data = config.model_dump(mode="json", exclude_none=True)
    path.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
    logger.info("Saved %s to %s", type(config).__name__, path)
    return path
