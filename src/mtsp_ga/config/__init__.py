"""Convenience exports for the configuration package."""

from .constants import *  # noqa: F401,F403
from .loader import ConfigError, load_config, save_config
from .logging_conf import JSONFormatter, configure_logging
from .params_default import (
    DEFAULT_VARIANT,
    VARIANT_DEFAULTS,
    VariantDefaults,
    defaults_for,
    merge_defaults,
)
from .schemas import CitiesConfig, GAConfig, ProblemConfig, SolverConfig
from .settings import ENV_PREFIX, Settings, get_settings, reset_settings_cache

__all__ = [
    "ConfigError",
    "load_config",
    "save_config",
    "JSONFormatter",
    "configure_logging",
    "DEFAULT_VARIANT",
    "VARIANT_DEFAULTS",
    "VariantDefaults",
    "defaults_for",
    "merge_defaults",
    "CitiesConfig",
    "GAConfig",
    "ProblemConfig",
    "SolverConfig",
    "ENV_PREFIX",
    "Settings",
    "get_settings",
    "reset_settings_cache",
]
