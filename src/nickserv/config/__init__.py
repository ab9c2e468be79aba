"""Configuration: YAML + env overlay, plugin option resolution."""

from nickserv.config.loader import _deep_update, load_config, load_config_with_env
from nickserv.config.schema import Config, NickServConfig, cfg

__all__ = [
    "Config",
    "NickServConfig",
    "_deep_update",
    "cfg",
    "load_config",
    "load_config_with_env",
]
