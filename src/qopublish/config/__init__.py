"""
Configuration for publish runs.

See Also
--------
qopublish.config.loader : INI files and layering
"""

from .loader import config_to_ini, load_config, read_config_file, write_default_config
from .settings import (
    ENV_VARS,
    PublishConfig,
    apply_overrides,
    coerce_value,
    parse_bool,
    validate_config,
)

__all__ = [
    "ENV_VARS",
    "PublishConfig",
    "apply_overrides",
    "coerce_value",
    "config_to_ini",
    "load_config",
    "parse_bool",
    "read_config_file",
    "validate_config",
    "write_default_config",
]
