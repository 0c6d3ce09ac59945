"""INI configuration files for qopublish.

Settings live in a single ``[publish]`` section, with the same keys as the
fields of `PublishConfig`:

[publish]
source_dir = notebooks
markdown_dir = markdown
docs_dest = ../QuantumOptics.jl-documentation/src/examples
kernel_name = julia-1.2
timeout = 200
overwrite = true
workers = 4
converter = jupyter-nbconvert

Resolution order, later wins:

1. package defaults
2. ~/.qopublish/publish.ini
3. ./qopublish.ini, or the path given explicitly
4. QOPUBLISH_* environment variables

Command line flags are applied on top by the CLI.

See Also
--------
qopublish.config.settings : The configuration dataclass
"""

from __future__ import annotations

import shlex
from configparser import ConfigParser
from pathlib import Path
from typing import Mapping, Optional

from loguru import logger

from qopublish.types import ConfigError
from qopublish.util import defaults

from .settings import PublishConfig, apply_overrides, validate_config


def read_config_file(config: PublishConfig, path: Path) -> PublishConfig:
    """Apply the ``[publish]`` section of one INI file to `config`."""
    parser = ConfigParser(interpolation=None)
    parser.read(path)
    if not parser.has_section(defaults.CONFIG_SECTION):
        logger.warning(
            "No [{}] section in {}, ignoring file.", defaults.CONFIG_SECTION, path
        )
        return config
    values = dict(parser[defaults.CONFIG_SECTION])
    logger.debug("Loaded {} setting(s) from {}", len(values), path)
    return apply_overrides(config, values, source=str(path))


def load_config(
    path: Optional[str | Path] = None,
    environ: Optional[Mapping[str, str]] = None,
    user_file: Optional[Path] = None,
) -> PublishConfig:
    """Resolve the configuration from files and the environment.

    Parameters
    ----------
    path : str | Path, optional
        Explicit config file. Replaces ./qopublish.ini and must exist.
    environ : Mapping[str, str], optional
        Environment to read overrides from, by default os.environ.
    user_file : Path, optional
        Per-user config file, by default ~/.qopublish/publish.ini.

    Returns
    -------
    PublishConfig
        The resolved and validated configuration.

    Raises
    ------
    FileNotFoundError
        If `path` is given but does not exist.
    ConfigError
        If a value cannot be parsed or the result is invalid.
    """
    config = PublishConfig()

    if user_file is None:
        user_file = defaults.USER_CONFIG_FILE
    if user_file.exists():
        config = read_config_file(config, user_file)

    if path is not None:
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        config = read_config_file(config, path)
    elif defaults.LOCAL_CONFIG_FILE.exists():
        config = read_config_file(config, defaults.LOCAL_CONFIG_FILE)

    config = PublishConfig.from_env(config, environ=environ)

    is_valid, error_msg = validate_config(config)
    if not is_valid:
        raise ConfigError(error_msg)
    return config


def config_to_ini(config: PublishConfig) -> ConfigParser:
    parser = ConfigParser(interpolation=None)
    section = {}
    for key, value in config.to_dict().items():
        if value is None:
            continue
        if isinstance(value, list):
            value = shlex.join(value)
        elif isinstance(value, bool):
            value = "true" if value else "false"
        section[key] = str(value)
    parser[defaults.CONFIG_SECTION] = section
    return parser


def write_default_config(path: str | Path) -> Path:
    """Write an INI file holding the default configuration."""
    path = Path(path)
    if path.exists():
        raise FileExistsError(f"Config file already exists: {path}")
    path.parent.mkdir(parents=True, exist_ok=True)
    logger.debug(f"Creating default config file at {path}")
    with path.open("w") as f:
        config_to_ini(PublishConfig()).write(f)
    return path
