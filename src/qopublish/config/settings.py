"""The publish configuration structure."""

from __future__ import annotations

import dataclasses
import os
import shlex
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

from mashumaro import DataClassDictMixin

from qopublish.types import ConfigError
from qopublish.util import defaults

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


@dataclass(kw_only=True)
class PublishConfig(DataClassDictMixin):
    """Everything a publish run needs to know.

    Attributes
    ----------
    source_dir : str
        Directory holding the notebooks.
    script_dir : str
        Output directory for the script form of each notebook.
    markdown_dir : str
        Output directory for the executed markdown form.
    snippet_dir : str
        Static code snippets, published alongside the markdown.
    docs_dest : str
        Where `markdown_dir` is copied to (documentation repository).
    website_dest : str
        Where `snippet_dir` is copied to (website repository).
    kernel_name : str
        Jupyter kernel used to execute the notebooks.
    timeout : int
        Per-cell execution timeout handed to the converter, in seconds.
    overwrite : bool
        Reconvert notebooks whose markdown output already exists.
    workers : int
        Number of notebooks converted at once. 1 is sequential.
    converter : list[str]
        Command prefix of the notebook converter.
    kernel_project : str, optional
        Exported to the converter as JULIA_PROJECT when set.
    """

    source_dir: str = defaults.DEFAULT_SOURCE_DIR
    script_dir: str = defaults.DEFAULT_SCRIPT_DIR
    markdown_dir: str = defaults.DEFAULT_MARKDOWN_DIR
    snippet_dir: str = defaults.DEFAULT_SNIPPET_DIR
    docs_dest: str = defaults.DEFAULT_DOCS_DEST
    website_dest: str = defaults.DEFAULT_WEBSITE_DEST
    kernel_name: str = defaults.DEFAULT_KERNEL
    timeout: int = defaults.DEFAULT_TIMEOUT
    overwrite: bool = True
    template: str = defaults.DEFAULT_TEMPLATE
    notebook_ext: str = defaults.NOTEBOOK_EXT
    script_ext: str = defaults.SCRIPT_EXT
    markdown_ext: str = defaults.MARKDOWN_EXT
    workers: int = defaults.DEFAULT_WORKERS
    converter: list[str] = field(
        default_factory=lambda: list(defaults.DEFAULT_CONVERTER)
    )
    kernel_project: Optional[str] = None

    @property
    def source_path(self) -> Path:
        return Path(self.source_dir)

    @property
    def script_path(self) -> Path:
        return Path(self.script_dir)

    @property
    def markdown_path(self) -> Path:
        return Path(self.markdown_dir)

    @property
    def snippet_path(self) -> Path:
        return Path(self.snippet_dir)

    def destinations(self) -> list[tuple[Path, Path]]:
        """(local directory, external destination) pairs to publish."""
        return [
            (self.markdown_path, Path(self.docs_dest)),
            (self.snippet_path, Path(self.website_dest)),
        ]

    def replace(self, **changes) -> "PublishConfig":
        """Copy with the given fields changed. None values are ignored."""
        changes = {k: v for k, v in changes.items() if v is not None}
        return dataclasses.replace(self, **changes)

    @classmethod
    def from_env(
        cls,
        base: Optional["PublishConfig"] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> "PublishConfig":
        """Apply QOPUBLISH_* environment overrides on top of `base`."""
        if base is None:
            base = cls()
        if environ is None:
            environ = os.environ
        values = {}
        for name, var in ENV_VARS.items():
            if var in environ and environ[var] != "":
                values[name] = environ[var]
        if base.kernel_project is None and environ.get("JULIA_PROJECT"):
            values["kernel_project"] = environ["JULIA_PROJECT"]
        return apply_overrides(base, values, source="environment")


ENV_VARS = {
    "source_dir": defaults.ENV_PREFIX + "SOURCE_DIR",
    "script_dir": defaults.ENV_PREFIX + "SCRIPT_DIR",
    "markdown_dir": defaults.ENV_PREFIX + "MARKDOWN_DIR",
    "snippet_dir": defaults.ENV_PREFIX + "SNIPPET_DIR",
    "docs_dest": defaults.ENV_PREFIX + "DOCS_DEST",
    "website_dest": defaults.ENV_PREFIX + "WEBSITE_DEST",
    "kernel_name": defaults.ENV_PREFIX + "KERNEL",
    "timeout": defaults.ENV_PREFIX + "TIMEOUT",
    "overwrite": defaults.ENV_PREFIX + "OVERWRITE",
    "template": defaults.ENV_PREFIX + "TEMPLATE",
    "workers": defaults.ENV_PREFIX + "WORKERS",
    "converter": defaults.ENV_PREFIX + "CONVERTER",
}

CONFIG_FIELDS = {f.name: f for f in dataclasses.fields(PublishConfig)}


def parse_bool(value: str) -> bool:
    lowered = str(value).strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise ValueError(f"not a boolean: {value!r}")


def coerce_value(name: str, value):
    """Turn a string from an INI file or the environment into a field value."""
    if name not in CONFIG_FIELDS:
        raise ConfigError(f"Unknown configuration key: {name}")
    if not isinstance(value, str):
        return value
    try:
        if name in ("timeout", "workers"):
            return int(value)
        if name == "overwrite":
            return parse_bool(value)
        if name == "converter":
            return shlex.split(value)
        if name == "kernel_project":
            return value or None
    except ValueError as e:
        raise ConfigError(f"Invalid value for {name}: {value!r} ({e})") from e
    return value


def apply_overrides(
    config: PublishConfig, values: Mapping[str, str], source: str = "overrides"
) -> PublishConfig:
    """Return a copy of `config` with string `values` coerced and applied."""
    changes = {}
    for name, value in values.items():
        try:
            changes[name] = coerce_value(name, value)
        except ConfigError as e:
            raise ConfigError(f"{e} (from {source})") from e
    return dataclasses.replace(config, **changes)


def validate_config(config: PublishConfig) -> tuple[bool, str]:
    """Validate a configuration.

    Returns
    -------
    tuple[bool, str]
        (is_valid, error_message)
    """
    for name in ("notebook_ext", "script_ext", "markdown_ext"):
        ext = getattr(config, name)
        if not ext.startswith(".") or len(ext) < 2:
            return False, f"Invalid extension for {name}: {ext!r}"
    if config.timeout <= 0:
        return False, f"Timeout must be positive, got {config.timeout}"
    if config.workers < 1:
        return False, f"Workers must be at least 1, got {config.workers}"
    if not config.kernel_name:
        return False, "Missing kernel name"
    if not config.converter:
        return False, "Missing converter command"
    return True, ""
