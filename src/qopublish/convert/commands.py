"""Command lines for the notebook converter (jupyter nbconvert)."""

from __future__ import annotations

import os
from pathlib import Path

from qopublish.config import PublishConfig


def derive_output_names(filename: str, config: PublishConfig) -> tuple[str, str]:
    """Script and markdown filenames produced for a notebook filename."""
    if not filename.endswith(config.notebook_ext):
        raise ValueError(f"Not a notebook: {filename}")
    stem = filename[: -len(config.notebook_ext)]
    return stem + config.script_ext, stem + config.markdown_ext


def _execute_options(config: PublishConfig) -> list[str]:
    return [
        f"--ExecutePreprocessor.kernel_name={config.kernel_name}",
        f"--ExecutePreprocessor.timeout={config.timeout}",
    ]


def script_command(source_path: str | Path, config: PublishConfig) -> list[str]:
    return [
        *config.converter,
        "--to=script",
        *_execute_options(config),
        f"--output-dir={config.script_dir}",
        str(source_path),
    ]


def markdown_command(source_path: str | Path, config: PublishConfig) -> list[str]:
    return [
        *config.converter,
        "--to=markdown",
        *_execute_options(config),
        f"--output-dir={config.markdown_dir}",
        f"--template={config.template}",
        "--execute",
        str(source_path),
    ]


def converter_environment(config: PublishConfig) -> dict[str, str]:
    env = dict(os.environ)
    if config.kernel_project:
        env["JULIA_PROJECT"] = config.kernel_project
    return env
