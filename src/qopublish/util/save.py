# -*- coding: utf-8 -*-
"""Saving and loading run reports."""

from __future__ import annotations

import typing
from pathlib import Path

import simplejson as json
from loguru import logger

if typing.TYPE_CHECKING:
    from qopublish.types import BatchReport


def save_report(report: "BatchReport", path) -> Path:
    """Write a run report as JSON, creating parent dirs. Returns the path."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(report.to_dict(), f, indent=2)
    logger.info("Saved run report to {}", path)
    return path


def load_report(path) -> "BatchReport":
    from qopublish.types import BatchReport

    with Path(path).open(encoding="utf-8") as f:
        return BatchReport.from_dict(json.load(f))
