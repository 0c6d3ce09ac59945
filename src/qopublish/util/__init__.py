# -*- coding: utf-8 -*-
"""
Utility functions and constants for qopublish.

- Default paths, kernel name and converter settings
- Logging configuration and management
- Run report saving

See Also
--------
qopublish.util.logging : Logging configuration
qopublish.util.save : Run report saving
"""

from .defaults import (
    DEFAULT_KERNEL,
    DEFAULT_LOGLEVEL,
    DEFAULT_TIMEOUT,
    SINGLE_LINE_ERR_LOG,
    TEST_LOGLEVEL,
)
from .logging import (
    clear_log,
    format_error_response,
    get_log_filename,
    log_default_path,
    shutdown_publish_log,
    start_publish_log,
)
from .save import load_report, save_report

__all__ = [
    "DEFAULT_KERNEL",
    "DEFAULT_LOGLEVEL",
    "DEFAULT_TIMEOUT",
    "SINGLE_LINE_ERR_LOG",
    "TEST_LOGLEVEL",
    "clear_log",
    "format_error_response",
    "get_log_filename",
    "log_default_path",
    "load_report",
    "save_report",
    "shutdown_publish_log",
    "start_publish_log",
]
