# -*- coding: utf-8 -*-

from pathlib import Path

DEFAULT_LOGLEVEL = "INFO"
TEST_LOGLEVEL = "TRACE"
SINGLE_LINE_ERR_LOG = False  # reformat tracebacks into a single line

USER_DIR = Path.home() / ".qopublish"
USER_CONFIG_FILE = USER_DIR / "publish.ini"
LOCAL_CONFIG_FILE = Path("qopublish.ini")
CONFIG_SECTION = "publish"
ENV_PREFIX = "QOPUBLISH_"

DEFAULT_SOURCE_DIR = "notebooks"
DEFAULT_SCRIPT_DIR = "julia"
DEFAULT_MARKDOWN_DIR = "markdown"
DEFAULT_SNIPPET_DIR = "codesnippets"
DEFAULT_DOCS_DEST = "../QuantumOptics.jl-documentation/src/examples"
DEFAULT_WEBSITE_DEST = "../QuantumOptics.jl-website/src/_codesnippets/src"

DEFAULT_KERNEL = "julia-1.2"
DEFAULT_TIMEOUT = 200  # seconds, per cell, enforced by the converter
DEFAULT_TEMPLATE = "markdown_template.tpl"
DEFAULT_CONVERTER = ("jupyter-nbconvert",)
DEFAULT_WORKERS = 1

NOTEBOOK_EXT = ".ipynb"
SCRIPT_EXT = ".jl"
MARKDOWN_EXT = ".md"

KILL_WAIT = 3  # seconds to wait for an aborted converter to exit
