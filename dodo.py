# -*- coding: utf-8 -*-
# pydoit task file
# see https://pydoit.org/
# run from this dir with `doit`, or `doit list`, `doit help` etc. (pip install doit 1st)

from doit.action import CmdAction


def _build_pytest_command(test_dir, keyword="", retry=False, print_logs=False):
    """Assemble the pytest command line for the test task."""
    cmd = ["pytest", "--color=yes", "-vv", "-x"]
    if print_logs:
        cmd.append("--capture=no")
    if retry:
        cmd.append("--lf")
    if keyword:
        cmd.extend(["-k", keyword])
    cmd.append(test_dir)
    return " ".join(cmd)


def task_install():
    """Install qopublish in editable mode, with dev extras"""
    return {
        "actions": ["pip install -e .[dev]"],
        "verbosity": 2,
    }


def task_test_logic():
    """Run the test suite in test/logic/ (fake converter, no Julia needed)."""

    def router(keyword, retry, print_logs, help=False):
        if help:
            return """echo '
Test Help
=========

The suite replaces jupyter-nbconvert with a small fake converter script,
so neither Jupyter nor a Julia kernel has to be installed.

Options:
  -k, --keyword TEXT    Select tests by pytest keyword expression
  -r, --retry           Rerun only the tests that failed last time
  -p, --print-logs      Show loguru output instead of capturing it

Examples:
  doit test_logic
  doit test_logic -k "concurrent and abort"
  doit test_logic -r -p
  '"""
        return _build_pytest_command(
            "test/logic/", keyword=keyword, retry=retry, print_logs=print_logs
        )

    return {
        "actions": [CmdAction(router)],
        "params": [
            {
                "name": "help",
                "long": "help",
                "default": False,
                "type": bool,
            },
            {
                "name": "keyword",
                "short": "k",
                "default": "",
            },
            {
                "name": "retry",
                "short": "r",
                "default": False,
                "type": bool,
            },
            {
                "name": "print_logs",
                "short": "p",
                "default": False,
                "type": bool,
            },
        ],
        "verbosity": 2,
    }


def task_publish():
    """Convert the notebooks and publish them (qopublish run)."""

    def router(workers, keep_existing, help=False):
        if help:
            return """echo '
Publish Help
============

Runs `qopublish run` from this directory: converts notebooks/ to julia/
and markdown/, then copies markdown/ and codesnippets/ to the sibling
documentation and website repositories.

Options:
  -w, --workers INT     Notebooks converted in parallel (default: 1)
  -n, --keep-existing   Skip notebooks whose markdown already exists

Examples:
  doit publish
  doit publish -w 4 -n
  '"""
        overwrite_flag = "--no-overwrite" if keep_existing else "--overwrite"
        return f"qopublish run --workers {workers} {overwrite_flag}"

    return {
        "actions": [CmdAction(router)],
        "params": [
            {
                "name": "help",
                "long": "help",
                "default": False,
                "type": bool,
            },
            {
                "name": "workers",
                "short": "w",
                "default": 1,
                "type": int,
            },
            {
                "name": "keep_existing",
                "short": "n",
                "default": False,
                "type": bool,
            },
        ],
        "verbosity": 2,
    }


def task_format():
    """Format code using ruff."""

    def router(help=False):
        if help:
            return """echo '
Code Formatter Help
=================

This task runs the ruff formatter to ensure consistent code style:
- Sorts imports (ruff check --select I --fix)
- Formats code (ruff format)

Formats these locations:
- src/qopublish/
- test/
- dodo.py

No options required - simply run:
  doit format
  '"""
        return [
            "ruff check --select I --fix src/qopublish",
            "ruff format src/qopublish",
            "ruff check --select I --fix test/",
            "ruff format test/",
            "ruff check --select I --fix dodo.py",
            "ruff format dodo.py",
        ]

    return {
        "actions": [CmdAction(router)],
        "params": [
            {
                "name": "help",
                "long": "help",
                "default": False,
                "type": bool,
            },
        ],
        "verbosity": 2,
    }
