import shlex
import sys
import textwrap

import pytest

from qopublish.config import ENV_VARS, PublishConfig

FAKE_CONVERTER = textwrap.dedent(
    """
    # Minimal stand-in for jupyter-nbconvert.
    import os
    import pathlib
    import sys
    import time

    args = sys.argv[1:]
    opts = dict(a[2:].split("=", 1) for a in args if a.startswith("--") and "=" in a)
    flags = {a for a in args if a.startswith("--") and "=" not in a}
    source = pathlib.Path([a for a in args if not a.startswith("--")][-1])

    log = os.environ.get("FAKE_CONVERTER_LOG")
    if log:
        with open(log, "a") as f:
            f.write(f"{opts['to']} {source.name}\\n")

    if not source.exists():
        sys.stderr.write(f"no such notebook: {source}\\n")
        sys.exit(1)
    text = source.read_text()
    if "CORRUPT" in text:
        sys.stderr.write("notebook is corrupt\\n")
        sys.exit(2)
    if "HANG" in text:
        time.sleep(60)

    ext = ".jl" if opts["to"] == "script" else ".md"
    out = pathlib.Path(opts["output-dir"]) / (source.stem + ext)
    kernel = opts["ExecutePreprocessor.kernel_name"]
    executed = "--execute" in flags
    out.write_text(f"{opts['to']}|{kernel}|{executed}|{text}")
    sys.stderr.write(f"[NbConvertApp] Writing {out}\\n")
    """
)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Keep the user's config file and QOPUBLISH_* variables out of tests."""
    for var in ENV_VARS.values():
        monkeypatch.delenv(var, raising=False)
    monkeypatch.delenv("JULIA_PROJECT", raising=False)
    monkeypatch.setattr(
        "qopublish.util.defaults.USER_CONFIG_FILE", tmp_path / "no-user.ini"
    )


@pytest.fixture
def fake_converter(tmp_path):
    script = tmp_path / "fake_nbconvert.py"
    script.write_text(FAKE_CONVERTER)
    return [sys.executable, str(script)]


@pytest.fixture
def converter_log(tmp_path, monkeypatch):
    """File the fake converter appends '<format> <notebook>' lines to."""
    log = tmp_path / "converter.log"
    monkeypatch.setenv("FAKE_CONVERTER_LOG", str(log))

    def calls():
        if not log.exists():
            return []
        return log.read_text().splitlines()

    return calls


def write_notebook(directory, name, body="println(1)"):
    path = directory / name
    path.write_text(f'{{"cells": ["{body}"]}}')
    return path


@pytest.fixture
def workspace(tmp_path):
    """An examples checkout next to documentation and website checkouts."""
    root = tmp_path / "QuantumOptics.jl-examples"
    notebooks = root / "notebooks"
    notebooks.mkdir(parents=True)
    write_notebook(notebooks, "spin.ipynb", "spin")
    write_notebook(notebooks, "fock.ipynb", "fock")
    (notebooks / "README.txt").write_text("not a notebook")

    snippets = root / "codesnippets"
    snippets.mkdir()
    (snippets / "spin.jl").write_text("b = SpinBasis(1//2)")

    (tmp_path / "QuantumOptics.jl-documentation" / "src").mkdir(parents=True)
    (tmp_path / "QuantumOptics.jl-website" / "src" / "_codesnippets").mkdir(
        parents=True
    )
    return root


@pytest.fixture
def config(workspace, fake_converter, tmp_path):
    return PublishConfig(
        source_dir=str(workspace / "notebooks"),
        script_dir=str(workspace / "julia"),
        markdown_dir=str(workspace / "markdown"),
        snippet_dir=str(workspace / "codesnippets"),
        docs_dest=str(tmp_path / "QuantumOptics.jl-documentation" / "src" / "examples"),
        website_dest=str(
            tmp_path / "QuantumOptics.jl-website" / "src" / "_codesnippets" / "src"
        ),
        converter=fake_converter,
    )


@pytest.fixture
def converter_env(monkeypatch, fake_converter):
    """Point the CLI at the fake converter through the environment."""
    monkeypatch.setenv("QOPUBLISH_CONVERTER", shlex.join(fake_converter))


@pytest.fixture
def make_notebook():
    return write_notebook
