"""Tests for configuration defaults, INI files and environment overrides."""

from configparser import ConfigParser
from pathlib import Path

import pytest

from qopublish.config import (
    PublishConfig,
    apply_overrides,
    coerce_value,
    load_config,
    parse_bool,
    validate_config,
    write_default_config,
)
from qopublish.types import ConfigError


@pytest.fixture
def in_tmp(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return tmp_path


def write_ini(path: Path, **values):
    config = ConfigParser(interpolation=None)
    config["publish"] = {k: str(v) for k, v in values.items()}
    with path.open("w") as f:
        config.write(f)
    return path


def test_defaults():
    config = PublishConfig()
    assert config.source_dir == "notebooks"
    assert config.script_dir == "julia"
    assert config.markdown_dir == "markdown"
    assert config.snippet_dir == "codesnippets"
    assert config.docs_dest == "../QuantumOptics.jl-documentation/src/examples"
    assert config.website_dest == "../QuantumOptics.jl-website/src/_codesnippets/src"
    assert config.kernel_name == "julia-1.2"
    assert config.timeout == 200
    assert config.overwrite is True
    assert config.workers == 1
    assert config.converter == ["jupyter-nbconvert"]
    assert validate_config(config) == (True, "")


def test_destinations():
    config = PublishConfig()
    assert config.destinations() == [
        (Path("markdown"), Path("../QuantumOptics.jl-documentation/src/examples")),
        (Path("codesnippets"), Path("../QuantumOptics.jl-website/src/_codesnippets/src")),
    ]


def test_replace_ignores_none():
    config = PublishConfig().replace(kernel_name=None, timeout=30)
    assert config.kernel_name == "julia-1.2"
    assert config.timeout == 30


@pytest.mark.parametrize("value", ["1", "true", "Yes", "ON"])
def test_parse_bool_true(value):
    assert parse_bool(value) is True


@pytest.mark.parametrize("value", ["0", "false", "No", "off"])
def test_parse_bool_false(value):
    assert parse_bool(value) is False


def test_parse_bool_invalid():
    with pytest.raises(ValueError):
        parse_bool("maybe")


def test_coerce_value():
    assert coerce_value("timeout", "30") == 30
    assert coerce_value("overwrite", "no") is False
    assert coerce_value("converter", "python -m nbconvert") == [
        "python",
        "-m",
        "nbconvert",
    ]
    assert coerce_value("kernel_name", "julia-1.9") == "julia-1.9"


def test_coerce_value_errors():
    with pytest.raises(ConfigError, match="Unknown configuration key"):
        coerce_value("colour", "blue")
    with pytest.raises(ConfigError, match="Invalid value for timeout"):
        coerce_value("timeout", "soon")


def test_from_env():
    environ = {
        "QOPUBLISH_DOCS_DEST": "/srv/docs/examples",
        "QOPUBLISH_KERNEL": "julia-1.9",
        "QOPUBLISH_OVERWRITE": "false",
        "QOPUBLISH_WORKERS": "4",
        "QOPUBLISH_TIMEOUT": "",  # empty means unset
        "JULIA_PROJECT": "@.",
    }
    config = PublishConfig.from_env(environ=environ)
    assert config.docs_dest == "/srv/docs/examples"
    assert config.kernel_name == "julia-1.9"
    assert config.overwrite is False
    assert config.workers == 4
    assert config.timeout == 200
    assert config.kernel_project == "@."


def test_from_env_keeps_base():
    base = PublishConfig(kernel_name="julia-1.6")
    config = PublishConfig.from_env(base, environ={})
    assert config == base


def test_from_env_invalid():
    with pytest.raises(ConfigError, match="environment"):
        PublishConfig.from_env(environ={"QOPUBLISH_WORKERS": "many"})


def test_validate_config_errors():
    assert not validate_config(PublishConfig(timeout=0))[0]
    assert not validate_config(PublishConfig(workers=0))[0]
    assert not validate_config(PublishConfig(kernel_name=""))[0]
    assert not validate_config(PublishConfig(converter=[]))[0]
    is_valid, error_msg = validate_config(PublishConfig(markdown_ext="md"))
    assert not is_valid
    assert "Invalid extension" in error_msg


def test_apply_overrides_reports_source():
    with pytest.raises(ConfigError, match="from my.ini"):
        apply_overrides(PublishConfig(), {"timeout": "x"}, source="my.ini")


class TestLoadConfig:
    def test_no_files(self, in_tmp):
        assert load_config(environ={}) == PublishConfig()

    def test_local_file(self, in_tmp):
        write_ini(in_tmp / "qopublish.ini", kernel_name="julia-1.6", workers=2)
        config = load_config(environ={})
        assert config.kernel_name == "julia-1.6"
        assert config.workers == 2

    def test_layering(self, in_tmp):
        user = write_ini(
            in_tmp / "user.ini", kernel_name="julia-1.5", timeout=100, workers=8
        )
        explicit = write_ini(in_tmp / "explicit.ini", timeout=300)
        config = load_config(
            explicit, environ={"QOPUBLISH_WORKERS": "3"}, user_file=user
        )
        assert config.kernel_name == "julia-1.5"  # user file
        assert config.timeout == 300  # explicit file beats user file
        assert config.workers == 3  # environment beats both

    def test_explicit_missing(self, in_tmp):
        with pytest.raises(FileNotFoundError):
            load_config(in_tmp / "missing.ini", environ={})

    def test_unknown_key(self, in_tmp):
        path = write_ini(in_tmp / "bad.ini", colour="blue")
        with pytest.raises(ConfigError, match="Unknown configuration key"):
            load_config(path, environ={})

    def test_invalid_result(self, in_tmp):
        path = write_ini(in_tmp / "bad.ini", workers=0)
        with pytest.raises(ConfigError, match="Workers"):
            load_config(path, environ={})

    def test_percent_in_value(self, in_tmp):
        path = write_ini(in_tmp / "pct.ini", docs_dest="/srv/100%/examples")
        assert load_config(path, environ={}).docs_dest == "/srv/100%/examples"

    def test_file_without_section(self, in_tmp):
        path = in_tmp / "other.ini"
        path.write_text("[something]\nkey = value\n")
        assert load_config(path, environ={}) == PublishConfig()


def test_write_default_config_round_trip(in_tmp):
    path = write_default_config(in_tmp / "conf" / "qopublish.ini")
    assert path.exists()
    assert load_config(path, environ={}) == PublishConfig()


def test_write_default_config_refuses_overwrite(in_tmp):
    path = write_default_config(in_tmp / "qopublish.ini")
    with pytest.raises(FileExistsError):
        write_default_config(path)
