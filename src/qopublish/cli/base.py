import io
from pathlib import Path

import click
from click_option_group import optgroup
from loguru import logger

from qopublish._version import __version__
from qopublish.config import load_config, validate_config, write_default_config
from qopublish.config.loader import config_to_ini
from qopublish.publisher import Publisher, print_status, print_summary
from qopublish.types import ConfigError, PublishPipelineError
from qopublish.util import (
    DEFAULT_LOGLEVEL,
    format_error_response,
    save_report,
    shutdown_publish_log,
    start_publish_log,
)
from qopublish.util.defaults import LOCAL_CONFIG_FILE


def print_tree(cmd, prefix="", parent_ctx=None):
    """Print command tree starting from given command."""
    ctx = click.Context(cmd, info_name=cmd.name, parent=parent_ctx)

    # Only print root name if no parent
    if not parent_ctx:
        click.echo(cmd.name)

    for sub in sorted(cmd.list_commands(ctx)):
        sub_cmd = cmd.get_command(ctx, sub)
        click.echo(f"{prefix}└── {sub}")
        if isinstance(sub_cmd, click.Group):
            print_tree(sub_cmd, prefix + "    ", ctx)


def tree_option(f):
    """Add --tree option to command."""

    def callback(ctx, param, value):
        if not value or ctx.resilient_parsing:
            return
        print_tree(ctx.command)
        ctx.exit()

    return click.option(
        "--tree",
        is_flag=True,
        help="Show command tree from this point",
        expose_value=False,
        is_eager=True,
        callback=callback,
    )(f)


def config_options(f):
    """Options overriding the resolved configuration. Unset means 'keep'."""
    options = [
        optgroup.group("Paths"),
        optgroup.option("--config", "-C", "config_path", help="INI config file"),
        optgroup.option("--source-dir", "-s", help="Notebook directory"),
        optgroup.option("--script-dir", help="Script output directory"),
        optgroup.option("--markdown-dir", help="Markdown output directory"),
        optgroup.option("--snippet-dir", help="Code snippets directory"),
        optgroup.option("--docs-dest", help="Documentation destination"),
        optgroup.option("--website-dest", help="Website snippets destination"),
        optgroup.group("Conversion"),
        optgroup.option("--kernel", "-k", "kernel_name", help="Jupyter kernel name"),
        optgroup.option(
            "--timeout", "-t", type=int, help="Per-cell execution timeout (seconds)"
        ),
        optgroup.option(
            "--overwrite/--no-overwrite",
            default=None,
            help="Reconvert notebooks whose markdown already exists",
        ),
        optgroup.option(
            "--workers", "-w", type=int, help="Notebooks converted in parallel"
        ),
    ]
    for option in reversed(options):
        f = option(f)
    return f


def log_options(f):
    options = [
        optgroup.group("Logging"),
        optgroup.option(
            "--log-to-file/--no-log-to-file",
            default=True,
            help="Enable/disable logging to file (default: enabled)",
        ),
        optgroup.option(
            "--log-to-stdout/--no-log-to-stdout",
            default=True,
            help="Enable/disable console logging (default: enabled)",
        ),
        optgroup.option(
            "--log-path", "-lp", default="", help="Custom path for log file"
        ),
        optgroup.option(
            "--log-level",
            "-ll",
            default=DEFAULT_LOGLEVEL,
            help="Logging level (DEBUG, INFO, WARNING, ERROR) (default: INFO)",
        ),
    ]
    for option in reversed(options):
        f = option(f)
    return f


def resolve_config(config_path=None, **overrides):
    """Load the configuration, then apply command line overrides."""
    config = load_config(config_path).replace(**overrides)
    is_valid, error_msg = validate_config(config)
    if not is_valid:
        raise ConfigError(error_msg)
    return config


def _split_options(kwargs):
    log_kwargs = {
        "log_to_file": kwargs.pop("log_to_file"),
        "log_to_stdout": kwargs.pop("log_to_stdout"),
        "log_path": kwargs.pop("log_path"),
        "log_level": kwargs.pop("log_level"),
    }
    return log_kwargs, kwargs


def run_pipeline(convert, publish, report_path=None, progress=True, **kwargs):
    """Shared body of run/convert/publish. Any failure exits with status 1."""
    log_kwargs, overrides = _split_options(kwargs)
    start_publish_log(**log_kwargs)
    try:
        config = resolve_config(**overrides)
        publisher = Publisher(config, progress=progress)
        try:
            publisher.run(convert=convert, publish=publish)
        finally:
            print_summary(publisher.report)
            if report_path:
                save_report(publisher.report, report_path)
    except (PublishPipelineError, OSError) as e:
        logger.debug(format_error_response())
        raise click.ClickException(str(e)) from e
    finally:
        shutdown_publish_log()


@click.group(invoke_without_command=True)
@click.version_option(__version__, prog_name="qopublish")
@tree_option
@click.pass_context
def cli(ctx):
    """qopublish - publish the QuantumOptics.jl example notebooks.

    Converts every notebook to a Julia script and to executed markdown,
    then copies the markdown into the documentation repository and the code
    snippets into the website repository.

    Run without a command to do all of it.
    """
    if ctx.invoked_subcommand is None:
        ctx.invoke(run)


@cli.command()
@config_options
@log_options
@click.option("--report", "report_path", help="Write a JSON run report here")
@click.option(
    "--progress/--no-progress", default=True, help="Show a progress bar"
)
def run(**kwargs):
    """Convert all notebooks, then publish.

    Exits non-zero on the first failed conversion or copy. Outputs written
    before the failure are left in place.
    """
    run_pipeline(convert=True, publish=True, **kwargs)


@cli.command()
@config_options
@log_options
@click.option("--report", "report_path", help="Write a JSON run report here")
@click.option(
    "--progress/--no-progress", default=True, help="Show a progress bar"
)
def convert(**kwargs):
    """Convert all notebooks without publishing."""
    run_pipeline(convert=True, publish=False, **kwargs)


@cli.command()
@config_options
@log_options
@click.option("--report", "report_path", help="Write a JSON run report here")
def publish(**kwargs):
    """Publish the current outputs without converting anything."""
    run_pipeline(convert=False, publish=True, progress=False, **kwargs)


@cli.command(name="list")
@config_options
def list_notebooks(**kwargs):
    """List notebooks and whether their outputs exist."""
    try:
        config = resolve_config(**kwargs)
        print_status(Publisher(config, progress=False).output_status())
    except (PublishPipelineError, OSError) as e:
        raise click.ClickException(str(e)) from e


@cli.group()
@tree_option
def config():
    """Inspect and create configuration files."""
    pass


@config.command()
@config_options
def show(**kwargs):
    """Print the resolved configuration as INI."""
    try:
        resolved = resolve_config(**kwargs)
    except (PublishPipelineError, OSError) as e:
        raise click.ClickException(str(e)) from e
    buf = io.StringIO()
    config_to_ini(resolved).write(buf)
    click.echo(buf.getvalue().rstrip())


@config.command()
@click.argument("path", required=False, default=str(LOCAL_CONFIG_FILE))
def init(path):
    """Write a config file holding the defaults.

    PATH: Where to write it (default: ./qopublish.ini)
    """
    try:
        written = write_default_config(Path(path))
    except FileExistsError as e:
        raise click.ClickException(str(e)) from e
    click.echo(f"Wrote default configuration to {written}")
