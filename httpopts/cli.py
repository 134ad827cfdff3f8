import asyncio
import json
from pathlib import Path

import click

from .daemon import run_daemon
from .errors import SettingsError
from .models import SettingsInfo
from .portfile import load_port, remove_port, wait_for_port
from .settings import Settings

PASSTHROUGH = {"ignore_unknown_options": True, "allow_interspersed_args": False}


def build_settings(args: tuple[str, ...]) -> Settings:
    try:
        return Settings(args)
    except SettingsError as e:
        raise click.ClickException(str(e))


def echo_result(ctx, data: dict, plain: str) -> None:
    if ctx.obj["json"]:
        click.echo(json.dumps(data, indent=2))
    else:
        click.echo(plain)


CLI_HELP = """\
httpopts parses the command line of a small HTTP server front and resolves
the socket it listens on.

Server arguments are written as --key or --key=value. Recognized keys are
daemon, hit-refresh, port, lifetime, threads and max-latency. --port takes a
port number or the path of a port file: an existing file holds the port to
bind, a missing one is created and filled with an ephemeral port.

Put server arguments after `--` so they are not read as httpopts options.
"""


@click.group(
    help=CLI_HELP,
    context_settings={"help_option_names": ["-h", "--help"], "max_content_width": 120},
)
@click.option("--json", "json_output", is_flag=True, help="Output as JSON")
@click.pass_context
def cli(ctx, json_output):
    ctx.ensure_object(dict)
    ctx.obj["json"] = json_output


@cli.command(context_settings=PASSTHROUGH)
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def show(ctx, args):
    """Print the settings resolved from ARGS.

    \b
    Examples:
      httpopts show -- --port=8080 --threads=16
      httpopts --json show -- --daemon --port=/tmp/server.port
    """
    settings = build_settings(args)
    try:
        info = SettingsInfo.from_settings(settings)
    except SettingsError as e:
        raise click.ClickException(str(e))

    echo_result(ctx, info.model_dump(), info.to_plain())


@cli.command(context_settings=PASSTHROUGH)
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
def listen(args):
    """Bind the socket described by ARGS and hold it until the lifetime ends.

    \b
    Examples:
      httpopts listen -- --port=8080 --lifetime=60000
      httpopts listen -- --port=/tmp/server.port
    """
    settings = build_settings(args)
    try:
        asyncio.run(run_daemon(settings))
    except (SettingsError, OSError) as e:
        raise click.ClickException(str(e))


@cli.group()
def port():
    """Inspect and manage port files."""
    pass


@port.command("read")
@click.argument("path", type=click.Path(path_type=Path))
@click.pass_context
def port_read(ctx, path):
    """Print the port stored in the port file PATH."""
    try:
        number = load_port(path)
    except (SettingsError, OSError) as e:
        raise click.ClickException(str(e))

    echo_result(ctx, {"path": str(path), "port": number}, str(number))


@port.command("wait")
@click.argument("path", type=click.Path(path_type=Path))
@click.option("-t", "--timeout", type=float, default=5.0, show_default=True, help="Seconds to wait")
@click.pass_context
def port_wait(ctx, path, timeout):
    """Wait until a port is written to PATH, then print it."""
    try:
        number = wait_for_port(path, timeout=timeout)
    except TimeoutError as e:
        raise click.ClickException(str(e))

    echo_result(ctx, {"path": str(path), "port": number}, str(number))


@port.command("clear")
@click.argument("path", type=click.Path(path_type=Path))
def port_clear(path):
    """Remove the port file PATH."""
    remove_port(path)
    click.echo(f"Removed {path}")


if __name__ == "__main__":
    cli()
