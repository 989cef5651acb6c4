"""CLI entrypoint: Typer app definition and command registration"""

import typer

from mdblog.cli.commands import build_cmd, config_cmd


app = typer.Typer(name="mdblog", no_args_is_help=True, help="Static markdown blog builder")

app.command(name="build")(build_cmd)
app.command(name="config")(config_cmd)
