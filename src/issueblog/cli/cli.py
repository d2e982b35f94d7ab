"""CLI entrypoint: Typer app definition and command registration"""

import logging
from typing import Annotated

import typer

from issueblog.cli.commands import (
    history_cmd, init_cmd, list_cmd, publish_cmd, rebuild_cmd, render_cmd, unpublish_cmd,
)


app = typer.Typer(name="issueblog", no_args_is_help=True, help="Publish GitHub Issues as a static blog")


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log progress to stderr")] = False,
    ):
    """Publish GitHub Issues as a static blog."""
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


app.command(name="init")(init_cmd)
app.command(name="publish")(publish_cmd)
app.command(name="render")(render_cmd)
app.command(name="rebuild")(rebuild_cmd)
app.command(name="list")(list_cmd)
app.command(name="unpublish")(unpublish_cmd)
app.command(name="history")(history_cmd)
