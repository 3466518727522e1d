import typer
from typer import Typer

from .commands.config import config
from .commands.create import create
from .commands.delete import delete
from .commands.get import get
from .commands.list import list_command
from .commands.update import update
from .config import read_config
from .log import configure_logging
from ..cli.services import output

app = Typer(name="itglue", no_args_is_help=True, add_completion=False)


@app.callback()
def cb(
    stacktrace: bool = typer.Option(False, hidden=True),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output"),
):
    if stacktrace:
        output.DEBUG = True
    with output.abort_on_error("Reading config failed"):
        log_file = read_config().log_file
    configure_logging(verbose=verbose, log_file=log_file)


for command in (
    config,
    create,
    delete,
    get,
    list_command,
    update,
):
    if isinstance(command, typer.Typer):
        app.add_typer(command)
    else:
        app.command()(command)


def main():
    app()
