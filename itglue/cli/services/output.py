import contextlib
import json
import typing

import rich.prompt
import typer
from rich.console import Console
from rich.table import Table
from rich.theme import Theme

from itglue.cli.services.errors import AuthError, RequestError

"""Set to True to raise exceptions from cli commands rather than printing the message"""
DEBUG = False

console = Console(
    theme=(
        Theme(
            {
                "info": "italic cyan",
                "warning": "magenta",
                "success": "green",
                "error": "red",
                "code": "bold cyan",
            }
        )
    )
)


def prompt_str(message: str, default: str = None, password: bool = False) -> str:
    return rich.prompt.Prompt.ask(message, default=default, password=password)


def sprint(message):
    """Print styled content"""
    console.print(message)


def abort(message: str) -> typing.NoReturn:
    """Print an error message and raise an Exit exception"""
    sprint(f"[error]{message}")
    raise typer.Exit(1)


@contextlib.contextmanager
def abort_on_error(message: str, prefix=": ", suffix=""):
    """Catch any exceptions that occur and call `abort` with their message"""
    if DEBUG:
        yield
        return
    try:
        yield
    except RequestError as e:
        if e.status_code == 401:
            abort(
                f"{message}{prefix}{e.detail}\n"
                "[info]Check your api key, or log in with [code]--email"
            )
        abort(f"{message}{prefix}{e.detail}{suffix}")
    except AuthError as e:
        abort(f"{e}{suffix}")
    except (typer.Exit, typer.Abort) as e:
        raise e
    except KeyError as e:
        abort(f"{message}{prefix}KeyError: {e}{suffix}")
    except Exception as e:
        abort(f"{message}{prefix}{e}{suffix}")


def print_records(
    name: str, records: list, print_json: bool, headers: typing.Iterable[str] = ()
):
    """Print JSON:API resources as a table of their attributes, or as JSON Lines"""
    if not records:
        if not print_json:
            sprint(f"[info]No {name} found")
        return

    if print_json:
        for r in records:
            print(json.dumps(r))
        return

    rows = [_flatten(r) for r in records]
    table = Table()
    for k in headers:
        table.add_column(k)
    for k in rows[0].keys():
        if k not in headers:
            table.add_column(k)
    columns = [str(c.header) for c in table.columns]
    for row in rows:
        table.add_row(*(_cell(row.get(c, "")) for c in columns))
    sprint(table)


def _flatten(record: dict) -> dict:
    row = {"id": record.get("id", "")}
    row.update(record.get("attributes") or {})
    return row


def _cell(value) -> str:
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    return str(value)
