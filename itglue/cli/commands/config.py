import json

from rich.table import Table
from typer import Option

from itglue.cli.config import get_config_path, update_config
from itglue.cli.services.output import abort_on_error, sprint

_json_help = "Output the config as JSON"


def config(
    api_url: str = Option(None, help="The api url used with an api key"),
    login_url: str = Option(None, help="The url used to log in with an email"),
    token_api_url: str = Option(None, help="The api url used after logging in"),
    email: str = Option(None, help="The email to log in with by default"),
    page_size: int = Option(
        None, min=1, max=1000, help="Records to request per page"
    ),
    max_attempts: int = Option(
        None, min=1, help="Attempts per request before giving up on timeouts"
    ),
    retry_delay: float = Option(
        None, min=0, help="Seconds to wait before retrying a request"
    ),
    log_file: str = Option(None, help="Also write log lines to this file"),
    print_json: bool = Option(False, "--json", help=_json_help),
):
    """Get or set the default values used by other commands"""
    given = {
        "api_url": api_url,
        "login_url": login_url,
        "token_api_url": token_api_url,
        "email": email,
        "page_size": page_size,
        "max_attempts": max_attempts,
        "retry_delay": retry_delay,
        "log_file": log_file,
    }
    with abort_on_error("Updating config failed"):
        cfg = update_config(**{k: v for k, v in given.items() if v is not None})
    config_path = get_config_path().as_posix()

    rows = {k: "" if v is None else str(v) for k, v in cfg.model_dump().items()}
    if print_json:
        rows["config file"] = config_path
        print(json.dumps(rows))
    else:
        sprint(f"[info]Your itglue config is located at [code]{config_path}")
        t = Table(show_header=False)
        for k, v in rows.items():
            t.add_row(k, v)
        sprint(t)
