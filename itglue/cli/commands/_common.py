import json
from typing import Tuple

from typer import Option

from itglue.cli.config import CliConfig, read_config
from itglue.cli.services.api import RetryPolicy
from itglue.cli.services.auth import authenticate
from itglue.cli.services.credentials import (
    ApiKey,
    AuthContext,
    Credential,
    UserPassword,
)
from itglue.cli.services.output import abort, abort_on_error, prompt_str

API_KEY_ENV_VAR = "ITGLUE_API_KEY"
PASSWORD_ENV_VAR = "ITGLUE_PASSWORD"

_api_key_help = f"The IT Glue api key to use [env: {API_KEY_ENV_VAR}]"
_email_help = "Log in with this email instead of an api key"
_password_help = "The password for --email. You will be prompted if it isn't given"
_json_help = "Output the objects as JSON Lines"
_regex_help = "Treat the name as a case insensitive regular expression"

api_key_option = Option(
    None, "--api-key", envvar=API_KEY_ENV_VAR, help=_api_key_help, show_default=False
)
email_option = Option(None, "--email", help=_email_help, show_default=False)
password_option = Option(
    None,
    "--password",
    envvar=PASSWORD_ENV_VAR,
    help=_password_help,
    show_default=False,
)
json_option = Option(False, "--json", help=_json_help)
regex_option = Option(False, "--regex", help=_regex_help)


def credential_from(
    api_key: str, email: str, password: str, cfg: CliConfig
) -> Credential:
    if api_key:
        return ApiKey(api_key)
    email = email or cfg.email
    if not email:
        abort(
            "No credentials given.\n"
            f"[info]Pass [code]--api-key[/code], set [code]{API_KEY_ENV_VAR}[/code], "
            "or log in with [code]--email"
        )
    if not password:
        password = prompt_str(f"Password for {email}", password=True)
    return UserPassword(email, password)


def retry_policy(cfg: CliConfig) -> RetryPolicy:
    return RetryPolicy(
        page_size=cfg.page_size,
        max_attempts=cfg.max_attempts,
        retry_delay=cfg.retry_delay,
    )


def authenticated(
    api_key: str, email: str, password: str
) -> Tuple[AuthContext, RetryPolicy]:
    """Authenticate once for the current command"""
    with abort_on_error("Reading config failed"):
        cfg = read_config()
    credential = credential_from(api_key, email, password, cfg)
    with abort_on_error("Authentication failed"):
        auth = authenticate(credential, cfg)
    return auth, retry_policy(cfg)


def parse_traits(traits: str) -> dict:
    try:
        parsed = json.loads(traits)
    except ValueError as e:
        abort(f"Traits must be a JSON object: {e}")
    if not isinstance(parsed, dict):
        abort("Traits must be a JSON object")
    return parsed
