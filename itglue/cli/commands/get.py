import typer
from typer import Argument

from itglue.cli.commands._common import (
    api_key_option,
    authenticated,
    email_option,
    json_option,
    password_option,
)
from itglue.cli.services.flexible_assets import get_flexible_asset
from itglue.cli.services.output import abort_on_error, print_records

get = typer.Typer(name="get", help="Show a single object")


@get.command()
def asset(
    asset_id: str = Argument(..., help="The id of the flexible asset"),
    print_json: bool = json_option,
    api_key: str = api_key_option,
    email: str = email_option,
    password: str = password_option,
):
    """Show one flexible asset"""
    auth, policy = authenticated(api_key, email, password)
    with abort_on_error("Error fetching flexible asset"):
        a = get_flexible_asset(auth, policy, asset_id)
    print_records("flexible assets", [a] if a else [], print_json)
