import typer
from typer import Argument, Option

from itglue.cli.commands._common import (
    api_key_option,
    authenticated,
    email_option,
    password_option,
    parse_traits,
)
from itglue.cli.services.flexible_assets import update_flexible_asset
from itglue.cli.services.output import abort_on_error, sprint

update = typer.Typer(name="update", help="Update an existing object")

_traits_help = "The traits to set as a JSON object. Traits left out are cleared"


@update.command()
def asset(
    asset_id: str = Argument(..., help="The id of the flexible asset"),
    traits: str = Option(..., "--traits", "-t", help=_traits_help),
    api_key: str = api_key_option,
    email: str = email_option,
    password: str = password_option,
):
    """Replace the traits of a flexible asset"""
    values = parse_traits(traits)
    auth, policy = authenticated(api_key, email, password)
    with abort_on_error("Updating flexible asset failed"):
        update_flexible_asset(auth, policy, asset_id, values)
    sprint(f"[success]Updated flexible asset [b]{asset_id}")
