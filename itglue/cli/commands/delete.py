import typer
from rich.prompt import Confirm
from typer import Argument, Option

from itglue.cli.commands._common import (
    api_key_option,
    authenticated,
    email_option,
    password_option,
)
from itglue.cli.services.flexible_assets import delete_flexible_asset
from itglue.cli.services.output import abort_on_error, sprint

delete = typer.Typer(name="delete", help="Delete an object")

_force_help = "Don't prompt before deleting"


@delete.command()
def asset(
    asset_id: str = Argument(..., help="The id of the flexible asset"),
    force: bool = Option(False, "-f", "--force", help=_force_help),
    api_key: str = api_key_option,
    email: str = email_option,
    password: str = password_option,
):
    """Delete a flexible asset"""
    if not force and not Confirm.ask(f"Delete flexible asset {asset_id}?"):
        raise typer.Abort()
    auth, policy = authenticated(api_key, email, password)
    with abort_on_error("Deleting flexible asset failed"):
        delete_flexible_asset(auth, policy, asset_id)
    sprint(f"[success]Flexible asset {asset_id} deleted.")
