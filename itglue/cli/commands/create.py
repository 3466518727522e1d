import json

import typer
from typer import Argument, Option

from itglue.cli.commands._common import (
    api_key_option,
    authenticated,
    email_option,
    password_option,
    parse_traits,
)
from itglue.cli.services.flexible_assets import create_flexible_asset
from itglue.cli.services.output import abort_on_error, sprint

create = typer.Typer(name="create", help="Create a new object")

_traits_help = 'The asset\'s traits as a JSON object, e.g. {"name": "Firewall"}'


@create.command()
def asset(
    type_id: str = Argument(..., help="The id of the flexible asset type"),
    organization_id: str = Option(
        ..., "--organization-id", "-o", help="The organization to create it in"
    ),
    traits: str = Option(..., "--traits", "-t", help=_traits_help),
    api_key: str = api_key_option,
    email: str = email_option,
    password: str = password_option,
):
    """Create a flexible asset"""
    values = parse_traits(traits)
    auth, policy = authenticated(api_key, email, password)
    with abort_on_error("Creating flexible asset failed"):
        created = create_flexible_asset(
            auth,
            policy,
            type_id=type_id,
            organization_id=organization_id,
            traits=values,
        )
    sprint(f"[success]Created flexible asset [b]{(created or {}).get('id', '')}")
    if created:
        print(json.dumps(created))
