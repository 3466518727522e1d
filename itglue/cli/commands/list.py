import typer
from typer import Option, Argument

from itglue.cli.commands._common import (
    api_key_option,
    authenticated,
    email_option,
    json_option,
    password_option,
    regex_option,
)
from itglue.cli.services.configurations import list_configurations
from itglue.cli.services.flexible_assets import list_flexible_assets
from itglue.cli.services.organizations import list_organizations
from itglue.cli.services.output import abort_on_error, print_records

_organization_id_help = "Only include objects in the organization with this id"
_type_id_help = "The id of the flexible asset type to list"

list_command = typer.Typer(name="list", help="List objects of a given type")


@list_command.command()
def organizations(
    name: str = Option(None, "--name", "-n", help="Only include this organization"),
    id: str = Option(None, "--id", help="Only include the organization with this id"),
    regex: bool = regex_option,
    print_json: bool = json_option,
    api_key: str = api_key_option,
    email: str = email_option,
    password: str = password_option,
):
    """List organizations, all of them or filtered by name or id"""
    auth, policy = authenticated(api_key, email, password)
    with abort_on_error("Error listing organizations"):
        orgs = list_organizations(auth, policy, name=name, id=id, regex=regex)
    print_records("organizations", orgs, print_json, headers=("id", "name"))


@list_command.command()
def configurations(
    hostname: str = Option(None, "--hostname", help="Only include this hostname"),
    organization_id: str = Option(
        None, "--organization-id", "-o", help=_organization_id_help
    ),
    regex: bool = regex_option,
    print_json: bool = json_option,
    api_key: str = api_key_option,
    email: str = email_option,
    password: str = password_option,
):
    """List device configurations"""
    auth, policy = authenticated(api_key, email, password)
    with abort_on_error("Error listing configurations"):
        cs = list_configurations(
            auth,
            policy,
            hostname=hostname,
            organization_id=organization_id,
            regex=regex,
        )
    print_records("configurations", cs, print_json, headers=("id", "hostname"))


@list_command.command()
def assets(
    type_id: str = Argument(..., help=_type_id_help, show_default=False),
    organization_id: str = Option(
        None, "--organization-id", "-o", help=_organization_id_help
    ),
    name: str = Option(None, "--name", "-n", help="Only include assets with this name"),
    regex: bool = regex_option,
    print_json: bool = json_option,
    api_key: str = api_key_option,
    email: str = email_option,
    password: str = password_option,
):
    """List flexible assets of one type"""
    auth, policy = authenticated(api_key, email, password)
    with abort_on_error("Error listing flexible assets"):
        fs = list_flexible_assets(
            auth,
            policy,
            type_id=type_id,
            organization_id=organization_id,
            name=name,
            regex=regex,
        )
    print_records("flexible assets", fs, print_json, headers=("id", "name"))
