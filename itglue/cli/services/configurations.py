from __future__ import annotations

from typing import List

from itglue.cli.services.api import Endpoints, RetryPolicy
from itglue.cli.services.credentials import AuthContext
from itglue.cli.services.filters import (
    all_of,
    filter_records,
    hostname_matches,
    id_matches,
)
from itglue.cli.services.pagination import fetch_all


def list_configurations(
    auth: AuthContext,
    policy: RetryPolicy = None,
    hostname: str = None,
    organization_id: str = None,
    regex: bool = False,
) -> List[dict]:
    """List device configurations, optionally scoped to one organization"""
    params = {}
    if organization_id:
        params["filter[organization_id]"] = organization_id
    configurations = fetch_all(Endpoints.CONFIGURATIONS_LIST, auth, params, policy)
    return filter_records(
        configurations,
        all_of(
            id_matches(organization_id, "organization_id") if organization_id else None,
            hostname_matches(hostname, regex=regex) if hostname else None,
        ),
    )
