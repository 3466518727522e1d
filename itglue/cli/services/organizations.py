from __future__ import annotations

from typing import List

from itglue.cli.services.api import Endpoints, RetryPolicy
from itglue.cli.services.credentials import AuthContext
from itglue.cli.services.filters import filter_records, name_matches
from itglue.cli.services.pagination import fetch_all


def list_organizations(
    auth: AuthContext,
    policy: RetryPolicy = None,
    name: str = None,
    id: str = None,
    regex: bool = False,
) -> List[dict]:
    params = {}
    if id:
        params["filter[id]"] = id
    organizations = fetch_all(Endpoints.ORGANIZATIONS_LIST, auth, params, policy)
    if name:
        return filter_records(organizations, name_matches(name, regex=regex))
    return organizations
