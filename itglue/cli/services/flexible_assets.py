from __future__ import annotations

from typing import List

from loguru import logger

from itglue.cli.services.api import (
    Endpoints,
    RetryPolicy,
    call_with_retry,
    delete,
    get_json,
    patch_for_json,
    post_for_json,
)
from itglue.cli.services.credentials import AuthContext
from itglue.cli.services.filters import filter_records, name_matches
from itglue.cli.services.pagination import fetch_all

FLEXIBLE_ASSET_TYPE = "flexible-assets"


def list_flexible_assets(
    auth: AuthContext,
    policy: RetryPolicy = None,
    type_id: str = None,
    organization_id: str = None,
    name: str = None,
    regex: bool = False,
) -> List[dict]:
    if not type_id:
        raise ValueError("A flexible asset type id is required")
    params = {"filter[flexible_asset_type_id]": type_id}
    if organization_id:
        params["filter[organization_id]"] = organization_id
    assets = fetch_all(Endpoints.FLEXIBLE_ASSETS_LIST, auth, params, policy)
    if name:
        return filter_records(assets, name_matches(name, regex=regex))
    return assets


def get_flexible_asset(
    auth: AuthContext, policy: RetryPolicy = None, asset_id: str = None
) -> dict:
    data = call_with_retry(
        lambda: get_json(Endpoints.flexible_asset_by_id(asset_id), auth),
        policy or RetryPolicy(),
    )
    return (data or {}).get("data")


def create_flexible_asset(
    auth: AuthContext,
    policy: RetryPolicy = None,
    type_id: str = None,
    organization_id: str = None,
    traits: dict = None,
) -> dict:
    body = _document(
        {
            "organization-id": organization_id,
            "flexible-asset-type-id": type_id,
            "traits": traits or {},
        }
    )
    logger.info(
        "Creating flexible asset of type {} in organization {}",
        type_id,
        organization_id,
    )
    data = call_with_retry(
        lambda: post_for_json(Endpoints.FLEXIBLE_ASSETS_LIST, auth, body),
        policy or RetryPolicy(),
    )
    return (data or {}).get("data")


def update_flexible_asset(
    auth: AuthContext,
    policy: RetryPolicy = None,
    asset_id: str = None,
    traits: dict = None,
) -> dict:
    body = _document({"traits": traits or {}}, id=asset_id)
    logger.info("Updating flexible asset {}", asset_id)
    data = call_with_retry(
        lambda: patch_for_json(Endpoints.flexible_asset_by_id(asset_id), auth, body),
        policy or RetryPolicy(),
    )
    return (data or {}).get("data")


def delete_flexible_asset(
    auth: AuthContext, policy: RetryPolicy = None, asset_id: str = None
):
    logger.info("Deleting flexible asset {}", asset_id)
    call_with_retry(
        lambda: delete(Endpoints.flexible_asset_by_id(asset_id), auth),
        policy or RetryPolicy(),
    )


def _document(attributes: dict, id: str = None) -> dict:
    data = {"type": FLEXIBLE_ASSET_TYPE, "attributes": attributes}
    if id is not None:
        data["id"] = id
    return {"data": data}
