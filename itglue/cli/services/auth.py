from __future__ import annotations

import requests
from loguru import logger

from itglue.cli.config import CliConfig
from itglue.cli.services.api import Endpoints, build_url, error_detail
from itglue.cli.services.credentials import (
    JSON_API_CONTENT_TYPE,
    ApiKey,
    AuthContext,
    Credential,
    UserPassword,
)
from itglue.cli.services.errors import AuthError

AUTH_TOKEN_PREFIX = "Bearer"
API_KEY_HEADER = "x-api-key"


def authenticate(credential: Credential, cfg: CliConfig = None) -> AuthContext:
    """Build the request headers and base url for a credential.

    An api key is used as is. An email and password are exchanged for a
    refresh token, then for an access token, which is only accepted by the
    token api host.
    """
    cfg = cfg or CliConfig()
    if isinstance(credential, ApiKey):
        return AuthContext(
            headers={
                API_KEY_HEADER: credential.secret,
                "Content-Type": JSON_API_CONTENT_TYPE,
                "Accept": JSON_API_CONTENT_TYPE,
            },
            base_url=cfg.api_url,
        )
    if isinstance(credential, UserPassword):
        access_token = _exchange_password(credential, cfg.login_url)
        return AuthContext(
            headers={
                "Authorization": f"{AUTH_TOKEN_PREFIX} {access_token}",
                "Content-Type": JSON_API_CONTENT_TYPE,
                "Accept": JSON_API_CONTENT_TYPE,
            },
            base_url=cfg.token_api_url,
        )
    raise TypeError(f"Unsupported credential type: {type(credential).__name__}")


def _exchange_password(credential: UserPassword, login_url: str) -> str:
    logger.debug("Requesting refresh token for {}", credential.email)
    refresh_token = _token_from(
        "Login failed",
        lambda: requests.post(
            build_url(login_url, Endpoints.LOGIN),
            json={
                "user": {"email": credential.email, "password": credential.password}
            },
        ),
    )

    logger.debug("Exchanging refresh token for access token")
    return _token_from(
        "Fetching access token failed",
        lambda: requests.get(
            build_url(login_url, Endpoints.JWT_TOKEN),
            params={"refresh_token": refresh_token},
        ),
    )


def _token_from(message: str, send) -> str:
    try:
        resp = send()
    except requests.RequestException as e:
        raise AuthError(f"{message}: {e}") from e
    if not resp.ok:
        raise AuthError(f"{message}: {error_detail(resp)}")
    try:
        token = resp.json().get("token")
    except (ValueError, AttributeError):
        token = None
    if not token:
        raise AuthError(f"{message}: no token in response")
    return token
