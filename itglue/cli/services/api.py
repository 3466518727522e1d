from __future__ import annotations

import dataclasses
import time
from typing import Any, Callable, Optional, TypeVar

import requests
from loguru import logger
from requests import Response, Session

from itglue.cli.services.credentials import AuthContext
from itglue.cli.services.errors import (
    FatalError,
    FatalReason,
    RequestError,
    RequestErrorKind,
)

T = TypeVar("T")

_TIMEOUT_STATUSES = (408, 504)
_RATE_LIMIT_STATUSES = (429,)
_TIMEOUT_MARKERS = ("timeout", "timed out", "time out")
_RATE_LIMIT_MARKERS = ("rate limit", "too many requests", "throttl")

# IT Glue returns at most this many records per page
MAX_PAGE_SIZE = 1000


@dataclasses.dataclass(frozen=True)
class RetryPolicy:
    page_size: int = 50
    max_attempts: Optional[int] = 5
    retry_delay: float = 5.0

    def __post_init__(self):
        if not 1 <= self.page_size <= MAX_PAGE_SIZE:
            raise ValueError(
                f"page_size must be between 1 and {MAX_PAGE_SIZE}, got {self.page_size}"
            )
        if self.max_attempts is not None and self.max_attempts < 1:
            raise ValueError(
                f"max_attempts must be at least 1, got {self.max_attempts}"
            )


def build_url(base_url: str, path: str) -> str:
    if path.startswith(("http://", "https://")):
        return path
    return base_url.rstrip("/") + "/" + path.lstrip("/")


def error_detail(resp: Response) -> str:
    """The most specific error message found in an error response body"""
    try:
        body = resp.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        errors = body.get("errors")
        if isinstance(errors, list):
            details = [
                str(e.get("detail") or e.get("title"))
                for e in errors
                if isinstance(e, dict) and (e.get("detail") or e.get("title"))
            ]
            if details:
                return "; ".join(details)
        for key in ("detail", "message", "error"):
            if body.get(key):
                return str(body[key])
    return resp.text or f"HTTP {resp.status_code}"


def classify_error(status_code: int | None, detail: str) -> RequestErrorKind:
    text = (detail or "").lower()
    if status_code in _RATE_LIMIT_STATUSES or any(
        m in text for m in _RATE_LIMIT_MARKERS
    ):
        return RequestErrorKind.RATE_LIMITED
    if status_code in _TIMEOUT_STATUSES or any(m in text for m in _TIMEOUT_MARKERS):
        return RequestErrorKind.TIMEOUT
    return RequestErrorKind.OTHER


def execute(
    method: str,
    path: str,
    auth: AuthContext,
    params: dict = None,
    json: Any = None,
    session: Session = None,
    **kwargs,
) -> Any:
    """Issue exactly one request and return its parsed json body.

    Raises RequestError on any failure. Nothing is retried here: the caller
    owns the retry policy since recovering from a timeout may mean changing
    the request.
    """
    session = session or auth.session()
    url = build_url(auth.base_url, path)
    logger.debug("{} {} {}", method.upper(), url, params or "")
    try:
        resp = session.request(method, url, params=params or {}, json=json, **kwargs)
    except requests.Timeout as e:
        raise RequestError(RequestErrorKind.TIMEOUT, str(e)) from e
    except requests.RequestException as e:
        raise RequestError(RequestErrorKind.OTHER, str(e)) from e

    if not resp.ok:
        detail = error_detail(resp)
        kind = classify_error(resp.status_code, detail)
        raise RequestError(kind, detail, resp.status_code)

    if not resp.content:
        return None
    try:
        return resp.json()
    except ValueError as e:
        raise RequestError(
            RequestErrorKind.OTHER,
            resp.text or f"HTTP {resp.status_code}",
            resp.status_code,
        ) from e


def get_json(path: str, auth: AuthContext, params: dict = None, **kwargs) -> Any:
    return execute("get", path, auth, params=params, **kwargs)


def post_for_json(path: str, auth: AuthContext, json: dict = None, **kwargs) -> Any:
    return execute("post", path, auth, json=json or {}, **kwargs)


def patch_for_json(path: str, auth: AuthContext, json: dict = None, **kwargs) -> Any:
    return execute("patch", path, auth, json=json or {}, **kwargs)


def delete(path: str, auth: AuthContext, **kwargs) -> Any:
    return execute("delete", path, auth, **kwargs)


def call_with_retry(
    fn: Callable[[], T],
    policy: RetryPolicy,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """Call `fn`, retrying timeouts and rate limits after a fixed delay"""
    attempts = 0
    while True:
        try:
            return fn()
        except RequestError as e:
            if not e.retryable:
                raise
            attempts += 1
            if policy.max_attempts is not None and attempts >= policy.max_attempts:
                raise FatalError(FatalReason.RETRY_LIMIT_REACHED, e.detail) from e
            logger.warning(
                "Request failed ({}), retrying in {}s (attempt {})",
                e.detail,
                policy.retry_delay,
                attempts + 1,
            )
            sleep(policy.retry_delay)


class Endpoints:
    LOGIN = "login?generate_jwt=1&sso_disabled=1"
    JWT_TOKEN = "jwt/token"
    ORGANIZATIONS_LIST = "organizations"
    CONFIGURATIONS_LIST = "configurations"
    FLEXIBLE_ASSETS_LIST = "flexible_assets"

    @classmethod
    def flexible_asset_by_id(cls, asset_id: str) -> str:
        return f"flexible_assets/{asset_id}"
