from __future__ import annotations

from enum import Enum


class ItGlueError(Exception):
    """Base class for errors raised while talking to IT Glue"""


class AuthError(ItGlueError):
    """The credential could not be exchanged for an access token"""


class RequestErrorKind(str, Enum):
    TIMEOUT = "timeout"
    RATE_LIMITED = "rate_limited"
    OTHER = "other"


class RequestError(ItGlueError):
    def __init__(
        self, kind: RequestErrorKind, detail: str, status_code: int | None = None
    ):
        super().__init__(detail)
        self.kind = kind
        self.detail = detail
        self.status_code = status_code

    @property
    def retryable(self) -> bool:
        return self.kind != RequestErrorKind.OTHER


class FatalReason(str, Enum):
    PAGE_SIZE_EXHAUSTED = "page size exhausted"
    RETRY_LIMIT_REACHED = "retry limit reached"


class FatalError(ItGlueError):
    def __init__(self, reason: FatalReason, detail: str = ""):
        message = reason.value
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.reason = reason
