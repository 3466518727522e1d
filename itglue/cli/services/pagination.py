from __future__ import annotations

import itertools
import time
from typing import Callable, Iterable, List, Optional

from loguru import logger

from itglue.cli.services.api import RetryPolicy, get_json
from itglue.cli.services.credentials import AuthContext
from itglue.cli.services.errors import (
    FatalError,
    FatalReason,
    RequestError,
    RequestErrorKind,
)


def halve_page_size(page_size: int) -> int:
    """Halve the page size, rounding half to even (25 -> 12, 3 -> 2, 1 -> 0)"""
    return round(page_size / 2)


class PaginatedCall:
    """Fetch every record from a JSON:API list endpoint, one page at a time.

    The first page doubles as the probe for `meta.total-count`, and the fetch
    is complete once that many records have been received. A timeout halves
    the page size and retries the same position after `policy.retry_delay`
    seconds. Position is tracked by record offset rather than page number, so
    changing the page size mid-fetch doesn't repeat or skip records.
    """

    def __init__(
        self,
        path: str,
        auth: AuthContext,
        params: dict = None,
        policy: RetryPolicy = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._path = path
        self._auth = auth
        self._params = dict(params or {})
        self._policy = policy or RetryPolicy()
        self._sleep = sleep
        self.page_size = self._policy.page_size
        self.total_count: Optional[int] = None
        self.total_pages: Optional[int] = None

    def pages(self) -> Iterable[List[dict]]:
        """Iterate over pages returned from the endpoint"""
        session = self._auth.session()
        offset = 0
        failures = 0
        while self.total_count is None or offset < self.total_count:
            number = offset // self.page_size + 1
            skip = offset % self.page_size
            params = {
                **self._params,
                "page[size]": self.page_size,
                "page[number]": number,
            }
            try:
                data = get_json(self._path, self._auth, params, session=session)
            except RequestError as e:
                if not e.retryable:
                    raise
                failures += 1
                self._back_off(e, failures)
                continue
            failures = 0

            data = data or {}
            records = data.get("data") or []
            if self.total_count is None:
                self._read_meta(data, len(records))
            expected = min(self.page_size, self.total_count)
            if number == 1 and 0 < len(records) < expected:
                # the server caps page sizes below what was asked for
                logger.info(
                    "{} returned {} records per page, not {}",
                    self._path,
                    len(records),
                    self.page_size,
                )
                self.page_size = len(records)
            records = records[skip : skip + self.total_count - offset]
            if not records:
                if offset < self.total_count:
                    logger.warning(
                        "{} reported {} records but only {} were returned",
                        self._path,
                        self.total_count,
                        offset,
                    )
                return
            offset += len(records)
            logger.debug(
                "Fetched page {} of {} ({}/{} records)",
                number,
                self._path,
                offset,
                self.total_count,
            )
            yield records

    def _read_meta(self, data: dict, page_length: int):
        meta = data.get("meta") or {}
        total = meta.get("total-count")
        if total is None:
            # unpaginated response
            total = page_length
        self.total_count = int(total)
        self.total_pages = int(meta.get("total-pages") or 0) or None
        logger.info(
            "{} has {} records across {} pages",
            self._path,
            self.total_count,
            self.total_pages or 1,
        )

    def _back_off(self, error: RequestError, failures: int):
        limit = self._policy.max_attempts
        if limit is not None and failures >= limit:
            raise FatalError(FatalReason.RETRY_LIMIT_REACHED, error.detail) from error

        if error.kind == RequestErrorKind.TIMEOUT:
            size = halve_page_size(self.page_size)
            if size < 1:
                raise FatalError(
                    FatalReason.PAGE_SIZE_EXHAUSTED, error.detail
                ) from error
            logger.warning(
                "Request to {} timed out, retrying with page size {} in {}s",
                self._path,
                size,
                self._policy.retry_delay,
            )
            self.page_size = size
        else:
            logger.warning(
                "Request to {} was rate limited, retrying in {}s",
                self._path,
                self._policy.retry_delay,
            )
        self._sleep(self._policy.retry_delay)

    def __iter__(self) -> Iterable[dict]:
        """Iterate over all objects returned from the endpoint"""
        return itertools.chain.from_iterable(self.pages())

    def fetch_all(self) -> List[dict]:
        return list(self)


def fetch_all(
    path: str,
    auth: AuthContext,
    params: dict = None,
    policy: RetryPolicy = None,
    sleep: Callable[[float], None] = time.sleep,
) -> List[dict]:
    return PaginatedCall(path, auth, params, policy, sleep).fetch_all()
