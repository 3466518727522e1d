import pytest

from itglue.cli.config import DEFAULT_API_URL
from itglue.cli.services.api import Endpoints, RetryPolicy, build_url
from itglue.cli.services.credentials import AuthContext
from itglue.cli.services.errors import (
    FatalError,
    FatalReason,
    RequestError,
    RequestErrorKind,
)
from itglue.cli.services.pagination import PaginatedCall, fetch_all, halve_page_size
from tests.cli.base import CappedServer, PagedServer, page, records, request_mocker

AUTH = AuthContext(headers={"x-api-key": "k"}, base_url=DEFAULT_API_URL)
URL = build_url(DEFAULT_API_URL, Endpoints.ORGANIZATIONS_LIST)
TIMEOUT = (504, "Gateway timeout")


def _call(page_size=100, max_attempts=5, sleeps=None):
    policy = RetryPolicy(page_size=page_size, max_attempts=max_attempts, retry_delay=5)
    sleep = sleeps.append if sleeps is not None else (lambda s: None)
    return PaginatedCall(Endpoints.ORGANIZATIONS_LIST, AUTH, policy=policy, sleep=sleep)


@pytest.mark.parametrize(
    "n,page_size,expected_requests",
    [(0, 10, 1), (1, 10, 1), (9, 10, 1), (10, 10, 1), (11, 10, 2), (250, 100, 3), (5, 1, 5)],
)
def test_fetches_every_record_in_order(n, page_size, expected_requests):
    server = PagedServer(records(n))
    with request_mocker() as m:
        m.get(URL, json=server)
        call = _call(page_size)
        result = call.fetch_all()
    assert result == records(n)
    assert len(server.requests) == expected_requests
    assert call.total_count == n


def test_pages_are_requested_in_increasing_order():
    server = PagedServer(records(250))
    with request_mocker() as m:
        m.get(URL, json=server)
        pages = list(_call(100).pages())
    assert [len(p) for p in pages] == [100, 100, 50]
    assert server.requests == [(100, 1), (100, 2), (100, 3)]


def test_filters_are_sent_with_every_page():
    server = PagedServer(records(3))
    with request_mocker() as m:
        m.get(URL, json=server)
        fetch_all(
            Endpoints.ORGANIZATIONS_LIST,
            AUTH,
            {"filter[id]": "2"},
            RetryPolicy(page_size=2),
        )
        qs = [r.qs for r in m.request_history]
    assert all(q["filter[id]"] == ["2"] for q in qs)
    assert len(qs) == 2


def test_halve_page_size():
    sizes = [100]
    while sizes[-1]:
        sizes.append(halve_page_size(sizes[-1]))
    assert sizes == [100, 50, 25, 12, 6, 3, 2, 1, 0]


def test_timeouts_halve_the_page_size():
    server = PagedServer(records(30), failures=[TIMEOUT, TIMEOUT, TIMEOUT])
    sleeps = []
    with request_mocker() as m:
        m.get(URL, json=server)
        result = _call(100, sleeps=sleeps).fetch_all()
    assert result == records(30)
    assert server.page_sizes == [100, 50, 25, 12, 12, 12]
    assert sleeps == [5, 5, 5]


def test_timeout_detected_from_error_body():
    server = PagedServer(records(4), failures=[(500, "Request timed out")])
    with request_mocker() as m:
        m.get(URL, json=server)
        result = _call(4).fetch_all()
    assert result == records(4)
    assert server.page_sizes == [4, 2, 2]


def test_shrinking_mid_fetch_does_not_repeat_records():
    server = PagedServer(records(60), failures=[None, TIMEOUT])
    with request_mocker() as m:
        m.get(URL, json=server)
        result = _call(25).fetch_all()
    assert result == records(60)
    assert server.requests == [(25, 1), (25, 2), (12, 3), (12, 4), (12, 5)]


def test_page_size_exhausted():
    server = PagedServer(records(10), failures=[TIMEOUT] * 10)
    with request_mocker() as m:
        m.get(URL, json=server)
        with pytest.raises(FatalError) as e:
            _call(4, max_attempts=None).fetch_all()
    assert e.value.reason == FatalReason.PAGE_SIZE_EXHAUSTED
    assert server.page_sizes == [4, 2, 1]


def test_retry_limit_reached():
    server = PagedServer(records(10), failures=[(429, "Too many requests")] * 10)
    sleeps = []
    with request_mocker() as m:
        m.get(URL, json=server)
        with pytest.raises(FatalError) as e:
            _call(10, max_attempts=3, sleeps=sleeps).fetch_all()
    assert e.value.reason == FatalReason.RETRY_LIMIT_REACHED
    assert len(server.requests) == 3
    assert len(sleeps) == 2
    # rate limits don't shrink the page
    assert server.page_sizes == [10, 10, 10]


def test_unbounded_attempts_keep_retrying():
    server = PagedServer(records(2), failures=[(429, "Rate limit exceeded")] * 8)
    with request_mocker() as m:
        m.get(URL, json=server)
        result = _call(10, max_attempts=None).fetch_all()
    assert result == records(2)
    assert len(server.requests) == 9


def test_attempts_reset_after_a_successful_page():
    server = PagedServer(records(4), failures=[TIMEOUT, None, TIMEOUT, None])
    with request_mocker() as m:
        m.get(URL, json=server)
        result = _call(4, max_attempts=2).fetch_all()
    assert result == records(4)


def test_other_errors_propagate():
    server = PagedServer(records(10), failures=[None, (500, "Internal server error")])
    with request_mocker() as m:
        m.get(URL, json=server)
        with pytest.raises(RequestError) as e:
            _call(5).fetch_all()
    assert e.value.kind == RequestErrorKind.OTHER
    assert e.value.detail == "Internal server error"
    assert len(server.requests) == 2


def test_short_server_returns_what_was_gathered():
    with request_mocker() as m:
        m.get(
            URL,
            [
                {"json": page(records(3), total=5, total_pages=2)},
                {"json": page([], total=5, total_pages=2)},
            ],
        )
        result = _call(3).fetch_all()
        assert m.call_count == 2
    assert result == records(3)


def test_unpaginated_response():
    with request_mocker() as m:
        m.get(URL, json={"data": records(2)})
        result = _call(10).fetch_all()
        assert m.call_count == 1
    assert result == records(2)


def test_server_page_cap_is_followed():
    server = CappedServer(records(25), max_page_size=10)
    with request_mocker() as m:
        m.get(URL, json=server)
        call = _call(25)
        result = call.fetch_all()
        requested = [int(r.qs["page[size]"][0]) for r in m.request_history]
    assert result == records(25)
    assert requested == [25, 10, 10]
    assert server.requests == [(10, 1), (10, 2), (10, 3)]
    assert call.page_size == 10


def test_server_page_cap_at_api_maximum():
    server = CappedServer(records(2500), max_page_size=1000)
    with request_mocker() as m:
        m.get(URL, json=server)
        result = _call(1000).fetch_all()
    assert len(result) == 2500
    assert result == records(2500)
    assert server.requests == [(1000, 1), (1000, 2), (1000, 3)]


def test_page_size_above_api_maximum_is_rejected():
    with pytest.raises(ValueError):
        RetryPolicy(page_size=1001)


def test_records_beyond_total_count_are_dropped():
    with request_mocker() as m:
        m.get(URL, json=page(records(5), total=3))
        result = _call(10).fetch_all()
        assert m.call_count == 1
    assert result == records(3)
