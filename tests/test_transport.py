import httpx
import pytest

from canvas_fetch.api.errors import FetchCancelled, TransportError
from canvas_fetch.api.pagination import PaginatedFetcher
from canvas_fetch.api.transport import CancelToken, HttpxTransport


def _transport(handler):
    return HttpxTransport(client=httpx.Client(transport=httpx.MockTransport(handler)))


def test_httpx_transport_follows_pages_with_auth_header():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append((str(request.url), request.headers["Authorization"]))
        if request.url.params.get("page") == "2":
            return httpx.Response(200, json=[{"id": 2}])
        return httpx.Response(
            200,
            json=[{"id": 1}],
            headers={"Link": '<https://canvas.test/api/v1/courses?page=2>; rel="next"'},
        )

    with _transport(handler) as transport:
        records = PaginatedFetcher(transport).fetch_all(
            "https://canvas.test/api/v1/courses", "abc123"
        )

    assert records == [{"id": 1}, {"id": 2}]
    assert seen == [
        ("https://canvas.test/api/v1/courses", "Bearer abc123"),
        ("https://canvas.test/api/v1/courses?page=2", "Bearer abc123"),
    ]


def test_httpx_transport_returns_status_and_body():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            503, text="Service Unavailable", headers={"Retry-After": "5"}
        )

    page = _transport(handler).get("https://canvas.test/a", {})

    assert page.status == 503
    assert page.body == "Service Unavailable"
    assert page.headers["retry-after"] == "5"


def test_httpx_transport_keeps_repeated_link_headers():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            content=b"[]",
            headers=[
                ("Link", '<https://canvas.test/a?page=1>; rel="first"'),
                ("Link", '<https://canvas.test/a?page=2>; rel="next"'),
            ],
        )

    page = _transport(handler).get("https://canvas.test/a", {})

    assert page.headers.get_list("link") == [
        '<https://canvas.test/a?page=1>; rel="first"',
        '<https://canvas.test/a?page=2>; rel="next"',
    ]


@pytest.mark.parametrize(
    "exc_type", [httpx.ConnectError, httpx.ReadTimeout, httpx.RemoteProtocolError]
)
def test_httpx_failures_become_transport_errors(exc_type):
    def handler(request: httpx.Request) -> httpx.Response:
        raise exc_type("boom", request=request)

    with pytest.raises(TransportError) as excinfo:
        _transport(handler).get("https://canvas.test/a", {})

    assert excinfo.value.url == "https://canvas.test/a"
    assert isinstance(excinfo.value.__cause__, exc_type)


def test_cancel_during_body_read():
    token = CancelToken()

    def body():
        yield b'[{"id": 1},'
        token.cancel()
        yield b'{"id": 2}]'

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=body())

    with pytest.raises(FetchCancelled):
        _transport(handler).get("https://canvas.test/a", {}, token)


def test_borrowed_client_is_left_open():
    client = httpx.Client(transport=httpx.MockTransport(lambda r: httpx.Response(200)))

    with HttpxTransport(client=client):
        pass

    assert not client.is_closed
    client.close()


def test_timeout_reaches_httpx_client():
    with HttpxTransport(timeout=1.5) as transport:
        assert transport._client.timeout == httpx.Timeout(1.5)

    with PaginatedFetcher(timeout=2.0) as fetcher:
        assert fetcher._owned._client.timeout == httpx.Timeout(2.0)
