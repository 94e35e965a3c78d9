import pytest
import requests

from conftest import make_response, BrokenBody, RawBody
from sankgrap.config import USER_AGENT
from sankgrap.errors import FetchError, RequestBuildError, BodyReadError
from sankgrap.utils.http_utils import fetch, get_session, header_multimap


def test_session_has_fixed_headers():
    session = get_session()
    assert session.headers["User-Agent"] == USER_AGENT
    assert session.headers["Accept"] == "*/*"


def test_session_custom_user_agent():
    assert get_session("recon/1.0").headers["User-Agent"] == "recon/1.0"


def test_fetch_returns_headers_and_body(transport):
    url = "https://target.test/"
    transport.routes[url] = lambda: make_response(
        url, body=b"hello api.example.com", headers=[("Server", "edge.example.com")])

    view = fetch(transport.session(), url)

    assert view.url == url
    assert view.status_code == 200
    assert view.ok
    assert view.headers == {"Server": ["edge.example.com"]}
    assert view.body == b"hello api.example.com"
    assert view.body_error is None


def test_fetch_uses_timeout_and_streaming(transport):
    url = "https://target.test/"
    transport.routes[url] = lambda: make_response(url)
    fetch(transport.session(), url, timeout=3)
    assert transport.calls == [(url, {"timeout": 3, "stream": True})]


def test_fetch_keeps_error_status_responses(transport):
    url = "https://target.test/missing"
    transport.routes[url] = lambda: make_response(url, body=b"try www.example.com", status_code=404)
    view = fetch(transport.session(), url)
    assert view.status_code == 404
    assert not view.ok
    assert view.body == b"try www.example.com"


def test_repeated_headers_keep_every_value(transport):
    url = "https://target.test/"
    transport.routes[url] = lambda: make_response(url, headers=[
        ("Set-Cookie", "a=1; Domain=one.example.com"),
        ("Set-Cookie", "b=2; Domain=two.example.com"),
    ])
    view = fetch(transport.session(), url)
    assert view.headers == {"Set-Cookie": ["a=1; Domain=one.example.com", "b=2; Domain=two.example.com"]}


def test_header_multimap_falls_back_to_response_headers():
    response = make_response("https://target.test/", headers=[("Via", "proxy.example.com")],
                             raw=RawBody(b"", headers=None))
    assert header_multimap(response) == {"Via": ["proxy.example.com"]}


def test_body_read_failure_keeps_headers(transport):
    url = "https://target.test/"
    transport.routes[url] = lambda: make_response(
        url, headers=[("Location", "www.example.com")], raw=BrokenBody())
    view = fetch(transport.session(), url)
    assert view.body is None
    assert isinstance(view.body_error, BodyReadError)
    assert view.headers == {"Location": ["www.example.com"]}


def test_response_is_always_closed(transport):
    url = "https://target.test/"
    closed = []

    def route():
        response = make_response(url, raw=BrokenBody())
        original_close = response.close

        def close():
            closed.append(True)
            original_close()

        response.close = close
        return response

    transport.routes[url] = route
    fetch(transport.session(), url)
    assert closed == [True]


@pytest.mark.parametrize("exc", [
    requests.exceptions.ConnectionError("refused"),
    requests.exceptions.ConnectTimeout("slow"),
    requests.exceptions.ReadTimeout("slower"),
    requests.exceptions.SSLError("bad cert"),
])
def test_transport_failures_raise_fetch_error(transport, exc):
    url = "https://target.test/"
    transport.routes[url] = exc
    with pytest.raises(FetchError) as info:
        fetch(transport.session(), url)
    assert not isinstance(info.value, RequestBuildError)
    assert info.value.url == url


@pytest.mark.parametrize("url", ["not a url", "ftp://files.example.com/", "http://", ""])
def test_malformed_urls_raise_request_build_error(url):
    with pytest.raises(RequestBuildError):
        fetch(get_session(), url)
