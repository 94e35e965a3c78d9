import io
import threading

import pytest
import requests
from requests.structures import CaseInsensitiveDict
from urllib3._collections import HTTPHeaderDict


class RawBody(io.BytesIO):
    """Body stream that also carries urllib3-style multi-valued headers."""

    def __init__(self, body=b"", headers=None):
        super().__init__(body)
        self.headers = headers


class BrokenBody(io.BytesIO):
    def read(self, *args, **kwargs):
        raise OSError("connection reset by peer")


def make_response(url, body=b"", headers=None, status_code=200, raw=None):
    header_dict = HTTPHeaderDict()
    for name, value in (headers or []):
        header_dict.add(name, value)

    response = requests.Response()
    response.url = url
    response.status_code = status_code
    response.headers = CaseInsensitiveDict({name: ", ".join(header_dict.getlist(name)) for name in header_dict})
    response.raw = raw if raw is not None else RawBody(body, header_dict)
    return response


class FakeSession:
    def __init__(self, transport):
        self.transport = transport
        self.closed = False

    def get(self, url, **kwargs):
        return self.transport.handle(url, kwargs)

    def close(self):
        self.closed = True


class FakeTransport:
    """
    Serves canned responses by URL. A route is either a callable returning a
    fresh requests.Response or an exception instance to raise.
    """

    def __init__(self, routes=None):
        self.routes = dict(routes or {})
        self.calls = []
        self.sessions = []
        self._lock = threading.Lock()

    def session(self):
        session = FakeSession(self)
        with self._lock:
            self.sessions.append(session)
        return session

    def handle(self, url, kwargs):
        with self._lock:
            self.calls.append((url, kwargs))
        route = self.routes.get(url)
        if route is None:
            raise requests.exceptions.ConnectionError(f"no route to {url}")
        if isinstance(route, Exception):
            raise route
        return route()


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def scenario_transport():
    return FakeTransport({
        "https://one.test/": lambda: make_response(
            "https://one.test/", body=b"see https://api.example.com/v1 and cdn.example.com"),
        "https://two.test/": lambda: make_response(
            "https://two.test/", headers=[("Location", "www.example.com/redirect")]),
    })
