from dataclasses import dataclass, field
from typing import Dict, List, Optional

import requests

from ..config import USER_AGENT, DEFAULT_TIMEOUT
from ..errors import FetchError, RequestBuildError, BodyReadError

BODY_CHUNK_SIZE = 64 * 1024

# Raised by requests before anything goes on the wire
REQUEST_BUILD_EXCEPTIONS = (
    requests.exceptions.MissingSchema,
    requests.exceptions.InvalidSchema,
    requests.exceptions.InvalidURL,
    requests.exceptions.InvalidHeader,
    requests.exceptions.URLRequired,
)


@dataclass
class ResponseView:
    url: str
    status_code: int
    headers: Dict[str, List[str]] = field(default_factory=dict)
    body: Optional[bytes] = None
    body_error: Optional[BodyReadError] = None

    @property
    def ok(self):
        return self.status_code == 200


def get_session(user_agent=USER_AGENT):
    session = requests.Session()
    session.headers.update({'User-Agent': user_agent, 'Accept': '*/*'})
    return session


def header_multimap(response):
    """
    Returns every header as name -> list of values.

    requests folds repeated headers into one comma-joined string, so the
    urllib3 header dict is used when present to keep each value separate.
    """
    raw_headers = getattr(response.raw, 'headers', None)
    if raw_headers is not None and hasattr(raw_headers, 'getlist'):
        return {name: list(raw_headers.getlist(name)) for name in raw_headers}
    return {name: [value] for name, value in response.headers.items()}


def read_body(response):
    try:
        return b''.join(response.iter_content(chunk_size=BODY_CHUNK_SIZE)), None
    except (requests.exceptions.RequestException, OSError) as e:
        return None, BodyReadError(f"{response.url}: {e}")


def fetch(session, url, timeout=DEFAULT_TIMEOUT):
    """
    GETs ``url`` and returns a ResponseView whatever the status code.

    Raises RequestBuildError for URLs requests refuses to send and FetchError
    for transport failures. The body is always drained and the response
    closed before returning.
    """
    if not url:
        raise RequestBuildError(url, "empty URL")
    try:
        response = session.get(url, timeout=timeout, stream=True)
    except REQUEST_BUILD_EXCEPTIONS as e:
        raise RequestBuildError(url, e) from e
    except requests.exceptions.RequestException as e:
        raise FetchError(url, e) from e

    try:
        headers = header_multimap(response)
        body, body_error = read_body(response)
    finally:
        response.close()

    return ResponseView(
        url=url,
        status_code=response.status_code,
        headers=headers,
        body=body,
        body_error=body_error,
    )
