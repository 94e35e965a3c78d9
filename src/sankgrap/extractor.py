from enum import Enum

from .errors import ConfigurationError


class Mode(Enum):
    BODY = 'rb'
    HEADERS = 'rh'
    BOTH = 'both'

    @property
    def scans_headers(self):
        return self in (Mode.HEADERS, Mode.BOTH)

    @property
    def scans_body(self):
        return self in (Mode.BODY, Mode.BOTH)

    @classmethod
    def parse(cls, value):
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise ConfigurationError(f"Invalid mode {value!r}. Use 'rb', 'rh', or 'both'")


def extract_from_headers(headers, matcher):
    found = set()
    for values in headers.values():
        for value in values:
            found.update(matcher.find_all(value))
    return found


def extract_from_body(body, matcher):
    if body is None:
        return set()
    return set(matcher.find_all(body.decode('utf-8', errors='replace')))


def extract(view, matcher, mode=Mode.BOTH):
    """Returns the distinct matches found in one response for the given mode."""
    mode = Mode.parse(mode)
    found = set()
    if mode.scans_headers:
        found |= extract_from_headers(view.headers, matcher)
    if mode.scans_body:
        found |= extract_from_body(view.body, matcher)
    return found
