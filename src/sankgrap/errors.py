class SankgrapError(Exception):
    """Base class for every error raised by sankgrap."""


class ConfigurationError(SankgrapError):
    """Missing or invalid option. Raised before any worker starts."""


class SourceReadError(SankgrapError):
    """The URL list could not be read."""


class FetchError(SankgrapError):
    """Network failure or timeout while fetching a single URL."""

    def __init__(self, url, message):
        super().__init__(f"{url}: {message}")
        self.url = url


class RequestBuildError(FetchError):
    """The URL could not be turned into a request (bad scheme, empty, ...)."""


class BodyReadError(SankgrapError):
    """The response body could not be read completely."""


class SinkWriteError(SankgrapError):
    """The result destination could not be written."""
