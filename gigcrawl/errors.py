class GigCrawlError(Exception):
    """Base class for crawler errors."""


class ParseMiss(GigCrawlError):
    """A fragment did not match any pattern (no date, no valid artist)."""


class ConfigurationError(GigCrawlError):
    """Invalid run input. Raised before any fetch is attempted."""


class FetchFailure(GigCrawlError):
    """A network/HTTP failure that survived all retries."""

    def __init__(self, operation, url, cause=None):
        self.operation = operation
        self.url = url
        self.cause = cause
        detail = f": {cause}" if cause else ""
        super().__init__(f"{operation} failed for {url}{detail}")
