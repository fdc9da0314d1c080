class CatalogFetchError(Exception):
    """Generic catalog fetch error."""


class CatalogConnectionError(CatalogFetchError):
    """The endpoint could not be reached."""


class CatalogTimeoutError(CatalogFetchError):
    """The request did not complete within the timeout."""


class CatalogHTTPError(CatalogFetchError):
    def __init__(self, status: int, url: str = ""):
        super().__init__(f"Bad status code {status} from {url}".strip())
        self.status = status
        self.url = url


class CatalogParseError(CatalogFetchError):
    """The payload was not a JSON array of product records."""
