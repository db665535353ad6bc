"""Search-specific exceptions for error handling."""


class SearchError(Exception):
    """Base exception for search operations."""

    pass


class SearchNotConfiguredError(SearchError):
    """Raised when no API key is configured for the search provider."""

    pass


class SearchRequestError(SearchError):
    """Raised when the provider request fails or returns an unusable response."""

    def __init__(self, message: str, status_code: int = None):
        self.status_code = status_code
        super().__init__(message)
