"""Exception classes for schemaward operations.

Every failure inside the schema subsystem is expressed as a subclass of
:class:`SchemawardError`. The resolver and the orchestrator catch these at
their boundaries, so none of them reach the user as a hard failure.
"""


class SchemawardError(Exception):
    """Base exception for schemaward operations."""

    error_prefix: str = "Operation failed"

    def __init__(self, message: str, target: str | None = None) -> None:
        """Initialize error with message and optional target.

        Args:
            message: Error message describing the failure.
            target: Optional URL, path or URI the failure relates to.

        """
        super().__init__(message)
        self.message = message
        self.target = target

    def __str__(self) -> str:
        """Return formatted error message."""
        if self.target:
            return f"{self.error_prefix} for '{self.target}': {self.message}"
        return f"{self.error_prefix}: {self.message}"


class NetworkError(SchemawardError):
    """Raised when a connection fails or a request times out."""

    error_prefix = "Network request failed"


class FetchFailed(NetworkError):
    """Raised when the terminal response is not a 2xx status."""

    error_prefix = "Fetch failed"

    def __init__(self, status: int, target: str | None = None) -> None:
        """Initialize with the HTTP status of the terminal response.

        Args:
            status: HTTP status code returned by the server.
            target: URL that produced the status.

        """
        super().__init__(f"HTTP status {status}", target)
        self.status = status


class TooManyRedirects(NetworkError):
    """Raised when a redirect chain exceeds the hop bound."""

    error_prefix = "Too many redirects"

    def __init__(self, max_redirects: int, target: str | None = None) -> None:
        """Initialize with the exceeded hop bound.

        Args:
            max_redirects: Maximum number of redirects that were allowed.
            target: URL the chain started from.

        """
        super().__init__(f"more than {max_redirects} redirects", target)
        self.max_redirects = max_redirects


class ParseError(SchemawardError):
    """Raised when a downloaded body is not valid JSON."""

    error_prefix = "Invalid JSON"


class CatalogParseError(ParseError):
    """Raised when the schema catalog is malformed."""

    error_prefix = "Invalid schema catalog"


class CatalogUnavailable(SchemawardError):
    """Raised while a failed catalog fetch is cooling down."""

    error_prefix = "Schema catalog unavailable"


class CacheIOError(SchemawardError):
    """Raised when reading or writing a cache file fails."""

    error_prefix = "Schema cache I/O failed"


class ValidatorFault(SchemawardError):
    """Raised when a validator call throws or returns garbage."""

    error_prefix = "Validator failed"


class ValidatorUnavailable(SchemawardError):
    """Raised when the native validator module cannot be loaded."""

    error_prefix = "Validator unavailable"


class ConfigurationError(SchemawardError):
    """Raised when the configuration file cannot be written."""

    error_prefix = "Configuration error"
