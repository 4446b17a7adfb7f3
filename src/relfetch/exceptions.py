"""
Custom exceptions for relfetch.

Every failure the tool reports is terminal for the run: the entry point logs
the error and exits with a non-zero status. Usage errors are reported by the
argument parser itself and never reach this hierarchy.
"""


class RelfetchError(Exception):
    """
    Base exception for all relfetch errors.

    All custom exceptions in relfetch inherit from this class so the entry
    point can catch every application-specific error in one place.
    """

    def __init__(self, message: str, details: str | None = None) -> None:
        """
        Initialize the exception.

        Args:
            message: The primary error message.
            details: Optional additional context about the error.
        """
        self.message = message
        self.details = details
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - {self.details}"
        return self.message


# =============================================================================
# Release Query Errors
# =============================================================================


class ConnectivityError(RelfetchError):
    """
    Exception raised when the release API could not be reached.

    This includes connection failures, timeouts, and responses with an empty
    body.
    """

    pass


class APIError(RelfetchError):
    """
    Exception raised when the release API answers with an error.

    Attributes:
        status_code: The HTTP status code returned by the server, if known.
        url: The URL that was requested.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        url: str | None = None,
        details: str | None = None,
    ) -> None:
        super().__init__(message, details)
        self.status_code = status_code
        self.url = url


class RateLimitError(APIError):
    """
    Exception raised when the GitHub API rate limit is exhausted.

    Attributes:
        reset_time: Human-readable time at which the rate limit resets.
    """

    def __init__(
        self,
        message: str = "GitHub API rate limit exceeded",
        reset_time: str | None = None,
        url: str | None = None,
    ) -> None:
        super().__init__(
            message,
            status_code=403,
            url=url,
            details=f"Resets at: {reset_time or 'unknown'}",
        )
        self.reset_time = reset_time


# =============================================================================
# Download Errors
# =============================================================================


class NoMatchingAssetsError(RelfetchError):
    """
    Exception raised when a release has no assets left to download after filtering.

    Attributes:
        tag: Tag of the selected release.
        pattern: The asset pattern that matched nothing.
    """

    def __init__(self, tag: str, pattern: str) -> None:
        super().__init__(
            f"No assets in release '{tag}' match pattern '{pattern}'"
        )
        self.tag = tag
        self.pattern = pattern


class DownloadError(RelfetchError):
    """
    Base exception for asset download failures.

    Attributes:
        url: The URL that was being downloaded when the error occurred.
    """

    def __init__(
        self,
        message: str,
        url: str | None = None,
        details: str | None = None,
    ) -> None:
        super().__init__(message, details)
        self.url = url


class NetworkError(DownloadError):
    """Exception raised for connection, timeout, and transfer failures during a download."""

    pass


class HTTPError(DownloadError):
    """
    Exception raised when an asset download answers with a non-2xx status.

    Attributes:
        status_code: The HTTP status code returned by the server.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        url: str | None = None,
        details: str | None = None,
    ) -> None:
        super().__init__(message, url, details)
        self.status_code = status_code


# =============================================================================
# File System Errors
# =============================================================================


class FileSystemError(RelfetchError):
    """
    Exception raised for file system-related errors.

    Attributes:
        path: The file system path involved, if known.
    """

    def __init__(
        self,
        message: str,
        path: str | None = None,
        details: str | None = None,
    ) -> None:
        super().__init__(message, details)
        self.path = path


class PathValidationError(FileSystemError):
    """Exception raised when an asset name would escape the output directory."""

    pass
