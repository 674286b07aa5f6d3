"""Asana and Trello API exceptions."""

from typing import Any, Optional


class APIError(Exception):
    """Base exception for remote API errors."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response_data: Optional[Any] = None,
    ):
        """Initialize API error.

        Args:
            message: Error message
            status_code: HTTP status code
            response_data: Response data from API
        """
        super().__init__(message)
        self.status_code = status_code
        self.response_data = response_data


class AsanaAPIError(APIError):
    """Base exception for Asana API errors."""

    pass


class AsanaAuthenticationError(AsanaAPIError):
    """Personal access token missing, invalid or expired."""

    pass


class AsanaPermissionError(AsanaAPIError):
    """Permission denied error."""

    pass


class AsanaNotFoundError(AsanaAPIError):
    """Resource not found error."""

    pass


class AsanaValidationError(AsanaAPIError):
    """Asana rejected the request payload."""

    pass


class AsanaRateLimitError(AsanaAPIError):
    """Rate limit exceeded error."""

    def __init__(self, message: str, retry_after: int = 60, **kwargs):
        """Initialize rate limit error.

        Args:
            message: Error message
            retry_after: Seconds to wait before retry
            **kwargs: Additional arguments for base class
        """
        super().__init__(message, **kwargs)
        self.retry_after = retry_after


class TrelloAPIError(APIError):
    """Trello API error."""

    pass


class AttachmentDownloadError(APIError):
    """An attachment URL could not be downloaded."""

    pass
