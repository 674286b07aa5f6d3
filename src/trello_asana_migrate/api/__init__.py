"""Asana and Trello API clients."""

from .asana import AsanaClient
from .client import APIResponse, BaseClient
from .exceptions import (
    APIError,
    AsanaAPIError,
    AsanaAuthenticationError,
    AsanaNotFoundError,
    AsanaPermissionError,
    AsanaRateLimitError,
    AsanaValidationError,
    AttachmentDownloadError,
    TrelloAPIError,
)
from .rate_limiter import RateLimiter
from .trello import TrelloClient

__all__ = [
    'APIResponse',
    'BaseClient',
    'AsanaClient',
    'TrelloClient',
    'RateLimiter',
    'APIError',
    'AsanaAPIError',
    'AsanaAuthenticationError',
    'AsanaNotFoundError',
    'AsanaPermissionError',
    'AsanaRateLimitError',
    'AsanaValidationError',
    'AttachmentDownloadError',
    'TrelloAPIError',
]
