"""Trello API client for card activity and attachment downloads."""

from typing import Dict, List
from urllib.parse import urlparse

from ..config.config import TrelloConfig
from ..models.trello import TrelloAction
from .client import BaseClient
from .exceptions import AttachmentDownloadError, TrelloAPIError

# The Trello actions endpoint never returns more than this many entries
MAX_ACTIONS = 1000


class TrelloClient(BaseClient):
    """Trello REST client authenticated with an API key and token."""

    service_name = 'Trello'
    api_error = TrelloAPIError

    def __init__(self, config: TrelloConfig):
        """Initialize Trello client.

        Args:
            config: Trello configuration
        """
        super().__init__(
            base_url=config.base_url,
            timeout=config.timeout,
            rate_limit_per_second=config.rate_limit_per_second,
        )
        self.config = config

    def _default_params(self) -> Dict[str, str]:
        return {'key': self.config.key, 'token': self.config.token}

    def _oauth_header(self) -> Dict[str, str]:
        return {
            'Authorization': (
                f'OAuth oauth_consumer_key="{self.config.key}", '
                f'oauth_token="{self.config.token}"'
            )
        }

    async def get_card_actions(
        self, card_id: str, limit: int = MAX_ACTIONS
    ) -> List[TrelloAction]:
        """Fetch the most recent activity of a card, newest first.

        Board exports truncate the action history, so comments are read from
        the API instead.
        """
        response = await self.get_async(
            f'/cards/{card_id}/actions', params={'limit': min(limit, MAX_ACTIONS)}
        )
        return [TrelloAction(**item) for item in response.data or []]

    async def get_card_comments(self, card_id: str) -> List[TrelloAction]:
        """Comment actions of a card, oldest first."""
        actions = await self.get_card_actions(card_id)
        comments = [action for action in actions if action.is_comment]
        comments.reverse()
        return comments

    async def download_attachment(self, url: str) -> bytes:
        """Download the raw bytes behind an attachment URL.

        Trello-hosted files need the OAuth header; other hosts get a plain
        GET without credentials.

        Raises:
            AttachmentDownloadError: On any status other than 200 or a
                transport failure
        """
        host = urlparse(url).hostname or ''
        trello_hosted = host == 'trello.com' or host.endswith('.trello.com')
        headers = self._oauth_header() if trello_hosted else None

        try:
            response = await self._make_request_async(
                'GET', url, headers=headers, raw=True, authenticate=False
            )
        except TrelloAPIError as e:
            raise AttachmentDownloadError(
                f'Failed to download {url}: {e}', status_code=e.status_code
            ) from e

        if response.status_code != 200:
            raise AttachmentDownloadError(
                f'Failed to download {url}: HTTP {response.status_code}',
                status_code=response.status_code,
            )

        return response.data or b''
