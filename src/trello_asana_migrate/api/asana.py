"""Asana API client."""

from typing import Any, Dict, List, Optional

import aiohttp

from ..config.config import AsanaConfig
from ..models.asana import (
    Attachment,
    Project,
    Section,
    Story,
    Tag,
    Task,
    TaskCreate,
    Team,
    User,
    Workspace,
)
from .client import APIResponse, BaseClient
from .exceptions import (
    AsanaAPIError,
    AsanaAuthenticationError,
    AsanaNotFoundError,
    AsanaPermissionError,
    AsanaRateLimitError,
    AsanaValidationError,
)


class AsanaClient(BaseClient):
    """Asana REST client covering the endpoints the migration needs.

    Every body is wrapped in Asana's ``{"data": ...}`` envelope on the way
    out and unwrapped on the way back.
    """

    service_name = 'Asana'
    api_error = AsanaAPIError
    status_errors = {
        400: AsanaValidationError,
        401: AsanaAuthenticationError,
        403: AsanaPermissionError,
        404: AsanaNotFoundError,
    }
    rate_limit_error = AsanaRateLimitError

    page_size = 100

    def __init__(self, config: AsanaConfig):
        """Initialize Asana client.

        Args:
            config: Asana configuration
        """
        super().__init__(
            base_url=config.base_url,
            timeout=config.timeout,
            rate_limit_per_second=config.rate_limit_per_second,
        )
        self.config = config
        self.logger.debug(f'Initialized Asana client for {config.base_url}')

    def _default_headers(self) -> Dict[str, str]:
        headers = super()._default_headers()
        headers['Authorization'] = f'Bearer {self.config.personal_access_token}'
        return headers

    def _error_message(self, status: int, payload: Any) -> str:
        if isinstance(payload, dict) and payload.get('errors'):
            return '; '.join(
                str(error.get('message', error)) for error in payload['errors']
            )
        return super()._error_message(status, payload)

    @staticmethod
    def _unwrap(response: APIResponse) -> Any:
        if isinstance(response.data, dict) and 'data' in response.data:
            return response.data['data']
        return response.data

    async def get_paginated_async(
        self, endpoint: str, params: Optional[Dict[str, Any]] = None
    ) -> List[Dict[str, Any]]:
        """Get all pages of a paginated collection.

        Args:
            endpoint: API endpoint
            params: Query parameters

        Returns:
            List of all items from all pages
        """
        request_params = dict(params or {})
        request_params['limit'] = self.page_size
        items: List[Dict[str, Any]] = []

        while True:
            response = await self.get_async(endpoint, params=dict(request_params))
            payload = response.data or {}
            items.extend(payload.get('data') or [])

            next_page = payload.get('next_page') or {}
            offset = next_page.get('offset')
            if not offset:
                break
            request_params['offset'] = offset

        self.logger.debug(f'Retrieved {len(items)} items from {endpoint}')
        return items

    async def _create(self, endpoint: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        response = await self.post_async(endpoint, data={'data': fields})
        return self._unwrap(response)

    # Lookups

    async def list_workspaces(self) -> List[Workspace]:
        return [Workspace(**item) for item in await self.get_paginated_async('/workspaces')]

    async def list_teams(self, workspace_gid: str) -> List[Team]:
        items = await self.get_paginated_async(f'/workspaces/{workspace_gid}/teams')
        return [Team(**item) for item in items]

    async def list_projects(self, team_gid: str) -> List[Project]:
        items = await self.get_paginated_async(f'/teams/{team_gid}/projects')
        return [Project(**item) for item in items]

    async def list_tags(self, workspace_gid: str) -> List[Tag]:
        items = await self.get_paginated_async(f'/workspaces/{workspace_gid}/tags')
        return [Tag(**item) for item in items]

    async def list_users(self, workspace_gid: str) -> List[User]:
        items = await self.get_paginated_async(f'/workspaces/{workspace_gid}/users')
        return [User(**item) for item in items]

    async def list_tasks(self, project_gid: str) -> List[Task]:
        items = await self.get_paginated_async(f'/projects/{project_gid}/tasks')
        return [Task(**item) for item in items]

    async def list_sections(self, project_gid: str) -> List[Section]:
        items = await self.get_paginated_async(f'/projects/{project_gid}/sections')
        return [Section(**item) for item in items]

    # Creation

    async def create_project(
        self, team_gid: str, name: str, notes: str = '', layout: str = 'board'
    ) -> Project:
        data = await self._create(
            f'/teams/{team_gid}/projects',
            {'name': name, 'notes': notes, 'layout': layout},
        )
        return Project(**data)

    async def create_section(self, project_gid: str, name: str) -> Section:
        data = await self._create(f'/projects/{project_gid}/sections', {'name': name})
        return Section(**data)

    async def create_tag(
        self,
        workspace_gid: str,
        name: str,
        color: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> Tag:
        """Create a workspace tag.

        ``color`` and ``notes`` are left out of the request when None, so
        Asana applies its defaults.
        """
        fields: Dict[str, Any] = {'name': name}
        if color is not None:
            fields['color'] = color
        if notes is not None:
            fields['notes'] = notes
        data = await self._create(f'/workspaces/{workspace_gid}/tags', fields)
        return Tag(**data)

    async def create_task(self, task: TaskCreate) -> Task:
        data = await self._create('/tasks', task.to_payload())
        return Task(**data)

    async def add_subtask(
        self, task_gid: str, name: str, completed: Optional[bool] = None
    ) -> Task:
        """Create a subtask under ``task_gid``.

        The subtask is inserted at the head of the parent's subtask list.
        """
        fields: Dict[str, Any] = {'name': name}
        if completed is not None:
            fields['completed'] = completed
        data = await self._create(f'/tasks/{task_gid}/subtasks', fields)
        return Task(**data)

    async def add_comment(self, task_gid: str, text: str) -> Story:
        data = await self._create(f'/tasks/{task_gid}/stories', {'text': text})
        return Story(**data)

    async def upload_attachment(
        self, task_gid: str, content: bytes, filename: str
    ) -> Attachment:
        """Upload a file to a task as a multipart form."""
        form = aiohttp.FormData()
        form.add_field(
            'file',
            content,
            filename=filename,
            content_type='application/octet-stream',
        )
        response = await self._make_request_async(
            'POST', f'/tasks/{task_gid}/attachments', form=form
        )
        data = self._unwrap(response)
        if not isinstance(data, dict):
            raise AsanaAPIError(
                f'Unexpected attachment upload response: {data!r}',
                status_code=response.status_code,
            )
        return Attachment(**data)
