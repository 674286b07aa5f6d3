"""Shared fixtures: in-memory Asana and Trello clients and board builders."""

import asyncio
from typing import Any, Dict, List, Optional

import pytest

from trello_asana_migrate.api.exceptions import (
    AsanaAPIError,
    AttachmentDownloadError,
)
from trello_asana_migrate.migration.sequencer import MigrationContext
from trello_asana_migrate.migration.workspace import WorkspaceCache
from trello_asana_migrate.models.asana import (
    Attachment,
    Project,
    Section,
    Story,
    Tag,
    Task,
    Team,
    User,
    Workspace,
)
from trello_asana_migrate.models.trello import TrelloAction, TrelloBoard


class FakeAsanaClient:
    """Asana stand-in that records calls.

    Subtasks are inserted at the head, like the real endpoint.
    """

    def __init__(
        self,
        workspaces=(),
        teams=(),
        projects=(),
        tags=(),
        users=(),
        project_tasks: Optional[Dict[str, List[Task]]] = None,
        project_sections: Optional[Dict[str, List[Section]]] = None,
    ):
        self.workspaces = list(workspaces)
        self.teams = list(teams)
        self.projects = list(projects)
        self.tags = list(tags)
        self.users = list(users)
        self.project_tasks = project_tasks or {}
        self.project_sections = project_sections or {}

        self.calls: List[tuple] = []
        self.created_projects: List[Dict[str, Any]] = []
        self.created_sections: List[tuple] = []
        self.created_tags: List[Dict[str, Any]] = []
        self.created_tasks: List[Any] = []
        self.subtasks: Dict[str, List[tuple]] = {}
        self.comments: Dict[str, List[str]] = {}
        self.attachments: Dict[str, List[str]] = {}

        self.failures: Dict[str, Exception] = {}
        self.failing_uploads: set = set()
        self.tag_in_flight = 0
        self.max_tag_in_flight = 0
        self._next_gid = 1000

    def _gid(self) -> str:
        self._next_gid += 1
        return str(self._next_gid)

    def _maybe_fail(self, method: str) -> None:
        if method in self.failures:
            raise self.failures[method]

    async def list_workspaces(self) -> List[Workspace]:
        self.calls.append(('list_workspaces',))
        return list(self.workspaces)

    async def list_teams(self, workspace_gid: str) -> List[Team]:
        self.calls.append(('list_teams', workspace_gid))
        return list(self.teams)

    async def list_projects(self, team_gid: str) -> List[Project]:
        self.calls.append(('list_projects', team_gid))
        return list(self.projects)

    async def list_tags(self, workspace_gid: str) -> List[Tag]:
        self.calls.append(('list_tags', workspace_gid))
        return list(self.tags)

    async def list_users(self, workspace_gid: str) -> List[User]:
        self.calls.append(('list_users', workspace_gid))
        return list(self.users)

    async def list_tasks(self, project_gid: str) -> List[Task]:
        self.calls.append(('list_tasks', project_gid))
        return list(self.project_tasks.get(project_gid, []))

    async def list_sections(self, project_gid: str) -> List[Section]:
        self.calls.append(('list_sections', project_gid))
        return list(self.project_sections.get(project_gid, []))

    async def create_project(self, team_gid, name, notes='', layout='board') -> Project:
        self._maybe_fail('create_project')
        self.calls.append(('create_project', name))
        self.created_projects.append(
            {'team': team_gid, 'name': name, 'notes': notes, 'layout': layout}
        )
        return Project(gid=self._gid(), name=name, notes=notes, layout=layout)

    async def create_section(self, project_gid, name) -> Section:
        self._maybe_fail('create_section')
        self.calls.append(('create_section', name))
        await asyncio.sleep(0)
        self.created_sections.append((project_gid, name))
        return Section(gid=self._gid(), name=name)

    async def create_tag(self, workspace_gid, name, color=None, notes=None) -> Tag:
        self._maybe_fail('create_tag')
        self.calls.append(('create_tag', name))
        self.tag_in_flight += 1
        self.max_tag_in_flight = max(self.max_tag_in_flight, self.tag_in_flight)
        await asyncio.sleep(0.001)
        self.tag_in_flight -= 1
        self.created_tags.append(
            {'workspace': workspace_gid, 'name': name, 'color': color, 'notes': notes}
        )
        return Tag(gid=self._gid(), name=name, color=color)

    async def create_task(self, task) -> Task:
        self._maybe_fail('create_task')
        self.calls.append(('create_task', task.name))
        self.created_tasks.append(task)
        return Task(gid=self._gid(), name=task.name)

    async def add_subtask(self, task_gid, name, completed=None) -> Task:
        self._maybe_fail('add_subtask')
        self.calls.append(('add_subtask', name))
        self.subtasks.setdefault(task_gid, []).insert(0, (name, completed))
        return Task(gid=self._gid(), name=name)

    async def add_comment(self, task_gid, text) -> Story:
        self._maybe_fail('add_comment')
        self.calls.append(('add_comment', text))
        self.comments.setdefault(task_gid, []).append(text)
        return Story(gid=self._gid(), text=text)

    async def upload_attachment(self, task_gid, content, filename) -> Attachment:
        self.calls.append(('upload_attachment', filename))
        if filename in self.failing_uploads:
            raise AsanaAPIError('upload rejected', status_code=500)
        self.attachments.setdefault(task_gid, []).append(filename)
        return Attachment(gid=self._gid(), name=filename)

    def names_of(self, method: str) -> List[str]:
        return [call[1] for call in self.calls if call[0] == method]


class FakeTrelloClient:
    """Trello stand-in serving card actions and attachment bytes."""

    def __init__(self, actions: Optional[Dict[str, List[dict]]] = None):
        self.actions = actions or {}
        self.failing_downloads: set = set()
        self.action_requests: List[str] = []

    async def get_card_comments(self, card_id: str) -> List[TrelloAction]:
        self.action_requests.append(card_id)
        actions = [TrelloAction(**item) for item in self.actions.get(card_id, [])]
        comments = [action for action in actions if action.is_comment]
        comments.reverse()
        return comments

    async def download_attachment(self, url: str) -> bytes:
        if url in self.failing_downloads:
            raise AttachmentDownloadError(f'Failed to download {url}', status_code=404)
        return url.encode()


def make_board(**overrides) -> TrelloBoard:
    """Board export with one open list and sensible empty defaults."""
    data = {
        'name': 'Roadmap',
        'desc': 'Product roadmap',
        'labels': [],
        'lists': [{'id': 'list-1', 'name': 'Todo', 'closed': False}],
        'cards': [],
        'members': [],
        'checklists': [],
    }
    data.update(overrides)
    return TrelloBoard.from_export(data)


def make_card(card_id: str, name: str, list_id: str = 'list-1', **fields) -> dict:
    card = {
        'id': card_id,
        'name': name,
        'desc': '',
        'idList': list_id,
        'idLabels': [],
        'idMembers': [],
        'idChecklists': [],
        'due': None,
        'closed': False,
        'attachments': [],
        'badges': {'comments': 0},
    }
    card.update(fields)
    return card


def comment_action(action_id: str, text: str, member_id: str, full_name: str) -> dict:
    return {
        'id': action_id,
        'type': 'commentCard',
        'idMemberCreator': member_id,
        'data': {'text': text},
        'memberCreator': {'fullName': full_name},
    }


@pytest.fixture
def asana():
    return FakeAsanaClient(
        users=[User(gid='u-1', name='Alice Asana'), User(gid='u-2', name='Bob Asana')]
    )


@pytest.fixture
def trello():
    return FakeTrelloClient()


@pytest.fixture
def context(asana, trello):
    return MigrationContext(
        asana_client=asana,
        trello_client=trello,
        workspace_gid='ws-1',
        team_gid='team-1',
        member_map={'tm-alice': 'u-1', 'tm-bob': 'u-2'},
    )


@pytest.fixture
def workspace(asana):
    return WorkspaceCache(projects=asana.projects, tags=asana.tags, users=asana.users)
