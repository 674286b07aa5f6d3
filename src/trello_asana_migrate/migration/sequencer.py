"""Ordered creation of sections, tags, tasks and task details for one board."""

import asyncio
from datetime import datetime
from enum import Enum
from pathlib import PurePosixPath
from typing import (
    Any,
    Awaitable,
    Callable,
    Dict,
    List,
    Optional,
    Sequence,
    Tuple,
    TypeVar,
)
from urllib.parse import unquote, urlparse

from loguru import logger
from pydantic import BaseModel, Field

from ..api.exceptions import APIError
from ..models.asana import Project, Section, Task, TaskCreate
from ..models.trello import TrelloAction, TrelloBoard, TrelloCard
from .exceptions import UnmappedIdError
from .identity import FileMappings, IdentityMapper, IdMapping
from .naming import unique_name
from .palette import asana_color_for, tag_name_for
from .workspace import WorkspaceCache

ItemT = TypeVar('ItemT')
ResultT = TypeVar('ResultT')

TAG_NOTES = 'Created by Trello'
COMMENT_TEMPLATE = '{author}: {text} from Trello'
PROGRESS_EVERY = 10


class FileState(str, Enum):
    """Per-file progress; each state is reached only after the previous one."""

    LOADING = 'loading'
    PROJECT_RESOLVED = 'project_resolved'
    SECTIONS_DONE = 'sections_done'
    TAGS_DONE = 'tags_done'
    TASKS_DONE = 'tasks_done'


class FileMigrationResult(BaseModel):
    """Outcome of migrating one board export."""

    source: str = Field(..., description='Input file path')
    board_name: str = Field(..., description='Trello board name')
    state: FileState = Field(default=FileState.LOADING)

    project_gid: Optional[str] = Field(default=None, description='Target project')
    project_name: Optional[str] = Field(default=None)
    appended: bool = Field(default=False, description='Existing project was reused')

    sections_created: int = 0
    sections_reused: int = 0
    tags_created: int = 0
    tags_reused: int = 0
    tasks_created: int = 0
    tasks_reused: int = 0
    subtasks_created: int = 0
    comments_created: int = 0
    attachments_uploaded: int = 0
    attachments_failed: int = 0

    warnings: List[str] = Field(default_factory=list, description='Warning messages')

    started_at: datetime = Field(default_factory=datetime.now)
    completed_at: Optional[datetime] = Field(default=None)

    @property
    def success(self) -> bool:
        return self.state == FileState.TASKS_DONE

    class Config:
        """Pydantic configuration."""

        json_encoders = {datetime: lambda v: v.isoformat() if v else None}


class MigrationContext(BaseModel):
    """Clients and run settings shared by every file of a run."""

    asana_client: Any = Field(..., description='Destination Asana client')
    trello_client: Any = Field(..., description='Source Trello client')

    workspace_gid: Optional[str] = Field(default=None, description='Asana workspace')
    team_gid: Optional[str] = Field(default=None, description='Asana team')
    member_map: Dict[str, str] = Field(
        default_factory=dict, description='Trello member id to Asana user gid'
    )
    append: bool = Field(default=False, description='Reuse same-named projects')

    class Config:
        """Pydantic configuration."""

        arbitrary_types_allowed = True


async def settle(*awaitables: Awaitable[Any]) -> List[Any]:
    """Await everything, then re-raise the first failure if there was one."""
    results = await asyncio.gather(*awaitables, return_exceptions=True)
    for outcome in results:
        if isinstance(outcome, BaseException):
            raise outcome
    return results


class Stage:
    """A pipeline stage with a declared concurrency bound.

    With a bound of 1 items run strictly in order, one in flight at a time.
    Larger bounds run up to ``concurrency`` items at once; every item settles
    before the first failure is re-raised.
    """

    def __init__(self, name: str, concurrency: int):
        if concurrency < 1:
            raise ValueError('Stage concurrency must be at least 1')
        self.name = name
        self.concurrency = concurrency

    async def run(
        self,
        items: Sequence[ItemT],
        worker: Callable[[ItemT], Awaitable[ResultT]],
    ) -> List[ResultT]:
        if self.concurrency == 1:
            return [await worker(item) for item in items]

        semaphore = asyncio.Semaphore(self.concurrency)

        async def bounded(item: ItemT) -> ResultT:
            async with semaphore:
                return await worker(item)

        return await settle(*(bounded(item) for item in items))

    def __repr__(self) -> str:
        return f'Stage({self.name!r}, concurrency={self.concurrency})'


SECTIONS = Stage('sections', concurrency=1)
TAGS = Stage('tags', concurrency=3)
TASKS = Stage('tasks', concurrency=1)


async def prepend_in_order(
    entries: Sequence[ItemT], insert_at_head: Callable[[ItemT], Awaitable[Any]]
) -> int:
    """Write ``entries`` through a head-inserting endpoint so they read in order.

    Each insert lands in front of the previous one, so entries are submitted
    last to first.

    Returns:
        Number of entries written
    """
    for entry in reversed(entries):
        await insert_at_head(entry)
    return len(entries)


def attachment_filename(url: str) -> str:
    """File name for an uploaded attachment, taken from the URL path."""
    name = PurePosixPath(unquote(urlparse(url).path)).name
    return name or 'attachment'


class BoardSequencer:
    """Runs the per-file phases: project, sections, tags, tasks."""

    def __init__(self, context: MigrationContext, workspace: WorkspaceCache):
        """Initialize board sequencer.

        Args:
            context: Clients and run settings
            workspace: Run-wide cache, appended to as entities are created
        """
        self.context = context
        self.workspace = workspace
        self.asana = context.asana_client
        self.trello = context.trello_client
        self.members = IdMapping('user', context.member_map)
        self.logger = logger.bind(component='BoardSequencer')

    def _advance(self, result: FileMigrationResult, state: FileState) -> None:
        result.state = state
        self.logger.debug(f'{result.source}: {state.value}')

    async def migrate(
        self, board: TrelloBoard, source: str = ''
    ) -> FileMigrationResult:
        """Migrate one board.

        Args:
            board: Board export with archived lists and cards removed
            source: Input file path, for reporting

        Returns:
            Result of the file; a failure in any phase propagates instead
        """
        result = FileMigrationResult(source=source, board_name=board.name)
        mappings = FileMappings(board.checklists, self.workspace.users)
        mapper = IdentityMapper(mappings)

        project, sections, tasks = await self._resolve_project(board, mapper, result)
        self._advance(result, FileState.PROJECT_RESOLVED)

        await self._create_sections(board, project, sections, mapper, result)
        self._advance(result, FileState.SECTIONS_DONE)

        await self._create_tags(board, mapper, result)
        self._advance(result, FileState.TAGS_DONE)

        await self._create_tasks(board, project, tasks, mapper, result)
        self._advance(result, FileState.TASKS_DONE)

        result.completed_at = datetime.now()
        self.logger.info(f'Completed {board.name} -> {project.name}')
        return result

    async def _resolve_project(
        self,
        board: TrelloBoard,
        mapper: IdentityMapper,
        result: FileMigrationResult,
    ) -> Tuple[Project, List[Section], List[Task]]:
        existing = mapper.resolve_project(
            board.name, self.workspace.projects, self.context.append
        )

        if existing is not None:
            tasks = await self.asana.list_tasks(existing.gid)
            self.logger.info(f'Loaded {len(tasks)} existing tasks.')
            sections = await self.asana.list_sections(existing.gid)
            self.logger.info(f'Loaded {len(sections)} existing sections.')

            result.appended = True
            result.project_gid, result.project_name = existing.gid, existing.name
            return existing, sections, tasks

        name = unique_name(board.name, self.workspace.project_names())
        project = await self.asana.create_project(
            self.context.team_gid, name, notes=board.desc, layout='board'
        )
        self.workspace.add_project(project)
        self.logger.info(f'Created {project.name} project in your team.')

        result.project_gid, result.project_name = project.gid, project.name
        return project, [], []

    async def _create_sections(
        self,
        board: TrelloBoard,
        project: Project,
        sections: List[Section],
        mapper: IdentityMapper,
        result: FileMigrationResult,
    ) -> None:
        pending = mapper.resolve_sections(board.lists, sections)
        result.sections_reused = len(board.lists) - len(pending)
        section_map = mapper.mappings.list_to_section

        async def create(trello_list):
            section = await self.asana.create_section(project.gid, trello_list.name)
            section_map.record(trello_list.id, section.gid)
            result.sections_created += 1
            self.logger.info(f'Created {trello_list.name} section.')

        await SECTIONS.run(pending, create)

    async def _create_tags(
        self,
        board: TrelloBoard,
        mapper: IdentityMapper,
        result: FileMigrationResult,
    ) -> None:
        pending = mapper.resolve_tags(board.labels, self.workspace.tags)
        result.tags_reused = len(board.labels) - len(pending)
        tag_map = mapper.mappings.label_to_tag
        self.logger.info(f'Creating {len(pending)} tags...')

        async def create(label):
            color = asana_color_for(label.color)
            if color is None and label.color is not None:
                message = f'Label color "{label.color}" has no Asana equivalent'
                self.logger.warning(message)
                result.warnings.append(message)

            tag = await self.asana.create_tag(
                self.context.workspace_gid,
                tag_name_for(label.name, label.color),
                color=color,
                notes=TAG_NOTES,
            )
            tag_map.record(label.id, tag.gid)
            self.workspace.add_tag(tag)
            result.tags_created += 1
            self.logger.info(f'Created {tag.name}({tag.gid}) tag.')

        await TAGS.run(pending, create)

    async def _create_tasks(
        self,
        board: TrelloBoard,
        project: Project,
        tasks: List[Task],
        mapper: IdentityMapper,
        result: FileMigrationResult,
    ) -> None:
        mappings = mapper.mappings
        pending = mapper.resolve_tasks(board.cards, tasks)
        result.tasks_reused = len(board.cards) - len(pending)
        self.logger.info(f'Creating {len(pending)} of {len(board.cards)} tasks...')

        async def create(card):
            self.logger.debug(f'Creating task for card {card.id} "{card.name}"')
            task = await self.asana.create_task(
                self._task_payload(card, project, mappings)
            )
            mappings.card_to_task.record(card.id, task.gid)
            result.tasks_created += 1
            if result.tasks_created % PROGRESS_EVERY == 0:
                self.logger.info(f'{result.tasks_created}...')

            await settle(*self._task_details(card, task, mappings, result))

        await TASKS.run(pending, create)

    def _task_payload(
        self, card: TrelloCard, project: Project, mappings: FileMappings
    ) -> TaskCreate:
        assignee = None
        if card.idMembers:
            try:
                assignee = self.members.lookup(card.idMembers[0])
            except UnmappedIdError as e:
                self.logger.debug(f'Card {card.id} left unassigned: {e}')

        followers = (
            self.members.resolve_many(card.idMembers) if len(card.idMembers) > 1 else []
        )

        membership = {'project': project.gid}
        try:
            membership['section'] = mappings.list_to_section.lookup(card.idList)
        except UnmappedIdError:
            self.logger.warning(f'Card {card.id} has no section, placed in project only')

        return TaskCreate(
            name=card.name,
            notes=card.desc,
            assignee=assignee,
            followers=followers,
            due_at=card.due,
            projects=[project.gid],
            memberships=[membership],
            tags=mappings.label_to_tag.resolve_many(card.idLabels),
        )

    def _task_details(
        self,
        card: TrelloCard,
        task: Task,
        mappings: FileMappings,
        result: FileMigrationResult,
    ) -> List[Awaitable[None]]:
        """Independent follow-up work for a created task, each sequential inside."""
        branches = []
        if card.idChecklists:
            branches.append(self._add_checklists(card, task, mappings, result))
        if card.badges.comments > 0:
            branches.append(self._replay_comments(card, task, mappings, result))
        if card.attachments:
            branches.append(self._upload_attachments(card, task, result))
        return branches

    async def _add_checklists(
        self,
        card: TrelloCard,
        task: Task,
        mappings: FileMappings,
        result: FileMigrationResult,
    ) -> None:
        # Display order: each checklist's "<name>:" header followed by its items
        entries: List[Tuple[str, Optional[bool]]] = []
        for checklist in mappings.checklists_for(card.idChecklists):
            entries.append((f'{checklist.name}:', None))
            entries.extend((item.name, item.completed) for item in checklist.checkItems)

        async def insert(entry):
            name, completed = entry
            await self.asana.add_subtask(task.gid, name, completed=completed)

        result.subtasks_created += await prepend_in_order(entries, insert)

    def _comment_author(self, comment: TrelloAction, mappings: FileMappings) -> str:
        try:
            user_gid = self.members.lookup(comment.idMemberCreator or '')
        except UnmappedIdError:
            return comment.memberCreator.fullName
        return mappings.user_names.get(user_gid) or comment.memberCreator.fullName

    async def _replay_comments(
        self,
        card: TrelloCard,
        task: Task,
        mappings: FileMappings,
        result: FileMigrationResult,
    ) -> None:
        self.logger.debug(f'Getting Trello card actions for card {card.id}')
        comments = await self.trello.get_card_comments(card.id)

        for comment in comments:
            text = COMMENT_TEMPLATE.format(
                author=self._comment_author(comment, mappings), text=comment.data.text
            )
            await self.asana.add_comment(task.gid, text)
            result.comments_created += 1

    async def _upload_attachments(
        self, card: TrelloCard, task: Task, result: FileMigrationResult
    ) -> None:
        for attachment in card.attachments:
            try:
                content = await self.trello.download_attachment(attachment.url)
                await self.asana.upload_attachment(
                    task.gid, content, attachment_filename(attachment.url)
                )
                result.attachments_uploaded += 1
            except (APIError, ValueError) as e:
                result.attachments_failed += 1
                message = f'Failed to upload attachment {attachment.url}: {e}'
                self.logger.warning(message)
                result.warnings.append(message)
