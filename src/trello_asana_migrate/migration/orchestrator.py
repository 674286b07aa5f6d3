"""Migration orchestrator for processing board exports one after another."""

from datetime import datetime
from typing import Callable, Dict, List, Optional, Tuple

from loguru import logger
from pydantic import BaseModel, Field

from ..models.trello import TrelloBoard
from .exceptions import Listing, MigrationCancelled
from .sequencer import BoardSequencer, FileMigrationResult, MigrationContext, settle
from .workspace import WorkspaceCache

ProgressCallback = Callable[[int, int, str], None]

COUNTERS = (
    'sections_created',
    'sections_reused',
    'tags_created',
    'tags_reused',
    'tasks_created',
    'tasks_reused',
    'subtasks_created',
    'comments_created',
    'attachments_uploaded',
    'attachments_failed',
)


class MigrationPlan(BaseModel):
    """Migration execution plan."""

    files: List[str] = Field(..., description='Board export files, in run order')
    append: bool = Field(
        default=False, description='Append to an existing project with the same name'
    )
    only_members: bool = Field(
        default=False, description='List Trello and Asana members, then stop'
    )


class MigrationSummary(BaseModel):
    """Summary of migration results."""

    total_files: int = Field(..., description='Files in the plan')
    started_at: datetime = Field(..., description='Migration start time')
    completed_at: Optional[datetime] = Field(
        default=None, description='Migration completion time'
    )
    results: List[FileMigrationResult] = Field(
        default_factory=list, description='Per-file results, in run order'
    )

    @property
    def completed_files(self) -> int:
        return sum(1 for result in self.results if result.success)

    @property
    def totals(self) -> Dict[str, int]:
        return {
            counter: sum(getattr(result, counter) for result in self.results)
            for counter in COUNTERS
        }

    @property
    def warnings(self) -> List[str]:
        return [warning for result in self.results for warning in result.warnings]

    class Config:
        """Pydantic configuration."""

        json_encoders = {datetime: lambda v: v.isoformat() if v else None}


class MigrationOrchestrator:
    """Orchestrates a run: configuration checks, preloading, then each file in turn."""

    def __init__(
        self,
        context: MigrationContext,
        progress_callback: Optional[ProgressCallback] = None,
    ):
        """Initialize migration orchestrator.

        Args:
            context: Migration context with clients and settings
            progress_callback: Called as (current, total, description) per file
        """
        self.context = context
        self.progress_callback = progress_callback
        self.logger = logger.bind(component='MigrationOrchestrator')

    async def execute_migration(self, plan: MigrationPlan) -> MigrationSummary:
        """Execute migration according to the plan.

        Args:
            plan: Migration execution plan

        Returns:
            Migration summary with per-file results

        Raises:
            MigrationCancelled: Workspace or team unset, or members-only mode
        """
        started_at = datetime.now()

        await self._ensure_workspace_and_team()
        workspace = await self._preload_workspace()
        boards = self._load_boards(plan.files)

        if plan.only_members:
            raise self._members_listing(boards, workspace)

        context = self.context.copy(update={'append': plan.append})
        sequencer = BoardSequencer(context, workspace)
        results: List[FileMigrationResult] = []

        for index, (path, board) in enumerate(boards, start=1):
            self._report_progress(index - 1, len(boards), f'Migrating {board.name}')
            self.logger.info(f'[{index}/{len(boards)}] Migrating {path} ({board.name})')

            try:
                result = await sequencer.migrate(board, source=path)
            except Exception as e:
                self.logger.error(f'Migration of {path} failed: {e}')
                raise

            results.append(result)

        self._report_progress(len(boards), len(boards), 'Migration completed')

        summary = MigrationSummary(
            total_files=len(plan.files),
            started_at=started_at,
            completed_at=datetime.now(),
            results=results,
        )
        self.logger.info(
            f'Migration completed: {summary.completed_files}/{summary.total_files} files, '
            f'{summary.totals["tasks_created"]} tasks created'
        )
        return summary

    def _report_progress(self, current: int, total: int, description: str) -> None:
        if self.progress_callback is not None:
            self.progress_callback(current, total, description)

    async def _ensure_workspace_and_team(self) -> None:
        """Halt with the available choices when workspace or team is unset.

        Raises:
            MigrationCancelled: With a workspace or team listing
        """
        asana = self.context.asana_client

        if not self.context.workspace_gid:
            workspaces = await asana.list_workspaces()
            raise MigrationCancelled(
                'Asana workspace is not configured',
                [
                    Listing(
                        title='You should select your workspace in Asana.',
                        columns=('gid', 'name'),
                        rows=[(w.gid, w.name) for w in workspaces],
                    )
                ],
            )

        if not self.context.team_gid:
            teams = await asana.list_teams(self.context.workspace_gid)
            raise MigrationCancelled(
                'Asana team is not configured',
                [
                    Listing(
                        title='You should select a team in Asana.',
                        columns=('gid', 'name'),
                        rows=[(t.gid, t.name) for t in teams],
                    )
                ],
            )

    async def _preload_workspace(self) -> WorkspaceCache:
        """Load team projects, workspace tags and users once per run."""
        asana = self.context.asana_client
        projects, tags, users = await settle(
            asana.list_projects(self.context.team_gid),
            asana.list_tags(self.context.workspace_gid),
            asana.list_users(self.context.workspace_gid),
        )
        workspace = WorkspaceCache(projects=projects, tags=tags, users=users)
        self.logger.info(f'Loaded {workspace!r}')
        return workspace

    def _load_boards(self, files: List[str]) -> List[Tuple[str, TrelloBoard]]:
        """Parse every export before anything is created."""
        boards = []
        for path in files:
            board = TrelloBoard.from_file(path)
            self.logger.debug(
                f'Loaded {path}: {len(board.lists)} lists, {len(board.cards)} cards'
            )
            boards.append((path, board))
        return boards

    def _members_listing(
        self, boards: List[Tuple[str, TrelloBoard]], workspace: WorkspaceCache
    ) -> MigrationCancelled:
        seen = set()
        trello_rows = []
        for _, board in boards:
            for member in board.members:
                if member.id in seen:
                    continue
                seen.add(member.id)
                trello_rows.append((member.id, member.fullName, member.username))

        return MigrationCancelled(
            'Members listed',
            [
                Listing(
                    title='Trello Users',
                    columns=('id', 'full name', 'username'),
                    rows=trello_rows,
                ),
                Listing(
                    title='Asana Users',
                    columns=('gid', 'name'),
                    rows=[(user.gid, user.name) for user in workspace.users],
                ),
            ],
        )
