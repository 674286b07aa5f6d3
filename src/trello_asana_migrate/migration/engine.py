"""Migration engine - main entry point for migration operations."""

from typing import Optional

from loguru import logger

from ..api.asana import AsanaClient
from ..api.trello import TrelloClient
from ..config.config import Config
from .orchestrator import (
    MigrationOrchestrator,
    MigrationPlan,
    MigrationSummary,
    ProgressCallback,
)
from .sequencer import MigrationContext


class MigrationEngine:
    """Builds the API clients from configuration and runs a migration plan."""

    def __init__(self, config: Config):
        """Initialize migration engine.

        Args:
            config: Migration configuration
        """
        self.config = config
        self.logger = logger.bind(component='MigrationEngine')

        self.asana_client = AsanaClient(config.asana)
        self.trello_client = TrelloClient(config.trello)

        self.context = MigrationContext(
            asana_client=self.asana_client,
            trello_client=self.trello_client,
            workspace_gid=config.asana.workspace,
            team_gid=config.asana.team,
            member_map=config.member,
        )

    async def migrate(
        self,
        plan: MigrationPlan,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> MigrationSummary:
        """Execute migration with the given plan.

        Args:
            plan: Migration plan
            progress_callback: Optional per-file progress hook

        Returns:
            Migration summary

        Raises:
            MigrationCancelled: When the run halts to present listings
        """
        self.logger.info(f'Starting Trello to Asana migration of {len(plan.files)} file(s)')
        orchestrator = MigrationOrchestrator(self.context, progress_callback)

        try:
            return await orchestrator.execute_migration(plan)
        finally:
            await self.asana_client.close()
            await self.trello_client.close()
