"""Migration engine, orchestrator and sequencing."""

from .engine import MigrationEngine
from .exceptions import Listing, MigrationCancelled, MigrationError, UnmappedIdError
from .identity import FileMappings, IdentityMapper, IdMapping
from .naming import unique_name
from .orchestrator import MigrationOrchestrator, MigrationPlan, MigrationSummary
from .palette import LabelColor, asana_color_for
from .sequencer import (
    BoardSequencer,
    FileMigrationResult,
    FileState,
    MigrationContext,
    Stage,
    prepend_in_order,
)
from .workspace import WorkspaceCache

__all__ = [
    'BoardSequencer',
    'FileMappings',
    'FileMigrationResult',
    'FileState',
    'IdMapping',
    'IdentityMapper',
    'LabelColor',
    'Listing',
    'MigrationCancelled',
    'MigrationContext',
    'MigrationEngine',
    'MigrationError',
    'MigrationOrchestrator',
    'MigrationPlan',
    'MigrationSummary',
    'Stage',
    'UnmappedIdError',
    'WorkspaceCache',
    'asana_color_for',
    'prepend_in_order',
    'unique_name',
]
