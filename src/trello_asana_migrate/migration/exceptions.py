"""Migration control-flow exceptions."""

from typing import List, Sequence, Tuple

from pydantic import BaseModel, Field


class Listing(BaseModel):
    """A table of choices shown to the operator when a run halts early."""

    title: str = Field(..., description='Heading shown above the table')
    columns: Tuple[str, ...] = Field(..., description='Column headers')
    rows: List[Tuple[str, ...]] = Field(default_factory=list)


class MigrationError(Exception):
    """Base exception for migration failures."""

    pass


class MigrationCancelled(MigrationError):
    """Informational halt: the run stops after presenting listings.

    Not a failure. Raised when workspace or team still need choosing and in
    members-only mode.
    """

    def __init__(self, message: str, listings: Sequence[Listing] = ()):
        super().__init__(message)
        self.listings = list(listings)


class UnmappedIdError(KeyError):
    """A source id has no destination counterpart in an id mapping."""

    def __init__(self, kind: str, source_id: str):
        super().__init__(source_id)
        self.kind = kind
        self.source_id = source_id

    def __str__(self) -> str:
        return f'No destination {self.kind} for source id {self.source_id!r}'
