"""Source to destination identity mapping.

For every source entity the mapper decides whether an Asana entity with the
same name already exists (reuse its gid) or has to be created (the sequencer
records the new gid later). Names are compared exactly: case-sensitive and
untrimmed. When several destination entities share a name the first one wins.
"""

from typing import Callable, Dict, Iterable, List, Mapping, Optional, Sequence, TypeVar

from loguru import logger

from ..models.asana import AsanaModel, Project, User
from ..models.trello import TrelloCard, TrelloChecklist, TrelloLabel, TrelloList
from .exceptions import UnmappedIdError
from .palette import tag_name_for

SourceT = TypeVar('SourceT')


class IdMapping:
    """Finite source id to destination gid table for one kind of entity."""

    def __init__(self, kind: str, initial: Optional[Mapping[str, str]] = None):
        self.kind = kind
        self._ids: Dict[str, str] = dict(initial or {})

    def record(self, source_id: str, destination_id: str) -> None:
        self._ids[source_id] = destination_id

    def lookup(self, source_id: str) -> str:
        """Destination gid for ``source_id``.

        Raises:
            UnmappedIdError: When the id was never recorded
        """
        try:
            return self._ids[source_id]
        except KeyError:
            raise UnmappedIdError(self.kind, source_id) from None

    def resolve_many(self, source_ids: Iterable[str]) -> List[str]:
        """Destination gids in source order, skipping ids without a mapping."""
        resolved = []
        for source_id in source_ids:
            if source_id in self._ids:
                resolved.append(self._ids[source_id])
            else:
                logger.debug(f'No destination {self.kind} for {source_id}, skipped')
        return resolved

    def __contains__(self, source_id: object) -> bool:
        return source_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    def as_dict(self) -> Dict[str, str]:
        return dict(self._ids)


class FileMappings:
    """Mapping tables for a single input file; discarded when it completes."""

    def __init__(
        self,
        checklists: Iterable[TrelloChecklist] = (),
        users: Iterable[User] = (),
    ):
        self.list_to_section = IdMapping('section')
        self.card_to_task = IdMapping('task')
        self.label_to_tag = IdMapping('tag')
        self.checklists: Dict[str, TrelloChecklist] = {
            checklist.id: checklist for checklist in checklists
        }
        self.user_names: Dict[str, str] = {user.gid: user.name for user in users}

    def checklists_for(self, checklist_ids: Iterable[str]) -> List[TrelloChecklist]:
        """Checklists in the given order; unknown ids are skipped."""
        return [self.checklists[cid] for cid in checklist_ids if cid in self.checklists]


def _first_by_name(entities: Iterable[AsanaModel]) -> Dict[str, AsanaModel]:
    by_name: Dict[str, AsanaModel] = {}
    for entity in entities:
        by_name.setdefault(entity.name, entity)
    return by_name


class IdentityMapper:
    """Makes the reuse-or-create decision for each kind of source entity."""

    def __init__(self, mappings: FileMappings):
        self.mappings = mappings
        self.logger = logger.bind(component='IdentityMapper')

    def _partition(
        self,
        items: Sequence[SourceT],
        existing: Iterable[AsanaModel],
        mapping: IdMapping,
        name_of: Callable[[SourceT], str],
        id_of: Callable[[SourceT], str],
    ) -> List[SourceT]:
        """Record matches in ``mapping`` and return the items to create, in order."""
        by_name = _first_by_name(existing)
        pending = []

        for item in items:
            match = by_name.get(name_of(item))
            if match is not None:
                mapping.record(id_of(item), match.gid)
                self.logger.debug(
                    f'Reusing {mapping.kind} "{match.name}" ({match.gid})'
                )
            else:
                pending.append(item)

        return pending

    def resolve_project(
        self, board_name: str, projects: Iterable[Project], append: bool
    ) -> Optional[Project]:
        """Project to append to, or None when a new project must be created."""
        if not append:
            return None
        return _first_by_name(projects).get(board_name)

    def resolve_sections(
        self, lists: Sequence[TrelloList], sections: Iterable[AsanaModel]
    ) -> List[TrelloList]:
        return self._partition(
            lists,
            sections,
            self.mappings.list_to_section,
            name_of=lambda lst: lst.name,
            id_of=lambda lst: lst.id,
        )

    def resolve_tags(
        self, labels: Sequence[TrelloLabel], tags: Iterable[AsanaModel]
    ) -> List[TrelloLabel]:
        return self._partition(
            labels,
            tags,
            self.mappings.label_to_tag,
            name_of=lambda label: tag_name_for(label.name, label.color),
            id_of=lambda label: label.id,
        )

    def resolve_tasks(
        self, cards: Sequence[TrelloCard], tasks: Iterable[AsanaModel]
    ) -> List[TrelloCard]:
        return self._partition(
            cards,
            tasks,
            self.mappings.card_to_task,
            name_of=lambda card: card.name,
            id_of=lambda card: card.id,
        )
