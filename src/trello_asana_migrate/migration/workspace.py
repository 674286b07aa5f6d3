"""Per-run cache of workspace-wide Asana entities."""

from typing import Iterable, List, Tuple

from ..models.asana import Project, Tag, User


class WorkspaceCache:
    """Projects, tags and users of the target workspace for one run.

    The orchestrator owns the cache and fills it once. Everything else may
    read it and append newly created entities, never replace or prune, so a
    later file sees tags and projects created by an earlier one.
    """

    def __init__(
        self,
        projects: Iterable[Project] = (),
        tags: Iterable[Tag] = (),
        users: Iterable[User] = (),
    ):
        self._projects: List[Project] = list(projects)
        self._tags: List[Tag] = list(tags)
        self._users: List[User] = list(users)

    @property
    def projects(self) -> Tuple[Project, ...]:
        return tuple(self._projects)

    @property
    def tags(self) -> Tuple[Tag, ...]:
        return tuple(self._tags)

    @property
    def users(self) -> Tuple[User, ...]:
        return tuple(self._users)

    def project_names(self) -> List[str]:
        return [project.name for project in self._projects]

    def add_project(self, project: Project) -> None:
        self._projects.append(project)

    def add_tag(self, tag: Tag) -> None:
        self._tags.append(tag)

    def __repr__(self) -> str:
        return (
            f'WorkspaceCache(projects={len(self._projects)}, '
            f'tags={len(self._tags)}, users={len(self._users)})'
        )
