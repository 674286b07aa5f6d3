"""Asana entity models."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class AsanaModel(BaseModel):
    """Base for Asana resources; every resource is identified by a string gid."""

    gid: str = Field(..., description='Globally unique identifier')
    name: str = Field(default='', description='Display name')

    class Config:
        """Pydantic configuration."""

        extra = 'ignore'


class Workspace(AsanaModel):
    """Asana workspace or organization."""


class Team(AsanaModel):
    """Team within an organization."""


class User(AsanaModel):
    """Workspace member."""


class Project(AsanaModel):
    """Asana project."""

    notes: Optional[str] = Field(default=None, description='Project description')
    team: Optional[Dict[str, Any]] = Field(default=None, description='Owning team')
    layout: Optional[str] = Field(default=None, description='list or board')


class Section(AsanaModel):
    """Project section (board column)."""

    project: Optional[Dict[str, Any]] = Field(default=None, description='Owning project')


class Tag(AsanaModel):
    """Workspace tag."""

    color: Optional[str] = Field(default=None, description='Asana palette color')


class Task(AsanaModel):
    """Asana task."""

    notes: Optional[str] = Field(default=None, description='Task description')
    completed: Optional[bool] = Field(default=None)
    assignee: Optional[Dict[str, Any]] = Field(default=None)
    due_at: Optional[str] = Field(default=None)
    followers: List[Dict[str, Any]] = Field(default_factory=list)
    memberships: List[Dict[str, Any]] = Field(default_factory=list)
    tags: List[Dict[str, Any]] = Field(default_factory=list)


class Story(AsanaModel):
    """Task story; comments are stories with a text body."""

    text: Optional[str] = Field(default=None)


class Attachment(AsanaModel):
    """File attached to a task."""


class TaskCreate(BaseModel):
    """Payload for creating a task inside a project section."""

    name: str = Field(..., description='Task name')
    notes: str = Field(default='', description='Task description')
    assignee: Optional[str] = Field(default=None, description='Assignee user gid')
    followers: List[str] = Field(default_factory=list, description='Follower gids')
    due_at: Optional[str] = Field(default=None, description='Due timestamp')
    projects: List[str] = Field(default_factory=list, description='Project gids')
    memberships: List[Dict[str, str]] = Field(
        default_factory=list, description='Project/section placements'
    )
    tags: List[str] = Field(default_factory=list, description='Tag gids')

    def to_payload(self) -> Dict[str, Any]:
        """Serialize for the API, dropping unset optional fields."""
        return {key: value for key, value in self.dict().items() if value is not None}
