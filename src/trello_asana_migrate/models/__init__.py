"""Data models for Trello exports and Asana entities."""

from .asana import (
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
from .trello import (
    TrelloAction,
    TrelloAttachment,
    TrelloBoard,
    TrelloCard,
    TrelloChecklist,
    TrelloCheckItem,
    TrelloLabel,
    TrelloList,
    TrelloMember,
)

__all__ = [
    'Attachment',
    'Project',
    'Section',
    'Story',
    'Tag',
    'Task',
    'TaskCreate',
    'Team',
    'User',
    'Workspace',
    'TrelloAction',
    'TrelloAttachment',
    'TrelloBoard',
    'TrelloCard',
    'TrelloChecklist',
    'TrelloCheckItem',
    'TrelloLabel',
    'TrelloList',
    'TrelloMember',
]
