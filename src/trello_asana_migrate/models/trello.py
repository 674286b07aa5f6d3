"""Trello board export models."""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, validator


class TrelloModel(BaseModel):
    """Base for Trello payloads; exports carry many fields we never read."""

    class Config:
        """Pydantic configuration."""

        extra = 'ignore'


class TrelloLabel(TrelloModel):
    """Board label."""

    id: str = Field(..., description='Label ID')
    name: str = Field(default='', description='Label name (may be empty)')
    color: Optional[str] = Field(default=None, description='Trello palette color')

    @validator('name', pre=True)
    def none_name_is_empty(cls, v):
        return v or ''


class TrelloList(TrelloModel):
    """Board list (column)."""

    id: str = Field(..., description='List ID')
    name: str = Field(..., description='List name')
    closed: bool = Field(default=False, description='List is archived')


class TrelloCheckItem(TrelloModel):
    """Checklist item."""

    name: str = Field(..., description='Item text')
    state: str = Field(default='incomplete', description='complete or incomplete')

    @property
    def completed(self) -> bool:
        return self.state != 'incomplete'


class TrelloChecklist(TrelloModel):
    """Checklist attached to a card."""

    id: str = Field(..., description='Checklist ID')
    name: str = Field(..., description='Checklist name')
    checkItems: List[TrelloCheckItem] = Field(default_factory=list)


class TrelloAttachment(TrelloModel):
    """Card attachment."""

    id: Optional[str] = Field(default=None, description='Attachment ID')
    name: Optional[str] = Field(default=None, description='Attachment name')
    url: str = Field(..., description='Download URL')


class TrelloBadges(TrelloModel):
    """Card badge counters."""

    comments: int = Field(default=0, description='Number of comments on the card')


class TrelloCard(TrelloModel):
    """Board card."""

    id: str = Field(..., description='Card ID')
    name: str = Field(..., description='Card title')
    desc: str = Field(default='', description='Card description')
    idList: str = Field(..., description='Containing list ID')
    idLabels: List[str] = Field(default_factory=list)
    idMembers: List[str] = Field(default_factory=list)
    idChecklists: List[str] = Field(default_factory=list)
    due: Optional[str] = Field(default=None, description='Due date (ISO 8601)')
    closed: bool = Field(default=False, description='Card is archived')
    attachments: List[TrelloAttachment] = Field(default_factory=list)
    badges: TrelloBadges = Field(default_factory=TrelloBadges)

    @validator('desc', pre=True)
    def none_desc_is_empty(cls, v):
        return v or ''


class TrelloMember(TrelloModel):
    """Board member."""

    id: str = Field(..., description='Member ID')
    fullName: str = Field(default='', description='Display name')
    username: str = Field(default='', description='Username')


class TrelloBoard(TrelloModel):
    """A board export, restricted to what the migration reads."""

    name: str = Field(..., description='Board name')
    desc: str = Field(default='', description='Board description')
    labels: List[TrelloLabel] = Field(default_factory=list)
    lists: List[TrelloList] = Field(default_factory=list)
    cards: List[TrelloCard] = Field(default_factory=list)
    members: List[TrelloMember] = Field(default_factory=list)
    checklists: List[TrelloChecklist] = Field(default_factory=list)

    @validator('desc', pre=True)
    def none_desc_is_empty(cls, v):
        return v or ''

    def without_closed(self) -> 'TrelloBoard':
        """Return a copy without archived lists and cards.

        A card on an archived list is dropped even when the card itself is
        not flagged closed.
        """
        closed_list_ids = {lst.id for lst in self.lists if lst.closed}
        lists = [lst for lst in self.lists if not lst.closed]
        cards = [
            card
            for card in self.cards
            if not card.closed and card.idList not in closed_list_ids
        ]
        return self.copy(update={'lists': lists, 'cards': cards})

    @classmethod
    def from_export(cls, data: Dict[str, Any]) -> 'TrelloBoard':
        """Parse an export document and drop archived lists and cards."""
        return cls(**data).without_closed()

    @classmethod
    def from_file(cls, path: str) -> 'TrelloBoard':
        """Load a board export JSON file."""
        board_file = Path(path)

        if not board_file.exists():
            raise FileNotFoundError(f'Board export not found: {path}')

        with open(board_file, 'r', encoding='utf-8') as f:
            data = json.load(f)

        return cls.from_export(data)


class TrelloMemberCreator(TrelloModel):
    fullName: str = Field(default='', description='Commenter display name')


class TrelloActionData(TrelloModel):
    text: str = Field(default='', description='Comment text')


class TrelloAction(TrelloModel):
    """Card activity entry returned by the Trello actions endpoint."""

    id: str = Field(..., description='Action ID')
    type: str = Field(..., description='Action type, e.g. commentCard')
    date: Optional[str] = Field(default=None, description='Action timestamp')
    idMemberCreator: Optional[str] = Field(default=None)
    data: TrelloActionData = Field(default_factory=TrelloActionData)
    memberCreator: TrelloMemberCreator = Field(default_factory=TrelloMemberCreator)

    @property
    def is_comment(self) -> bool:
        return self.type == 'commentCard'
