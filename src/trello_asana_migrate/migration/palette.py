"""Trello label color to Asana tag color translation."""

from enum import Enum
from typing import Optional


class LabelColor(str, Enum):
    """Trello label colors with an Asana equivalent."""

    GREEN = 'green'
    YELLOW = 'yellow'
    ORANGE = 'orange'
    RED = 'red'
    PURPLE = 'purple'
    BLUE = 'blue'
    SKY = 'sky'
    LIME = 'lime'
    PINK = 'pink'
    BLACK = 'black'

    @property
    def asana_color(self) -> str:
        return ASANA_COLORS[self]


ASANA_COLORS = {
    LabelColor.GREEN: 'light-green',
    LabelColor.YELLOW: 'light-yellow',
    LabelColor.ORANGE: 'dark-orange',
    LabelColor.RED: 'light-red',
    LabelColor.PURPLE: 'dark-purple',
    LabelColor.BLUE: 'dark-blue',
    LabelColor.SKY: 'light-blue',
    LabelColor.LIME: 'light-orange',
    LabelColor.PINK: 'light-pink',
    LabelColor.BLACK: 'dark-warm-gray',
}


def asana_color_for(trello_color: Optional[str]) -> Optional[str]:
    """Asana color for a Trello label color, or None when there is no equivalent.

    Callers omit the color field on None rather than sending an empty value.
    """
    if trello_color is None:
        return None
    try:
        return LabelColor(trello_color).asana_color
    except ValueError:
        return None


def tag_name_for(label_name: str, trello_color: Optional[str]) -> str:
    """Tag name for a label; color-only labels are named after their color."""
    if label_name:
        return label_name
    return trello_color or 'Unnamed label'
