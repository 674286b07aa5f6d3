"""Trello to Asana Migration Tool

Imports exported Trello boards (lists, cards, labels, checklists, comments
and attachments) into Asana projects through the Asana REST API.
"""

__version__ = '0.1.0'

from .cli import main

__all__ = ['main']
