"""Tests for Trello export models."""

import json

import pytest

from trello_asana_migrate.models.trello import TrelloAction, TrelloBoard, TrelloCheckItem


def board_export():
    return {
        'id': 'board-1',
        'name': 'Roadmap',
        'desc': None,
        'prefs': {'background': 'blue'},
        'labels': [{'id': 'lb1', 'name': None, 'color': 'red'}],
        'lists': [
            {'id': 'open', 'name': 'Open', 'closed': False, 'pos': 1},
            {'id': 'archived', 'name': 'Archived', 'closed': True, 'pos': 2},
        ],
        'cards': [
            {'id': 'c1', 'name': 'Kept', 'desc': 'text', 'idList': 'open', 'closed': False},
            {'id': 'c2', 'name': 'Closed card', 'idList': 'open', 'closed': True},
            {'id': 'c3', 'name': 'On archived list', 'idList': 'archived', 'closed': False},
            {'id': 'c4', 'name': 'Also kept', 'desc': None, 'idList': 'open'},
        ],
        'members': [{'id': 'm1', 'fullName': 'Alice', 'username': 'alice'}],
        'checklists': [
            {
                'id': 'cl1',
                'name': 'Steps',
                'checkItems': [{'name': 'One', 'state': 'complete', 'pos': 1}],
            }
        ],
        'actions': [],
    }


class TestTrelloBoard:
    """Test cases for TrelloBoard."""

    def test_archived_lists_and_cards_dropped(self):
        board = TrelloBoard.from_export(board_export())

        assert [lst.id for lst in board.lists] == ['open']
        assert [card.id for card in board.cards] == ['c1', 'c4']

    def test_card_on_archived_list_dropped_even_when_open(self):
        board = TrelloBoard.from_export(board_export())
        assert 'c3' not in {card.id for card in board.cards}

    def test_null_text_fields_become_empty(self):
        board = TrelloBoard.from_export(board_export())

        assert board.desc == ''
        assert board.labels[0].name == ''
        assert board.cards[1].desc == ''

    def test_defaults(self):
        board = TrelloBoard.from_export(board_export())
        card = board.cards[0]

        assert card.idLabels == []
        assert card.attachments == []
        assert card.badges.comments == 0
        assert card.due is None

    def test_from_file(self, tmp_path):
        path = tmp_path / 'board.json'
        path.write_text(json.dumps(board_export()), encoding='utf-8')

        board = TrelloBoard.from_file(str(path))

        assert board.name == 'Roadmap'
        assert board.checklists[0].checkItems[0].completed is True

    def test_from_file_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            TrelloBoard.from_file(str(tmp_path / 'missing.json'))

    def test_from_file_invalid_json(self, tmp_path):
        path = tmp_path / 'broken.json'
        path.write_text('{not json', encoding='utf-8')

        with pytest.raises(json.JSONDecodeError):
            TrelloBoard.from_file(str(path))


class TestTrelloMisc:
    """Test cases for check items and actions."""

    def test_check_item_completed(self):
        assert TrelloCheckItem(name='a', state='complete').completed is True
        assert TrelloCheckItem(name='b', state='incomplete').completed is False
        assert TrelloCheckItem(name='c').completed is False

    def test_action_is_comment(self):
        comment = TrelloAction(
            id='a1',
            type='commentCard',
            idMemberCreator='m1',
            data={'text': 'hello', 'card': {'id': 'c1'}},
            memberCreator={'fullName': 'Alice', 'id': 'm1'},
        )
        update = TrelloAction(id='a2', type='updateCard')

        assert comment.is_comment
        assert comment.data.text == 'hello'
        assert comment.memberCreator.fullName == 'Alice'
        assert not update.is_comment
        assert update.data.text == ''
