"""Tests for label color translation."""

import pytest

from trello_asana_migrate.migration.palette import (
    LabelColor,
    asana_color_for,
    tag_name_for,
)


class TestPalette:
    """Test cases for the label palette."""

    @pytest.mark.parametrize(
        'trello_color, asana_color',
        [
            ('green', 'light-green'),
            ('yellow', 'light-yellow'),
            ('orange', 'dark-orange'),
            ('red', 'light-red'),
            ('purple', 'dark-purple'),
            ('blue', 'dark-blue'),
            ('sky', 'light-blue'),
            ('lime', 'light-orange'),
            ('pink', 'light-pink'),
            ('black', 'dark-warm-gray'),
        ],
    )
    def test_known_colors(self, trello_color, asana_color):
        assert asana_color_for(trello_color) == asana_color

    def test_every_color_is_mapped(self):
        assert all(color.asana_color for color in LabelColor)

    def test_unknown_color(self):
        assert asana_color_for('teal') is None
        assert asana_color_for(None) is None
        assert asana_color_for('') is None

    def test_tag_name(self):
        assert tag_name_for('Bug', 'red') == 'Bug'
        assert tag_name_for('', 'red') == 'red'
        assert tag_name_for('', None) == 'Unnamed label'
