"""Tests for CLI interface."""

import json
from datetime import datetime
from unittest.mock import AsyncMock, patch

import pytest
from click.testing import CliRunner

from trello_asana_migrate.cli.main import cli
from trello_asana_migrate.migration.exceptions import Listing, MigrationCancelled
from trello_asana_migrate.migration.orchestrator import MigrationSummary
from trello_asana_migrate.migration.sequencer import FileMigrationResult, FileState

CONFIG = {
    'asana': {'personal_access_token': 'pat', 'workspace': 'w1', 'team': 't1'},
    'trello': {'key': 'k', 'token': 't'},
}


def write_inputs(config=CONFIG):
    with open('config.json', 'w', encoding='utf-8') as f:
        json.dump(config, f)
    with open('board.json', 'w', encoding='utf-8') as f:
        json.dump({'name': 'Roadmap'}, f)


def summary(**counters):
    result = FileMigrationResult(
        source='board.json',
        board_name='Roadmap',
        state=FileState.TASKS_DONE,
        project_name='Roadmap',
        **counters,
    )
    return MigrationSummary(
        total_files=1,
        started_at=datetime.now(),
        completed_at=datetime.now(),
        results=[result],
    )


@pytest.fixture(autouse=True)
def quiet_logging():
    with patch('trello_asana_migrate.cli.main.setup_logging'):
        yield


class TestCLI:
    """Test CLI commands."""

    def setup_method(self):
        """Set up test fixtures."""
        self.runner = CliRunner()

    def test_cli_help(self):
        result = self.runner.invoke(cli, ['--help'])

        assert result.exit_code == 0
        assert '--only-members' in result.output
        assert '--append' in result.output
        assert '--config' in result.output

    def test_cli_version(self):
        result = self.runner.invoke(cli, ['--version'])

        assert result.exit_code == 0
        assert '0.1.0' in result.output

    def test_files_required(self):
        result = self.runner.invoke(cli, [])
        assert result.exit_code == 2

    def test_missing_board_file(self):
        with self.runner.isolated_filesystem():
            result = self.runner.invoke(cli, ['nope.json'])
        assert result.exit_code == 2

    @patch('trello_asana_migrate.cli.main.MigrationEngine')
    def test_successful_migration(self, mock_engine):
        mock_engine.return_value.migrate = AsyncMock(
            return_value=summary(tasks_created=3, warnings=['Label color "teal" dropped'])
        )

        with self.runner.isolated_filesystem():
            write_inputs()
            result = self.runner.invoke(cli, ['board.json', '--append'])

        assert result.exit_code == 0
        assert 'Migration completed successfully' in result.output
        assert 'Warnings (1)' in result.output

        plan = mock_engine.return_value.migrate.call_args.args[0]
        assert plan.files == ['board.json']
        assert plan.append is True
        assert plan.only_members is False

        config = mock_engine.call_args.args[0]
        assert config.asana.team == 't1'

    @patch('trello_asana_migrate.cli.main.MigrationEngine')
    def test_cancellation_shows_listings(self, mock_engine):
        mock_engine.return_value.migrate = AsyncMock(
            side_effect=MigrationCancelled(
                'Members listed',
                [
                    Listing(
                        title='Asana Users',
                        columns=('gid', 'name'),
                        rows=[('u-1', 'Alice')],
                    )
                ],
            )
        )

        with self.runner.isolated_filesystem():
            write_inputs()
            result = self.runner.invoke(cli, ['board.json', '-m'])

        assert result.exit_code == 0
        assert 'Members listed' in result.output
        assert 'Asana Users' in result.output
        assert 'Alice' in result.output
        assert mock_engine.return_value.migrate.call_args.args[0].only_members is True

    @patch('trello_asana_migrate.cli.main.MigrationEngine')
    def test_failed_migration(self, mock_engine):
        mock_engine.return_value.migrate = AsyncMock(side_effect=RuntimeError('boom'))

        with self.runner.isolated_filesystem():
            write_inputs()
            result = self.runner.invoke(cli, ['board.json'])

        assert result.exit_code == 1
        assert 'Migration failed: boom' in result.output

    def test_explicit_config_missing(self):
        with self.runner.isolated_filesystem():
            write_inputs()
            result = self.runner.invoke(cli, ['board.json', '--config', 'other.yaml'])

        assert result.exit_code == 1
        assert 'Configuration file not found' in result.output

    def test_invalid_config(self):
        with self.runner.isolated_filesystem():
            write_inputs({'asana': {}, 'trello': {'key': 'k', 'token': 't'}})
            result = self.runner.invoke(cli, ['board.json'])

        assert result.exit_code == 1
        assert 'Migration failed' in result.output

    @patch('trello_asana_migrate.config.config.load_dotenv')
    @patch('trello_asana_migrate.cli.main.MigrationEngine')
    def test_environment_fallback(self, mock_engine, mock_dotenv, monkeypatch):
        monkeypatch.setenv('ASANA_PERSONAL_ACCESS_TOKEN', 'env-pat')
        monkeypatch.setenv('TRELLO_KEY', 'env-key')
        monkeypatch.setenv('TRELLO_TOKEN', 'env-token')
        mock_engine.return_value.migrate = AsyncMock(return_value=summary())

        with self.runner.isolated_filesystem():
            with open('board.json', 'w', encoding='utf-8') as f:
                json.dump({'name': 'Roadmap'}, f)
            result = self.runner.invoke(cli, ['board.json'])

        assert result.exit_code == 0
        assert mock_engine.call_args.args[0].asana.personal_access_token == 'env-pat'

    @patch('trello_asana_migrate.config.config.load_dotenv')
    def test_no_configuration(self, mock_dotenv, monkeypatch):
        for name in ('ASANA_PERSONAL_ACCESS_TOKEN', 'TRELLO_KEY', 'TRELLO_TOKEN'):
            monkeypatch.delenv(name, raising=False)

        with self.runner.isolated_filesystem():
            with open('board.json', 'w', encoding='utf-8') as f:
                json.dump({'name': 'Roadmap'}, f)
            result = self.runner.invoke(cli, ['board.json'])

        assert result.exit_code == 1
        assert 'No configuration found' in result.output
