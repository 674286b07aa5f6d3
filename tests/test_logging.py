"""Tests for logging setup."""

from loguru import logger

from trello_asana_migrate.utils.logging import setup_logging


def test_setup_logging_writes_file(tmp_path):
    log_file = tmp_path / 'logs' / 'migrate.log'

    setup_logging('DEBUG', log_file=str(log_file))
    logger.bind(component='BoardSequencer').info('Created Todo section.')
    logger.debug('unbound record')
    logger.remove()

    content = log_file.read_text(encoding='utf-8')
    assert 'BoardSequencer | ' in content
    assert 'Created Todo section.' in content
    assert 'trello-asana-migrate | ' in content


def test_setup_logging_respects_level(tmp_path):
    log_file = tmp_path / 'migrate.log'

    setup_logging('WARNING', log_file=str(log_file))
    logger.info('hidden')
    logger.warning('shown')
    logger.remove()

    content = log_file.read_text(encoding='utf-8')
    assert 'hidden' not in content
    assert 'shown' in content
