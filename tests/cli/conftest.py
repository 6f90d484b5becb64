import functools
import logging

import click.testing
import pytest

from scalables.cli import main


@pytest.fixture(autouse=True)
def _restore_logging():
    logger = logging.getLogger()
    original_level = logger.level
    original_handlers = logger.handlers[:]
    yield
    logger.handlers[:] = original_handlers
    logger.setLevel(original_level)


@pytest.fixture()
def runner():
    runner = click.testing.CliRunner()
    return runner


@pytest.fixture()
def invoke(runner):
    return functools.partial(runner.invoke, main)


@pytest.fixture()
def inspect_fn(mocker):
    return mocker.patch('scalables._core.engines.coordination.inspect')


@pytest.fixture()
def rescale_fn(mocker):
    return mocker.patch('scalables._core.engines.coordination.rescale')
