import logging
import logging.handlers

import pytest

from scalables._core.actions.loggers import WorkloadLogger


@pytest.fixture(autouse=True)
def _caplog_all_levels(caplog):
    caplog.set_level(0)


def _make_record(namespace):
    handler = logging.handlers.BufferingHandler(capacity=100)
    logger = WorkloadLogger(kind='StatefulSet', namespace=namespace, name='agents')
    logger.logger.addHandler(handler)
    try:
        logger.info("hello")
    finally:
        logger.logger.removeHandler(handler)
    return handler.buffer[0]


@pytest.fixture()
def ns_record():
    return _make_record('ns')


@pytest.fixture()
def nameonly_record():
    return _make_record(None)
