import logging

import pytest

from slotbook.utils.my_logging import APP_LOGGER, LIBRARY_LOGGERS, setup_logging


@pytest.fixture(autouse=True)
def restore_levels():
    names = list(LIBRARY_LOGGERS) + [APP_LOGGER, "alembic", "celery", "uvicorn", "uvicorn.error"]
    saved = {name: logging.getLogger(name).level for name in names}
    yield
    for name, level in saved.items():
        logging.getLogger(name).setLevel(level)


def test_broker_and_cache_clients_are_quiet():
    setup_logging()

    for name in ("redis", "kombu", "amqp", "sqlalchemy.engine"):
        assert logging.getLogger(name).getEffectiveLevel() >= logging.WARNING


def test_quiet_mode_keeps_booking_engine_logs():
    setup_logging(verbose=False)

    assert logging.getLogger("celery").level == logging.ERROR
    assert logging.getLogger("uvicorn.error").level == logging.ERROR
    assert logging.getLogger("slotbook.services.booking").isEnabledFor(logging.INFO)
