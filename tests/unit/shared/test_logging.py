"""Tests for logging setup"""

import logging

import pytest
from loguru import logger

from deadlock_gc.core.config import ClientConfig
from deadlock_gc.infrastructure.coordinator import DeadlockClient
from deadlock_gc.shared.logging import configure_logging, install_logging_bridge


@pytest.fixture
def captured():
    records: list[dict] = []
    sink_id = logger.add(lambda message: records.append(message.record))
    yield records
    logger.remove(sink_id)


@pytest.mark.unit
def test_bridge_forwards_stdlib_records(captured):
    install_logging_bridge(["deadlock_gc.test_bridge"])

    logging.getLogger("deadlock_gc.test_bridge").warning("socket closed")

    record = next(r for r in captured if r["message"] == "socket closed")
    assert record["level"].name == "WARNING"
    assert record["extra"]["stdlib_logger"] == "deadlock_gc.test_bridge"
    assert record["function"] == "test_bridge_forwards_stdlib_records"


@pytest.mark.unit
def test_bridge_installs_once():
    install_logging_bridge(["deadlock_gc.test_once"])
    install_logging_bridge(["deadlock_gc.test_once"])

    assert len(logging.getLogger("deadlock_gc.test_once").handlers) == 1


@pytest.mark.unit
def test_default_bridge_leaves_host_loggers_alone(transport, cached_store, config):
    DeadlockClient(transport, credential_store=cached_store, config=config)

    asyncio_logger = logging.getLogger("asyncio")
    assert asyncio_logger.propagate is True
    assert not any(
        type(h).__module__ == "deadlock_gc.shared.logging"
        for h in asyncio_logger.handlers
    )


@pytest.mark.unit
def test_configure_logging_uses_config_level_and_dir(tmp_path):
    configure_logging(ClientConfig(log_level="WARNING", log_dir=str(tmp_path)))
    logger.info("below the configured level")
    logger.warning("file sink check")
    logger.complete()

    try:
        files = list(tmp_path.glob("deadlock_gc_*.log"))
        assert len(files) == 1
        text = files[0].read_text()
        assert "file sink check" in text
        assert "below the configured level" not in text
    finally:
        logger.remove()
