"""Unit tests for routing pipeline logs to the GUI console queue."""
import logging
from queue import Queue

import pytest

from photo_framer.gui.utils.logging_utils import (
    PIPELINE_LOGGER,
    QueueLogHandler,
    attach_queue_handler,
    detach_queue_handler,
)


@pytest.fixture
def log_queue():
    return Queue()


class TestQueueLogHandler:
    """Tests for QueueLogHandler."""

    def test_puts_message_and_level(self, log_queue):
        """Records become (message, level) tuples."""
        logger = logging.getLogger("photo_framer.tests.handler")
        handler = QueueLogHandler(log_queue)
        logger.addHandler(handler)
        try:
            logger.warning("Frame unavailable")
        finally:
            logger.removeHandler(handler)

        assert log_queue.get_nowait() == ("Frame unavailable", "WARNING")

    def test_debug_mapped_to_info(self, log_queue):
        handler = QueueLogHandler(log_queue, level=logging.DEBUG)
        record = logging.LogRecord("x", logging.DEBUG, __file__, 1, "detail", None, None)

        handler.emit(record)

        assert log_queue.get_nowait() == ("detail", "INFO")


class TestAttachDetach:
    """Tests for attaching to the pipeline logger."""

    def test_pipeline_records_reach_queue(self, log_queue):
        """Child loggers of the package propagate to the queue."""
        handler = attach_queue_handler(log_queue)
        try:
            logging.getLogger(f"{PIPELINE_LOGGER}.framing.controller").info("Preview ready")
        finally:
            detach_queue_handler(handler)

        assert log_queue.get_nowait() == ("Preview ready", "INFO")

    def test_detach_stops_forwarding(self, log_queue):
        handler = attach_queue_handler(log_queue)
        detach_queue_handler(handler)

        logging.getLogger(PIPELINE_LOGGER).warning("after detach")

        assert log_queue.empty()

    def test_level_filters_records(self, log_queue):
        handler = attach_queue_handler(log_queue, level=logging.WARNING)
        try:
            logger = logging.getLogger(PIPELINE_LOGGER)
            logger.info("quiet")
            logger.error("loud")
        finally:
            detach_queue_handler(handler)

        assert log_queue.get_nowait() == ("loud", "ERROR")
        assert log_queue.empty()
