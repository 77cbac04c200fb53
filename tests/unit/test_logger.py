"""
Component loggers: JSON output and request correlation fields.
"""

import json
import logging
import sys

from util_logger import (
    ComponentType,
    JSONFormatter,
    LoggerFactory,
    bind_request_context,
    current_request_context,
    reset_request_context,
)


def _capture(logger):
    records = []

    class _ListHandler(logging.Handler):
        def emit(self, record):
            records.append(record)

    handler = _ListHandler()
    logger.addHandler(handler)
    return records, handler


class TestLoggerFactory:
    def test_name_and_single_handler(self):
        first = LoggerFactory.create_logger(ComponentType.SERVICE, "InventoryService")
        second = LoggerFactory.create_logger(ComponentType.SERVICE, "InventoryService")

        assert first is second
        assert first.name == "service.InventoryService"
        json_handlers = [h for h in first.handlers if isinstance(h.formatter, JSONFormatter)]
        assert len(json_handlers) == 1
        assert len(first.filters) == 1

    def test_component_and_request_dimensions(self):
        logger = LoggerFactory.create_logger(ComponentType.REPOSITORY, "StockRepository")
        records, handler = _capture(logger)
        token = bind_request_context(request_id="abc12345", username="ada", order_id=None)
        try:
            logger.info("stock reserved", extra={'custom_dimensions': {'product_id': "p-1"}})
        finally:
            reset_request_context(token)
            logger.removeHandler(handler)

        dims = records[0].custom_dimensions
        assert dims == {
            'component_type': "repository",
            'component_name': "StockRepository",
            'request_id': "abc12345",
            'username': "ada",
            'product_id': "p-1",
        }
        assert current_request_context() == {}

    def test_explicit_dimensions_win(self):
        logger = LoggerFactory.create_logger(ComponentType.TRIGGER, "RetryTrigger")
        records, handler = _capture(logger)
        token = bind_request_context(request_id="outer")
        try:
            logger.warning("retry", extra={'custom_dimensions': {'request_id': "inner"}})
        finally:
            reset_request_context(token)
            logger.removeHandler(handler)

        assert records[0].custom_dimensions['request_id'] == "inner"


class TestJSONFormatter:
    def test_exception_block(self):
        record = logging.LogRecord("service.X", logging.ERROR, __file__, 10, "failed", None, None)
        try:
            raise ValueError("bad price")
        except ValueError:
            record.exc_info = sys.exc_info()
        record.custom_dimensions = {'order_id': "o-1"}

        payload = json.loads(JSONFormatter().format(record))

        assert payload['level'] == "ERROR"
        assert payload['message'] == "failed"
        assert payload['customDimensions'] == {'order_id': "o-1"}
        assert payload['exception']['type'] == "ValueError"
        assert "bad price" in payload['exception']['traceback']
