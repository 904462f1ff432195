"""Tests for storefront/common/log_config.py"""

import logging
import sys

from storefront.common.log_config import setup_logging


class TestSetupLogging:
    def teardown_method(self):
        """Reset logger between tests."""
        logger = logging.getLogger("storefront")
        logger.handlers.clear()
        logger.setLevel(logging.WARNING)

    def test_default_level_is_info(self):
        setup_logging()
        logger = logging.getLogger("storefront")
        assert logger.level == logging.INFO

    def test_verbose_sets_debug(self):
        setup_logging(verbose=True)
        logger = logging.getLogger("storefront")
        assert logger.level == logging.DEBUG

    def test_quiet_sets_warning(self):
        setup_logging(quiet=True)
        logger = logging.getLogger("storefront")
        assert logger.level == logging.WARNING

    def test_handler_outputs_to_stderr(self):
        setup_logging()
        logger = logging.getLogger("storefront")
        assert len(logger.handlers) == 1
        handler = logger.handlers[0]
        assert handler.stream is sys.stderr

    def test_repeated_setup_keeps_one_handler(self):
        setup_logging()
        setup_logging(verbose=True)
        assert len(logging.getLogger("storefront").handlers) == 1

    def test_module_loggers_propagate_to_package_logger(self):
        setup_logging()
        child = logging.getLogger("storefront.ingestion.uploader")
        assert child.getEffectiveLevel() == logging.INFO

    def test_returns_package_logger(self):
        assert setup_logging() is logging.getLogger("storefront")

    def test_format(self):
        handler = setup_logging().handlers[0]
        assert handler.formatter._fmt == "%(levelname)-8s %(name)s: %(message)s"

    def test_urllib3_quiet_unless_verbose(self):
        setup_logging()
        assert logging.getLogger("urllib3").level == logging.WARNING
        setup_logging(verbose=True)
        assert logging.getLogger("urllib3").level == logging.DEBUG
