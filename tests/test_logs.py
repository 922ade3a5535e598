"""Tests for the logging utils and the logging emitted by the approximations"""
from __future__ import annotations

import logging
import os
import tempfile
import unittest

import precisemath.logs as log_utils
from precisemath import ONE, PreciseNumber


class TestLogging(unittest.TestCase):
    """Run the logging tests."""

    def setUp(self):
        self.log_dir = tempfile.TemporaryDirectory()  # pylint: disable=consider-using-with
        self.log_filename = os.path.join(self.log_dir.name, "test_logging")

    def tearDown(self):
        log_utils.close_logging(delete_logs=True)
        self.log_dir.cleanup()

    def added_handlers(self) -> list[logging.Handler]:
        """Handlers on the package logger, other than its NullHandler"""
        return [
            handler for handler in log_utils.get_logger().handlers if not isinstance(handler, logging.NullHandler)
        ]

    def test_handlers_per_destination(self):
        """Verifies that one handler is created per requested destination."""
        log_utils.setup_logging(log_filename=self.log_filename, log_stdout=False)
        self.assertEqual(len(self.added_handlers()), 1)
        log_utils.setup_logging(log_stdout=True)
        self.assertEqual(len(self.added_handlers()), 1)
        log_utils.setup_logging(log_filename=self.log_filename, log_stdout=True)
        self.assertEqual(len(self.added_handlers()), 2)
        log_utils.setup_logging(log_stdout=False)
        self.assertEqual(self.added_handlers(), [])

    def test_setup_leaves_root_logger_alone(self):
        """Verifies that only the package logger is configured."""
        root_handlers = list(logging.getLogger().handlers)
        root_level = logging.getLogger().level
        logger = log_utils.setup_logging(log_level=logging.DEBUG)
        self.assertEqual(logger.name, "precisemath")
        self.assertEqual(logger.level, logging.DEBUG)
        self.assertEqual(logging.getLogger().handlers, root_handlers)
        self.assertEqual(logging.getLogger().level, root_level)

    def test_close_keeps_null_handler(self):
        """Verifies close_logging detaches added handlers and keeps the NullHandler."""
        log_utils.setup_logging(log_level=logging.DEBUG)
        log_utils.close_logging()
        self.assertEqual(self.added_handlers(), [])
        assert any(isinstance(handler, logging.NullHandler) for handler in log_utils.get_logger().handlers)
        self.assertEqual(log_utils.get_logger().level, logging.NOTSET)

    def test_log_file_written_and_deleted(self):
        """Verifies that the file handler writes a .log file and close_logging removes it."""
        log_utils.setup_logging(log_filename=self.log_filename, log_stdout=False, log_level=logging.INFO)
        log_utils.get_logger().info("Info test")
        log_path = self.log_filename + ".log"
        assert os.path.exists(log_path)
        with open(log_path, "r", encoding="UTF-8") as file:
            assert "Info test" in file.read()
        log_utils.close_logging(delete_logs=True)
        assert not os.path.exists(log_path)

    def test_log_file_directory_created(self):
        """Verifies that a missing log directory is created."""
        nested = os.path.join(self.log_dir.name, "nested", "calc.log")
        log_utils.setup_logging(log_filename=nested, log_stdout=False)
        assert os.path.exists(nested)


class TestApproximationLogging(unittest.TestCase):
    """The approximations log through the package logger and never touch the root logger."""

    HALF = PreciseNumber(ONE // 2)

    def test_pow_approximation_debug_logs(self):
        """Verifies the Taylor series reports convergence and the iteration cap."""
        with self.assertLogs("precisemath", level=logging.DEBUG) as captured:
            PreciseNumber(ONE // 4).checked_pow_approximation(self.HALF, 3)
        assert any("max_iterations=3" in message for message in captured.output)
        with self.assertLogs("precisemath", level=logging.DEBUG) as captured:
            PreciseNumber(ONE * 11 // 10).checked_pow_approximation(
                self.HALF, PreciseNumber.MAX_APPROXIMATION_ITERATIONS
            )
        assert any("converged" in message for message in captured.output)

    def test_newtonian_overflow_debug_log(self):
        """Verifies an overflowing power term is reported when it is treated as zero."""
        with self.assertLogs("precisemath.precise_number", level=logging.DEBUG) as captured:
            PreciseNumber.new(9).newtonian_root_approximation(PreciseNumber.new(5), PreciseNumber.new(10**20))
        assert any("overflowed" in message for message in captured.output)

    def test_root_logger_untouched(self):
        """Verifies the first approximation does not give the root logger a handler."""
        root_logger = logging.getLogger()
        saved_handlers = list(root_logger.handlers)
        saved_level = root_logger.level
        try:
            root_logger.handlers = []
            root_logger.setLevel(logging.DEBUG)
            PreciseNumber(ONE // 4).checked_pow_approximation(self.HALF, PreciseNumber.MAX_APPROXIMATION_ITERATIONS)
            PreciseNumber.new(9).newtonian_root_approximation(PreciseNumber.new(5), PreciseNumber.new(10**20))
            self.assertEqual(root_logger.handlers, [])
        finally:
            root_logger.handlers = saved_handlers
            root_logger.setLevel(saved_level)
