import logging
import unittest

from rich.logging import RichHandler

from dndcalc.logger import LOGGER_NAME, setup_logging


class TestLogging(unittest.TestCase):
    def test_single_handler_and_level(self) -> None:
        setup_logging("info")
        logger = setup_logging("debug")
        handlers = [h for h in logger.handlers if isinstance(h, RichHandler)]
        self.assertEqual(len(handlers), 1)
        self.assertEqual(logger.level, logging.DEBUG)
        self.assertFalse(logger.propagate)
        self.assertIs(logger, logging.getLogger(LOGGER_NAME))

    def tearDown(self) -> None:
        logging.getLogger(LOGGER_NAME).setLevel(logging.WARNING)


if __name__ == "__main__":
    unittest.main()
