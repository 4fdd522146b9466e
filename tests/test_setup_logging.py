import logging
import unittest

from mesh_scatter.setup_logging import LOGGER_NAME, setup_logging


class TestSetupLogging(unittest.TestCase):
    def tearDown(self):
        logger = logging.getLogger(LOGGER_NAME)
        for h in list(logger.handlers):
            logger.removeHandler(h)
        logger.propagate = True
        logger.setLevel(logging.NOTSET)

    def test_handler_installed_once(self):
        setup_logging("INFO")
        logger = setup_logging("DEBUG")
        self.assertEqual(logger.name, "mesh_scatter")
        self.assertEqual(len(logger.handlers), 1)
        self.assertEqual(logger.level, logging.DEBUG)

    def test_unknown_level_falls_back_to_warning(self):
        logger = setup_logging("chatty")
        self.assertEqual(logger.level, logging.WARNING)


if __name__ == "__main__":
    unittest.main()
