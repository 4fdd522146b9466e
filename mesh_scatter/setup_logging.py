import logging
import sys

LOGGER_NAME = __package__ or "mesh_scatter"
LOG_FORMAT = "%(asctime)s.%(msecs)03d [%(levelname)s] %(name)s:%(lineno)d | %(message)s"

_HANDLER_FLAG = "_mesh_scatter_handler"


def setup_logging(level: str = "WARNING") -> logging.Logger:
    """
    Configures the add-on logger.
    - Prints to stdout (Blender's system console).
    - Installs its handler once, so re-registering doesn't duplicate lines.
    - Leaves the root logger and other add-ons alone.
    """
    logger = logging.getLogger(LOGGER_NAME)
    if not any(getattr(h, _HANDLER_FLAG, False) for h in logger.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%H:%M:%S"))
        setattr(handler, _HANDLER_FLAG, True)
        logger.addHandler(handler)
        logger.propagate = False
    logger.setLevel(getattr(logging, str(level).upper(), logging.WARNING))
    return logger
