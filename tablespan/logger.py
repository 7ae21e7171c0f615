"""Logging setup.

The rest of the code gets the logger through this module rather than
``logging.getLogger`` to make sure that it is configured.

Logging levels are used for specific purposes:

- warnings are used in ``LOGGER`` for malformed tables, ignored HTML
  attributes, unknown options and various non-fatal problems;
- infos are used in ``PROGRESS_LOGGER`` to advertise parsing steps and
  committed column resizes;
- debug messages are used in ``LOGGER`` for refused commands and cancelled
  drags.

"""

import contextlib
import logging

LOGGER = logging.getLogger('tablespan')
if not LOGGER.handlers:  # pragma: no cover
    LOGGER.setLevel(logging.WARNING)
    LOGGER.addHandler(logging.NullHandler())

PROGRESS_LOGGER = logging.getLogger('tablespan.progress')

SIMPLE_FORMAT = '%(levelname)s: %(message)s'
DEBUG_FORMAT = (
    '%(levelname)s: %(filename)s:%(lineno)d (%(funcName)s): %(message)s')


class CallbackHandler(logging.Handler):
    """A logging handler that calls a function for every kept message."""
    def __init__(self, callback, level=logging.NOTSET, ignored=()):
        logging.Handler.__init__(self, level)
        self.callback = callback
        self.ignored = ignored

    def emit(self, record):
        if record.name not in self.ignored:
            self.callback(record)


def configure_logging(verbose=False, debug=False, quiet=False):
    """Make ``LOGGER`` write to stderr, as needed by the command line."""
    if debug:
        LOGGER.setLevel(logging.DEBUG)
    elif verbose:
        LOGGER.setLevel(logging.INFO)
    if quiet:
        return None
    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter(DEBUG_FORMAT if debug else SIMPLE_FORMAT))
    LOGGER.addHandler(handler)
    return handler


@contextlib.contextmanager
def capture_logs(logger='tablespan', level=None):
    """Return a context manager that captures all logged messages.

    Messages are captured as ``'LEVEL: message'`` strings. Only messages of
    at least ``level``, ``INFO`` by default, are kept, and progress messages
    are ignored.

    """
    logger = logging.getLogger(logger)
    messages = []

    def keep(record):
        messages.append(f'{record.levelname.upper()}: {record.getMessage()}')

    handler = CallbackHandler(
        keep, logging.INFO if level is None else level,
        ignored=(PROGRESS_LOGGER.name,))
    previous_handlers, previous_level = logger.handlers, logger.level
    logger.handlers = [handler]
    logger.setLevel(logging.DEBUG)
    try:
        yield messages
    finally:
        logger.handlers = previous_handlers
        logger.setLevel(previous_level)
