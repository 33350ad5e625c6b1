import logging
import os
import sys

DEBUG_LOG_FILE_NAME = "motorshop-debug.log"

# Third party loggers that flood a debug log with connection chatter
NOISY_LOGGERS = ("urllib3",)


def setup(logDir, debugLogFileName=DEBUG_LOG_FILE_NAME, debug=False):
    """
    Configure the root logger.

    With ``debug`` set, everything from DEBUG up goes to a file: the path in
    ``debug`` if it is a string, otherwise ``debugLogFileName`` in
    ``logDir``. Without it, only errors reach stderr.

    Returns:
        The debug log file path, or None when logging to stderr
    """
    fmt = (
        '+%(process)-6d %(levelname)-9s '
        '%(name)-28s %(filename)20s:%(lineno)-5d '
        '[%(asctime)s] %(message)s')
    if not debug:
        logging.basicConfig(stream=sys.stderr, level=logging.ERROR, format=fmt)
        return None

    if isinstance(debug, str):
        logFileName = os.path.expanduser(debug)
    else:
        logFileName = os.path.join(logDir, debugLogFileName)
    logFileDir = os.path.dirname(logFileName)
    if logFileDir:
        os.makedirs(logFileDir, exist_ok=True)
    logging.basicConfig(
        filename=logFileName,
        level=logging.DEBUG,
        format=fmt)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    return logFileName
