"""A print-based logger for interactive simulation runs.

Messages go to stdout with a rule line, a timestamp and a level label, so
they stay visible in notebooks and terminals alike. A minimum level filters
the chatter of long runs; it starts from the IZHINET_LOG_LEVEL environment
variable and can be changed at runtime with set_log_level().

Usage:
    from izhinet.utils import get_logger
    log = get_logger("simulation.engine")
    log.info("Simulating %d neurons", 1000)
"""

import os
import sys
from datetime import datetime


LEVELS = {"DEBUG": 10, "INFO": 20, "WARNING": 30, "ERROR": 40}

_THRESHOLD = {"level": LEVELS.get(os.environ.get("IZHINET_LOG_LEVEL", "INFO").upper(),
                                  LEVELS["INFO"])}


def set_log_level(level):
    """Set the minimum level printed by every izhinet logger.

    Parameters
    ----------
    level : str
        One of DEBUG, INFO, WARNING, ERROR (case-insensitive).

    Returns
    -------
    str
        The previous level name.
    """
    name = str(level).upper()
    if name not in LEVELS:
        raise ValueError(f"Unknown log level {level!r}; expected one of {sorted(LEVELS)}")
    previous = next(k for k, v in LEVELS.items() if v == _THRESHOLD["level"])
    _THRESHOLD["level"] = LEVELS[name]
    return previous


def get_logger(name, out=None):
    """Create a print-based logger.

    Parameters
    ----------
    name : str
        Logger name, displayed in every message header.
    out : file-like, optional
        Additional output stream (e.g., an open log file).

    Returns
    -------
    callable
        A log function with .debug, .info, .warning, .error methods.
    """
    prefix = f"izhinet:{name}"
    line_length = 72

    def _outputs():
        # resolved per call so that redirected stdout (pytest capsys) is honoured
        return [sys.stdout] + ([out] if out else [])

    def log(level, msg, args):
        if LEVELS[level] < _THRESHOLD["level"]:
            return
        now = datetime.now().strftime("%H:%M:%S")
        for dest in _outputs():
            print(f"{'_' * line_length}", file=dest)
            print(f"{prefix} {level} [{now}]", file=dest)
            try:
                print(msg % args, file=dest)
            except TypeError:
                print(msg, file=dest)

    log.debug = lambda msg, *args: log("DEBUG", msg, args)
    log.info = lambda msg, *args: log("INFO", msg, args)
    log.warning = lambda msg, *args: log("WARNING", msg, args)
    log.error = lambda msg, *args: log("ERROR", msg, args)

    return log
