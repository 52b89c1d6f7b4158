"""General purpose utility functions."""
import logging
import sys
from pathlib import Path
from typing import NoReturn

def error(msg: str, *args: object) -> NoReturn:
    if args:
        msg = msg%args
    print(msg, file=sys.stderr)
    sys.exit(1)

def resolve_path(path: str) -> Path:
    """
    Parse a given path string to an absolute L{Path} object.
    The path does not need to exist.
    """
    return Path(Path.cwd(), path).resolve()

def parse_path(value: str, opt: str) -> Path:
    """
    Parse a str path to a L{Path} object using L{resolve_path()}.

    Watch out, prints a message and SystemExits on error!
    """
    try:
        return resolve_path(value)
    except Exception as ex:
        error(f"{opt}: invalid path, {ex}.")

class ImmediateStreamHandler(logging.StreamHandler): # type:ignore[type-arg]
    """
    Writes to whatever C{sys.stderr} is when the record is emitted.
    """
    def emit(self, record: logging.LogRecord) -> None:
        self.stream = sys.stderr
        super().emit(record)
        self.flush()

_LEVELS = {-2: logging.ERROR, -1: logging.WARNING, 0: logging.INFO, 1: logging.DEBUG}

def setup_logging(verbosity: int) -> None:
    """
    Configure the C{nodewalk} loggers for the command line.

    @param verbosity: 0 is the default, positive values are noisier, negative quieter.
    """
    log = logging.getLogger('nodewalk')
    log.setLevel(_LEVELS[max(-2, min(1, verbosity))])
    if not any(isinstance(h, ImmediateStreamHandler) for h in log.handlers):
        handler = ImmediateStreamHandler()
        handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))
        log.addHandler(handler)
