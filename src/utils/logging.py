"""
Logging setup for the API process.

logging.ini declares a console handler and a file handler. Colour codes from
uvicorn and from coloured log arguments must not end up in the log file.
"""
import logging
import logging.config
import re
from pathlib import Path
from typing import Iterator, Union

# CSI sequences: colours, bold, cursor movement
ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[A-Za-z]")

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_DATEFMT = "%Y-%m-%d %H:%M:%S"


def strip_ansi(text: str) -> str:
    return ANSI_ESCAPE_RE.sub("", text)


class StripAnsiFilter(logging.Filter):
    """Remove ANSI codes from the message and its arguments."""

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        if record.args:
            # Merge args first so coloured arguments are cleaned as well
            record.msg = strip_ansi(record.getMessage())
            record.args = None
        elif isinstance(record.msg, str):
            record.msg = strip_ansi(record.msg)
        return True


def iter_file_handlers() -> Iterator[logging.FileHandler]:
    """FileHandlers on the root logger and on every named logger, each once."""
    loggers = [logging.getLogger()]
    loggers.extend(
        logger for logger in logging.root.manager.loggerDict.values()
        if isinstance(logger, logging.Logger)
    )
    seen = set()
    for logger in loggers:
        for handler in logger.handlers:
            if isinstance(handler, logging.FileHandler) and id(handler) not in seen:
                seen.add(id(handler))
                yield handler


def attach_strip_ansi_to_file_handlers() -> int:
    """
    Attach StripAnsiFilter to every FileHandler that does not have one yet.

    Call after logging.config.fileConfig(...) so the handlers declared in
    logging.ini exist. Returns the number of handlers that got the filter.
    """
    attached = 0
    for handler in iter_file_handlers():
        if not any(isinstance(f, StripAnsiFilter) for f in handler.filters):
            handler.addFilter(StripAnsiFilter())
            attached += 1
    return attached


def configure_logging(config_path: Union[str, Path], log_file: str, level: str) -> bool:
    """
    Configure logging from an ini file, or fall back to basicConfig.

    Returns True when the ini file was used.
    """
    config_path = Path(config_path)
    if not config_path.exists():
        logging.basicConfig(level=level, format=DEFAULT_FORMAT, datefmt=DEFAULT_DATEFMT)
        return False

    logging.config.fileConfig(
        config_path,
        defaults={"logfilename": log_file},
        disable_existing_loggers=False,
    )
    attach_strip_ansi_to_file_handlers()
    logging.getLogger().setLevel(level)
    return True
