#!/usr/bin/env python3

import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.text import Text

from breakwatch.constants import APP_NAME

console = Console()

logger = logging.getLogger(APP_NAME)
logger.setLevel(logging.DEBUG)


class ExtraDataFormatter(logging.Formatter):
    def format(self, record):
        s = super().format(record)

        if hasattr(record, 'interval'):
            s += f" - Interval: {record.interval} seconds"
        if hasattr(record, 'breaks'):
            s += f" - Breaks: {record.breaks}"
        return s


class CustomRichHandler(RichHandler):
    """RichHandler that colours the message by level instead of showing a level column."""

    LEVEL_STYLES = {
        logging.DEBUG: "dim",
        logging.INFO: "green",
        logging.WARNING: "yellow",
        logging.ERROR: "bold red",
        logging.CRITICAL: "bold red",
    }

    def render_message(self, record, message):
        text = super().render_message(record, message)
        if isinstance(text, Text):
            text.stylize(self.LEVEL_STYLES.get(record.levelno, ""))
        return text


def setup_logging(log_file_path_str: str, verbose: bool):
    log_file_path = Path(log_file_path_str)
    log_file_path.parent.mkdir(parents=True, exist_ok=True)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    fh = logging.FileHandler(log_file_path)
    fh.setLevel(logging.DEBUG)

    rh = CustomRichHandler(
        console=console,
        rich_tracebacks=True,
        show_path=False,
        show_level=False,
        log_time_format='[%H:%M:%S]'
    )
    rh.setLevel(logging.DEBUG if verbose else logging.INFO)

    fh_formatter = ExtraDataFormatter(
        '%(asctime)s - %(levelname)s - %(message)s'
    )
    fh.setFormatter(fh_formatter)

    logger.addHandler(fh)
    logger.addHandler(rh)
