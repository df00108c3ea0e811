"""
WgMeshGen Color Log Formatter - ANSI Color-Coded Console Output

PURPOSE:
    Colors log messages by severity so the per-host progress of a run is
    easy to follow in a terminal. Falls back to plain text when the output
    is not a terminal, e.g. when redirected to a file.

WHO READS ME:
    - main.py: Installs CustomFormatter on the root log handlers

COLOR SCHEME:
    - DEBUG: Grey
    - INFO: Cyan
    - WARNING: Yellow
    - ERROR: Red
    - CRITICAL: Bold Red

LOG FORMAT:
    %(asctime)s - %(levelname)s - %(message)s
    Example: "2026-10-19 13:04:26,789 - INFO - Wrote host configuration for hub ..."
"""

import logging


class CustomFormatter(logging.Formatter):
    """return a formatter that prints log messages with color"""

    grey = "\x1b[38;20m"
    yellow = "\x1b[33;20m"
    red = "\x1b[31;20m"
    cyan = "\x1b[36;20m"
    bold_red = "\x1b[31;1m"
    reset = "\x1b[0m"
    template = "%(asctime)s - %(levelname)s - %(message)s"

    COLORS = {
        logging.DEBUG: grey,
        logging.INFO: cyan,
        logging.WARNING: yellow,
        logging.ERROR: red,
        logging.CRITICAL: bold_red,
    }

    def __init__(self, color: bool = True):
        super().__init__(self.template)
        self.color = color

    def format(self, record):
        text = super().format(record)
        if not self.color:
            return text
        return self.COLORS.get(record.levelno, "") + text + self.reset
