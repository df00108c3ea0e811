"""
WgMeshGen Main Entry Point - CLI Argument Parsing and Application Bootstrap

PURPOSE:
    Entry point for the wgmeshgen CLI tool. Takes exactly one argument, the
    host description document, sets up logging, loads the document and runs
    the generation pipeline.

WHO READS ME:
    - Users: via CLI command `wgmeshgen` or `python -m wgmeshgen`

WHO I READ:
    - config.py: Document loading
    - keys.py: Key backend selection
    - generator.py: The generation pipeline
    - models.py: WgMeshError, UsageError
    - colorlog.py: Custom log formatting

FLOW:
    1. Parse CLI arguments (create_argparser), wrong count is a UsageError
    2. Load the host description document
    3. Apply the log level from the general settings, if any
    4. Generate one configuration file per host
"""

import argparse
import logging
import sys
from pathlib import Path

import wgmeshgen
from wgmeshgen.colorlog import CustomFormatter
from wgmeshgen.config import load_document
from wgmeshgen.generator import generate
from wgmeshgen.keys import get_key_provider
from wgmeshgen.models import UsageError, WgMeshError

_LOGGER = logging.getLogger(__name__)


class ArgumentParser(argparse.ArgumentParser):
    """argument parser raising a UsageError instead of exiting"""

    def error(self, message):
        raise UsageError(f"{message}\n{self.format_usage().strip()}")


def create_argparser(parser_class=ArgumentParser):
    """create the argparser for wgmeshgen"""
    parser = parser_class(
        prog=wgmeshgen.__name__,
        description=wgmeshgen.__description__,
        add_help=False,
    )
    parser.add_argument(
        "configfile",
        help="host description document (JSON, or TOML with a .toml suffix)",
    )
    return parser


def get_log_level(level_name: str) -> tuple[int, bool]:
    log_levels = {
        "CRITICAL": logging.CRITICAL,
        "ERROR": logging.ERROR,
        "WARN": logging.WARNING,
        "WARNING": logging.WARNING,
        "INFO": logging.INFO,
        "DEBUG": logging.DEBUG,
    }
    level_name = level_name.upper()
    if level_name in log_levels:
        return log_levels[level_name], False
    return logging.WARNING, True


def setup_logging(level: int = logging.INFO):
    """sets up the logging with the custom, colorful log formatter"""
    logging.basicConfig(level=level)
    logging.root.setLevel(level)
    for handler in logging.root.handlers:
        stream = getattr(handler, "stream", None)
        color = bool(stream is not None and hasattr(stream, "isatty") and stream.isatty())
        handler.setFormatter(CustomFormatter(color=color))


def apply_log_level(level_name: str | None):
    if level_name is None:
        return
    level, unknown_loglevel = get_log_level(level_name)
    logging.root.setLevel(level)
    if unknown_loglevel:
        _LOGGER.warning("Unknown log level: %s", level_name.upper())


def main(argv: list[str] | None = None) -> int:
    """main function, returns 0 on success, 1 otherwise"""
    setup_logging()
    try:
        args = create_argparser().parse_args(argv)
        document = load_document(Path(args.configfile))
        apply_log_level(document.general.log_level)
        provider = get_key_provider(document.general.key_backend)
        generate(document, provider, base_dir=Path.cwd())
    except (WgMeshError, OSError) as exc:
        _LOGGER.error(exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
