"""Logging utilities with rich output.

This module combines Python's standard logging with rich's console output.
While the interactive browser owns the terminal, console logging is switched
off and records go to the optional log file only.

Usage:
    from common.logger import get_logger

    logger = get_logger(__name__)
    logger.info("Loaded 42 commits")
    logger.warning("Walk of branch 'stable' truncated")
"""

import logging
import os

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

# stderr keeps --dump output on stdout machine readable
console = Console(stderr=True)

# Shared by every module logger so setup_logging() can mute them all at once
console_handler = RichHandler(
    console=console,
    show_time=False,
    show_path=False,
    rich_tracebacks=True,
    markup=False,
)
console_handler.setFormatter(logging.Formatter(fmt="%(message)s", datefmt="[%X]"))


def get_logger(name: str, level: str | None = None) -> logging.Logger:
    """Get a configured logger with rich output.

    Args:
        name: Logger name (typically __name__ of the module)
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
               If None, the logger stays at NOTSET and follows the root
               level configured by setup_logging().

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    if logger.handlers:
        return logger

    if level is not None:
        logger.setLevel(level.upper())
    logger.addHandler(console_handler)

    # Propagate so pytest's caplog and the root file handler see records
    logger.propagate = True

    return logger


def setup_logging(
    level: str = "INFO",
    log_file: str | None = None,
    console_output: bool = True,
) -> None:
    """Configure logging once at the CLI entry point.

    Args:
        level: Default logging level for all modules
        log_file: Optional file path to also log to a file
        console_output: Keep the rich console handler active. The interactive
            browser passes False so log lines never draw over the screen.
    """
    level = os.getenv("LOG_LEVEL", level).upper()

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    console_handler.setLevel(logging.NOTSET if console_output else logging.CRITICAL + 1)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        root_logger.addHandler(file_handler)


def error(message: str) -> None:
    """Print an error message with a red X icon."""
    console.print(f"[red]✗[/red] {escape(message)}", soft_wrap=True)
