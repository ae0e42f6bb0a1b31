"""Environment configuration interface for ostree-tui.

This module centralizes all environment variable access in one place.
Values may also come from a .env file in the working directory.
"""

import os

from dotenv import load_dotenv

# Load environment variables from .env file if it exists
load_dotenv()


class Environment:
    """Interface for accessing environment configuration."""

    @staticmethod
    def ostree_bin() -> str:
        """Get the ostree executable used by the CLI store.

        Returns:
            Executable name or path, defaults to 'ostree'
        """
        return os.getenv("OSTREE_BIN", "ostree")

    @staticmethod
    def ostree_timeout() -> float:
        """Get the timeout for a single ostree invocation.

        Returns:
            Timeout in seconds, defaults to 10.0
        """
        return float(os.getenv("OSTREE_TIMEOUT", "10.0"))

    @staticmethod
    def store_type() -> str:
        """Get the repository store backend (cli or memory).

        Returns:
            Store type, defaults to 'cli'
        """
        return os.getenv("OSTREE_STORE", "cli")

    @staticmethod
    def refresh_interval() -> float:
        """Get the periodic refresh interval of the interactive browser.

        Returns:
            Interval in seconds, 0 disables periodic refresh (default)
        """
        return float(os.getenv("OSTREE_TUI_REFRESH_INTERVAL", "0"))

    @staticmethod
    def log_file() -> str | None:
        """Get the log file the interactive browser writes to.

        Returns:
            File path, or None when unset
        """
        return os.getenv("OSTREE_TUI_LOG_FILE") or None


# Singleton instance for convenient access
env = Environment()
