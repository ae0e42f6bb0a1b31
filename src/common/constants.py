"""Shared constants for ostree-tui.

For environment-based configuration (ostree binary, refresh interval, etc.),
use the env module:
    from common.env import env
    interval = env.refresh_interval()
"""

# Rendered lines per commit in the log pane (header, subject, spacer)
COMMIT_ENTRY_HEIGHT = 3

# Branch marker colors, assigned in sorted branch order
BRANCH_PALETTE: tuple[str, ...] = (
    "red",
    "green",
    "yellow",
    "blue",
    "magenta",
    "cyan",
    "bright_red",
    "bright_green",
    "bright_yellow",
    "bright_blue",
    "bright_magenta",
    "bright_cyan",
)

SHORT_HASH_LENGTH = 10

NO_SUBJECT = "(no subject)"
NO_PARENT = "(no parent)"

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S +0000"
