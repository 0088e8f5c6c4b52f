"""Passepartout utility modules.

- logging: Human/verbose/JSON formatting for passepartout's log records
"""

from passepartout.utils.logging import LogMode, get_logger, setup_logging

__all__ = [
    "LogMode",
    "get_logger",
    "setup_logging",
]
