"""
Common constants for the slot-puzzle solver.

This package provides the default values shared by the configuration layer,
the logging setup and the command line front end.
"""

from common.constants import *

__all__ = [
    # Logging
    "DEFAULT_LOG_DIR",
    "DEFAULT_LOG_FILE_NAME",
    "ERROR_LOG_FILE_NAME",
    "PERFORMANCE_LOG_FILE_NAME",
    "DEFAULT_CONSOLE_LOG_LEVEL",
    "DEFAULT_FILE_LOG_LEVEL",
    "LOG_FILE_MAX_BYTES",
    "LOG_FILE_BACKUP_COUNT",
    # Configuration
    "DEFAULT_CONFIG_PATH",
    "CONFIG_PATH_ENV_VAR",
    # Search diagnostics
    "DEFAULT_TRACE_ENABLED",
    "DEFAULT_TRACE_LEVEL",
    "DEFAULT_SHOW_STATISTICS",
    # Collaborators
    "SUDOKU_ORDER",
    "ZEBRA_HOUSE_COUNT",
    "MAX_LATIN_SQUARE_ORDER",
    "DEFAULT_SOLUTION_PRINT_LIMIT",
]
