"""
Centralized constants for the slot-puzzle solver.

This module is the single source of truth for the default values used by the
configuration layer (solver_config.py), the logging setup
(component_6_logging_config.py) and the command line front end
(main_solver_cli.py). Values from config/solver.yaml override these at run
time; the constants themselves are never mutated.

Organization:
    - Logging: file names, levels, rotation limits
    - Configuration: where the YAML file is looked up
    - Search diagnostics: trace defaults for the CLI
    - Collaborators: puzzle sizes used by the bundled encodings

Usage:
    from common.constants import DEFAULT_CONFIG_PATH, SUDOKU_ORDER
"""

# =============================================================================
# Logging
# =============================================================================

DEFAULT_LOG_DIR: str = "logs"
"""Directory for rotating log files (only used when file logging is on)."""

DEFAULT_LOG_FILE_NAME: str = "solver.log"
ERROR_LOG_FILE_NAME: str = "solver_errors.log"
PERFORMANCE_LOG_FILE_NAME: str = "solver_performance.log"

DEFAULT_CONSOLE_LOG_LEVEL: str = "WARNING"
"""
Console level for library use.

The search engine logs its start/end at INFO and every search event at DEBUG,
so WARNING keeps headless callers (tests, scripts) silent by default.
"""

DEFAULT_FILE_LOG_LEVEL: str = "DEBUG"

LOG_FILE_MAX_BYTES: int = 10 * 1024 * 1024
LOG_FILE_BACKUP_COUNT: int = 5

# =============================================================================
# Configuration
# =============================================================================

DEFAULT_CONFIG_PATH: str = "config/solver.yaml"
"""Relative to the current working directory."""

CONFIG_PATH_ENV_VAR: str = "SOLVER_CONFIG"
"""Environment variable that overrides DEFAULT_CONFIG_PATH."""

# =============================================================================
# Search diagnostics
# =============================================================================

DEFAULT_TRACE_ENABLED: bool = False
DEFAULT_TRACE_LEVEL: str = "DEBUG"
DEFAULT_SHOW_STATISTICS: bool = False

# =============================================================================
# Collaborators
# =============================================================================

SUDOKU_ORDER: int = 9
"""Rows, columns, boxes and digits of a standard sudoku."""

ZEBRA_HOUSE_COUNT: int = 5

MAX_LATIN_SQUARE_ORDER: int = 5
"""
Largest Latin square the CLI will enumerate.

Order 5 has 161280 squares; order 6 has over 800 million.
"""

DEFAULT_SOLUTION_PRINT_LIMIT: int = 10
