"""
solver_config.py

YAML-backed configuration for the slot-puzzle solver.

The configuration is a nested mapping read from ``config/solver.yaml`` (or the
file named by the ``SOLVER_CONFIG`` environment variable). Missing files fall
back to the defaults in common/constants.py; malformed files are an error.

Usage:
    from solver_config import get_config

    cfg = get_config()
    level = cfg.get("logging.console_level", "WARNING")
"""

import copy
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from common.constants import (
    CONFIG_PATH_ENV_VAR,
    DEFAULT_CONFIG_PATH,
    DEFAULT_CONSOLE_LOG_LEVEL,
    DEFAULT_FILE_LOG_LEVEL,
    DEFAULT_LOG_DIR,
    DEFAULT_SHOW_STATISTICS,
    DEFAULT_TRACE_ENABLED,
    DEFAULT_TRACE_LEVEL,
)
from component_6_logging_config import get_logger
from solver_exceptions import InvalidConfigError, wrap_exception

logger = get_logger(__name__)

DEFAULTS: Dict[str, Any] = {
    "logging": {
        "console_level": DEFAULT_CONSOLE_LOG_LEVEL,
        "file_level": DEFAULT_FILE_LOG_LEVEL,
        "log_to_file": False,
        "log_dir": DEFAULT_LOG_DIR,
    },
    "solver": {
        "trace": DEFAULT_TRACE_ENABLED,
        "trace_level": DEFAULT_TRACE_LEVEL,
        "show_statistics": DEFAULT_SHOW_STATISTICS,
    },
}


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class SolverConfig:
    """
    Read-only view over the merged defaults and YAML settings.

    Keys are addressed with dots: ``cfg.get("solver.trace")``.
    """

    def __init__(
        self,
        values: Optional[Dict[str, Any]] = None,
        source: Optional[Path] = None,
    ):
        self._values: Dict[str, Any] = _deep_merge(DEFAULTS, values or {})
        self.source = source

    @classmethod
    def load(cls, path: Optional[Union[str, Path]] = None) -> "SolverConfig":
        """
        Load configuration from a YAML file.

        Args:
            path: Explicit path; otherwise $SOLVER_CONFIG or config/solver.yaml

        Returns:
            SolverConfig with defaults for every key the file leaves out

        Raises:
            InvalidConfigError: If the file is not valid YAML or not a mapping
        """
        if path is None:
            path = os.environ.get(CONFIG_PATH_ENV_VAR, DEFAULT_CONFIG_PATH)
        config_file = Path(path)

        if not config_file.exists():
            logger.warning(f"Config file not found: {config_file}, using defaults")
            return cls(source=None)

        try:
            with open(config_file, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise wrap_exception(
                e, InvalidConfigError, "Malformed YAML", config_path=str(config_file)
            ) from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise InvalidConfigError(
                "Top-level configuration must be a mapping",
                config_path=str(config_file),
            )

        logger.info(f"[OK] Configuration loaded from {config_file}")
        return cls(values=data, source=config_file)

    def get(self, key: str, default: Any = None) -> Any:
        """Look up a dotted key, returning ``default`` when any part is missing."""
        node: Any = self._values
        for part in key.split("."):
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return node

    def as_dict(self) -> Dict[str, Any]:
        return copy.deepcopy(self._values)

    def __repr__(self) -> str:
        return f"SolverConfig(source={self.source!s})"


_config: Optional[SolverConfig] = None


def get_config(path: Optional[Union[str, Path]] = None) -> SolverConfig:
    """
    Return the process-wide configuration, loading it on first use.

    Passing ``path`` forces a reload from that file.
    """
    global _config
    if _config is None or path is not None:
        _config = SolverConfig.load(path)
    return _config


def reset_config() -> None:
    """Forget the cached configuration (used by tests)."""
    global _config
    _config = None
