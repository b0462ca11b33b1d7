"""Core module - configuration, logging, exceptions."""

from followrank.core.config import Settings, get_settings
from followrank.core.exceptions import (
    FollowRankError,
    DataSourceError,
    GraphError,
    PersistenceError,
)
from followrank.core.logging import setup_logging, get_logger

__all__ = [
    "Settings",
    "get_settings",
    "FollowRankError",
    "DataSourceError",
    "GraphError",
    "PersistenceError",
    "setup_logging",
    "get_logger",
]
