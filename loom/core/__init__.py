"""Core infrastructure: cache config, logger, wait helper."""
from .config import CacheConfig, get_config
from .logger import setup_logging, get_logger
from .waiting import wait_for

__all__ = [
    "CacheConfig", "get_config",
    "setup_logging", "get_logger",
    "wait_for",
]
