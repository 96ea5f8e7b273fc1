"""Logging infrastructure for grid systems."""

from .setup import setup_logging, setup_simple_logging, get_log_stats

__all__ = [
    'setup_logging',
    'setup_simple_logging',
    'get_log_stats'
]
