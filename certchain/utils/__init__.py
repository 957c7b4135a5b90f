"""Utility modules."""

from .logger import setup_logger
from .providers import RandomSource, SecureRandomSource, utc_now
from .validators import classify_host, parse_duration, parse_hosts

__all__ = [
    "setup_logger",
    "RandomSource",
    "SecureRandomSource",
    "utc_now",
    "classify_host",
    "parse_duration",
    "parse_hosts",
]
