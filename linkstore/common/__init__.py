"""Common utilities for the link shortener."""

from .validators import is_valid_url, is_valid_short_code, normalize_url
from .headers import header_value, build_base_url, get_client_ip
from .url_builder import build_short_url, build_site_root
from .logging_config import setup_logging, get_logger

__all__ = [
    "is_valid_url",
    "is_valid_short_code",
    "normalize_url",
    "header_value",
    "build_base_url",
    "get_client_ip",
    "build_short_url",
    "build_site_root",
    "setup_logging",
    "get_logger",
]
