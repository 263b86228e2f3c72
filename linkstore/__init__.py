"""Core business logic for the link shortener."""

from .models import Link
from .shortcode import ShortCodeGenerator
from .store import LinkStore, ShortCodeCollisionError
from .persistence import SnapshotFile, AutosaveWorker
from .service import LinkShortenerService

__all__ = [
    "Link",
    "ShortCodeGenerator",
    "LinkStore",
    "ShortCodeCollisionError",
    "SnapshotFile",
    "AutosaveWorker",
    "LinkShortenerService",
]
