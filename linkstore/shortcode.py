"""Short code generation utilities."""

import random
import string
from typing import Optional


class ShortCodeGenerator:
    """Generate random short codes for links."""

    # Base62 characters (alphanumeric, case-sensitive)
    BASE62_CHARS = string.ascii_letters + string.digits  # a-zA-Z0-9

    # Paths served by the web app; a code equal to one would be unreachable
    RESERVED_CODES = frozenset({"api", "my", "stats", "top", "health", "shorten", "delete"})

    def __init__(self, default_length: int = 6, rng: Optional[random.Random] = None):
        """Initialize short code generator.

        Args:
            default_length: Default length for generated codes
            rng: Optional random source (a seeded Random makes codes reproducible)
        """
        if default_length < 1:
            raise ValueError("Short code length must be at least 1")
        self.default_length = default_length
        self._rng = rng or random.Random()

    def generate_random(self, length: Optional[int] = None) -> str:
        """Generate a random short code that is not a reserved path.

        Args:
            length: Length of the code (uses default if not specified)

        Returns:
            Random short code
        """
        length = length or self.default_length
        while True:
            code = ''.join(self._rng.choices(self.BASE62_CHARS, k=length))
            if code not in self.RESERVED_CODES:
                return code

    @property
    def keyspace(self) -> int:
        """Number of distinct codes of the default length."""
        return len(self.BASE62_CHARS) ** self.default_length

    @staticmethod
    def is_valid_format(code: str) -> bool:
        """Check if code has valid format (alphanumeric only).

        Args:
            code: Code to validate

        Returns:
            True if valid format
        """
        return bool(code) and all(c in ShortCodeGenerator.BASE62_CHARS for c in code)
