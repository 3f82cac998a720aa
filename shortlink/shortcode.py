"""Short code generation utilities."""

import secrets
import string
from typing import Optional


class ShortCodeGenerator:
    """Generate random short codes for URLs.

    Each call draws independently from ``secrets``, so one generator can be
    shared between concurrent callers. Uniqueness is not checked here; the
    allocator enforces it against the mapping store.
    """

    # Base62 characters (alphanumeric, case-sensitive)
    BASE62_CHARS = string.digits + string.ascii_uppercase + string.ascii_lowercase

    def __init__(self, default_length: int = 8):
        """Initialize short code generator.

        Args:
            default_length: Default length for generated codes
        """
        if default_length < 1:
            raise ValueError("default_length must be positive")
        self.default_length = default_length

    def generate(self, length: Optional[int] = None) -> str:
        """Generate a random short code.

        Args:
            length: Length of the code (uses default if not specified)

        Returns:
            Random short code
        """
        length = length or self.default_length
        return ''.join(secrets.choice(self.BASE62_CHARS) for _ in range(length))

    @staticmethod
    def is_valid_format(code: str) -> bool:
        """Check if code has valid format (non-empty, alphanumeric).

        Args:
            code: Code to validate

        Returns:
            True if valid format
        """
        return bool(code) and all(c in ShortCodeGenerator.BASE62_CHARS for c in code)
