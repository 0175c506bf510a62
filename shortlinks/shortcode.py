"""Short code generation utilities."""

import random
import string
from typing import Optional


class ShortCodeGenerator:
    """Generate candidate short codes for links.

    Codes are drawn uniformly from the base62 alphabet. The generator does
    not know which codes are taken; callers enforce uniqueness by retrying
    against the link store.
    """

    # Base62 characters (alphanumeric, case-sensitive)
    BASE62_CHARS = string.ascii_letters + string.digits  # a-zA-Z0-9

    def __init__(self, default_length: int = 6, rng: Optional[random.Random] = None):
        """Initialize short code generator.

        Args:
            default_length: Default length for generated codes
            rng: Optional random source (a SystemRandom is used if omitted)
        """
        if default_length < 1:
            raise ValueError("default_length must be positive")
        self.default_length = default_length
        self._rng = rng or random.SystemRandom()

    def generate(self, length: Optional[int] = None) -> str:
        """Generate a random short code.

        Args:
            length: Length of the code (uses default if not specified)

        Returns:
            Random short code
        """
        length = length or self.default_length
        return ''.join(self._rng.choices(self.BASE62_CHARS, k=length))

    def __call__(self) -> str:
        return self.generate()

    @staticmethod
    def is_valid_format(code: str) -> bool:
        """Check if code is non-empty and made only of base62 characters."""
        return bool(code) and all(c in ShortCodeGenerator.BASE62_CHARS for c in code)
