"""Short code generation utilities."""

import random
import string
from typing import Iterable, Optional

# Path segments served by the HTTP layer itself; a generated code must never shadow them.
RESERVED_WORDS = frozenset({
    "api", "health", "admin", "static", "assets", "favicon",
    "robots", "sitemap", "create", "delete", "list", "stats",
    "login", "logout", "register", "css", "js",
})


class ShortCodeGenerator:
    """Generate short codes for URLs."""

    # URL-safe characters (alphanumeric, case-sensitive, plus '-' and '_')
    ALPHABET = string.ascii_letters + string.digits + "-_"

    def __init__(
        self,
        default_length: int = 7,
        reserved_words: Optional[Iterable[str]] = None,
    ):
        """Initialize short code generator.

        Args:
            default_length: Length of generated codes
            reserved_words: Codes that must never be returned (compared case-insensitively)
        """
        if default_length < 1:
            raise ValueError("default_length must be positive")
        self.default_length = default_length
        words = RESERVED_WORDS if reserved_words is None else reserved_words
        self.reserved_words = frozenset(w.lower() for w in words)
        self._random = random.SystemRandom()

    def generate(self, length: Optional[int] = None) -> str:
        """Generate a random short code.

        The result is probably unique, never guaranteed unique: the link store
        enforces uniqueness when the code is inserted.

        Args:
            length: Length of the code (uses default if not specified)

        Returns:
            Random short code that is not a reserved word
        """
        length = length or self.default_length
        while True:
            code = ''.join(self._random.choices(self.ALPHABET, k=length))
            if not self.is_reserved(code):
                return code

    def is_reserved(self, code: str) -> bool:
        return code.lower() in self.reserved_words

    @staticmethod
    def is_valid_format(code: str) -> bool:
        """Check if code only uses the URL-safe alphabet.

        Args:
            code: Code to validate

        Returns:
            True if valid format
        """
        return bool(code) and all(c in ShortCodeGenerator.ALPHABET for c in code)
