"""Short code generation utilities."""

import secrets
import string
import uuid
from typing import Optional


class ShortCodeGenerator:
    """Draw short codes from a fixed alphabet.

    The generator knows nothing about which codes are taken; uniqueness is
    the caller's job (see ``URLShortenerService._issue_short_link``).
    """

    # Base62 characters (alphanumeric, case-sensitive)
    BASE62_CHARS = string.ascii_letters + string.digits  # a-zA-Z0-9

    STRATEGIES = ("random", "uuid")

    def __init__(self, default_length: int = 6, strategy: str = "random"):
        """Initialize short code generator.

        Args:
            default_length: Default length for generated codes
            strategy: "random" (secrets-based draw) or "uuid" (base62 of a UUID4)
        """
        if default_length < 1:
            raise ValueError("default_length must be positive")
        if strategy not in self.STRATEGIES:
            raise ValueError(f"Unknown short code strategy: {strategy}")

        self.default_length = default_length
        self.strategy = strategy

    def generate(self, length: Optional[int] = None) -> str:
        """Draw one code using the configured strategy."""
        if self.strategy == "uuid":
            return self.generate_from_uuid(length)
        return self.generate_random(length)

    def generate_random(self, length: Optional[int] = None) -> str:
        """Generate a random short code.

        Args:
            length: Length of the code (uses default if not specified)

        Returns:
            Random short code
        """
        length = length or self.default_length
        return ''.join(secrets.choice(self.BASE62_CHARS) for _ in range(length))

    def generate_from_uuid(self, length: Optional[int] = None) -> str:
        """Generate short code from a random UUID.

        Args:
            length: Length of the code (uses default if not specified)

        Returns:
            Short code based on UUID
        """
        length = length or self.default_length

        code = self._int_to_base62(uuid.uuid4().int)

        # A UUID4 encodes to ~22 base62 chars; pad in the unlikely short case
        return code[:length].rjust(length, self.BASE62_CHARS[0])

    def generate_sequential(self, sequence_number: int, length: Optional[int] = None) -> str:
        """Generate a short code from a sequence number.

        Padding uses the zero digit, so ``_base62_to_int`` recovers the
        number. Codes grow past ``length`` once the sequence outgrows it.

        Args:
            sequence_number: Non-negative sequential ID
            length: Minimum length of the code (uses default if not specified)

        Returns:
            Short code based on the sequence number
        """
        if sequence_number < 0:
            raise ValueError("sequence_number must be non-negative")
        length = length or self.default_length
        return self._int_to_base62(sequence_number).rjust(length, self.BASE62_CHARS[0])

    def capacity(self, length: Optional[int] = None) -> int:
        """Number of distinct codes of the given length."""
        length = length or self.default_length
        return len(self.BASE62_CHARS) ** length

    def _int_to_base62(self, num: int) -> str:
        """Convert integer to base62 string."""
        if num == 0:
            return self.BASE62_CHARS[0]

        result = []
        base = len(self.BASE62_CHARS)

        while num > 0:
            num, remainder = divmod(num, base)
            result.append(self.BASE62_CHARS[remainder])

        return ''.join(reversed(result))

    def _base62_to_int(self, code: str) -> int:
        """Convert base62 string to integer."""
        result = 0
        base = len(self.BASE62_CHARS)

        for char in code:
            result = result * base + self.BASE62_CHARS.index(char)

        return result

    @staticmethod
    def is_valid_format(code: str) -> bool:
        """Check if code has valid format (alphanumeric, '-' or '_')."""
        return bool(code) and all(
            c in ShortCodeGenerator.BASE62_CHARS or c in '-_' for c in code
        )
