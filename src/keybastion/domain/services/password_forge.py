"""Password generation and strength evaluation.

Generation draws every character from ``secrets.SystemRandom`` and guarantees
at least one character from each requested class. Strength is a fixed
0-100 score from length and character variety.
"""

import secrets
from dataclasses import dataclass

LOWERCASE_CHARS = "abcdefghijklmnopqrstuvwxyz"
UPPERCASE_CHARS = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
NUMERIC_CHARS = "0123456789"
SPECIAL_CHARS = "!@#$%^&*()_-+=<>?/[]{}|"

MIN_LENGTH = 4
MAX_LENGTH = 128
DEFAULT_LENGTH = 12


class InvalidParametersError(ValueError):
    """Raised when a generation request cannot be satisfied."""

    pass


@dataclass(frozen=True)
class GenerationOptions:
    """Options a password was (or should be) generated with.

    Attributes:
        length: Number of characters.
        include_lowercase: Include ``a-z``.
        include_uppercase: Include ``A-Z``.
        include_numbers: Include ``0-9``.
        include_special: Include symbols.
    """

    length: int = DEFAULT_LENGTH
    include_lowercase: bool = True
    include_uppercase: bool = True
    include_numbers: bool = True
    include_special: bool = True

    def enabled_classes(self) -> list[str]:
        """Return the character sets selected by the flags, in fixed order."""
        flagged = [
            (self.include_lowercase, LOWERCASE_CHARS),
            (self.include_uppercase, UPPERCASE_CHARS),
            (self.include_numbers, NUMERIC_CHARS),
            (self.include_special, SPECIAL_CHARS),
        ]
        return [chars for enabled, chars in flagged if enabled]


class PasswordForge:
    """Generates random passwords and scores password strength.

    Stateless apart from its random source; one instance can be shared by
    any number of concurrent callers.
    """

    def __init__(self, rng: secrets.SystemRandom | None = None) -> None:
        self._rng = rng or secrets.SystemRandom()

    def generate(
        self,
        length: int,
        use_lower: bool = True,
        use_upper: bool = True,
        use_digits: bool = True,
        use_symbols: bool = True,
    ) -> str:
        """Generate a random password.

        One character is drawn from every enabled class, the remaining
        positions are drawn uniformly from the union of the enabled classes,
        and the result is shuffled so the mandatory characters do not sit at
        predictable positions.

        Args:
            length: Desired password length (4 to 128).
            use_lower: Include lowercase letters.
            use_upper: Include uppercase letters.
            use_digits: Include digits.
            use_symbols: Include special characters.

        Returns:
            The generated password, exactly ``length`` characters long.

        Raises:
            InvalidParametersError: If the length is outside 4 to 128, no class is
                enabled, or the length cannot hold one character per class.
        """
        return self.generate_with(
            GenerationOptions(
                length=length,
                include_lowercase=use_lower,
                include_uppercase=use_upper,
                include_numbers=use_digits,
                include_special=use_symbols,
            )
        )

    def generate_with(self, options: GenerationOptions) -> str:
        """Generate a password from a :class:`GenerationOptions` value."""
        if isinstance(options.length, bool) or not isinstance(options.length, int):
            raise InvalidParametersError("Password length must be an integer")
        if options.length < MIN_LENGTH:
            raise InvalidParametersError(
                f"Password length must be at least {MIN_LENGTH} characters"
            )
        if options.length > MAX_LENGTH:
            raise InvalidParametersError(
                f"Password length must be at most {MAX_LENGTH} characters"
            )

        classes = options.enabled_classes()
        if not classes:
            raise InvalidParametersError("At least one character type must be included")
        if len(classes) > options.length:
            raise InvalidParametersError(
                f"Password length must be at least {len(classes)} "
                "to include all required character types"
            )

        pool = "".join(classes)
        chars = [self._rng.choice(charset) for charset in classes]
        chars.extend(self._rng.choice(pool) for _ in range(options.length - len(classes)))
        self._rng.shuffle(chars)
        return "".join(chars)

    def generate_strong(self) -> str:
        """Generate a 12 character password using every character class."""
        return self.generate_with(GenerationOptions())

    @staticmethod
    def evaluate_strength(password: str | None) -> int:
        """Score a password from 0 to 100.

        ``min(40, 4 * len) + 15 * classes`` where classes counts lowercase,
        uppercase, digit and other characters present at least once.

        Args:
            password: Password to score. ``None`` or empty scores 0.

        Returns:
            The strength score.
        """
        if not password:
            return 0

        has_lower = has_upper = has_digit = has_other = False
        for ch in password:
            if ch.islower():
                has_lower = True
            elif ch.isupper():
                has_upper = True
            elif ch.isdigit():
                has_digit = True
            else:
                has_other = True

        classes_present = sum((has_lower, has_upper, has_digit, has_other))
        return min(100, min(40, len(password) * 4) + classes_present * 15)


default_password_forge = PasswordForge()
