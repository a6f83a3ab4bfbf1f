"""Typed failures raised by modular-integer operations."""

from __future__ import annotations


class ModIntError(Exception):
    """Base class for modring errors."""


class ParseError(ModIntError, ValueError):
    """Text is not a signed decimal integer."""

    def __init__(self, text: str) -> None:
        self.text = text
        super().__init__(f"invalid decimal integer: {text!r}")


class InverseError(ModIntError, ZeroDivisionError):
    """The value shares a factor with the modulus, so no inverse exists."""

    def __init__(self, value: int, modulus: int, gcd: int) -> None:
        self.value = value
        self.modulus = modulus
        self.gcd = gcd
        super().__init__(
            f"{value} has no inverse mod {modulus} (gcd={gcd})"
        )
