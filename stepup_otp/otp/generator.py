"""
OTP Generator
=============
Cryptographically random one-time password codes.
"""

import secrets

from .models import CharacterClass


def generate_code(length: int = 6, characters: CharacterClass = CharacterClass.NUMERIC) -> str:
    """
    Generate a random one-time password.

    Every character is drawn independently and uniformly from the
    alphabet of the given character class.

    Args:
        length: Number of characters, at least 1
        characters: Character class to draw from

    Returns:
        The generated code

    Raises:
        ValueError: If length is less than 1
    """
    if length < 1:
        raise ValueError("Length must be at least 1.")

    alphabet = CharacterClass(characters).alphabet
    return "".join(secrets.choice(alphabet) for _ in range(length))
