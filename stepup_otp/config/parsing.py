"""
Attribute Parsing
=================
Strict parsers for policy attributes and settings.

Every parser raises ConfigurationError on malformed input instead of
guessing a value.
"""

from enum import Enum
from typing import Optional, Type, TypeVar

from stepup_otp.errors import ConfigurationError
from stepup_otp.otp import CharacterClass

from .models import DeliveryChannel, MailEncryption, MissingAction

E = TypeVar("E", bound=Enum)

_TRUE_VALUES = ("true",)
_FALSE_VALUES = ("false",)


def is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


def parse_enum(
    enum_type: Type[E],
    value: str,
    attribute: str,
    source: Optional[str] = None,
) -> E:
    """Match an enum member by value or name, ignoring case."""
    wanted = value.strip().lower()
    for member in enum_type:
        if wanted in (str(member.value).lower(), member.name.lower()):
            return member

    allowed = ", ".join(str(member.value) for member in enum_type)
    raise ConfigurationError(attribute, value, source, f"expected one of: {allowed}")


def parse_positive_int(value: str, attribute: str, source: Optional[str] = None) -> int:
    try:
        parsed = int(value.strip())
    except (TypeError, ValueError):
        raise ConfigurationError(attribute, value, source, "not an integer") from None

    if parsed < 1:
        raise ConfigurationError(attribute, value, source, "must be at least 1")
    return parsed


def parse_positive_float(value: str, attribute: str, source: Optional[str] = None) -> float:
    try:
        parsed = float(value.strip())
    except (TypeError, ValueError):
        raise ConfigurationError(attribute, value, source, "not a number") from None

    if parsed <= 0:
        raise ConfigurationError(attribute, value, source, "must be positive")
    return parsed


def parse_bool(value: str, attribute: str, source: Optional[str] = None) -> bool:
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ConfigurationError(attribute, value, source, "expected 'true' or 'false'")


def parse_channel(value: str, attribute: str, source: Optional[str] = None) -> DeliveryChannel:
    return parse_enum(DeliveryChannel, value, attribute, source)


def parse_character_class(value: str, attribute: str, source: Optional[str] = None) -> CharacterClass:
    return parse_enum(CharacterClass, value, attribute, source)


def parse_missing_action(value: str, attribute: str, source: Optional[str] = None) -> MissingAction:
    return parse_enum(MissingAction, value, attribute, source)


def parse_encryption(value: str, attribute: str, source: Optional[str] = None) -> MailEncryption:
    return parse_enum(MailEncryption, value, attribute, source)
