"""
OTP Configuration
=================
Settings, attribute parsing, and per-principal policy resolution.
"""

from .models import DeliveryChannel, MailEncryption, MissingAction, OTPPolicy
from .attributes import (
    EMAIL_ADDRESS_ATTRIBUTE,
    GROUP_ATTRIBUTES,
    OTP_ALTERNATE_EMAIL_ATTRIBUTE,
    OTP_CHARACTERS_ATTRIBUTE,
    OTP_DISABLED_ATTRIBUTE,
    OTP_LENGTH_ATTRIBUTE,
    OTP_METHOD_ATTRIBUTE,
    OTP_PHONE_ATTRIBUTE,
    OTP_TIMEOUT_ATTRIBUTE,
    USER_ATTRIBUTES,
)
from .parsing import (
    parse_bool,
    parse_channel,
    parse_character_class,
    parse_encryption,
    parse_missing_action,
    parse_positive_int,
)
from .settings import OTPSettings
from .resolver import ConfigurationResolver

__all__ = [
    # Models
    "DeliveryChannel",
    "MailEncryption",
    "MissingAction",
    "OTPPolicy",
    # Attributes
    "EMAIL_ADDRESS_ATTRIBUTE",
    "GROUP_ATTRIBUTES",
    "OTP_ALTERNATE_EMAIL_ATTRIBUTE",
    "OTP_CHARACTERS_ATTRIBUTE",
    "OTP_DISABLED_ATTRIBUTE",
    "OTP_LENGTH_ATTRIBUTE",
    "OTP_METHOD_ATTRIBUTE",
    "OTP_PHONE_ATTRIBUTE",
    "OTP_TIMEOUT_ATTRIBUTE",
    "USER_ATTRIBUTES",
    # Parsing
    "parse_bool",
    "parse_channel",
    "parse_character_class",
    "parse_encryption",
    "parse_missing_action",
    "parse_positive_int",
    # Settings
    "OTPSettings",
    # Resolver
    "ConfigurationResolver",
]
