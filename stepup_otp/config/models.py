"""
Configuration Models
====================
Enums and the resolved per-principal OTP policy.
"""

from dataclasses import dataclass
from enum import Enum

from stepup_otp.otp import CharacterClass


class DeliveryChannel(str, Enum):
    """How a one-time password reaches the user."""
    EMAIL = "email"
    SMS = "sms"


class MissingAction(str, Enum):
    """What to do when a user has no destination for the code."""
    BLOCK = "block"
    ALLOW = "allow"


class MailEncryption(str, Enum):
    """Transport security for the SMTP connection."""
    NONE = "none"
    SSL = "ssl"
    STARTTLS = "starttls"


@dataclass(frozen=True)
class OTPPolicy:
    """Effective policy for one authentication attempt. Never persisted."""
    channel: DeliveryChannel
    timeout_seconds: int
    code_length: int
    character_class: CharacterClass
    disabled: bool = False
