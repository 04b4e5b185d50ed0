"""
OTP Settings
============
System-wide defaults and delivery transport settings.

Values come from the constructor or from the environment:

    OTP_DEFAULT_METHOD      email | sms               (email)
    OTP_DEFAULT_TIMEOUT     seconds a code is valid   (300)
    OTP_LENGTH              code length               (6)
    OTP_CHARACTER_CLASSES   numeric | alpha | alphanumeric | all (numeric)
    OTP_DISABLED            true | false              (false)
    OTP_MISSING_ACTION      block | allow             (block)
    OTP_MAIL_SENDER         From address              (otp@localhost.localdomain)
    OTP_MAIL_SERVER         SMTP host                 (localhost)
    OTP_MAIL_PORT           SMTP port                 (25)
    OTP_MAIL_AUTH           true | false              (false)
    OTP_MAIL_USERNAME       SMTP username, required with auth
    OTP_MAIL_PASSWORD       SMTP password, required with auth
    OTP_MAIL_ENCRYPT        none | ssl | starttls     (none)
    OTP_MAIL_TIMEOUT        SMTP socket timeout       (10.0)
    OTP_SMS_SERVER          SMS gateway, required when the default method is sms
    OTP_SMS_SENDER          SMS sender id
    OTP_SWEEP_INTERVAL      seconds between expiry sweeps (60)
"""

import os
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional

from stepup_otp.errors import ConfigurationError
from stepup_otp.otp import CharacterClass

from .models import DeliveryChannel, MailEncryption, MissingAction
from .parsing import (
    is_blank,
    parse_bool,
    parse_channel,
    parse_character_class,
    parse_encryption,
    parse_missing_action,
    parse_positive_float,
    parse_positive_int,
)

ENV_SOURCE = "environment"

_ENV_FIELDS: Dict[str, Any] = {
    "OTP_DEFAULT_METHOD": ("default_method", parse_channel),
    "OTP_DEFAULT_TIMEOUT": ("default_timeout", parse_positive_int),
    "OTP_LENGTH": ("length", parse_positive_int),
    "OTP_CHARACTER_CLASSES": ("character_classes", parse_character_class),
    "OTP_DISABLED": ("disabled", parse_bool),
    "OTP_MISSING_ACTION": ("missing_action", parse_missing_action),
    "OTP_MAIL_SENDER": ("mail_sender", None),
    "OTP_MAIL_SERVER": ("mail_server", None),
    "OTP_MAIL_PORT": ("mail_port", parse_positive_int),
    "OTP_MAIL_AUTH": ("mail_auth", parse_bool),
    "OTP_MAIL_USERNAME": ("mail_username", None),
    "OTP_MAIL_PASSWORD": ("mail_password", None),
    "OTP_MAIL_ENCRYPT": ("mail_encryption", parse_encryption),
    "OTP_MAIL_TIMEOUT": ("mail_timeout", parse_positive_float),
    "OTP_SMS_SERVER": ("sms_server", None),
    "OTP_SMS_SENDER": ("sms_sender", None),
    "OTP_SWEEP_INTERVAL": ("sweep_interval", parse_positive_float),
}


@dataclass
class OTPSettings:
    """System-wide OTP configuration."""
    default_method: DeliveryChannel = DeliveryChannel.EMAIL
    default_timeout: int = 300  # 5 minutes
    length: int = 6
    character_classes: CharacterClass = CharacterClass.NUMERIC
    disabled: bool = False
    missing_action: MissingAction = MissingAction.BLOCK

    mail_sender: str = "otp@localhost.localdomain"
    mail_server: str = "localhost"
    mail_port: int = 25
    mail_auth: bool = False
    mail_username: Optional[str] = None
    mail_password: Optional[str] = None
    mail_encryption: MailEncryption = MailEncryption.NONE
    mail_timeout: float = 10.0

    sms_server: Optional[str] = None
    sms_sender: Optional[str] = None

    sweep_interval: float = 60.0

    def __post_init__(self):
        self._coerce("default_method", parse_channel)
        self._coerce("character_classes", parse_character_class)
        self._coerce("missing_action", parse_missing_action)
        self._coerce("mail_encryption", parse_encryption)
        self.validate()

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "OTPSettings":
        """
        Build settings from environment variables.

        Unset or blank variables keep their defaults.

        Raises:
            ConfigurationError: If any variable is malformed
        """
        env = os.environ if environ is None else environ
        values: Dict[str, Any] = {}

        for name, (attribute, parser) in _ENV_FIELDS.items():
            raw = env.get(name)
            if is_blank(raw):
                continue
            values[attribute] = parser(raw, name, ENV_SOURCE) if parser else raw.strip()

        return cls(**values)

    def validate(self) -> None:
        """Check ranges and cross-field requirements."""
        for attribute in ("default_timeout", "length", "mail_port"):
            value = getattr(self, attribute)
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise ConfigurationError(attribute, str(value), reason="must be a positive integer")

        for attribute in ("mail_timeout", "sweep_interval"):
            value = getattr(self, attribute)
            if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
                raise ConfigurationError(attribute, str(value), reason="must be positive")

        if self.mail_auth and (is_blank(self.mail_username) or self.mail_password is None):
            raise ConfigurationError(
                "mail_auth",
                "true",
                reason="SMTP authentication requires a username and password",
            )

        if self.default_method is DeliveryChannel.SMS and is_blank(self.sms_server):
            raise ConfigurationError(
                "sms_server",
                self.sms_server,
                reason="required when the default method is sms",
            )

    def _coerce(self, attribute: str, parser: Callable[[str, str], Any]) -> None:
        value = getattr(self, attribute)
        if not isinstance(value, Enum):
            setattr(self, attribute, parser(str(value), attribute))
