"""
SMS Delivery
============
Declared SMS channel. No transport is implemented yet.
"""

from typing import Optional, Sequence

from stepup_otp.config import DeliveryChannel, OTPSettings
from stepup_otp.errors import ChannelNotSupportedError
from stepup_otp.otp import OTPRecord

from .base import DeliveryProvider, DeliveryResult


class SMSProvider(DeliveryProvider):
    """SMS delivery extension point. Every send raises ChannelNotSupportedError."""

    channel = DeliveryChannel.SMS

    def __init__(self, server: Optional[str] = None, sender: Optional[str] = None):
        self.server = server
        self.sender = sender

    @classmethod
    def from_settings(cls, settings: OTPSettings) -> "SMSProvider":
        return cls(server=settings.sms_server, sender=settings.sms_sender)

    def send(self, recipients: Sequence[str], record: OTPRecord) -> DeliveryResult:
        raise ChannelNotSupportedError(
            "SMS delivery of one-time passwords is not supported",
            channel=self.channel.value,
        )
