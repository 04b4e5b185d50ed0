"""
Delivery Dispatcher
===================
Routes a generated code to the provider for the resolved channel.
"""

from typing import Dict, Iterable, List, Optional

import structlog

from stepup_otp.config import (
    EMAIL_ADDRESS_ATTRIBUTE,
    OTP_ALTERNATE_EMAIL_ATTRIBUTE,
    OTP_PHONE_ATTRIBUTE,
    DeliveryChannel,
    OTPSettings,
)
from stepup_otp.errors import ChannelNotSupportedError
from stepup_otp.otp import OTPRecord
from stepup_otp.principal import Principal

from .base import DeliveryProvider, DeliveryResult
from .mail import SMTPEmailProvider
from .sms import SMSProvider

logger = structlog.get_logger(__name__)

RECIPIENT_ATTRIBUTES = {
    DeliveryChannel.EMAIL: (EMAIL_ADDRESS_ATTRIBUTE, OTP_ALTERNATE_EMAIL_ATTRIBUTE),
    DeliveryChannel.SMS: (OTP_PHONE_ATTRIBUTE,),
}


class DeliveryDispatcher:
    """Sends codes over whichever channel the policy selected."""

    def __init__(self, providers: Optional[Iterable[DeliveryProvider]] = None):
        self._providers: Dict[DeliveryChannel, DeliveryProvider] = {}
        for provider in providers or ():
            self.register(provider)

    @classmethod
    def from_settings(cls, settings: OTPSettings) -> "DeliveryDispatcher":
        return cls([
            SMTPEmailProvider.from_settings(settings),
            SMSProvider.from_settings(settings),
        ])

    def register(self, provider: DeliveryProvider) -> None:
        self._providers[DeliveryChannel(provider.channel)] = provider

    def provider_for(self, channel: DeliveryChannel) -> DeliveryProvider:
        provider = self._providers.get(DeliveryChannel(channel))
        if provider is None:
            raise ChannelNotSupportedError(
                f"No delivery provider registered for {channel.value}",
                channel=channel.value,
            )
        return provider

    def recipients_for(self, channel: DeliveryChannel, principal: Principal) -> List[str]:
        """
        Destinations for the principal on the given channel.

        For email this is the primary address followed by the alternate
        one, skipping blanks and duplicates.
        """
        attributes = principal.attributes or {}
        recipients: List[str] = []
        for attribute in RECIPIENT_ATTRIBUTES.get(DeliveryChannel(channel), ()):
            value = (attributes.get(attribute) or "").strip()
            if value and value not in recipients:
                recipients.append(value)
        return recipients

    def has_recipients(self, channel: DeliveryChannel, principal: Principal) -> bool:
        return bool(self.recipients_for(channel, principal))

    def dispatch(
        self,
        channel: DeliveryChannel,
        principal: Principal,
        record: OTPRecord,
    ) -> DeliveryResult:
        """
        Deliver a code to the principal.

        Raises:
            DeliveryError: If the channel has no provider or the send fails
        """
        provider = self.provider_for(channel)
        recipients = self.recipients_for(channel, principal)

        logger.debug(
            "otp_dispatching",
            identifier=principal.identifier,
            channel=channel.value,
            recipients=len(recipients),
        )
        return provider.send(recipients, record)
