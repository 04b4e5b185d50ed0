"""
Delivery Provider Base
======================
Base class for one-time password delivery channels.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Sequence, Tuple

from stepup_otp.config import DeliveryChannel
from stepup_otp.otp import OTPRecord


@dataclass(frozen=True)
class DeliveryResult:
    """Result of a delivery."""
    channel: DeliveryChannel
    recipients: Tuple[str, ...]


class DeliveryProvider(ABC):
    """
    Abstract base class for delivery channels.

    Implementations raise DeliveryError on transport failure.
    """

    channel: DeliveryChannel

    @abstractmethod
    def send(self, recipients: Sequence[str], record: OTPRecord) -> DeliveryResult:
        """
        Deliver a code to every recipient.

        Args:
            recipients: Destination addresses for this channel
            record: The record holding the code and its expiry

        Returns:
            DeliveryResult for the completed send
        """
