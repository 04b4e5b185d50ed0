"""
OTP Delivery
============
Delivery providers and the channel dispatcher.
"""

from .base import DeliveryProvider, DeliveryResult
from .mail import MESSAGE_SUBJECT, MESSAGE_TEMPLATE, SMTPEmailProvider, validate_email
from .sms import SMSProvider
from .dispatcher import RECIPIENT_ATTRIBUTES, DeliveryDispatcher

__all__ = [
    # Base
    "DeliveryProvider",
    "DeliveryResult",
    # Email
    "MESSAGE_SUBJECT",
    "MESSAGE_TEMPLATE",
    "SMTPEmailProvider",
    "validate_email",
    # SMS
    "SMSProvider",
    # Dispatcher
    "RECIPIENT_ATTRIBUTES",
    "DeliveryDispatcher",
]
