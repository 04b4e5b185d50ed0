"""
OTP Errors
==========
Exception taxonomy for the step-up OTP challenge.

Every error carries a stable ``code`` for callers and a user-facing
``user_message``. Technical detail stays in the exception text and the logs.
"""

from typing import Optional


class OTPError(Exception):
    """Base exception for all OTP challenge errors."""

    code = "OTP_ERROR"
    user_message = "One-time password verification is unavailable."

    def __init__(self, message: str, user_message: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if user_message is not None:
            self.user_message = user_message


class ConfigurationError(OTPError):
    """Raised when a policy attribute or setting is malformed."""

    code = "CONFIG_ERROR"
    user_message = "One-time password settings are invalid. Contact your administrator."

    def __init__(
        self,
        attribute: str,
        value: Optional[str] = None,
        source: Optional[str] = None,
        reason: Optional[str] = None,
    ):
        self.attribute = attribute
        self.value = value
        self.source = source
        detail = reason or "malformed value"
        where = f" (from {source})" if source else ""
        super().__init__(f"Invalid value {value!r} for '{attribute}'{where}: {detail}")


class MissingAttributesError(OTPError):
    """Raised when the data needed to deliver a code is absent."""

    code = "MISSING_ATTRIBUTES"
    user_message = "User is missing required attributes for one-time password."

    def __init__(self, identifier: str, channel: str):
        self.identifier = identifier
        self.channel = channel
        super().__init__(
            f"User '{identifier}' has no {channel} destination for one-time password delivery"
        )


class DeliveryError(OTPError):
    """Raised when a code cannot be delivered."""

    code = "DELIVERY_FAILED"
    user_message = "Error sending one-time password."

    def __init__(self, message: str, channel: Optional[str] = None):
        self.channel = channel
        super().__init__(message)


class InvalidRecipientError(DeliveryError):
    """Raised when a destination address is not usable."""

    code = "INVALID_RECIPIENT"
    user_message = "Invalid recipient address."


class ChannelNotSupportedError(DeliveryError):
    """Raised for a delivery channel with no working transport."""

    code = "CHANNEL_NOT_SUPPORTED"
    user_message = "The configured one-time password delivery method is not supported."


class VerificationFailed(OTPError):
    """Raised when a submitted code does not match the outstanding challenge."""

    code = "VERIFICATION_FAILED"
    user_message = "Invalid one-time password provided."


class ChallengeExpired(VerificationFailed):
    """Raised when the outstanding code has passed its expiry."""

    code = "CHALLENGE_EXPIRED"
    user_message = "The one-time password has expired. Sign in again to receive a new one."


class ServiceUnavailable(OTPError):
    """Raised when a code is requested after the session store has shut down."""

    code = "SERVICE_UNAVAILABLE"
    user_message = "One-time password verification is temporarily unavailable."
