"""
Verification Models
===================
States and tagged outcomes of the OTP challenge.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple, Union

from stepup_otp.config import DeliveryChannel
from stepup_otp.errors import OTPError

OTP_FIELD_NAME = "otp-code"


class VerificationState(str, Enum):
    """Challenge/response states."""
    NOT_CHALLENGED = "not_challenged"
    CHALLENGE_ISSUED = "challenge_issued"
    VERIFIED = "verified"
    REJECTED = "rejected"
    EXPIRED = "expired"


class BypassReason(str, Enum):
    """Why a principal was let through without a code."""
    DISABLED = "disabled"
    ANONYMOUS = "anonymous"
    MISSING_ATTRIBUTES = "missing_attributes"


class RejectionReason(str, Enum):
    """Why a verification attempt was refused."""
    VERIFICATION_FAILED = "verification_failed"
    CHALLENGE_EXPIRED = "challenge_expired"
    MISSING_ATTRIBUTES = "missing_attributes"
    DELIVERY_FAILED = "delivery_failed"
    CONFIGURATION_ERROR = "configuration_error"
    SERVICE_UNAVAILABLE = "service_unavailable"


RETRYABLE_REASONS = (
    RejectionReason.VERIFICATION_FAILED,
    RejectionReason.CHALLENGE_EXPIRED,
)


@dataclass(frozen=True)
class CredentialField:
    """An additional input the caller must collect from the user."""
    name: str
    secret: bool = True


@dataclass(frozen=True)
class Verified:
    """The principal passed the OTP step, or was allowed to bypass it."""
    bypass: Optional[BypassReason] = None

    @property
    def state(self) -> VerificationState:
        return VerificationState.VERIFIED


@dataclass(frozen=True)
class NeedsInput:
    """A code was sent; the caller must prompt for the listed fields."""
    fields: Tuple[CredentialField, ...]
    message: str
    channel: DeliveryChannel
    expires_at: datetime

    @property
    def state(self) -> VerificationState:
        return VerificationState.CHALLENGE_ISSUED


@dataclass(frozen=True)
class Rejected:
    """The attempt was refused. ``error`` holds the typed cause."""
    reason: RejectionReason
    message: str
    error: OTPError

    @property
    def state(self) -> VerificationState:
        if self.reason is RejectionReason.CHALLENGE_EXPIRED:
            return VerificationState.EXPIRED
        return VerificationState.REJECTED

    @property
    def retryable(self) -> bool:
        return self.reason in RETRYABLE_REASONS

    def raise_error(self) -> None:
        raise self.error


VerificationOutcome = Union[Verified, NeedsInput, Rejected]
