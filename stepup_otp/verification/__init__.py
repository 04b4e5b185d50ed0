"""
OTP Verification
================
Challenge/response state machine and the provider that owns it.
"""

from .models import (
    OTP_FIELD_NAME,
    BypassReason,
    CredentialField,
    NeedsInput,
    Rejected,
    RejectionReason,
    Verified,
    VerificationOutcome,
    VerificationState,
)
from .service import OTPVerificationService
from .provider import OTPAuthenticationProvider

__all__ = [
    # Models
    "OTP_FIELD_NAME",
    "BypassReason",
    "CredentialField",
    "NeedsInput",
    "Rejected",
    "RejectionReason",
    "Verified",
    "VerificationOutcome",
    "VerificationState",
    # Service
    "OTPVerificationService",
    # Provider
    "OTPAuthenticationProvider",
]
