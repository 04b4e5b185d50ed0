"""
Step-up OTP
===========
One-time password challenge run after a gateway's primary credential check.
"""

__version__ = "0.1.0"

# Errors
from stepup_otp.errors import (
    OTPError,
    ConfigurationError,
    MissingAttributesError,
    DeliveryError,
    InvalidRecipientError,
    ChannelNotSupportedError,
    ServiceUnavailable,
    VerificationFailed,
    ChallengeExpired,
)

# Principals
from stepup_otp.principal import (
    Principal,
    ParameterRequest,
    ResolvedGroup,
    GroupDirectory,
    InMemoryGroupDirectory,
)

# OTP
from stepup_otp.otp import CharacterClass, OTPRecord, generate_code

# Sessions
from stepup_otp.session import CheckResult, OTPSessionStore, PeriodicTask

# Configuration
from stepup_otp.config import (
    ConfigurationResolver,
    DeliveryChannel,
    MailEncryption,
    MissingAction,
    OTPPolicy,
    OTPSettings,
)

# Delivery
from stepup_otp.delivery import (
    DeliveryDispatcher,
    DeliveryProvider,
    DeliveryResult,
    SMTPEmailProvider,
    SMSProvider,
)

# Verification
from stepup_otp.verification import (
    OTP_FIELD_NAME,
    BypassReason,
    CredentialField,
    NeedsInput,
    OTPAuthenticationProvider,
    OTPVerificationService,
    Rejected,
    RejectionReason,
    Verified,
    VerificationState,
)

# Observability
from stepup_otp.logging_setup import setup_logging
from stepup_otp.metrics import get_metrics_text

__all__ = [
    # Errors
    "OTPError",
    "ConfigurationError",
    "MissingAttributesError",
    "DeliveryError",
    "InvalidRecipientError",
    "ChannelNotSupportedError",
    "ServiceUnavailable",
    "VerificationFailed",
    "ChallengeExpired",
    # Principals
    "Principal",
    "ParameterRequest",
    "ResolvedGroup",
    "GroupDirectory",
    "InMemoryGroupDirectory",
    # OTP
    "CharacterClass",
    "OTPRecord",
    "generate_code",
    # Sessions
    "CheckResult",
    "OTPSessionStore",
    "PeriodicTask",
    # Configuration
    "ConfigurationResolver",
    "DeliveryChannel",
    "MailEncryption",
    "MissingAction",
    "OTPPolicy",
    "OTPSettings",
    # Delivery
    "DeliveryDispatcher",
    "DeliveryProvider",
    "DeliveryResult",
    "SMTPEmailProvider",
    "SMSProvider",
    # Verification
    "OTP_FIELD_NAME",
    "BypassReason",
    "CredentialField",
    "NeedsInput",
    "OTPAuthenticationProvider",
    "OTPVerificationService",
    "Rejected",
    "RejectionReason",
    "Verified",
    "VerificationState",
    # Observability
    "setup_logging",
    "get_metrics_text",
]
