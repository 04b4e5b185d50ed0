"""
Attribute Names
===============
Keys read from user and group attribute maps.
"""

# User and group policy attributes
OTP_DISABLED_ATTRIBUTE = "otp-disabled"
OTP_METHOD_ATTRIBUTE = "otp-method"
OTP_TIMEOUT_ATTRIBUTE = "otp-timeout"
OTP_LENGTH_ATTRIBUTE = "otp-length"
OTP_CHARACTERS_ATTRIBUTE = "otp-character-classes"

# User-only delivery attributes
EMAIL_ADDRESS_ATTRIBUTE = "email-address"
OTP_ALTERNATE_EMAIL_ATTRIBUTE = "otp-email"
OTP_PHONE_ATTRIBUTE = "otp-phone"

POLICY_ATTRIBUTES = (
    OTP_DISABLED_ATTRIBUTE,
    OTP_METHOD_ATTRIBUTE,
    OTP_TIMEOUT_ATTRIBUTE,
    OTP_LENGTH_ATTRIBUTE,
    OTP_CHARACTERS_ATTRIBUTE,
)

USER_ATTRIBUTES = POLICY_ATTRIBUTES + (
    OTP_ALTERNATE_EMAIL_ATTRIBUTE,
    OTP_PHONE_ATTRIBUTE,
)

GROUP_ATTRIBUTES = POLICY_ATTRIBUTES
