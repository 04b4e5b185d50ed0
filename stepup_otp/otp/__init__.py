"""
One-Time Passwords
==================
Code generation and the immutable OTP record.
"""

from .models import SYMBOLS, CharacterClass, OTPRecord, utcnow
from .generator import generate_code

__all__ = [
    # Models
    "SYMBOLS",
    "CharacterClass",
    "OTPRecord",
    "utcnow",
    # Generator
    "generate_code",
]
