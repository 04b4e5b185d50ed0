"""
OTP Models
==========
Character classes and the immutable one-time password record.
"""

import hmac
import string
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Optional

SYMBOLS = "!@#$%^&*()[]{}:<>-+="


class CharacterClass(str, Enum):
    """Character classes a one-time password may be drawn from."""
    NUMERIC = "numeric"
    ALPHA = "alpha"
    ALPHANUMERIC = "alphanumeric"
    ALL = "all"

    @property
    def alphabet(self) -> str:
        letters = string.ascii_uppercase + string.ascii_lowercase
        if self is CharacterClass.NUMERIC:
            return string.digits
        if self is CharacterClass.ALPHA:
            return letters
        if self is CharacterClass.ALPHANUMERIC:
            return string.digits + letters
        return string.digits + letters + SYMBOLS


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class OTPRecord:
    """An outstanding one-time password and its absolute expiry."""
    code: str
    expires_at: datetime

    @classmethod
    def create(
        cls,
        code: str,
        timeout_seconds: int,
        now: Optional[datetime] = None,
    ) -> "OTPRecord":
        issued = now or utcnow()
        return cls(code=code, expires_at=issued + timedelta(seconds=timeout_seconds))

    def is_valid(self, now: Optional[datetime] = None) -> bool:
        return (now or utcnow()) < self.expires_at

    def matches(self, candidate: Optional[str], now: Optional[datetime] = None) -> bool:
        """
        Check a submitted code against this record.

        Compares in constant time; an expired record never matches.
        """
        if candidate is None or not self.is_valid(now):
            return False
        return hmac.compare_digest(self.code.encode("utf-8"), candidate.encode("utf-8"))

    @property
    def expiration_string(self) -> str:
        return self.expires_at.strftime("%Y-%m-%d %H:%M:%S %Z")

    def __repr__(self) -> str:
        return f"OTPRecord(code=<redacted>, expires_at={self.expires_at.isoformat()})"
