"""
Session Models
==============
Results of checking a submitted code against the session store.
"""

from enum import Enum


class CheckResult(str, Enum):
    """Outcome of a single atomic check against the store."""
    NO_CHALLENGE = "no_challenge"
    EXPIRED = "expired"
    MISMATCH = "mismatch"
    ACCEPTED = "accepted"
