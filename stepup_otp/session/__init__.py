"""
OTP Sessions
============
Replay-resistant store of outstanding codes with a background sweep.
"""

from .models import CheckResult
from .sweeper import PeriodicTask
from .store import DEFAULT_SWEEP_INTERVAL, OTPSessionStore

__all__ = [
    # Models
    "CheckResult",
    # Sweeper
    "PeriodicTask",
    # Store
    "DEFAULT_SWEEP_INTERVAL",
    "OTPSessionStore",
]
