"""
OTP Session Store
=================
In-process map of principal identifier to its single outstanding code.
"""

import threading
import time
from datetime import datetime
from typing import Callable, Dict, Optional

import structlog

from stepup_otp.errors import ServiceUnavailable
from stepup_otp.metrics import OTP_ACTIVE_SESSIONS, OTP_SWEEP_DURATION
from stepup_otp.otp import CharacterClass, OTPRecord, generate_code, utcnow

from .models import CheckResult
from .sweeper import PeriodicTask

logger = structlog.get_logger(__name__)

DEFAULT_SWEEP_INTERVAL = 60.0


class OTPSessionStore:
    """
    Holds at most one live one-time password per principal.

    Issuing a new code replaces any previous one. A successful check
    consumes the code atomically, so a code is accepted at most once.
    Expired codes are evicted by a background sweep.

    State is local to this process and is not shared across nodes.

    Example:
        store = OTPSessionStore(sweep_interval=60)
        record = store.generate("alice", 6, 300, CharacterClass.NUMERIC)
        ...
        store.check_and_consume("alice", submitted)
        store.shutdown()
    """

    def __init__(
        self,
        sweep_interval: float = DEFAULT_SWEEP_INTERVAL,
        clock: Optional[Callable[[], datetime]] = None,
        autostart: bool = True,
    ):
        self._clock = clock or utcnow
        self._records: Dict[str, OTPRecord] = {}
        self._lock = threading.Lock()
        self._closed = False
        self._sweeper = PeriodicTask("otp-session-sweep", sweep_interval, self.sweep)
        if autostart:
            self.start()

    @property
    def sweep_interval(self) -> float:
        return self._sweeper.interval

    @property
    def is_sweeping(self) -> bool:
        return self._sweeper.is_running

    def start(self) -> None:
        """Start the background sweep."""
        if self._closed:
            raise ServiceUnavailable("Session store has been shut down")
        self._sweeper.start()

    def generate(
        self,
        identifier: str,
        length: int,
        timeout_seconds: int,
        characters: CharacterClass,
    ) -> OTPRecord:
        """
        Issue a new code for a principal, replacing any outstanding one.

        Args:
            identifier: Principal identifier
            length: Code length
            timeout_seconds: Seconds the code stays valid
            characters: Character class for the code

        Returns:
            The stored record, for delivery
        """
        if timeout_seconds < 1:
            raise ValueError("Timeout must be at least 1 second.")

        code = generate_code(length, characters)
        record = OTPRecord.create(code, timeout_seconds, now=self._clock())
        replaced = self._store(identifier, record)

        logger.info(
            "otp_generated",
            identifier=identifier,
            length=length,
            expires_in=timeout_seconds,
            replaced=replaced,
        )
        return record

    def put(self, identifier: str, record: OTPRecord) -> None:
        """Store an externally built record, replacing any outstanding one."""
        self._store(identifier, record)

    def get(self, identifier: str) -> Optional[OTPRecord]:
        with self._lock:
            return self._records.get(identifier)

    def check(self, identifier: str, candidate: Optional[str]) -> CheckResult:
        """
        Check a submitted code, consuming the record if it is accepted.

        A wrong or expired code leaves the record in place, so the user
        may retry against the same code until it expires.
        """
        now = self._clock()
        with self._lock:
            record = self._records.get(identifier)
            if record is None:
                result = CheckResult.NO_CHALLENGE
            elif not record.is_valid(now):
                result = CheckResult.EXPIRED
            elif not record.matches(candidate, now):
                result = CheckResult.MISMATCH
            else:
                del self._records[identifier]
                result = CheckResult.ACCEPTED
            OTP_ACTIVE_SESSIONS.set(len(self._records))

        logger.debug("otp_checked", identifier=identifier, result=result.value)
        return result

    def check_and_consume(self, identifier: str, candidate: Optional[str]) -> bool:
        return self.check(identifier, candidate) is CheckResult.ACCEPTED

    def invalidate(self, identifier: str) -> bool:
        """Remove any record for the principal. Returns True if one existed."""
        with self._lock:
            removed = self._records.pop(identifier, None) is not None
            OTP_ACTIVE_SESSIONS.set(len(self._records))

        if removed:
            logger.debug("otp_invalidated", identifier=identifier)
        return removed

    def discard(self, identifier: str, record: OTPRecord) -> bool:
        """Remove the principal's record only if it is still the given one."""
        with self._lock:
            removed = self._records.get(identifier) is record
            if removed:
                del self._records[identifier]
            OTP_ACTIVE_SESSIONS.set(len(self._records))

        return removed

    def sweep(self) -> int:
        """
        Evict every expired record.

        Returns:
            Number of records removed
        """
        started = time.perf_counter()
        now = self._clock()

        with self._lock:
            expired = [
                identifier for identifier, record in self._records.items()
                if not record.is_valid(now)
            ]
            for identifier in expired:
                del self._records[identifier]
            size = len(self._records)
            OTP_ACTIVE_SESSIONS.set(size)

        duration = time.perf_counter() - started
        OTP_SWEEP_DURATION.observe(duration)

        for identifier in expired:
            logger.debug("otp_expired_removed", identifier=identifier)
        logger.debug(
            "otp_sweep_completed",
            removed=len(expired),
            remaining=size,
            duration_ms=round(duration * 1000, 3),
        )
        return len(expired)

    def shutdown(self) -> None:
        """Stop the sweep and drop every outstanding record."""
        self._sweeper.cancel()
        with self._lock:
            self._closed = True
            self._records.clear()
            OTP_ACTIVE_SESSIONS.set(0)

        logger.info("otp_session_store_shutdown")

    def _store(self, identifier: str, record: OTPRecord) -> bool:
        with self._lock:
            if self._closed:
                raise ServiceUnavailable("Session store has been shut down")
            replaced = identifier in self._records
            self._records[identifier] = record
            OTP_ACTIVE_SESSIONS.set(len(self._records))

        return replaced

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def __contains__(self, identifier: object) -> bool:
        with self._lock:
            return identifier in self._records
