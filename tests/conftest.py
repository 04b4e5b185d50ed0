"""
Shared fixtures for the stepup-otp test suite.
"""

import threading
from datetime import datetime, timedelta, timezone
from typing import List, Sequence, Tuple

import pytest

from stepup_otp.config import DeliveryChannel, OTPSettings
from stepup_otp.delivery import DeliveryDispatcher, DeliveryProvider, DeliveryResult
from stepup_otp.errors import DeliveryError
from stepup_otp.otp import OTPRecord

T0 = datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    """Manually advanced UTC clock."""

    def __init__(self, now: datetime = T0):
        self.now = now
        self._lock = threading.Lock()

    def __call__(self) -> datetime:
        with self._lock:
            return self.now

    def advance(self, seconds: float) -> None:
        with self._lock:
            self.now = self.now + timedelta(seconds=seconds)


class RecordingProvider(DeliveryProvider):
    """Delivery provider that keeps every sent code instead of sending it."""

    def __init__(self, channel: DeliveryChannel = DeliveryChannel.EMAIL, fail: bool = False):
        self.channel = channel
        self.fail = fail
        self.sent: List[Tuple[Tuple[str, ...], OTPRecord]] = []

    def send(self, recipients: Sequence[str], record: OTPRecord) -> DeliveryResult:
        if self.fail:
            raise DeliveryError("connection refused", channel=self.channel.value)
        self.sent.append((tuple(recipients), record))
        return DeliveryResult(channel=self.channel, recipients=tuple(recipients))

    @property
    def last_code(self) -> str:
        return self.sent[-1][1].code


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def mailer():
    return RecordingProvider(DeliveryChannel.EMAIL)


@pytest.fixture
def dispatcher(mailer):
    return DeliveryDispatcher([mailer])


@pytest.fixture
def settings():
    return OTPSettings()


class StoreAccessProvider(RecordingProvider):
    """
    Reads and writes the session store from a second thread while sending.

    ``unblocked`` records whether that thread finished, which it can only do
    if the store lock is free during delivery.
    """

    def __init__(self, channel: DeliveryChannel = DeliveryChannel.EMAIL):
        super().__init__(channel)
        self.store = None
        self.unblocked: List[bool] = []

    def send(self, recipients: Sequence[str], record: OTPRecord) -> DeliveryResult:
        worker = threading.Thread(target=self._touch_store, daemon=True)
        worker.start()
        worker.join(timeout=1)
        self.unblocked.append(not worker.is_alive())
        return super().send(recipients, record)

    def _touch_store(self) -> None:
        self.store.get("alice")
        self.store.invalidate("nobody")
