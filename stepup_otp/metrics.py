"""
OTP Metrics
===========
Prometheus metrics for the OTP challenge flow.

All metrics live on a dedicated registry so the host application decides
whether and where to expose them.
"""

from prometheus_client import (
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)

OTP_REGISTRY = CollectorRegistry()

OTP_CHALLENGES_TOTAL = Counter(
    name="otp_challenges_total",
    documentation="One-time password challenges issued",
    labelnames=["channel"],
    registry=OTP_REGISTRY,
)

OTP_VERIFICATIONS_TOTAL = Counter(
    name="otp_verifications_total",
    documentation="Verification outcomes by result",
    labelnames=["outcome"],
    registry=OTP_REGISTRY,
)

OTP_DELIVERY_FAILURES_TOTAL = Counter(
    name="otp_delivery_failures_total",
    documentation="One-time password delivery failures",
    labelnames=["channel"],
    registry=OTP_REGISTRY,
)

OTP_ACTIVE_SESSIONS = Gauge(
    name="otp_active_sessions",
    documentation="Outstanding one-time passwords held in the session store",
    registry=OTP_REGISTRY,
)

OTP_SWEEP_DURATION = Histogram(
    name="otp_sweep_duration_seconds",
    documentation="Time spent evicting expired one-time passwords",
    buckets=[0.0001, 0.0005, 0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0],
    registry=OTP_REGISTRY,
)


def record_challenge(channel: str) -> None:
    OTP_CHALLENGES_TOTAL.labels(channel=channel).inc()


def record_outcome(outcome: str) -> None:
    OTP_VERIFICATIONS_TOTAL.labels(outcome=outcome).inc()


def record_delivery_failure(channel: str) -> None:
    OTP_DELIVERY_FAILURES_TOTAL.labels(channel=channel).inc()


def get_metrics_text() -> bytes:
    """Render the OTP registry in the Prometheus text format."""
    return generate_latest(OTP_REGISTRY)
