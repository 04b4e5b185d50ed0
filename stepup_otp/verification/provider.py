"""
OTP Authentication Provider
===========================
Composition root for the OTP step: owns the session store and wires the
resolver, dispatcher and verification service around it.

Usage:
    provider = OTPAuthenticationProvider(directory=groups)

    outcome = provider.verify_user(principal, request)
    if isinstance(outcome, NeedsInput):
        ...  # prompt for outcome.fields
    elif isinstance(outcome, Verified):
        ...  # issue the session, then:
        provider.on_authentication_success(principal)

    provider.shutdown()
"""

from datetime import datetime
from typing import Callable, Optional

import structlog

from stepup_otp.config import ConfigurationResolver, OTPSettings
from stepup_otp.delivery import DeliveryDispatcher
from stepup_otp.principal import GroupDirectory, InboundRequest, InMemoryGroupDirectory, Principal
from stepup_otp.session import OTPSessionStore

from .models import VerificationOutcome
from .service import OTPVerificationService

logger = structlog.get_logger(__name__)


class OTPAuthenticationProvider:
    """Owns every OTP component for the lifetime of the host process."""

    identifier = "otp"

    def __init__(
        self,
        settings: Optional[OTPSettings] = None,
        directory: Optional[GroupDirectory] = None,
        dispatcher: Optional[DeliveryDispatcher] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.settings = settings or OTPSettings.from_env()
        self.directory = directory or InMemoryGroupDirectory()
        self.dispatcher = dispatcher or DeliveryDispatcher.from_settings(self.settings)
        self.resolver = ConfigurationResolver(self.settings)
        self.store = OTPSessionStore(
            sweep_interval=self.settings.sweep_interval,
            clock=clock,
        )
        self.service = OTPVerificationService(
            settings=self.settings,
            resolver=self.resolver,
            store=self.store,
            dispatcher=self.dispatcher,
            directory=self.directory,
        )
        logger.info(
            "otp_provider_started",
            default_method=self.settings.default_method.value,
            sweep_interval=self.settings.sweep_interval,
        )

    def verify_user(self, principal: Principal, request: InboundRequest) -> VerificationOutcome:
        return self.service.verify_user(principal, request)

    def on_authentication_success(self, principal: Principal) -> None:
        """
        Drop any leftover code once the host has issued the session.

        The code was normally consumed during verification already; this
        covers a code issued by a concurrent attempt for the same user.
        """
        if principal.is_anonymous:
            return
        self.store.invalidate(principal.identifier)

    def shutdown(self) -> None:
        self.store.shutdown()
        logger.info("otp_provider_shutdown")

    def __enter__(self) -> "OTPAuthenticationProvider":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown()
