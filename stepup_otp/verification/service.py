"""
OTP Verification Service
========================
Challenge/response flow run after the primary credential check.

    NOT_CHALLENGED -> CHALLENGE_ISSUED -> VERIFIED
                                       -> REJECTED -> CHALLENGE_ISSUED
                                       -> EXPIRED  -> CHALLENGE_ISSUED

A request without the challenge-response field issues a code and returns
NeedsInput. A request carrying the field is checked against the
outstanding code. A wrong code never issues a new one; the user retries
against the same code until it expires, then signs in again.
"""

from typing import List

import structlog

from stepup_otp.config import ConfigurationResolver, MissingAction, OTPPolicy, OTPSettings
from stepup_otp.delivery import DeliveryDispatcher
from stepup_otp.errors import (
    ChallengeExpired,
    ConfigurationError,
    DeliveryError,
    MissingAttributesError,
    ServiceUnavailable,
    VerificationFailed,
)
from stepup_otp.metrics import record_challenge, record_delivery_failure, record_outcome
from stepup_otp.principal import GroupDirectory, InboundRequest, Principal, ResolvedGroup
from stepup_otp.session import CheckResult, OTPSessionStore

from .models import (
    OTP_FIELD_NAME,
    BypassReason,
    CredentialField,
    NeedsInput,
    Rejected,
    RejectionReason,
    Verified,
    VerificationOutcome,
)

logger = structlog.get_logger(__name__)

CHALLENGE_MESSAGE = (
    "In order to complete authentication you must enter the "
    "one-time password you received."
)


class OTPVerificationService:
    """Drives the OTP challenge for one authentication attempt at a time."""

    def __init__(
        self,
        settings: OTPSettings,
        resolver: ConfigurationResolver,
        store: OTPSessionStore,
        dispatcher: DeliveryDispatcher,
        directory: GroupDirectory,
    ):
        self.settings = settings
        self.resolver = resolver
        self.store = store
        self.dispatcher = dispatcher
        self.directory = directory

    def verify_user(self, principal: Principal, request: InboundRequest) -> VerificationOutcome:
        """
        Run the OTP step for a principal whose primary credentials passed.

        Args:
            principal: The authenticated principal
            request: Inbound request, read for the challenge-response field

        Returns:
            Verified, NeedsInput, or Rejected. Errors of the OTP taxonomy
            are returned inside Rejected and never raised.
        """
        log = logger.bind(identifier=principal.identifier)

        if principal.is_anonymous:
            return self._finish(log, Verified(bypass=BypassReason.ANONYMOUS))

        try:
            groups = self.directory.resolve_groups(principal)
            if self.resolver.is_disabled(principal, groups):
                return self._finish(log, Verified(bypass=BypassReason.DISABLED))

            response = request.get_parameter(OTP_FIELD_NAME)
            if response is None:
                return self._finish(log, self._challenge(principal, groups))

            return self._finish(log, self._check(principal, response))

        except ConfigurationError as e:
            log.error("otp_configuration_invalid", attribute=e.attribute, source=e.source, error=e.message)
            return self._finish(log, Rejected(
                reason=RejectionReason.CONFIGURATION_ERROR,
                message=e.user_message,
                error=e,
            ))

        except ServiceUnavailable as e:
            log.error("otp_service_unavailable", error=e.message)
            return self._finish(log, Rejected(
                reason=RejectionReason.SERVICE_UNAVAILABLE,
                message=e.user_message,
                error=e,
            ))

    def _challenge(self, principal: Principal, groups: List[ResolvedGroup]) -> VerificationOutcome:
        policy = self.resolver.resolve_policy(principal, groups, disabled=False)

        if not self.dispatcher.has_recipients(policy.channel, principal):
            return self._missing_attributes(principal, policy)

        record = self.store.generate(
            principal.identifier,
            policy.code_length,
            policy.timeout_seconds,
            policy.character_class,
        )

        # Delivery runs after generate() has returned, outside the store lock.
        try:
            self.dispatcher.dispatch(policy.channel, principal, record)
        except DeliveryError as e:
            self.store.discard(principal.identifier, record)
            record_delivery_failure(policy.channel.value)
            logger.error(
                "otp_delivery_failed",
                identifier=principal.identifier,
                channel=policy.channel.value,
                error=e.message,
            )
            return Rejected(
                reason=RejectionReason.DELIVERY_FAILED,
                message=e.user_message,
                error=e,
            )

        record_challenge(policy.channel.value)
        return NeedsInput(
            fields=(CredentialField(OTP_FIELD_NAME, secret=True),),
            message=CHALLENGE_MESSAGE,
            channel=policy.channel,
            expires_at=record.expires_at,
        )

    def _missing_attributes(self, principal: Principal, policy: OTPPolicy) -> VerificationOutcome:
        error = MissingAttributesError(principal.identifier, policy.channel.value)

        if self.settings.missing_action is MissingAction.ALLOW:
            logger.warning(
                "otp_missing_attributes_allowed",
                identifier=principal.identifier,
                channel=policy.channel.value,
            )
            return Verified(bypass=BypassReason.MISSING_ATTRIBUTES)

        logger.warning(
            "otp_missing_attributes_blocked",
            identifier=principal.identifier,
            channel=policy.channel.value,
        )
        return Rejected(
            reason=RejectionReason.MISSING_ATTRIBUTES,
            message=error.user_message,
            error=error,
        )

    def _check(self, principal: Principal, response: str) -> VerificationOutcome:
        result = self.store.check(principal.identifier, response)

        if result is CheckResult.ACCEPTED:
            return Verified()

        if result is CheckResult.EXPIRED:
            error = ChallengeExpired(
                f"One-time password for '{principal.identifier}' has expired"
            )
            return Rejected(
                reason=RejectionReason.CHALLENGE_EXPIRED,
                message=error.user_message,
                error=error,
            )

        error = VerificationFailed(
            f"Invalid one-time password for '{principal.identifier}' ({result.value})"
        )
        return Rejected(
            reason=RejectionReason.VERIFICATION_FAILED,
            message=error.user_message,
            error=error,
        )

    def _finish(self, log, outcome: VerificationOutcome) -> VerificationOutcome:
        if isinstance(outcome, Verified):
            label = f"bypass_{outcome.bypass.value}" if outcome.bypass else "verified"
            log.info("otp_verification_passed", bypass=outcome.bypass.value if outcome.bypass else None)
        elif isinstance(outcome, NeedsInput):
            label = "challenge_issued"
            log.info("otp_challenge_issued", channel=outcome.channel.value)
        else:
            label = outcome.reason.value
            log.warning("otp_verification_rejected", reason=outcome.reason.value, code=outcome.error.code)

        record_outcome(label)
        return outcome
