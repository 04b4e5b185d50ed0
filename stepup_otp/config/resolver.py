"""
Configuration Resolver
======================
Effective OTP policy for a principal.

Every attribute is resolved through the same chain:

1. the principal's own attribute,
2. the first group, ordered by group identifier, that defines it,
3. the system-wide default from OTPSettings.

Blank values count as undefined. Malformed values raise
ConfigurationError naming the tier that supplied them.
"""

from typing import Callable, Iterable, Optional, Tuple, TypeVar

import structlog

from stepup_otp.otp import CharacterClass
from stepup_otp.principal import Principal, ResolvedGroup, sort_groups

from .attributes import (
    OTP_CHARACTERS_ATTRIBUTE,
    OTP_DISABLED_ATTRIBUTE,
    OTP_LENGTH_ATTRIBUTE,
    OTP_METHOD_ATTRIBUTE,
    OTP_TIMEOUT_ATTRIBUTE,
)
from .models import DeliveryChannel, OTPPolicy
from .parsing import (
    is_blank,
    parse_bool,
    parse_channel,
    parse_character_class,
    parse_positive_int,
)
from .settings import OTPSettings

logger = structlog.get_logger(__name__)

T = TypeVar("T")

USER_TIER = "user"
GROUP_TIER = "group"
DEFAULT_TIER = "default"


class ConfigurationResolver:
    """Resolves per-principal OTP policy with user > group > default precedence."""

    def __init__(self, settings: Optional[OTPSettings] = None):
        self.settings = settings or OTPSettings()

    def resolve_channel(self, principal: Principal, groups: Iterable[ResolvedGroup]) -> DeliveryChannel:
        return self._resolve(
            principal, groups, OTP_METHOD_ATTRIBUTE, parse_channel,
            self.settings.default_method,
        )

    def resolve_timeout(self, principal: Principal, groups: Iterable[ResolvedGroup]) -> int:
        return self._resolve(
            principal, groups, OTP_TIMEOUT_ATTRIBUTE, parse_positive_int,
            self.settings.default_timeout,
        )

    def resolve_length(self, principal: Principal, groups: Iterable[ResolvedGroup]) -> int:
        return self._resolve(
            principal, groups, OTP_LENGTH_ATTRIBUTE, parse_positive_int,
            self.settings.length,
        )

    def resolve_charset(self, principal: Principal, groups: Iterable[ResolvedGroup]) -> CharacterClass:
        return self._resolve(
            principal, groups, OTP_CHARACTERS_ATTRIBUTE, parse_character_class,
            self.settings.character_classes,
        )

    def is_disabled(self, principal: Principal, groups: Iterable[ResolvedGroup]) -> bool:
        disabled, source = self._lookup(
            principal, groups, OTP_DISABLED_ATTRIBUTE, parse_bool,
            self.settings.disabled,
        )
        if disabled:
            logger.warning(
                "otp_disabled_for_user",
                identifier=principal.identifier,
                source=source,
            )
        return disabled

    def resolve_policy(
        self,
        principal: Principal,
        groups: Iterable[ResolvedGroup],
        disabled: Optional[bool] = None,
    ) -> OTPPolicy:
        """
        Resolve every policy attribute for one authentication attempt.

        Pass ``disabled`` when the caller has already resolved the flag.
        """
        ordered = sort_groups(groups)
        if disabled is None:
            disabled = self.is_disabled(principal, ordered)
        return OTPPolicy(
            channel=self.resolve_channel(principal, ordered),
            timeout_seconds=self.resolve_timeout(principal, ordered),
            code_length=self.resolve_length(principal, ordered),
            character_class=self.resolve_charset(principal, ordered),
            disabled=disabled,
        )

    def _resolve(
        self,
        principal: Principal,
        groups: Iterable[ResolvedGroup],
        attribute: str,
        parser: Callable[[str, str, Optional[str]], T],
        default: T,
    ) -> T:
        value, _ = self._lookup(principal, groups, attribute, parser, default)
        return value

    def _lookup(
        self,
        principal: Principal,
        groups: Iterable[ResolvedGroup],
        attribute: str,
        parser: Callable[[str, str, Optional[str]], T],
        default: T,
    ) -> Tuple[T, str]:
        raw = (principal.attributes or {}).get(attribute)
        if not is_blank(raw):
            source = f"{USER_TIER}:{principal.identifier}"
            return self._found(attribute, parser(raw, attribute, source), source)

        for group in sort_groups(groups):
            raw = (group.attributes or {}).get(attribute)
            if not is_blank(raw):
                source = f"{GROUP_TIER}:{group.identifier}"
                return self._found(attribute, parser(raw, attribute, source), source)

        return self._found(attribute, default, DEFAULT_TIER)

    def _found(self, attribute: str, value: T, source: str) -> Tuple[T, str]:
        logger.debug("otp_attribute_resolved", attribute=attribute, source=source)
        return value, source
