"""
Unit Tests for OTP Generation and Records
==========================================
"""

import string
from datetime import datetime, timedelta, timezone

import pytest

T0 = datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


class TestGenerateCode:
    """Tests for random code generation."""

    def test_numeric_code(self):
        """Should generate a 6-digit numeric code."""
        from stepup_otp.otp import generate_code, CharacterClass

        for _ in range(50):
            code = generate_code(6, CharacterClass.NUMERIC)
            assert len(code) == 6
            assert all(c in string.digits for c in code)

    def test_alpha_code(self):
        """ALPHA should only draw letters."""
        from stepup_otp.otp import generate_code, CharacterClass

        code = generate_code(40, CharacterClass.ALPHA)

        assert len(code) == 40
        assert code.isalpha()

    def test_alphanumeric_code(self):
        """ALPHANUMERIC should only draw digits and letters."""
        from stepup_otp.otp import generate_code, CharacterClass

        code = generate_code(40, CharacterClass.ALPHANUMERIC)

        assert code.isalnum()

    def test_all_code_uses_fixed_alphabet(self):
        """ALL should stay within digits, letters and the symbol set."""
        from stepup_otp.otp import generate_code, CharacterClass, SYMBOLS

        allowed = set(string.digits + string.ascii_letters + SYMBOLS)
        code = generate_code(200, CharacterClass.ALL)

        assert set(code) <= allowed

    def test_accepts_string_class(self):
        """Should accept the class by value."""
        from stepup_otp.otp import generate_code

        assert generate_code(4, "numeric").isdigit()

    @pytest.mark.parametrize("length", [0, -1])
    def test_rejects_short_length(self, length):
        """Length below 1 is rejected."""
        from stepup_otp.otp import generate_code, CharacterClass

        with pytest.raises(ValueError):
            generate_code(length, CharacterClass.NUMERIC)

    def test_codes_vary(self):
        """Consecutive codes should not repeat."""
        from stepup_otp.otp import generate_code, CharacterClass

        codes = {generate_code(12, CharacterClass.ALPHANUMERIC) for _ in range(20)}

        assert len(codes) == 20


class TestCharacterClass:
    """Tests for character class alphabets."""

    def test_alphabets(self):
        from stepup_otp.otp import CharacterClass, SYMBOLS

        assert CharacterClass.NUMERIC.alphabet == "0123456789"
        assert len(CharacterClass.ALPHA.alphabet) == 52
        assert len(CharacterClass.ALPHANUMERIC.alphabet) == 62
        assert CharacterClass.ALL.alphabet.endswith(SYMBOLS)


class TestOTPRecord:
    """Tests for the immutable OTP record."""

    def test_create_sets_absolute_expiry(self):
        from stepup_otp.otp import OTPRecord

        record = OTPRecord.create("482913", 300, now=T0)

        assert record.expires_at == T0 + timedelta(seconds=300)

    def test_valid_before_expiry(self):
        from stepup_otp.otp import OTPRecord

        record = OTPRecord.create("482913", 300, now=T0)

        assert record.is_valid(T0 + timedelta(seconds=299))
        assert not record.is_valid(T0 + timedelta(seconds=300))
        assert not record.is_valid(T0 + timedelta(seconds=301))

    def test_matches(self):
        """Should match only the same code while valid."""
        from stepup_otp.otp import OTPRecord

        record = OTPRecord.create("482913", 300, now=T0)
        later = T0 + timedelta(seconds=10)

        assert record.matches("482913", later) is True
        assert record.matches("482914", later) is False
        assert record.matches("", later) is False
        assert record.matches(None, later) is False

    def test_expired_record_never_matches(self):
        from stepup_otp.otp import OTPRecord

        record = OTPRecord.create("482913", 60, now=T0)

        assert record.matches("482913", T0 + timedelta(seconds=61)) is False

    def test_non_ascii_candidate(self):
        """A non-ASCII candidate is a mismatch, not an error."""
        from stepup_otp.otp import OTPRecord

        record = OTPRecord.create("482913", 60, now=T0)

        assert record.matches("48291é", T0) is False

    def test_record_is_immutable(self):
        from dataclasses import FrozenInstanceError
        from stepup_otp.otp import OTPRecord

        record = OTPRecord.create("482913", 60, now=T0)

        with pytest.raises(FrozenInstanceError):
            record.code = "000000"

    def test_repr_hides_code(self):
        from stepup_otp.otp import OTPRecord

        record = OTPRecord.create("482913", 60, now=T0)

        assert "482913" not in repr(record)
        assert "2026-01-01" in record.expiration_string
