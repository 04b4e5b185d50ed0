"""
Unit Tests for OTP Delivery
============================
"""

import smtplib
from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

import pytest

from stepup_otp.config import (
    EMAIL_ADDRESS_ATTRIBUTE,
    OTP_ALTERNATE_EMAIL_ATTRIBUTE,
    OTP_PHONE_ATTRIBUTE,
    DeliveryChannel,
    MailEncryption,
    OTPSettings,
)
from stepup_otp.delivery import DeliveryDispatcher, SMSProvider, SMTPEmailProvider
from stepup_otp.errors import ChannelNotSupportedError, DeliveryError, InvalidRecipientError
from stepup_otp.otp import OTPRecord
from stepup_otp.principal import Principal

T0 = datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
RECORD = OTPRecord.create("482913", 300, now=T0)


def smtp_mock():
    """A patched SMTP class whose instance works as a context manager."""
    server = MagicMock()
    smtp_class = MagicMock()
    smtp_class.return_value.__enter__.return_value = server
    return smtp_class, server


class TestSMTPEmailProvider:
    """Tests for SMTP email delivery."""

    def test_compose_message(self):
        provider = SMTPEmailProvider(sender="otp@example.com")

        msg = provider.compose(["alice@example.com", "alt@example.com"], RECORD)

        assert msg["Subject"] == "One-time password"
        assert msg["From"] == "otp@example.com"
        assert msg["To"] == "alice@example.com, alt@example.com"
        body = msg.get_content()
        assert "Your one-time password is: 482913" in body
        assert RECORD.expiration_string in body

    def test_send_plain(self):
        provider = SMTPEmailProvider(sender="otp@example.com", host="mail.local", port=25)
        smtp_class, server = smtp_mock()

        with patch("stepup_otp.delivery.mail.smtplib.SMTP", smtp_class):
            result = provider.send(["alice@example.com"], RECORD)

        smtp_class.assert_called_once_with("mail.local", 25, timeout=10.0)
        server.starttls.assert_not_called()
        server.login.assert_not_called()
        server.send_message.assert_called_once()
        assert result.channel is DeliveryChannel.EMAIL
        assert result.recipients == ("alice@example.com",)

    def test_send_starttls_with_auth(self):
        provider = SMTPEmailProvider(
            sender="otp@example.com",
            host="mail.local",
            port=587,
            encryption=MailEncryption.STARTTLS,
            authenticate=True,
            username="mailer",
            password="secret",
        )
        smtp_class, server = smtp_mock()

        with patch("stepup_otp.delivery.mail.smtplib.SMTP", smtp_class):
            provider.send(["alice@example.com"], RECORD)

        server.starttls.assert_called_once()
        server.login.assert_called_once_with("mailer", "secret")

    def test_send_ssl(self):
        provider = SMTPEmailProvider(
            sender="otp@example.com",
            host="mail.local",
            port=465,
            encryption=MailEncryption.SSL,
        )
        smtp_class, server = smtp_mock()

        with patch("stepup_otp.delivery.mail.smtplib.SMTP_SSL", smtp_class):
            provider.send(["alice@example.com"], RECORD)

        assert smtp_class.call_args.args == ("mail.local", 465)
        server.send_message.assert_called_once()

    @pytest.mark.parametrize("error", [
        smtplib.SMTPRecipientsRefused({}),
        ConnectionRefusedError("refused"),
    ])
    def test_transport_failure_raises_delivery_error(self, error):
        provider = SMTPEmailProvider(sender="otp@example.com")
        smtp_class = MagicMock(side_effect=error)

        with patch("stepup_otp.delivery.mail.smtplib.SMTP", smtp_class):
            with pytest.raises(DeliveryError) as exc:
                provider.send(["alice@example.com"], RECORD)

        assert exc.value.channel == "email"

    def test_invalid_recipient(self):
        provider = SMTPEmailProvider(sender="otp@example.com")

        with pytest.raises(InvalidRecipientError):
            provider.send(["not-an-address"], RECORD)

    @pytest.mark.parametrize("address", [
        "x,evil@example.com",
        "\"x\"@example.com",
        "x;evil@example.com",
        "Alice <alice@example.com>",
        "alice@example.com\n",
    ])
    def test_rejects_header_splitting_addresses(self, address):
        """Each attribute must hold exactly one bare address."""
        provider = SMTPEmailProvider(sender="otp@example.com")

        with pytest.raises(InvalidRecipientError):
            provider.compose([address], RECORD)

    def test_no_recipients(self):
        provider = SMTPEmailProvider(sender="otp@example.com")

        with pytest.raises(InvalidRecipientError):
            provider.send([], RECORD)

    def test_from_settings(self):
        settings = OTPSettings(
            mail_sender="gw@example.com",
            mail_server="smtp.example.com",
            mail_port=587,
            mail_encryption=MailEncryption.STARTTLS,
        )

        provider = SMTPEmailProvider.from_settings(settings)

        assert provider.sender == "gw@example.com"
        assert provider.host == "smtp.example.com"
        assert provider.port == 587
        assert provider.encryption is MailEncryption.STARTTLS


class TestSMSProvider:
    """SMS is declared but not implemented."""

    def test_send_not_supported(self):
        with pytest.raises(ChannelNotSupportedError) as exc:
            SMSProvider().send(["+14155551234"], RECORD)

        assert isinstance(exc.value, DeliveryError)
        assert exc.value.channel == "sms"


class TestDeliveryDispatcher:
    """Tests for channel routing and recipient lookup."""

    def test_email_recipients_primary_then_alternate(self):
        dispatcher = DeliveryDispatcher()
        user = Principal("alice", {
            EMAIL_ADDRESS_ATTRIBUTE: "alice@example.com",
            OTP_ALTERNATE_EMAIL_ATTRIBUTE: "alice.alt@example.com",
        })

        assert dispatcher.recipients_for(DeliveryChannel.EMAIL, user) == [
            "alice@example.com",
            "alice.alt@example.com",
        ]

    def test_alternate_only(self):
        dispatcher = DeliveryDispatcher()
        user = Principal("alice", {
            EMAIL_ADDRESS_ATTRIBUTE: "",
            OTP_ALTERNATE_EMAIL_ATTRIBUTE: "alice.alt@example.com",
        })

        assert dispatcher.has_recipients(DeliveryChannel.EMAIL, user)
        assert dispatcher.recipients_for(DeliveryChannel.EMAIL, user) == ["alice.alt@example.com"]

    def test_duplicate_addresses_collapsed(self):
        dispatcher = DeliveryDispatcher()
        user = Principal("alice", {
            EMAIL_ADDRESS_ATTRIBUTE: "alice@example.com",
            OTP_ALTERNATE_EMAIL_ATTRIBUTE: "alice@example.com",
        })

        assert dispatcher.recipients_for(DeliveryChannel.EMAIL, user) == ["alice@example.com"]

    def test_sms_recipient(self):
        dispatcher = DeliveryDispatcher()
        user = Principal("alice", {EMAIL_ADDRESS_ATTRIBUTE: "alice@example.com"})

        assert not dispatcher.has_recipients(DeliveryChannel.SMS, user)
        user = Principal("alice", {OTP_PHONE_ATTRIBUTE: "+14155551234"})
        assert dispatcher.recipients_for(DeliveryChannel.SMS, user) == ["+14155551234"]

    def test_dispatch_routes_to_provider(self, mailer):
        dispatcher = DeliveryDispatcher([mailer])
        user = Principal("alice", {EMAIL_ADDRESS_ATTRIBUTE: "alice@example.com"})

        dispatcher.dispatch(DeliveryChannel.EMAIL, user, RECORD)

        assert mailer.sent == [(("alice@example.com",), RECORD)]

    def test_unregistered_channel(self):
        dispatcher = DeliveryDispatcher()
        user = Principal("alice", {OTP_PHONE_ATTRIBUTE: "+14155551234"})

        with pytest.raises(ChannelNotSupportedError):
            dispatcher.dispatch(DeliveryChannel.SMS, user, RECORD)

    def test_from_settings_registers_both_channels(self):
        dispatcher = DeliveryDispatcher.from_settings(OTPSettings())

        assert isinstance(dispatcher.provider_for(DeliveryChannel.EMAIL), SMTPEmailProvider)
        assert isinstance(dispatcher.provider_for(DeliveryChannel.SMS), SMSProvider)
