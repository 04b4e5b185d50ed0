"""
Email Delivery
==============
Sends one-time passwords over SMTP.
"""

import re
import smtplib
import ssl
from email.message import EmailMessage
from string import Template
from typing import Optional, Sequence

import structlog

from stepup_otp.config import DeliveryChannel, MailEncryption, OTPSettings
from stepup_otp.errors import DeliveryError, InvalidRecipientError
from stepup_otp.otp import OTPRecord

from .base import DeliveryProvider, DeliveryResult

logger = structlog.get_logger(__name__)

MESSAGE_SUBJECT = "One-time password"
MESSAGE_TEMPLATE = Template(
    "Your one-time password is: ${OTP}\n"
    "\n"
    "The password will expire on: ${EXPIRES}\n"
)

# One bare address; header separators and quoting are rejected.
EMAIL_PATTERN = re.compile(r'[^@\s<>,;"()]+@[^@\s<>,;"()]+\.[^@\s<>,;"()]+')


def validate_email(address: str) -> bool:
    """Loose syntactic check on a bare address."""
    return bool(EMAIL_PATTERN.fullmatch(address))


class SMTPEmailProvider(DeliveryProvider):
    """
    SMTP email delivery.

    Each send opens and closes its own connection with a per-call SSL
    context and timeout.
    """

    channel = DeliveryChannel.EMAIL

    def __init__(
        self,
        sender: str,
        host: str = "localhost",
        port: int = 25,
        encryption: MailEncryption = MailEncryption.NONE,
        username: Optional[str] = None,
        password: Optional[str] = None,
        authenticate: bool = False,
        timeout: float = 10.0,
        subject: str = MESSAGE_SUBJECT,
        template: Template = MESSAGE_TEMPLATE,
    ):
        self.sender = sender
        self.host = host
        self.port = port
        self.encryption = MailEncryption(encryption)
        self.username = username
        self.password = password
        self.authenticate = authenticate
        self.timeout = timeout
        self.subject = subject
        self.template = template

    @classmethod
    def from_settings(cls, settings: OTPSettings) -> "SMTPEmailProvider":
        return cls(
            sender=settings.mail_sender,
            host=settings.mail_server,
            port=settings.mail_port,
            encryption=settings.mail_encryption,
            username=settings.mail_username,
            password=settings.mail_password,
            authenticate=settings.mail_auth,
            timeout=settings.mail_timeout,
        )

    def compose(self, recipients: Sequence[str], record: OTPRecord) -> EmailMessage:
        """Build the message for the given record."""
        for address in recipients:
            if not validate_email(address):
                raise InvalidRecipientError(
                    f"Invalid recipient address: {address!r}",
                    channel=self.channel.value,
                )

        msg = EmailMessage()
        msg["Subject"] = self.subject
        msg["From"] = self.sender
        msg["To"] = ", ".join(recipients)
        msg.set_content(self.template.substitute(
            OTP=record.code,
            EXPIRES=record.expiration_string,
        ))
        return msg

    def send(self, recipients: Sequence[str], record: OTPRecord) -> DeliveryResult:
        if not recipients:
            raise InvalidRecipientError("No recipients given", channel=self.channel.value)

        msg = self.compose(recipients, record)

        try:
            with self._connect() as server:
                if self.encryption is MailEncryption.STARTTLS:
                    server.starttls(context=ssl.create_default_context())
                if self.authenticate:
                    server.login(self.username, self.password)
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(
                "otp_email_send_failed",
                host=self.host,
                port=self.port,
                error=str(e),
            )
            raise DeliveryError(
                f"Error sending one-time password e-mail: {e}",
                channel=self.channel.value,
            ) from e

        logger.info(
            "otp_email_sent",
            host=self.host,
            recipients=len(recipients),
            encryption=self.encryption.value,
        )
        return DeliveryResult(channel=self.channel, recipients=tuple(recipients))

    def _connect(self) -> smtplib.SMTP:
        if self.encryption is MailEncryption.SSL:
            return smtplib.SMTP_SSL(
                self.host,
                self.port,
                timeout=self.timeout,
                context=ssl.create_default_context(),
            )
        return smtplib.SMTP(self.host, self.port, timeout=self.timeout)
