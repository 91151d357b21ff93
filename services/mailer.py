'''
----------------------------
Templated HTML email over SMTP
NOT BY USER INTERACTION
----------------------------
'''

import asyncio
import logging
from dataclasses import dataclass
from email.message import EmailMessage
from typing import Optional

import aiosmtplib
from jinja2 import Environment, PackageLoader, StrictUndefined, select_autoescape
from jinja2.exceptions import TemplateError


logger = logging.getLogger(__name__)

WELCOME_TEMPLATE = "welcome.html"
NOTIFICATION_TEMPLATE = "notification.html"


class MailerError(Exception):
    pass


def _as_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class MailConfig:
    host: str = "localhost"
    port: int = 587
    # True: implicit TLS from the first byte. False: STARTTLS when offered
    secure: bool = False
    user: Optional[str] = None
    password: Optional[str] = None
    sender: Optional[str] = None
    operator_address: Optional[str] = None
    welcome_subject: str = "Welcome!"
    notification_subject: str = "New message from your portfolio"
    timeout: float = 60

    @classmethod
    def from_mapping(cls, config) -> "MailConfig":
        sender = config.get("MAIL_FROM") or config.get("SMTP_USER")
        return cls(
            host = config.get("SMTP_HOST") or "localhost",
            port = int(config.get("SMTP_PORT") or 587),
            secure = _as_bool(config.get("SMTP_SECURE", False)),
            user = config.get("SMTP_USER"),
            password = config.get("SMTP_PASSWORD"),
            sender = sender,
            operator_address = config.get("MAIL_OPERATOR_ADDRESS") or sender,
            welcome_subject = config.get("MAIL_WELCOME_SUBJECT") or cls.welcome_subject,
            notification_subject = config.get("MAIL_NOTIFICATION_SUBJECT") or cls.notification_subject,
            timeout = float(config.get("SMTP_TIMEOUT") or cls.timeout),
        )


class Mailer:
    """Renders the contact emails and hands them to the SMTP relay.

    One connection is opened per message. Nothing is retried: the first
    template or SMTP error is raised to the caller as ``MailerError``.
    """

    def __init__(self, config: MailConfig, environment: Optional[Environment] = None):
        self.config = config
        self.environment = environment or Environment(
            loader = PackageLoader("services", "templates"),
            autoescape = select_autoescape(["html", "xml"]),
            undefined = StrictUndefined,
        )

    def render(self, template_name: str, **context) -> str:
        try:
            return self.environment.get_template(template_name).render(**context)
        except TemplateError as e:
            logger.error("Failed to render %s: %s", template_name, e)
            raise MailerError(f"Failed to render email template {template_name}: {e}") from e

    async def _deliver(self, message: EmailMessage) -> None:
        # Implicit TLS when secure, otherwise STARTTLS if the relay offers it
        await aiosmtplib.send(
            message,
            hostname = self.config.host,
            port = self.config.port,
            username = self.config.user or None,
            password = (self.config.password or "") if self.config.user else None,
            use_tls = self.config.secure,
            start_tls = False if self.config.secure else None,
            timeout = self.config.timeout,
        )

    def send(self, to: str, subject: str, html: str) -> None:
        message = EmailMessage()
        message["From"] = self.config.sender
        message["To"] = to
        message["Subject"] = subject
        message.set_content("This message requires an HTML capable email client.")
        message.add_alternative(html, subtype = "html")

        try:
            asyncio.run(self._deliver(message))
        except (aiosmtplib.SMTPException, OSError) as e:
            logger.error("SMTP send to %s failed: %s", to, e)
            raise MailerError(f"Failed to send email to {to}: {e}") from e

        logger.info("Sent '%s' to %s", subject, to)

    def send_contact_emails(self, email: str, name: str, message: str) -> None:
        # Both templates are rendered before anything is sent
        welcome_html = self.render(WELCOME_TEMPLATE, name = name)
        notification_html = self.render(NOTIFICATION_TEMPLATE, name = name, message = message)

        self.send(email, self.config.welcome_subject, welcome_html)
        self.send(self.config.operator_address, self.config.notification_subject, notification_html)
