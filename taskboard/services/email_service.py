import logging
import smtplib
from email.message import EmailMessage
from typing import Any, Mapping, Optional

from flask import current_app

logger = logging.getLogger(__name__)

EXTENSION_KEY = "taskboard_email"


class EmailService:
    """Sends HTML mail over SMTP; failures are logged and reported as ``False``."""

    def __init__(
        self,
        server: Optional[str],
        port: int = 587,
        username: Optional[str] = None,
        password: Optional[str] = None,
        use_tls: bool = True,
        sender: Optional[str] = None,
        timeout: int = 10,
    ):
        self.server = server
        self.port = port
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.sender = sender or username
        self.timeout = timeout

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "EmailService":
        return cls(
            config.get("MAIL_SERVER"),
            port=config.get("MAIL_PORT", 587),
            username=config.get("MAIL_USERNAME"),
            password=config.get("MAIL_PASSWORD"),
            use_tls=config.get("MAIL_USE_TLS", True),
            sender=config.get("MAIL_DEFAULT_SENDER"),
            timeout=config.get("MAIL_TIMEOUT", 10),
        )

    @property
    def configured(self) -> bool:
        return bool(self.server and self.sender)

    def send_email(self, to: str, subject: str, html: str) -> bool:
        if not self.configured:
            logger.warning("Email not sent to %s: MAIL_SERVER or sender is not configured", to)
            return False

        message = EmailMessage()
        message["From"] = self.sender
        message["To"] = to
        message["Subject"] = subject
        message.set_content("This message requires an HTML-capable mail client.")
        message.add_alternative(html, subtype="html")

        try:
            with smtplib.SMTP(self.server, self.port, timeout=self.timeout) as smtp:
                if self.use_tls:
                    smtp.starttls()
                if self.username and self.password:
                    smtp.login(self.username, self.password)
                smtp.send_message(message)
        except (smtplib.SMTPException, OSError) as exc:
            logger.exception("Email sending error: %s", exc)
            return False
        logger.info("Email sent to %s: %s", to, subject)
        return True


def init_app(app, email_service: Optional[EmailService] = None) -> EmailService:
    service = email_service or EmailService.from_config(app.config)
    if not service.configured:
        app.logger.warning("Mail is not configured; password reset emails will fail.")
    app.extensions[EXTENSION_KEY] = service
    return service


def get_email_service() -> EmailService:
    return current_app.extensions[EXTENSION_KEY]
