"""Tests for the SMTP email service."""

import smtplib
from unittest.mock import MagicMock, patch

from taskboard.services.email_service import EmailService
from taskboard.utils.email_templates import forgot_password_template


def test_unconfigured_service_does_not_send():
    with patch("smtplib.SMTP") as mock_smtp:
        assert EmailService(None).send_email("a@b.co", "Hi", "<p>Hi</p>") is False
    mock_smtp.assert_not_called()


def test_send_email_over_smtp():
    service = EmailService("smtp.example.com", 2525, username="bot@example.com", password="pw")
    with patch("smtplib.SMTP") as mock_smtp:
        smtp = MagicMock()
        mock_smtp.return_value.__enter__.return_value = smtp
        assert service.send_email("a@b.co", "Hello", "<p>Hello</p>") is True

    mock_smtp.assert_called_once_with("smtp.example.com", 2525, timeout=10)
    smtp.starttls.assert_called_once()
    smtp.login.assert_called_once_with("bot@example.com", "pw")
    message = smtp.send_message.call_args[0][0]
    assert message["To"] == "a@b.co"
    assert message["From"] == "bot@example.com"


def test_smtp_failure_returns_false():
    service = EmailService("smtp.example.com", sender="bot@example.com")
    with patch("smtplib.SMTP", side_effect=smtplib.SMTPConnectError(421, "busy")):
        assert service.send_email("a@b.co", "Hello", "<p>Hello</p>") is False


def test_forgot_password_template_escapes_name():
    html = forgot_password_template("<b>Eve</b>", "https://app.test/reset-password?token=abc", 15)
    assert "&lt;b&gt;Eve&lt;/b&gt;" in html
    assert "expires in 15 minutes" in html
