"""
Unit tests for the EmailSender adapters.

Tests verify:
- ConsoleEmailSender logs codes in the [VERIFICATION] format
- SmtpEmailSender builds and sends the message, mapping failures
- RetryingEmailSender bounds retries and backs off exponentially
"""

import logging
import smtplib
from unittest.mock import MagicMock, Mock, patch

import pytest

from src.adapters.smtp.console import ConsoleEmailSender
from src.adapters.smtp.retrying import RetryingEmailSender, RetryPolicy
from src.adapters.smtp.smtp import SmtpEmailSender
from src.domain.exceptions import NotificationError


class TestConsoleEmailSender:
    """Tests for ConsoleEmailSender."""

    def test_no_explicit_inheritance(self) -> None:
        """ConsoleEmailSender uses structural subtyping, not inheritance."""
        assert ConsoleEmailSender.__bases__ == (object,)

    def test_send_verification_code_format(self, caplog: pytest.LogCaptureFixture) -> None:
        """Log format: [VERIFICATION] Email: ... Code: ..."""
        sender = ConsoleEmailSender()

        with caplog.at_level(logging.INFO):
            sender.send_verification_code("test@example.com", "123456")

        assert len(caplog.records) == 1
        assert caplog.records[0].levelno == logging.INFO
        assert caplog.records[0].getMessage() == "[VERIFICATION] Email: test@example.com Code: 123456"


class TestSmtpEmailSender:
    """Tests for SmtpEmailSender with smtplib.SMTP patched out."""

    def make_sender(self, **overrides) -> SmtpEmailSender:
        options = {
            "host": "smtp.example.com",
            "port": 587,
            "username": "mailer@example.com",
            "password": "pw",
            "timeout": 3.0,
        }
        options.update(overrides)
        return SmtpEmailSender(**options)

    def test_sends_message_with_code(self) -> None:
        with patch("src.adapters.smtp.smtp.smtplib.SMTP") as smtp_cls:
            server = smtp_cls.return_value.__enter__.return_value
            self.make_sender().send_verification_code("user@example.com", "123456")

        smtp_cls.assert_called_once_with("smtp.example.com", 587, timeout=3.0)
        server.starttls.assert_called_once()
        server.login.assert_called_once_with("mailer@example.com", "pw")
        message = server.send_message.call_args[0][0]
        assert message["To"] == "user@example.com"
        assert message["From"] == "mailer@example.com"
        assert message["Subject"] == "Your Verification Code"
        text_part, html_part = message.get_payload()
        assert "123456" in text_part.get_payload(decode=True).decode()
        assert "<strong>123456</strong>" in html_part.get_payload(decode=True).decode()

    def test_tls_and_login_optional(self) -> None:
        with patch("src.adapters.smtp.smtp.smtplib.SMTP") as smtp_cls:
            server = smtp_cls.return_value.__enter__.return_value
            self.make_sender(username="", use_tls=False, from_email="noreply@example.com").send_verification_code(
                "user@example.com", "123456"
            )

        server.starttls.assert_not_called()
        server.login.assert_not_called()
        assert server.send_message.call_args[0][0]["From"] == "noreply@example.com"

    @pytest.mark.parametrize(
        "error",
        [smtplib.SMTPAuthenticationError(535, b"bad auth"), TimeoutError("timed out"), ConnectionRefusedError()],
    )
    def test_failures_raise_notification_error(self, error: Exception) -> None:
        with patch("src.adapters.smtp.smtp.smtplib.SMTP", side_effect=error):
            with pytest.raises(NotificationError):
                self.make_sender().send_verification_code("user@example.com", "123456")


class TestRetryPolicy:
    """Tests for RetryPolicy backoff calculation."""

    def test_exponential_growth_without_jitter(self) -> None:
        policy = RetryPolicy(max_attempts=5, initial_delay=0.5, max_delay=10.0, jitter=False)

        assert [policy.calculate_delay(n) for n in range(1, 5)] == [0.5, 1.0, 2.0, 4.0]

    def test_delay_capped(self) -> None:
        policy = RetryPolicy(max_attempts=10, initial_delay=1.0, max_delay=3.0, jitter=False)

        assert policy.calculate_delay(6) == 3.0

    def test_jitter_stays_within_ten_percent(self) -> None:
        policy = RetryPolicy(initial_delay=1.0, max_delay=1.0)

        for _ in range(50):
            assert 0.9 <= policy.calculate_delay(1) <= 1.1

    @pytest.mark.parametrize(
        "kwargs",
        [{"max_attempts": 0}, {"initial_delay": -1.0}, {"initial_delay": 2.0, "max_delay": 1.0}],
    )
    def test_invalid_policy_rejected(self, kwargs: dict) -> None:
        with pytest.raises(ValueError):
            RetryPolicy(**kwargs)


class TestRetryingEmailSender:
    """Tests for RetryingEmailSender."""

    def test_success_first_try_no_sleep(self) -> None:
        inner = Mock()
        sleep = Mock()

        RetryingEmailSender(inner, RetryPolicy(), sleep=sleep).send_verification_code("a@example.com", "123456")

        inner.send_verification_code.assert_called_once_with("a@example.com", "123456")
        sleep.assert_not_called()

    def test_recovers_after_transient_failure(self) -> None:
        inner = Mock()
        inner.send_verification_code.side_effect = [NotificationError("busy"), None]
        sleep = Mock()
        policy = RetryPolicy(max_attempts=3, initial_delay=0.5, jitter=False)

        RetryingEmailSender(inner, policy, sleep=sleep).send_verification_code("a@example.com", "123456")

        assert inner.send_verification_code.call_count == 2
        sleep.assert_called_once_with(0.5)

    def test_gives_up_after_max_attempts(self) -> None:
        inner = Mock()
        inner.send_verification_code.side_effect = NotificationError("down")
        sleep = Mock()
        policy = RetryPolicy(max_attempts=3, initial_delay=0.5, jitter=False)

        with pytest.raises(NotificationError):
            RetryingEmailSender(inner, policy, sleep=sleep).send_verification_code("a@example.com", "123456")

        assert inner.send_verification_code.call_count == 3
        assert [c.args[0] for c in sleep.call_args_list] == [0.5, 1.0]

    def test_unexpected_errors_not_retried(self) -> None:
        inner = MagicMock()
        inner.send_verification_code.side_effect = RuntimeError("bug")
        sleep = Mock()

        with pytest.raises(RuntimeError):
            RetryingEmailSender(inner, sleep=sleep).send_verification_code("a@example.com", "123456")

        inner.send_verification_code.assert_called_once()
        sleep.assert_not_called()
