"""
SMTP email sender adapter - Implements EmailSender protocol.

Sends the verification code as a plain-text + HTML message over SMTP
with STARTTLS. The socket timeout bounds how long one delivery attempt
can block; any SMTP or socket failure is raised as NotificationError.
"""

import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from src.domain.exceptions import NotificationError

logger = logging.getLogger(__name__)

SUBJECT = "Your Verification Code"


class SmtpEmailSender:
    """Implements EmailSender protocol via smtplib."""

    def __init__(
        self,
        host: str,
        port: int = 587,
        username: str = "",
        password: str = "",
        from_email: str = "",
        use_tls: bool = True,
        timeout: float = 10.0,
    ) -> None:
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.from_email = from_email or username
        self.use_tls = use_tls
        self.timeout = timeout

    def send_verification_code(self, email: str, code: str) -> None:
        text_body = f"Your verification code is: {code}"
        html_body = f"<p>Your verification code is <strong>{code}</strong></p>"
        self._send_email(email, SUBJECT, html_body, text_body)

    def _send_email(self, to_email: str, subject: str, html_body: str, text_body: str) -> None:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = self.from_email
        msg["To"] = to_email

        msg.attach(MIMEText(text_body, "plain", "utf-8"))
        msg.attach(MIMEText(html_body, "html", "utf-8"))

        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
                if self.use_tls:
                    server.starttls()
                if self.username:
                    server.login(self.username, self.password)
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            raise NotificationError(f"SMTP delivery to {to_email} failed: {e}") from e

        logger.info("Verification email sent to %s", to_email)
