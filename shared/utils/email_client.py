import smtplib
import logging
import time
from email.message import EmailMessage
from typing import List, Optional

from shared.core.config import Settings, settings as default_settings

logger = logging.getLogger(__name__)


class EmailClient:
    """SMTP sender with a small retry loop.

    send_email() reports failure through its return value so that one bad
    mailbox never aborts a billing run.
    """

    def __init__(
        self,
        smtp_host: Optional[str],
        smtp_port: int = 587,
        username: Optional[str] = None,
        password: Optional[str] = None,
        use_ssl: bool = False,
        max_retries: int = 3,
        retry_delay: float = 3,
        timeout: float = 30,
    ):
        self.smtp_host = smtp_host
        self.smtp_port = smtp_port
        self.username = username
        self.password = password
        self.use_ssl = use_ssl
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.timeout = timeout

    @classmethod
    def from_settings(cls, cfg: Settings = default_settings) -> "EmailClient":
        return cls(
            smtp_host=cfg.SMTP_HOST,
            smtp_port=cfg.SMTP_PORT,
            username=cfg.SMTP_USERNAME,
            password=cfg.SMTP_PASSWORD,
            use_ssl=cfg.SMTP_USE_SSL,
        )

    def _open(self) -> smtplib.SMTP:
        if self.use_ssl:
            return smtplib.SMTP_SSL(self.smtp_host, self.smtp_port, timeout=self.timeout)

        server = smtplib.SMTP(self.smtp_host, self.smtp_port, timeout=self.timeout)
        server.starttls()
        return server

    @staticmethod
    def build_message(sender: str, recipients: List[str], subject: str,
                      text_body: str, html_body: Optional[str] = None) -> EmailMessage:
        message = EmailMessage()
        message["From"] = sender
        message["To"] = ", ".join(recipients)
        message["Subject"] = subject
        message.set_content(text_body or "")
        if html_body:
            message.add_alternative(html_body, subtype="html")
        return message

    def send_email(
        self,
        sender: str,
        recipients: List[str],
        subject: str,
        text_body: str,
        html_body: Optional[str] = None,
    ) -> bool:
        if not self.smtp_host:
            logger.error("SMTP_HOST is not configured, cannot email %s", ", ".join(recipients))
            return False

        message = self.build_message(sender, recipients, subject, text_body, html_body)

        for attempt in range(1, self.max_retries + 1):
            try:
                with self._open() as server:
                    if self.username:
                        server.login(self.username, self.password)
                    server.send_message(message)
                logger.info("Email sent to %s", ", ".join(recipients))
                return True
            except smtplib.SMTPAuthenticationError:
                logger.error("SMTP authentication failed for %s", self.username)
                return False
            except (smtplib.SMTPException, OSError) as e:
                logger.warning("Email attempt %s/%s to %s failed: %s",
                               attempt, self.max_retries, ", ".join(recipients), e)
                if attempt < self.max_retries:
                    time.sleep(self.retry_delay)

        logger.error("Giving up on email to %s", ", ".join(recipients))
        return False
