"""
Mail delivery collaborators.

- TestMailer: keeps messages in memory, nothing leaves the process
- SmtpMailer: hands messages to an SMTP relay with a bounded socket timeout

Both expose ``deliver(message)``; transport errors surface as DeliveryFailure.
"""

import logging
import smtplib
import threading
from email.message import EmailMessage
from typing import List, Optional, Protocol

from email_service.config import EmailServiceConfig
from email_service.errors import DeliveryFailure

logger = logging.getLogger("email_service.mailer")


def build_message(sender: str, to: str, subject: str, body: str) -> EmailMessage:
    message = EmailMessage()
    message["From"] = sender
    message["To"] = to
    message["Subject"] = subject
    message.set_content(body, subtype="html")
    return message


class Mailer(Protocol):
    def deliver(self, message: EmailMessage) -> None:  # pragma: no cover - Protocol
        ...


class TestMailer:
    __test__ = False  # not a pytest test class

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._deliveries: List[EmailMessage] = []

    @property
    def deliveries(self) -> List[EmailMessage]:
        with self._lock:
            return list(self._deliveries)

    def deliver(self, message: EmailMessage) -> None:
        with self._lock:
            self._deliveries.append(message)


class SmtpMailer:
    def __init__(
        self,
        host: str,
        port: int,
        timeout: float,
        username: Optional[str] = None,
        password: Optional[str] = None,
        starttls: bool = False,
    ) -> None:
        self.host = host
        self.port = port
        self.timeout = timeout
        self.username = username
        self.password = password
        self.starttls = starttls

    def deliver(self, message: EmailMessage) -> None:
        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
                if self.starttls:
                    smtp.starttls()
                if self.username:
                    smtp.login(self.username, self.password or "")
                smtp.send_message(message)
        except (smtplib.SMTPException, OSError) as e:
            # OSError covers refused connections and socket timeouts
            raise DeliveryFailure(
                f"SMTP delivery to {message['To']} via {self.host}:{self.port} failed: {e}"
            ) from e


def build_mailer(config: EmailServiceConfig) -> Mailer:
    if config.delivery == "smtp":
        logger.info("Delivering mail via SMTP %s:%d", config.smtp_host, config.smtp_port)
        return SmtpMailer(
            host=config.smtp_host,
            port=config.smtp_port,
            timeout=config.smtp_timeout,
            username=config.smtp_username,
            password=config.smtp_password,
            starttls=config.smtp_starttls,
        )
    return TestMailer()
