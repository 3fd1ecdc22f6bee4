"""
Notification dispatchers.

ConsoleDispatcher logs messages instead of sending them (development);
SmtpDispatcher delivers over SMTP.
"""

import asyncio
import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional

from src.app.services.notification_dispatcher import INotificationDispatcher
from src.domain import errors
from src.libs.result import Error, Result, Return

logger = logging.getLogger(__name__)


class ConsoleDispatcher(INotificationDispatcher):
    """Writes every message to the log and reports success"""

    async def send(self, destination: str, subject: str, body: str) -> Result[None]:
        logger.info(f"Would send email to {destination}: {subject}")
        logger.debug(f"Content: {body[:200]}...")
        return Return.ok(None)


class SmtpDispatcher(INotificationDispatcher):
    """SMTP delivery; the blocking smtplib session runs in a worker thread"""

    def __init__(
        self,
        host: str,
        port: int,
        from_address: str,
        username: Optional[str] = None,
        password: Optional[str] = None,
        use_tls: bool = True,
        timeout: float = 10.0,
    ):
        self.host = host
        self.port = port
        self.from_address = from_address
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.timeout = timeout

    async def send(self, destination: str, subject: str, body: str) -> Result[None]:
        try:
            await asyncio.to_thread(self._send_sync, destination, subject, body)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send email to {destination}: {e}")
            return Return.err(Error(errors.DISPATCH_FAILED, f"SMTP error: {e}"))

        logger.info(f"Email sent to {destination}")
        return Return.ok(None)

    def _send_sync(self, destination: str, subject: str, body: str) -> None:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = self.from_address
        msg["To"] = destination
        msg.attach(MIMEText(body, "html"))

        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
            if self.use_tls:
                server.starttls()
            if self.username and self.password:
                server.login(self.username, self.password)
            server.sendmail(self.from_address, [destination], msg.as_string())
