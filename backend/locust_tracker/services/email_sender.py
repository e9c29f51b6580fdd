"""Email sender service - sends alerts via Mailgun or SMTP."""
import asyncio
import logging
import smtplib
import ssl
from dataclasses import dataclass
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from typing import Optional

import httpx

from ..errors import DeliveryError

logger = logging.getLogger(__name__)


@dataclass
class EmailConfig:
    """Email transport configuration.

    Mailgun is used when an API key and domain are set, otherwise SMTP when a
    host is set. Without either, sending is skipped.
    """
    from_address: str = ""
    to_address: str = ""
    mailgun_api_key: str = ""
    mailgun_domain: str = ""
    mailgun_api_base: str = "https://api.mailgun.net"
    smtp_host: str = ""
    smtp_port: int = 587
    smtp_username: str = ""
    smtp_password: str = ""
    smtp_use_tls: bool = True
    timeout: float = 10.0

    @property
    def uses_mailgun(self) -> bool:
        return bool(self.mailgun_api_key and self.mailgun_domain)

    @property
    def uses_smtp(self) -> bool:
        return bool(self.smtp_host)


class EmailSenderService:
    """Service for sending email alerts to the configured recipient."""

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        # Overridable for tests
        self._transport = transport

    async def send_email(
        self,
        config: EmailConfig,
        subject: str,
        body: str,
    ) -> bool:
        """Send an email.

        Returns True on success, False on failure or when email is not
        configured.
        """
        logger.info(f"Attempting to send email: {subject}")

        if not config.to_address or not config.from_address:
            logger.warning("Email not configured - missing from or to address")
            return False

        if not config.uses_mailgun and not config.uses_smtp:
            logger.warning("Email not configured - no Mailgun or SMTP settings")
            return False

        try:
            if config.uses_mailgun:
                await self._send_mailgun(config, subject, body)
            else:
                await asyncio.wait_for(
                    asyncio.to_thread(self._send_smtp, config, subject, body),
                    timeout=config.timeout,
                )
            logger.info(f"Email sent successfully to {config.to_address}: {subject}")
            return True

        except DeliveryError as e:
            logger.error(f"Email delivery failed: {e}")
            return False
        except httpx.HTTPError as e:
            logger.error(f"Mailgun request failed: {type(e).__name__}: {e}")
            return False
        except smtplib.SMTPAuthenticationError as e:
            logger.error(f"SMTP authentication failed for user '{config.smtp_username}': {e}")
            return False
        except smtplib.SMTPException as e:
            logger.error(f"SMTP error: {type(e).__name__}: {e}")
            return False
        except (TimeoutError, asyncio.TimeoutError):
            logger.error(f"Timed out sending email after {config.timeout}s")
            return False
        except OSError as e:
            logger.error(f"Connection error sending email: {type(e).__name__}: {e}")
            return False

    async def _send_mailgun(self, config: EmailConfig, subject: str, body: str):
        """Send through the Mailgun messages API."""
        url = f"{config.mailgun_api_base.rstrip('/')}/v3/{config.mailgun_domain}/messages"
        async with httpx.AsyncClient(timeout=config.timeout, transport=self._transport) as client:
            response = await client.post(
                url,
                auth=("api", config.mailgun_api_key),
                data={
                    "from": config.from_address,
                    "to": config.to_address,
                    "subject": subject,
                    "text": body,
                },
            )
        if response.status_code >= 400:
            raise DeliveryError(f"Mailgun returned {response.status_code}: {response.text[:200]}")

    def _send_smtp(self, config: EmailConfig, subject: str, body: str):
        """Send through SMTP. Blocking, run in a worker thread."""
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = config.from_address
        msg["To"] = config.to_address
        msg.attach(MIMEText(body, "plain"))

        with smtplib.SMTP(config.smtp_host, config.smtp_port, timeout=config.timeout) as server:
            if config.smtp_use_tls:
                server.starttls(context=ssl.create_default_context())
            if config.smtp_username and config.smtp_password:
                server.login(config.smtp_username, config.smtp_password)
            server.sendmail(config.from_address, [config.to_address], msg.as_string())


# Global instance
email_sender_service = EmailSenderService()
