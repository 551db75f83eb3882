"""Reminder and timesheet emails.

Messages are built with the standard library email package and sent over
SMTP. SMTP replies that signal throttling or a temporarily unavailable
server are retried with backoff (see retry.py); everything else fails the
send immediately with DeliveryError.
"""

import logging
import mimetypes
import os
import smtplib
import time
from dataclasses import dataclass, field
from email.message import EmailMessage
from pathlib import Path
from typing import Callable, List, Optional

from .retry import DEFAULT_ATTEMPTS, RateLimitedError, with_retry
from .resolver import PeriodDates


logger = logging.getLogger(__name__)

# 421 service not available, 450/451/452 mailbox busy / local error /
# insufficient storage, 454 temporary auth failure
TRANSIENT_SMTP_CODES = {421, 450, 451, 452, 454}

SMTP_TIMEOUT = 30


class DeliveryError(Exception):
    """Raised when an email could not be delivered."""
    pass


@dataclass
class SmtpSettings:
    """Outgoing mail server settings (profile.yaml "smtp" section)."""

    host: str
    port: int = 587
    username: Optional[str] = None
    password: Optional[str] = None
    use_tls: bool = True
    sender: Optional[str] = None

    @classmethod
    def from_profile(cls, profile: dict) -> "SmtpSettings":
        smtp = profile.get("smtp") or {}
        password_env = smtp.get("password_env")
        password = os.environ.get(password_env) if password_env else None
        sender = smtp.get("sender") or (profile.get("employee") or {}).get("email")
        return cls(
            host=smtp["host"],
            port=int(smtp.get("port", 587)),
            username=smtp.get("username"),
            password=password,
            use_tls=bool(smtp.get("use_tls", True)),
            sender=sender,
        )


def build_reminder(dates: PeriodDates, employee_name: str, to: str, sender: Optional[str] = None) -> EmailMessage:
    """Reminder sent to the employee the business day before submission."""
    msg = EmailMessage()
    msg["Subject"] = f"Reminder: timesheet for {dates.pay_period_label} is due"
    msg["From"] = sender or to
    msg["To"] = to
    due = dates.email_date.strftime("%A %B %d at %H:%M")
    msg.set_content(
        f"Hi {employee_name},\n\n"
        f"Your timesheet for {dates.pay_period_label} will be submitted on {due}.\n"
        f"Please review your hours before then.\n\n"
        f"Pay date: {dates.pay_date.strftime('%A %B %d, %Y')}\n"
    )
    return msg


def build_submission(
    dates: PeriodDates,
    employee_name: str,
    to: List[str],
    attachment: Path,
    cc: Optional[List[str]] = None,
    sender: Optional[str] = None,
) -> EmailMessage:
    """Timesheet submission with the PDF attached."""
    attachment = Path(attachment)
    msg = EmailMessage()
    msg["Subject"] = f"Timesheet {dates.pay_period_label} - {employee_name}"
    msg["From"] = sender or to[0]
    msg["To"] = ", ".join(to)
    if cc:
        msg["Cc"] = ", ".join(cc)
    msg.set_content(
        f"Hello,\n\n"
        f"Please find attached the timesheet of {employee_name} "
        f"for the pay period {dates.pay_period_label}.\n\n"
        f"Thank you,\n{employee_name}\n"
    )

    ctype, _ = mimetypes.guess_type(attachment.name)
    maintype, subtype = (ctype or "application/octet-stream").split("/", 1)
    msg.add_attachment(
        attachment.read_bytes(),
        maintype=maintype,
        subtype=subtype,
        filename=attachment.name,
    )
    return msg


class SmtpMailer:
    """Sends messages through an SMTP server with bounded retries."""

    def __init__(
        self,
        settings: SmtpSettings,
        attempts: int = DEFAULT_ATTEMPTS,
        base_delay: float = 2.0,
        sleep: Callable[[float], None] = time.sleep,
        smtp_factory: Callable[..., smtplib.SMTP] = smtplib.SMTP,
    ):
        self.settings = settings
        self.attempts = attempts
        self.base_delay = base_delay
        self._sleep = sleep
        self._smtp_factory = smtp_factory

    def send(self, message: EmailMessage) -> None:
        """Deliver a message.

        Raises:
            DeliveryError: On a permanent SMTP error, or once retries of a
                           transient error are exhausted.
        """
        try:
            with_retry(
                lambda: self._send_once(message),
                attempts=self.attempts,
                base_delay=self.base_delay,
                sleep=self._sleep,
                description=f"SMTP send '{message['Subject']}'",
            )
        except RateLimitedError as e:
            raise DeliveryError(
                f"Giving up on '{message['Subject']}' after {self.attempts} attempt(s): {e}"
            ) from e
        logger.info(f"Sent '{message['Subject']}' to {message['To']}")

    def _send_once(self, message: EmailMessage) -> None:
        s = self.settings
        try:
            with self._smtp_factory(s.host, s.port, timeout=SMTP_TIMEOUT) as smtp:
                if s.use_tls:
                    smtp.starttls()
                if s.username and s.password:
                    smtp.login(s.username, s.password)
                smtp.send_message(message)
        except smtplib.SMTPResponseException as e:
            if e.smtp_code in TRANSIENT_SMTP_CODES:
                raise RateLimitedError(f"SMTP {e.smtp_code}: {e.smtp_error!r}") from e
            raise DeliveryError(f"SMTP {e.smtp_code}: {e.smtp_error!r}") from e
        except smtplib.SMTPRecipientsRefused as e:
            raise DeliveryError(f"Recipients refused: {', '.join(e.recipients)}") from e
        except (smtplib.SMTPException, OSError) as e:
            raise DeliveryError(f"Could not send via {s.host}:{s.port}: {e}") from e


@dataclass
class OutboxMailer:
    """Collects messages instead of sending them (dry runs and tests).

    When `directory` is set each message is also written there as .eml.
    """

    directory: Optional[Path] = None
    sent: List[EmailMessage] = field(default_factory=list)

    def send(self, message: EmailMessage) -> None:
        self.sent.append(message)
        if self.directory is not None:
            directory = Path(self.directory)
            directory.mkdir(parents=True, exist_ok=True)
            path = directory / f"message_{len(self.sent):03d}.eml"
            path.write_bytes(bytes(message))
            logger.info(f"Wrote '{message['Subject']}' to {path}")
