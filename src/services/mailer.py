"""
SMTP delivery for contact form emails.

MailerService sends through a single relay account that is both the sender
and the recipient (the site owner's own mailbox). Each send opens its own
implicit-TLS SMTP session with a timeout and closes it afterwards, so one
service instance can be shared by every invocation of a warm Lambda
container without sharing a connection.

Send failures are returned as SendResult values carrying a TransmissionError;
provider detail goes to the log only.
"""

import logging
import smtplib
import ssl
import time
from dataclasses import replace

from config import Settings
from domain.models import OutboundEmail, SendResult, TransmissionError, ValidatedSubmission
from services.email import format_contact_email, to_mime_message

logger = logging.getLogger(__name__)

# Transport failures: auth, provider rejection, DNS, refused/reset connections, timeouts
TRANSPORT_ERRORS = (smtplib.SMTPException, OSError)


class MailerService:
    """
    Sends email through an SMTP relay with one fixed account.

    Attributes:
        account: Address used for login and as both sender and recipient
        host: Relay hostname
        port: Relay port (implicit TLS)
        timeout: Seconds allowed for each SMTP operation
    """

    def __init__(self, account: str, password: str, host: str, port: int, timeout: int):
        self.account = account
        self._password = password
        self.host = host
        self.port = port
        self.timeout = timeout

    def _open_session(self) -> smtplib.SMTP_SSL:
        """Connect and authenticate. Caller owns (and must close) the session."""
        context = ssl.create_default_context()
        smtp = smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout, context=context)
        try:
            smtp.login(self.account, self._password)
        except Exception:
            smtp.close()
            raise
        return smtp

    def send(self, outbound: OutboundEmail) -> SendResult:
        """
        Send an email.

        Args:
            outbound: Email with from/to set

        Returns:
            SendResult: success, or failure with a TransmissionError
        """
        start_time = time.time()
        message = to_mime_message(outbound)

        try:
            with self._open_session() as smtp:
                smtp.send_message(message)
        except TRANSPORT_ERRORS as e:
            logger.error(
                f"Error sending email: to={outbound.to_address}, "
                f"subject={outbound.subject}, error={type(e).__name__}: {e}",
                exc_info=True
            )
            return SendResult.failed(TransmissionError("Failed to send email"))

        execution_time = time.time() - start_time
        logger.info(
            f"Email sent successfully: to={outbound.to_address}, "
            f"subject={outbound.subject}, execution_time={execution_time:.2f}s"
        )
        return SendResult.sent()

    def send_contact_submission(self, submission: ValidatedSubmission) -> SendResult:
        """
        Format a contact form submission and send it to the account mailbox.

        Args:
            submission: Validated contact form data

        Returns:
            SendResult: success, or failure with a TransmissionError
        """
        outbound = replace(
            format_contact_email(submission),
            from_address=self.account,
            to_address=self.account,
        )

        result = self.send(outbound)
        if result.success:
            logger.info(f"Contact form email sent successfully: {submission.to_log_fields()}")
        return result

    def verify_connection(self) -> bool:
        """
        Check that the relay is reachable and accepts the credentials.

        Returns:
            bool: True if login succeeded. Never raises.
        """
        try:
            with self._open_session() as smtp:
                smtp.noop()
        except Exception as e:
            logger.error(f"Email configuration verification failed: {type(e).__name__}: {e}")
            return False

        logger.info("Email configuration verified successfully")
        return True


def create_mailer_service(settings: Settings) -> MailerService:
    """
    Create a MailerService from the process settings.

    Args:
        settings: Loaded configuration

    Returns:
        MailerService: Configured mailer (no connection is opened here)
    """
    logger.info(
        f"Mailer configured: host={settings.smtp_host}, port={settings.smtp_port}, "
        f"timeout={settings.smtp_timeout}s, account={settings.email_user}, no retries"
    )
    return MailerService(
        account=settings.email_user,
        password=settings.email_pass,
        host=settings.smtp_host,
        port=settings.smtp_port,
        timeout=settings.smtp_timeout,
    )
