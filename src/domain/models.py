"""
Data models for the contact form domain.

These type-safe data structures define clear contracts between components.
"""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class ValidatedSubmission:
    """
    Contact form submission that passed validation.

    Attributes:
        name: Sender's name (trimmed)
        email: Sender's address (trimmed, lower-cased)
        message: Message text (trimmed, otherwise verbatim)
    """
    name: str
    email: str
    message: str

    @property
    def message_length(self) -> int:
        return len(self.message)

    def to_log_fields(self) -> str:
        """Fields that are safe to log (never the message body)."""
        return f"name={self.name}, email={self.email}, messageLength={self.message_length}"


@dataclass
class ValidationOutcome:
    """
    Result of validating a raw submission.

    Exactly one of submission/errors is meaningful: a valid outcome carries
    the normalized submission, an invalid one carries the ordered error list.

    Attributes:
        submission: Normalized submission (None when invalid)
        errors: Human-readable messages in field order, then rule order
    """
    submission: Optional[ValidatedSubmission] = None
    errors: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return self.submission is not None and not self.errors

    @classmethod
    def valid(cls, submission: ValidatedSubmission) -> 'ValidationOutcome':
        return cls(submission=submission)

    @classmethod
    def invalid(cls, errors: List[str]) -> 'ValidationOutcome':
        if not errors:
            raise ValueError("An invalid outcome needs at least one error")
        return cls(errors=list(errors))


@dataclass(frozen=True)
class OutboundEmail:
    """
    Email ready for transmission.

    Attributes:
        from_address: Envelope and header sender
        to_address: Recipient
        subject: Subject line
        html_body: HTML alternative (all user input escaped)
        text_body: Plain text body
    """
    from_address: str
    to_address: str
    subject: str
    html_body: str
    text_body: str


class TransmissionError(Exception):
    """Raised (or carried in a SendResult) when the SMTP relay rejects or fails a send."""
    pass


@dataclass
class SendResult:
    """
    Result of a send attempt.

    This explicit result type makes success/failure handling clear
    and prevents exceptions from being used for control flow.

    Attributes:
        success: Whether the relay accepted the message
        error: Failure description (None on success)
    """
    success: bool
    error: Optional[TransmissionError] = None

    @classmethod
    def sent(cls) -> 'SendResult':
        return cls(success=True)

    @classmethod
    def failed(cls, error: TransmissionError) -> 'SendResult':
        return cls(success=False, error=error)

    def __repr__(self) -> str:
        """Human-readable representation for logging."""
        if self.success:
            return "SendResult(success=True)"
        else:
            return f"SendResult(success=False, error={self.error})"
