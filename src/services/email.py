"""
Email composition utilities for the contact form.

This module renders a validated submission into an OutboundEmail (plain text
plus an HTML alternative) and converts an OutboundEmail into a MIME message
for SMTP delivery. Everything here is pure: the same input always produces
byte-identical output.
"""

import html
from email.message import EmailMessage

from domain.models import OutboundEmail, ValidatedSubmission

SUBJECT_TEMPLATE = "Contact Form Message from {name}"
FOOTER = "Sent from your contact form"

HTML_TEMPLATE = """
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
  <h2 style="color: #333; border-bottom: 2px solid #007bff; padding-bottom: 10px;">
    New Contact Form Submission
  </h2>
  <div style="background-color: #f8f9fa; padding: 20px; border-radius: 5px; margin: 20px 0;">
    <p style="margin: 10px 0;"><strong style="color: #007bff;">Name:</strong> {name}</p>
    <p style="margin: 10px 0;"><strong style="color: #007bff;">Email:</strong> {email}</p>
    <p style="margin: 10px 0;"><strong style="color: #007bff;">Message:</strong></p>
    <div style="background-color: white; padding: 15px; border-radius: 3px; border-left: 4px solid #007bff;">
      {message}
    </div>
  </div>
  <hr style="border: none; border-top: 1px solid #dee2e6; margin: 30px 0;">
  <p style="color: #6c757d; font-size: 12px; text-align: center;">
    <em>{footer}</em>
  </p>
</div>
""".strip()

TEXT_TEMPLATE = """New Contact Form Submission

Name: {name}
Email: {email}

Message:
{message}

---
{footer}"""


def escape_html(text: str) -> str:
    """
    Escape the characters that can open markup or break out of attributes.

    Converts &, <, >, " and ' to entities. html.unescape() recovers the
    original text.
    """
    return html.escape(text, quote=True)


def sanitize_header_value(value: str) -> str:
    """Collapse all whitespace (including CR/LF) to single spaces to prevent header injection."""
    return ' '.join(value.split())


def render_text_body(submission: ValidatedSubmission) -> str:
    return TEXT_TEMPLATE.format(
        name=submission.name,
        email=submission.email,
        message=submission.message,
        footer=FOOTER,
    )


def render_html_body(submission: ValidatedSubmission) -> str:
    """
    Render the HTML alternative.

    Every interpolated field is escaped; newlines in the message become <br>
    after escaping so the tags themselves are never escaped.
    """
    message = escape_html(submission.message)
    message = message.replace('\r\n', '\n').replace('\n', '<br>')

    return HTML_TEMPLATE.format(
        name=escape_html(submission.name),
        email=escape_html(submission.email),
        message=message,
        footer=FOOTER,
    )


def format_contact_email(submission: ValidatedSubmission) -> OutboundEmail:
    """
    Render a validated submission into an email.

    Addresses are left empty; the mailer decides who sends and receives.

    Args:
        submission: Validated contact form data

    Returns:
        OutboundEmail with subject, text and HTML bodies

    Example:
        >>> email = format_contact_email(ValidatedSubmission(
        ...     name="Jane Doe", email="jane@example.com", message="Hi <there>, more info please"))
        >>> email.subject
        'Contact Form Message from Jane Doe'
        >>> '&lt;there&gt;' in email.html_body
        True
    """
    return OutboundEmail(
        from_address='',
        to_address='',
        subject=SUBJECT_TEMPLATE.format(name=sanitize_header_value(submission.name)),
        html_body=render_html_body(submission),
        text_body=render_text_body(submission),
    )


def to_mime_message(outbound: OutboundEmail) -> EmailMessage:
    """
    Build a multipart/alternative MIME message (text first, then HTML).

    Args:
        outbound: Email with both addresses set

    Returns:
        EmailMessage ready for smtplib.SMTP.send_message()

    Raises:
        ValueError: If either address is missing
    """
    if not outbound.from_address or not outbound.to_address:
        raise ValueError("Outbound email needs both from and to addresses")

    msg = EmailMessage()
    msg['From'] = outbound.from_address
    msg['To'] = outbound.to_address
    msg['Subject'] = outbound.subject

    msg.set_content(outbound.text_body)
    msg.add_alternative(outbound.html_body, subtype='html')
    return msg
