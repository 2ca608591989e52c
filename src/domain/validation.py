"""
Contact form validation.

Rules are an ordered list of (field, check, message) tuples evaluated by
run_rules(). Every failing rule contributes its message. The presence and
type checks are the only gates: when the value is missing or not a string,
the remaining rules for that field are skipped since they only apply to
strings.

validate_submission() never raises for malformed input. Anything that is not
a dict with string fields comes back as an invalid ValidationOutcome.
"""

import logging
import re
from typing import Any, Callable, Dict, List, Pattern, Tuple

from email_validator import EmailNotValidError, validate_email

from .models import ValidatedSubmission, ValidationOutcome

logger = logging.getLogger(__name__)

Check = Callable[[Any], bool]
Rule = Tuple[str, Check, str]

FIELDS = ('name', 'email', 'message')

# ASCII letters, Latin-1 Supplement, Latin Extended-A and Extended-B, whitespace
NAME_PATTERN = re.compile(r'^[a-zA-Z\s\u00C0-\u017F\u0180-\u024F]+$')
EMAIL_PATTERN = re.compile(r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$')
LETTER_PATTERN = re.compile(r'[a-zA-Z]')

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 100
EMAIL_MAX_LENGTH = 254
MESSAGE_MIN_LENGTH = 10
MESSAGE_MAX_LENGTH = 2000


def _is_present(value: Any) -> bool:
    return value is not None and value != ''


def _is_string(value: Any) -> bool:
    return isinstance(value, str)


def _min_length(limit: int) -> Check:
    return lambda value: len(value) >= limit


def _max_length(limit: int) -> Check:
    return lambda value: len(value) <= limit


def _matches(pattern: Pattern) -> Check:
    return lambda value: pattern.match(value) is not None


def _contains_letter(value: str) -> bool:
    return LETTER_PATTERN.search(value) is not None


def _is_email_address(value: str) -> bool:
    # Syntax only; .test is allowed, other special-use domains (.local, .onion, ...) are not
    try:
        validate_email(value, check_deliverability=False, test_environment=True)
    except EmailNotValidError:
        return False
    return True


GATING_CHECKS = (_is_present, _is_string)

RULES: List[Rule] = [
    ('name', _is_present, "Name is required"),
    ('name', _is_string, "Name must be a string"),
    ('name', _min_length(NAME_MIN_LENGTH), "Name must be at least 2 characters long"),
    ('name', _max_length(NAME_MAX_LENGTH), "Name cannot exceed 100 characters"),
    ('name', _matches(NAME_PATTERN), "Name can only contain letters and spaces"),

    ('email', _is_present, "Email is required"),
    ('email', _is_string, "Email must be a string"),
    ('email', _is_email_address, "Please provide a valid email address"),
    ('email', _max_length(EMAIL_MAX_LENGTH), "Email cannot exceed 254 characters"),
    ('email', _matches(EMAIL_PATTERN), "Please provide a valid email format"),

    ('message', _is_present, "Message is required"),
    ('message', _is_string, "Message must be a string"),
    ('message', _min_length(MESSAGE_MIN_LENGTH), "Message must be at least 10 characters long"),
    ('message', _max_length(MESSAGE_MAX_LENGTH), "Message cannot exceed 2000 characters"),
    ('message', _contains_letter, "Message must contain at least one letter"),
]


def normalize_fields(raw: Any) -> Dict[str, Any]:
    """
    Pick the known fields out of a raw payload and normalize string values.

    Strings are trimmed, and the email is also lower-cased. Non-string values
    are passed through untouched so the type rules can report them. A payload
    that is not a dict yields no fields at all.

    Args:
        raw: Decoded request body (any JSON value)

    Returns:
        Dict with one entry per known field (None when absent)
    """
    if not isinstance(raw, dict):
        logger.info(f"Submission payload is not an object: {type(raw).__name__}")
        raw = {}

    normalized = {}
    for field_name in FIELDS:
        value = raw.get(field_name)
        if isinstance(value, str):
            value = value.strip()
            if field_name == 'email':
                value = value.lower()
        normalized[field_name] = value
    return normalized


def run_rules(values: Dict[str, Any], rules: List[Rule]) -> List[str]:
    """
    Evaluate rules against normalized values and collect failure messages.

    A failing presence or type check stops the field's remaining rules only
    when the value is not a string; a blank string still gets its length and
    pattern messages.

    Args:
        values: Field name to normalized value
        rules: Ordered (field, check, message) tuples

    Returns:
        List of messages for failed rules, in rule order
    """
    errors = []
    skipped_fields = set()

    for field_name, check, message in rules:
        if field_name in skipped_fields:
            continue
        value = values.get(field_name)
        if not check(value):
            errors.append(message)
            if check in GATING_CHECKS and not isinstance(value, str):
                skipped_fields.add(field_name)

    return errors


def validate_submission(raw: Any) -> ValidationOutcome:
    """
    Validate and normalize a raw contact form payload.

    Args:
        raw: Decoded request body (any JSON value)

    Returns:
        ValidationOutcome: valid with a ValidatedSubmission, or invalid with
        every failing rule's message

    Example:
        >>> outcome = validate_submission({
        ...     "name": " Jane Doe ",
        ...     "email": "JANE@Example.com",
        ...     "message": "Hello, I would like more info."
        ... })
        >>> outcome.submission.email
        'jane@example.com'
    """
    values = normalize_fields(raw)
    errors = run_rules(values, RULES)

    if errors:
        logger.info(f"Submission rejected with {len(errors)} validation error(s)")
        return ValidationOutcome.invalid(errors)

    return ValidationOutcome.valid(ValidatedSubmission(
        name=values['name'],
        email=values['email'],
        message=values['message'],
    ))
