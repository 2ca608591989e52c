"""
AWS Lambda handler for the contact form endpoint (API Gateway proxy integration).

Flow per request:
    method check -> OPTIONS (204) | other non-POST (405) | POST
    POST -> decode body -> validate (400 on errors) -> send (200 / 500)

CORS headers are attached to every response. Any unexpected exception is
caught at the handler boundary and turned into a generic 500; internal error
detail is logged, never returned.
"""

import base64
import json
import logging
from datetime import datetime, timezone
from typing import Dict, Any, Optional

from config import ConfigurationError, load_settings
from domain.models import ValidatedSubmission, ValidationOutcome
from domain.validation import validate_submission
from services.mailer import create_mailer_service

# Configure logging
logger = logging.getLogger()
logger.setLevel(logging.INFO)

# Add console handler for local testing (AWS Lambda provides handlers automatically)
if not logger.handlers:
    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.DEBUG)
    formatter = logging.Formatter('%(levelname)s - %(message)s')
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

# Initialize at module import time (fail fast, reused across invocations)
try:
    settings = load_settings()
    mailer = create_mailer_service(settings)
except ConfigurationError as e:
    logger.error(f"Module initialization failed: {e}")
    raise

logger.setLevel(settings.log_level)

CORS_HEADERS = {
    'Access-Control-Allow-Origin': '*',
    'Access-Control-Allow-Methods': 'POST, OPTIONS',
    'Access-Control-Allow-Headers': 'Content-Type, Authorization',
}

INVALID_BODY_MESSAGE = "Invalid data format"

METHOD_NOT_ALLOWED_BODY = {
    'error': 'Method Not Allowed',
    'message': 'Only POST requests are allowed',
}

SUCCESS_BODY = {
    'success': True,
    'message': 'Email sent successfully',
}

INTERNAL_ERROR_BODY = {
    'error': 'Internal Server Error',
    'message': 'An unexpected error occurred. Please try again later.',
}


def _response(status_code: int, headers: Dict[str, str], body: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Build an API Gateway proxy response. A None body is sent as an empty string."""
    response_headers = dict(headers)
    if body is None:
        payload = ''
    else:
        response_headers['Content-Type'] = 'application/json'
        payload = json.dumps(body)

    return {
        'statusCode': status_code,
        'headers': response_headers,
        'body': payload
    }


def _request_method(event: Dict[str, Any]) -> str:
    """Read the HTTP method from a REST API (v1) or HTTP API (v2) event."""
    method = event.get('httpMethod')
    if not method:
        method = ((event.get('requestContext') or {}).get('http') or {}).get('method', '')
    return (method or '').upper()


def _decode_body(event: Dict[str, Any]) -> Any:
    """
    Decode the request body into a JSON value.

    Returns:
        The parsed JSON value, or None when there is no body

    Raises:
        ValueError: If the body is not valid base64/UTF-8/JSON
    """
    body = event.get('body')
    if body is None:
        return None
    if isinstance(body, (dict, list)):
        # Direct invocation with an already-decoded payload
        return body

    if event.get('isBase64Encoded'):
        body = base64.b64decode(body, validate=True).decode('utf-8')

    if not body.strip():
        return None
    return json.loads(body)


def _validate_event(event: Dict[str, Any]) -> ValidationOutcome:
    try:
        payload = _decode_body(event)
    except ValueError as e:
        logger.warning(f"Request body could not be decoded: {type(e).__name__}: {e}")
        return ValidationOutcome.invalid([INVALID_BODY_MESSAGE])
    return validate_submission(payload)


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def _log_submission(level: int, text: str, submission: ValidatedSubmission) -> None:
    logger.log(level, f"{text}: {submission.to_log_fields()}, timestamp={_utc_timestamp()}")


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Handle one contact form request.

    Expected POST body:
    {
        "name": "Jane Doe",
        "email": "jane@example.com",
        "message": "Hello, I would like more info."
    }

    Returns:
        API Gateway proxy response (statusCode, headers, body)
    """
    headers = dict(CORS_HEADERS)

    try:
        method = _request_method(event)
        logger.info(f"Received {method or 'UNKNOWN'} request (environment: {settings.environment})")

        if method == 'OPTIONS':
            return _response(204, headers)

        if method != 'POST':
            return _response(405, headers, METHOD_NOT_ALLOWED_BODY)

        outcome = _validate_event(event)
        if not outcome.is_valid:
            return _response(400, headers, {
                'error': 'Validation Error',
                'message': 'Please check your input data',
                'details': outcome.errors,
            })

        submission = outcome.submission
        result = mailer.send_contact_submission(submission)

        if not result.success:
            _log_submission(logging.ERROR, f"Contact form submission failed ({result.error})", submission)
            return _response(500, headers, INTERNAL_ERROR_BODY)

        _log_submission(logging.INFO, "Contact form submitted successfully", submission)
        return _response(200, headers, SUCCESS_BODY)

    except Exception as e:
        logger.error(
            f"Contact form submission error: {type(e).__name__}: {e}, timestamp={_utc_timestamp()}",
            exc_info=True
        )
        return _response(500, headers, INTERNAL_ERROR_BODY)


def health_check(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Simple health check endpoint for monitoring.

    Pass ?verify=true to also log in to the SMTP relay.
    """
    params = (event or {}).get('queryStringParameters') or {}

    result = {
        'status': 'healthy',
        'environment': settings.environment,
        'mailConfigured': bool(settings.email_user and settings.email_pass)
    }

    if str(params.get('verify', '')).lower() == 'true':
        reachable = mailer.verify_connection()
        result['relayReachable'] = reachable
        if not reachable:
            result['status'] = 'degraded'

    return {
        'statusCode': 200,
        'body': json.dumps(result)
    }
