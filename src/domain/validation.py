"""
Request validation for the unsubscribe endpoint.

Extracts the `id` and `emailAddress` fields from an API Gateway proxy
event and validates them. Pure functions, no side effects.
"""

import base64
import binascii
import json
import logging
from email.utils import parseaddr
from typing import Any, Dict, Optional

from email_validator import EmailNotValidError, validate_email

from .models import UnsubscribeRequest, ValidationError

logger = logging.getLogger(__name__)

ID_FIELD = 'id'
EMAIL_ADDRESS_FIELD = 'emailAddress'


def _decode_body(event: Dict[str, Any]) -> Dict[str, Any]:
    """
    Decode the JSON request body, if any.

    Args:
        event: API Gateway proxy event

    Returns:
        Dict of body fields (empty when the event has no body)

    Raises:
        ValidationError: If the body is not a JSON object
    """
    body = event.get('body')
    if body is None or body == '':
        return {}
    if isinstance(body, dict):
        return body

    if event.get('isBase64Encoded'):
        try:
            body = base64.b64decode(body).decode('utf-8')
        except (binascii.Error, UnicodeDecodeError) as e:
            raise ValidationError("failed to decode request body", e)

    try:
        parsed = json.loads(body)
    except (TypeError, ValueError) as e:
        raise ValidationError("failed to parse request body", e)

    if not isinstance(parsed, dict):
        raise ValidationError("request body must be a JSON object")
    return parsed


def _extract_field(fields: Dict[str, Any], name: str) -> str:
    value = fields.get(name)
    if value is None:
        return ''
    if not isinstance(value, str):
        raise ValidationError(f"{name} must be a string")
    return value


def validate_email_address(value: str) -> None:
    """
    Check that a value parses as a single RFC 5322 mailbox.

    Both bare addresses and the display-name form are accepted. The
    display-name form must round-trip exactly, so unbalanced brackets,
    comments and stray characters are rejected.

    Args:
        value: Email address as supplied by the caller

    Raises:
        ValidationError: If the value is not a valid mailbox
    """
    if not value or not value.strip():
        raise ValidationError("failed to validate emailAddress: no address")

    mailbox = value.strip()
    display_name, address = parseaddr(mailbox)
    if not address:
        raise ValidationError("failed to validate emailAddress: malformed mailbox")

    if mailbox != address:
        angle_address = f"<{address}>"
        if not mailbox.endswith(angle_address):
            raise ValidationError("failed to validate emailAddress: malformed mailbox")
        phrase = mailbox[:-len(angle_address)].strip()
        if len(phrase) > 1 and phrase.startswith('"') and phrase.endswith('"'):
            phrase = phrase[1:-1]
        if phrase != display_name:
            raise ValidationError("failed to validate emailAddress: malformed mailbox")

    try:
        validate_email(address, check_deliverability=False)
    except EmailNotValidError as e:
        raise ValidationError("failed to validate emailAddress", e)


def parse_unsubscribe_request(event: Optional[Dict[str, Any]]) -> UnsubscribeRequest:
    """
    Extract and validate an unsubscribe request from an API Gateway event.

    Fields come from the query string (GET /unsubscribe links in emails)
    and from a JSON body; body values take precedence.

    Args:
        event: API Gateway proxy event

    Returns:
        UnsubscribeRequest: Validated request

    Raises:
        ValidationError: If a field is missing or malformed
    """
    if not isinstance(event, dict):
        raise ValidationError("request event must be an object")

    query = event.get('queryStringParameters') or {}
    if not isinstance(query, dict):
        raise ValidationError("queryStringParameters must be an object")

    fields: Dict[str, Any] = dict(query)
    fields.update(_decode_body(event))

    subscription_id = _extract_field(fields, ID_FIELD)
    email_address = _extract_field(fields, EMAIL_ADDRESS_FIELD)

    if not subscription_id:
        raise ValidationError("id cannot be empty")

    validate_email_address(email_address)

    logger.info(f"Validated unsubscribe request for id={subscription_id}")
    return UnsubscribeRequest(id=subscription_id, email_address=email_address)
