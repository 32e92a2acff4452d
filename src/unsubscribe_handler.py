"""
AWS Lambda handler for GET /unsubscribe requests from API Gateway.

Thin orchestration layer that delegates to UnsubscribeProcessor.
Policy: Every request gets a response. Errors logged to CloudWatch.
"""

import json
import logging
import os
from typing import Dict, Any

from domain.models import HandlerResponse, ALLOWED_ORIGIN
from domain.unsubscribe_processor import UnsubscribeProcessor

STAGE = os.environ.get('STAGE', 'dev')

# Configure logging
logger = logging.getLogger()
logger.setLevel(os.environ.get('LOG_LEVEL', 'INFO'))

# Add console handler for local testing (AWS Lambda provides handlers automatically)
if not logger.handlers:
    console_handler = logging.StreamHandler()
    formatter = logging.Formatter('%(levelname)s - %(message)s')
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

# Initialize processor once at module level (template prepared once, reused across invocations)
unsubscribe_processor = UnsubscribeProcessor()


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Unsubscribe a subscriber and return the confirmation page.

    Expected event format (API Gateway proxy):
    {
        "queryStringParameters": {
            "id": "subscription-id",
            "emailAddress": "user@example.com"
        }
    }

    Args:
        event: Lambda event from API Gateway
        context: Lambda context

    Returns:
        Dict with statusCode, headers and a JSON body holding "error" and/or "data"
    """
    logger.info("=" * 70)
    logger.info(f"Unsubscribe Handler ({STAGE}) - Started")
    logger.info("=" * 70)

    try:
        response = unsubscribe_processor.process(event)
    except Exception as e:
        logger.error(f"Unexpected error handling unsubscribe request: {e}", exc_info=True)
        return {
            'statusCode': 500,
            'headers': {
                'Content-Type': 'application/json',
                'Access-Control-Allow-Origin': ALLOWED_ORIGIN
            },
            'body': json.dumps({
                'error': 'Internal server error'
            })
        }

    _log_outcome(response)
    return response.to_api_gateway()


def _log_outcome(response: HandlerResponse) -> None:
    if response.succeeded:
        logger.info(f"✓ Unsubscribe completed: {response!r}")
    elif response.status_code < 500:
        logger.warning(f"⚠ Unsubscribe rejected: {response!r}")
    else:
        logger.error(f"✗ Unsubscribe failed: {response!r}")
    logger.info("=" * 70)
