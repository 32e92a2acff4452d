import json
import os
import logging
from typing import Dict, Any

from domain.models import ALLOWED_ORIGIN

# Configure logging
logger = logging.getLogger()
logger.setLevel(os.environ.get('LOG_LEVEL', 'INFO'))

# Environment variables
STAGE = os.environ.get('STAGE', 'dev')
TABLE_NAME = os.environ.get('TABLE_NAME')


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Simple health check endpoint for monitoring (GET /).
    """
    logger.info(f"Ping received on stage {STAGE}")

    return {
        'statusCode': 200,
        'headers': {
            'Content-Type': 'application/json',
            'Access-Control-Allow-Origin': ALLOWED_ORIGIN
        },
        'body': json.dumps({
            'status': 'healthy',
            'stage': STAGE,
            'tableConfigured': bool(TABLE_NAME)
        })
    }
