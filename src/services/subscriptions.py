"""
Subscription store operations for Lambda handlers.

This module provides reusable functions for managing subscription records
in Amazon DynamoDB.
"""

import logging
import os

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from domain.models import StoreDeletionError

logger = logging.getLogger(__name__)

# Key attribute names of the subscription table
ID_ATTRIBUTE = 'id'
EMAIL_ADDRESS_ATTRIBUTE = 'emailAddress'

# Configure DynamoDB client with timeouts to prevent infinite hangs
dynamodb_config = Config(
    retries={
        'max_attempts': 1,  # 1 attempt total (no retries)
        'mode': 'standard'
    },
    connect_timeout=5,   # 5 seconds to establish connection
    read_timeout=10      # 10 seconds max for reading response
)

# Initialize DynamoDB client at module level (thread-safe, reused across invocations)
dynamodb_client = boto3.client('dynamodb', config=dynamodb_config)
logger.info("DynamoDB client initialized with timeouts: connect=5s, read=10s, max_attempts=1")

TABLE_NAME = os.environ.get('TABLE_NAME')


def delete_subscription(subscription_id: str, email_address: str) -> None:
    """
    Delete a subscription record.

    Deleting a record that does not exist is a no-op, so repeated
    deletes of the same subscription succeed.

    Args:
        subscription_id: Subscriber identifier
        email_address: Subscriber email address

    Raises:
        StoreDeletionError: If the table is not configured, arguments are
            empty, or the DynamoDB call fails

    Example:
        >>> delete_subscription(
        ...     subscription_id="sub-123",
        ...     email_address="user@example.com"
        ... )
    """
    if not TABLE_NAME:
        raise StoreDeletionError("TABLE_NAME environment variable is not set")
    if not subscription_id:
        raise StoreDeletionError("subscription id cannot be empty")
    if not email_address:
        raise StoreDeletionError("email address cannot be empty")

    try:
        logger.info(f"Deleting subscription: table={TABLE_NAME}, id={subscription_id}")

        dynamodb_client.delete_item(
            TableName=TABLE_NAME,
            Key={
                ID_ATTRIBUTE: {'S': subscription_id},
                EMAIL_ADDRESS_ATTRIBUTE: {'S': email_address}
            }
        )

        logger.info(f"Successfully deleted subscription: id={subscription_id}")

    except ClientError as e:
        error_code = e.response.get('Error', {}).get('Code', 'Unknown')
        error_message = e.response.get('Error', {}).get('Message', str(e))

        logger.error(
            f"Failed to delete subscription: "
            f"table={TABLE_NAME}, id={subscription_id}, "
            f"error_code={error_code}, error_message={error_message}"
        )

        raise StoreDeletionError("failed to delete subscription", e)

    except BotoCoreError as e:
        logger.error(f"Failed to delete subscription id={subscription_id}: {e}")
        raise StoreDeletionError("failed to delete subscription", e)
