"""
Pytest configuration and fixtures for all tests.
"""

import os
import sys
import pytest

# Add src to Python path before any imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '../src'))

# Set up test environment variables before importing any modules
os.environ.setdefault('AWS_DEFAULT_REGION', 'us-east-1')
os.environ.setdefault('TABLE_NAME', 'test-subscription-table')
os.environ.setdefault('STAGE', 'test')
os.environ.setdefault('LOG_LEVEL', 'INFO')


@pytest.fixture
def lambda_context():
    """Mock Lambda context."""
    from unittest.mock import Mock

    context = Mock()
    context.aws_request_id = "test-request-id"
    context.invoked_function_arn = "arn:aws:lambda:us-east-1:123456789012:function:test"
    return context


@pytest.fixture
def unsubscribe_event():
    """API Gateway proxy event for a well-formed unsubscribe link."""
    return {
        'httpMethod': 'GET',
        'path': '/unsubscribe',
        'queryStringParameters': {
            'id': 'sub-123',
            'emailAddress': 'user@example.com'
        },
        'body': None,
        'isBase64Encoded': False
    }
