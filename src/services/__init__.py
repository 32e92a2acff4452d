"""
Utility functions for Lambda handler operations.

This package contains reusable service functions for the subscription
store (DynamoDB) and HTML templates.
"""

__all__ = ['subscriptions', 'templates']
