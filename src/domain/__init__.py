"""
Domain layer for unsubscribe business logic.

This layer contains:
- Data models (type-safe structures and the error taxonomy)
- Request validation
- Business logic (unsubscribe pipeline)
"""
