"""
Tests for domain models (data structures and error taxonomy).
"""

import json
import pytest
import sys
import os
from dataclasses import FrozenInstanceError

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '../src'))

from domain.models import (
    ConfirmationTemplate,
    ErrorKind,
    HandlerResponse,
    StoreDeletionError,
    TemplateLoadError,
    UnsubscribeError,
    UnsubscribeRequest,
    ValidationError,
)


class TestErrorKind:
    """Test ErrorKind status mapping."""

    def test_validation_maps_to_bad_request(self):
        assert ErrorKind.VALIDATION.status_code == 400

    def test_template_load_maps_to_internal_error(self):
        assert ErrorKind.TEMPLATE_LOAD.status_code == 500

    def test_store_deletion_maps_to_internal_error(self):
        assert ErrorKind.STORE_DELETION.status_code == 500


class TestUnsubscribeError:
    """Test tagged error types."""

    def test_subclasses_carry_their_kind(self):
        assert TemplateLoadError("x").kind is ErrorKind.TEMPLATE_LOAD
        assert ValidationError("x").kind is ErrorKind.VALIDATION
        assert StoreDeletionError("x").kind is ErrorKind.STORE_DELETION

    def test_base_error_with_explicit_kind(self):
        error = UnsubscribeError("boom", kind=ErrorKind.VALIDATION)
        assert error.kind is ErrorKind.VALIDATION

    def test_base_error_without_kind(self):
        with pytest.raises(TypeError):
            UnsubscribeError("boom")

    def test_cause_is_chained(self):
        cause = RuntimeError("connection reset")
        error = StoreDeletionError("failed to delete subscription", cause)

        assert error.cause is cause
        assert error.__cause__ is cause
        assert str(error) == "failed to delete subscription: connection reset"

    def test_message_without_cause(self):
        error = ValidationError("id cannot be empty")

        assert error.cause is None
        assert str(error) == "id cannot be empty"


class TestUnsubscribeRequest:
    """Test UnsubscribeRequest dataclass."""

    def test_request_creation(self):
        request = UnsubscribeRequest(id="sub-123", email_address="user@example.com")

        assert request.id == "sub-123"
        assert request.email_address == "user@example.com"

    def test_request_is_immutable(self):
        request = UnsubscribeRequest(id="sub-123", email_address="user@example.com")

        with pytest.raises(FrozenInstanceError):
            request.id = "other"


class TestConfirmationTemplate:
    """Test ConfirmationTemplate dataclass."""

    def test_template_is_immutable(self):
        template = ConfirmationTemplate(
            name="unsubscribe-successful",
            source="<p>Bye</p>",
            rendered=b"<p>Bye</p>"
        )

        with pytest.raises(FrozenInstanceError):
            template.rendered = b""


class TestHandlerResponse:
    """Test HandlerResponse result type."""

    def test_success_response(self):
        response = HandlerResponse.success(b"<p>Bye</p>")

        assert response.status_code == 200
        assert response.error is None
        assert response.body == b"<p>Bye</p>"
        assert response.succeeded is True
        assert response.payload() == {'data': '<p>Bye</p>'}

    def test_validation_failure_response(self):
        error = ValidationError("id cannot be empty")
        response = HandlerResponse.failure(error)

        assert response.status_code == 400
        assert response.body is None
        assert response.succeeded is False
        assert response.payload() == {'error': 'id cannot be empty'}

    def test_store_failure_response_with_body(self):
        error = StoreDeletionError("failed to delete subscription")
        response = HandlerResponse.failure(error, body=b"<p>Bye</p>")

        assert response.status_code == 500
        assert response.payload() == {
            'error': 'failed to delete subscription',
            'data': '<p>Bye</p>'
        }

    def test_to_api_gateway(self):
        response = HandlerResponse.success("<p>Tschüss</p>".encode('utf-8'))

        result = response.to_api_gateway()

        assert result['statusCode'] == 200
        assert result['headers']['Content-Type'] == 'application/json'
        assert 'Access-Control-Allow-Origin' in result['headers']
        assert json.loads(result['body']) == {'data': '<p>Tschüss</p>'}

    def test_repr_success(self):
        response = HandlerResponse.success(b"")
        assert repr(response) == "HandlerResponse(status_code=200)"

    def test_repr_failure(self):
        response = HandlerResponse.failure(ValidationError("id cannot be empty"))

        result = repr(response)

        assert "status_code=400" in result
        assert "kind=validation" in result
        assert "id cannot be empty" in result


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
