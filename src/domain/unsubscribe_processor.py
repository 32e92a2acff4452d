"""
Unsubscribe pipeline - core business logic.

This module handles one unsubscribe request end to end:
1. Check the confirmation template prepared at startup
2. Parse and validate the request
3. Delete the subscription from the store
4. Return the rendered confirmation page

All errors are caught and returned as HandlerResponse with an error set.
No exceptions propagate out of the public methods.
"""

import logging
from typing import Any, Callable, Dict, Optional

from .models import (
    ConfirmationTemplate,
    HandlerResponse,
    StoreDeletionError,
    TemplateLoadError,
    UnsubscribeError,
)
from .validation import parse_unsubscribe_request
from services import subscriptions as subscription_service
from services import templates as template_service

logger = logging.getLogger(__name__)

CONFIRMATION_TEMPLATE_NAME = 'unsubscribe-successful'


class UnsubscribeProcessor:
    """
    Handles the validate -> delete -> render pipeline.

    The confirmation template is prepared once when the processor is
    created and reused read-only for every request.
    """

    def __init__(
        self,
        load_template: Optional[Callable[[str], str]] = None,
        render_template: Optional[Callable[..., bytes]] = None,
        delete_subscription: Optional[Callable[[str, str], None]] = None,
        template_name: str = CONFIRMATION_TEMPLATE_NAME
    ):
        """
        Initialize processor and prepare the confirmation template.

        Args:
            load_template: Returns template source by name
            render_template: Renders (source, name, context) to bytes
            delete_subscription: Deletes (id, email_address) from the store
            template_name: Name of the confirmation template
        """
        self._load_template = load_template or template_service.load_template
        self._render_template = render_template or template_service.render_template
        self._delete_subscription = (
            delete_subscription or subscription_service.delete_subscription
        )
        self.template_name = template_name

        self.template: Optional[ConfirmationTemplate] = None
        self.template_error: Optional[TemplateLoadError] = None
        self._prepare_template()

    def _prepare_template(self) -> None:
        """Load and render the confirmation page, capturing any failure."""
        try:
            source = self._load_template(self.template_name)
            rendered = self._render_template(source, self.template_name, {})
        except TemplateLoadError as e:
            logger.error(f"Confirmation template unavailable: {e}")
            self.template_error = e
            return
        except Exception as e:
            logger.error(f"Confirmation template unavailable: {e}", exc_info=True)
            self.template_error = TemplateLoadError(
                "failed to create template from file", e
            )
            return

        self.template = ConfirmationTemplate(
            name=self.template_name,
            source=source,
            rendered=rendered
        )
        logger.info(
            f"Prepared template {self.template_name}: "
            f"{len(self.template.source):,} characters -> {len(rendered):,} bytes"
        )

    def process(self, event: Dict[str, Any]) -> HandlerResponse:
        """
        Process a single unsubscribe request.

        Args:
            event: API Gateway proxy event

        Returns:
            HandlerResponse with status 200, 400 or 500 (errors logged)
        """
        if self.template is None:
            error = self.template_error or TemplateLoadError(
                "failed to create template from file"
            )
            logger.error(f"Rejecting request, template not loaded: {error}")
            return HandlerResponse.failure(error)

        try:
            request = parse_unsubscribe_request(event)
        except UnsubscribeError as e:
            logger.warning(f"Invalid unsubscribe request: {e}")
            return HandlerResponse.failure(e)

        try:
            self._delete_subscription(request.id, request.email_address)
        except StoreDeletionError as e:
            logger.error(f"Failed to unsubscribe id={request.id}: {e}")
            return HandlerResponse.failure(e, body=self.template.rendered)
        except Exception as e:
            logger.error(f"Failed to unsubscribe id={request.id}: {e}", exc_info=True)
            return HandlerResponse.failure(
                StoreDeletionError("failed to delete subscription", e),
                body=self.template.rendered
            )

        logger.info(f"Unsubscribed id={request.id}")
        return HandlerResponse.success(self.template.rendered)
