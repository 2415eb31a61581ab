"""
Built-in exception types. Add new ones here or via exception_factory().
"""
from __future__ import annotations

from supportdesk.core.exceptions.base import SupportDeskError


class ConfigurationError(SupportDeskError):
    """Invalid or missing configuration."""

    default_code = "CONFIGURATION_ERROR"
    default_http_status = 500


class ProviderError(SupportDeskError):
    """Completion provider failed (transport error, non-2xx, timeout)."""

    default_code = "PROVIDER_ERROR"
    default_http_status = 502


class EmptyResponse(ProviderError):
    """Completion provider answered but returned no usable content."""

    default_code = "EMPTY_RESPONSE"
    default_http_status = 502


class DeliveryError(SupportDeskError):
    """Support ticket could not be handed to the notification channel."""

    default_code = "DELIVERY_ERROR"
    default_http_status = 502


class InvalidFlowState(SupportDeskError):
    """Ticket intake step invoked while the flow is not active."""

    default_code = "INVALID_FLOW_STATE"
    default_http_status = 409


class KnowledgeSourceError(SupportDeskError):
    """Knowledge rows could not be fetched or parsed."""

    default_code = "KNOWLEDGE_SOURCE_ERROR"
    default_http_status = 502


class ValidationRejected(SupportDeskError):
    """A ticket field was rejected; message is the corrective re-prompt.

    Not a fault: the intake machine reports rejections as return values.
    """

    default_code = "VALIDATION_REJECTED"
    default_http_status = 422
