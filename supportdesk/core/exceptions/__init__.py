"""
Project exception system.

Usage:
    from supportdesk.core.exceptions import ProviderError, DeliveryError

    raise ProviderError("OpenRouter returned 503", details={"provider": "openrouter"})

    # Add new type on demand
    QuotaError = exception_factory("QuotaError", code="QUOTA", http_status=429)
"""
from supportdesk.core.exceptions.base import SupportDeskError, exception_factory
from supportdesk.core.exceptions.errors import (
    ConfigurationError,
    DeliveryError,
    EmptyResponse,
    InvalidFlowState,
    KnowledgeSourceError,
    ProviderError,
    ValidationRejected,
)

__all__ = [
    "SupportDeskError",
    "exception_factory",
    "ConfigurationError",
    "ProviderError",
    "EmptyResponse",
    "DeliveryError",
    "InvalidFlowState",
    "KnowledgeSourceError",
    "ValidationRejected",
]
