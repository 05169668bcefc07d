"""Adapters for integrating external payment gateways."""

from .base import PaymentAdapter
from .exceptions import PaymentError, ConfigurationError, ValidationError, InvalidAmount, InvalidItems, GatewayFailure, NetworkError, GatewayTimeout, WebhookError

__all__ = ["PaymentAdapter", "PaymentError", "ConfigurationError", "ValidationError", "InvalidAmount", "InvalidItems", "GatewayFailure", "NetworkError", "GatewayTimeout", "WebhookError"]
