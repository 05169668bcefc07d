"""Exceptions raised by payment adapters."""


class PaymentError(Exception):
    """Base exception for payment-related errors."""
    pass


class ConfigurationError(PaymentError):
    """Raised when the merchant id or signing key is not configured."""
    pass


class ValidationError(PaymentError):
    """Raised when input validation fails."""
    pass


class InvalidAmount(ValidationError):
    """Raised when an amount is not a non-negative number."""
    pass


class InvalidItems(ValidationError):
    """Raised when the item list cannot be serialized for signing."""
    pass


class GatewayFailure(PaymentError):
    """Raised when the gateway rejects a request or answers with an unusable body."""
    pass


class NetworkError(PaymentError):
    """Raised when the gateway cannot be reached."""
    pass


class GatewayTimeout(NetworkError):
    """Raised when the gateway does not answer within the configured timeout."""
    pass


class WebhookError(PaymentError):
    """Raised when a callback body cannot be parsed."""
    pass
