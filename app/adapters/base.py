"""Base adapter interface and shared validators."""

from abc import ABC, abstractmethod
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any

from .exceptions import InvalidAmount

TWO_PLACES = Decimal("0.01")


def validate_currency_code(currency: Any) -> bool:
    """Return True for an upper-case three-letter ISO currency code."""
    return (
        isinstance(currency, str)
        and len(currency) == 3
        and currency.isalpha()
        and currency.isupper()
    )


def normalize_amount(amount: Any) -> str:
    """Normalize ``amount`` to a fixed-point string with two fraction digits.

    Accepts ``Decimal``, ``int``, ``float`` and numeric strings. Rounds half
    up, so ``"1.005"`` becomes ``"1.01"``.

    Raises:
        InvalidAmount: if the value is not a finite, non-negative number
    """
    if amount is None or isinstance(amount, bool):
        raise InvalidAmount(f"Invalid amount: {amount}")

    try:
        value = Decimal(str(amount).strip())
    except (InvalidOperation, ValueError) as exc:
        raise InvalidAmount(f"Invalid amount: {amount}") from exc

    if not value.is_finite() or value < 0:
        raise InvalidAmount(f"Invalid amount: {amount}")
    if value == 0:
        value = Decimal(0)  # drop the sign of "-0"

    try:
        return str(value.quantize(TWO_PLACES, rounding=ROUND_HALF_UP))
    except InvalidOperation as exc:
        # more digits than the decimal context can hold
        raise InvalidAmount(f"Invalid amount: {amount}") from exc


class PaymentAdapter(ABC):
    """Abstract base class for payment gateway adapters."""

    @abstractmethod
    async def create_payment(
        self,
        amount: Any,
        currency: str,
        **kwargs: Any
    ) -> Any:
        """Initiate a payment with the gateway.

        Args:
            amount: Payment amount in major currency units
            currency: Three-letter ISO currency code
            **kwargs: Gateway-specific parameters (payment option, items)

        Returns:
            The classified gateway outcome
        """
        pass

    @abstractmethod
    def webhook_verify(self, event: Any) -> bool:
        """Authenticate an inbound gateway callback.

        Args:
            event: Parsed callback fields

        Returns:
            True only if the callback is authentic
        """
        pass

    def validate_configuration(self) -> None:
        """Fail fast when required credentials are missing."""
        return None
