"""Construction of signed PayWay purchase requests."""

import json
import logging
from datetime import datetime
from typing import Any, Callable, Iterable, List, Optional
from urllib.parse import urlencode

import pydantic
from pydantic import TypeAdapter

from config import Settings
from models import Item, PaymentOption, PaymentRequest, signed_message
from ..base import normalize_amount, validate_currency_code
from ..exceptions import ConfigurationError, InvalidAmount, InvalidItems, ValidationError
from .signing import sign
from .transaction import TransactionIdGenerator, utc_now

logger = logging.getLogger(__name__)

REQUEST_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"
PUSHBACK_PATH = "/api/payment-callback"

_items_adapter = TypeAdapter(List[Item])


def serialize_items(items: Optional[Iterable[Any]]) -> str:
    """Render items as compact JSON with a fixed key order.

    The returned string is both signed and sent, so it must not be
    re-serialized afterwards.
    """
    try:
        parsed = _items_adapter.validate_python(list(items or []))
    except (pydantic.ValidationError, TypeError) as exc:
        raise InvalidItems(f"Invalid items: {exc}") from exc

    try:
        # PayWay accepts prices as two-decimal strings
        rendered = [
            {
                "name": item.name,
                "quantity": item.quantity,
                "price": normalize_amount(item.price),
            }
            for item in parsed
        ]
    except InvalidAmount as exc:
        raise InvalidItems(f"Invalid items: {exc}") from exc

    return json.dumps(
        rendered,
        separators=(",", ":"),
        ensure_ascii=False,
    )


def parse_payment_option(value: Any) -> PaymentOption:
    try:
        return PaymentOption(value)
    except ValueError as exc:
        allowed = ", ".join(option.value for option in PaymentOption)
        raise ValidationError(
            f"Unsupported payment option: {value}. Expected one of: {allowed}"
        ) from exc


class PaymentRequestBuilder:
    """Builds ``PaymentRequest`` objects for one merchant."""

    def __init__(
        self,
        settings: Settings,
        id_generator: Optional[TransactionIdGenerator] = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._settings = settings
        self._ids = id_generator or TransactionIdGenerator()
        self._clock = clock

    def build(
        self,
        payment_option: Any,
        amount: Any,
        items: Optional[Iterable[Any]] = None,
        currency: Optional[str] = None,
    ) -> PaymentRequest:
        merchant_id = self._settings.PAYWAY_MERCHANT_ID
        if not merchant_id or not self._settings.PAYWAY_API_KEY:
            raise ConfigurationError("Merchant ID or API key is not configured")

        currency = currency or self._settings.PAYWAY_CURRENCY
        if not validate_currency_code(currency):
            raise ValidationError(f"Invalid currency code: {currency}")

        option = parse_payment_option(payment_option)
        formatted_amount = normalize_amount(amount)
        items_string = serialize_items(items)

        req_time = self._clock().strftime(REQUEST_TIME_FORMAT)
        tran_id = self._ids.next()
        message = signed_message(
            req_time,
            tran_id,
            merchant_id,
            formatted_amount,
            items_string,
            option.gateway_code,
        )
        query = urlencode({"tran_id": tran_id})
        frontend = self._settings.FRONTEND_URL

        request = PaymentRequest(
            merchant_id=merchant_id,
            req_time=req_time,
            tran_id=tran_id,
            amount=formatted_amount,
            currency=currency,
            items=items_string,
            payment_option=option.gateway_code,
            return_url=f"{frontend}/payment-success?{query}",
            cancel_url=f"{frontend}/payment-cancel?{query}",
            pushback_url=f"{self._settings.BACKEND_URL}{PUSHBACK_PATH}",
            hash=sign(
                self._settings.secret_key,
                message,
                self._settings.PAYWAY_HASH_ENCODING,
            ),
        )
        logger.debug("Built %s request %s for %s", option.value, tran_id, formatted_amount)
        return request
