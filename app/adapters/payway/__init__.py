"""ABA PayWay hosted-checkout adapter."""

import logging
from typing import Any, Iterable, Optional

import httpx

from config import Settings
from models import CallbackEvent, GatewayOutcome
from ..base import PaymentAdapter
from ..exceptions import ConfigurationError, NetworkError
from .builder import PaymentRequestBuilder
from .callback import rejection_reason, verify
from .classifier import classify, classify_transport_error
from .transaction import TransactionIdGenerator
from .transport import GatewayTransport

logger = logging.getLogger(__name__)


class PayWayAdapter(PaymentAdapter):
    """Builds signed purchase requests, sends them and classifies the answer."""

    def __init__(
        self,
        settings: Settings,
        client: Optional[httpx.AsyncClient] = None,
        transport: Optional[GatewayTransport] = None,
        id_generator: Optional[TransactionIdGenerator] = None,
    ) -> None:
        self.settings = settings
        self.builder = PaymentRequestBuilder(settings, id_generator=id_generator)
        self.transport = transport or GatewayTransport(
            settings.PAYWAY_API_URL, settings.GATEWAY_TIMEOUT, client=client
        )

    def validate_configuration(self) -> None:
        missing = [
            name
            for name in ("PAYWAY_MERCHANT_ID", "PAYWAY_API_KEY")
            if not getattr(self.settings, name)
        ]
        if missing:
            raise ConfigurationError(f"Missing PayWay configuration: {', '.join(missing)}")

    async def create_payment(
        self,
        amount: Any,
        currency: Optional[str] = None,
        payment_option: Any = None,
        items: Optional[Iterable[Any]] = None,
        **kwargs: Any
    ) -> GatewayOutcome:
        request = self.builder.build(payment_option, amount, items, currency=currency)
        logger.info(
            "Initiating %s payment %s for %s %s",
            request.payment_option,
            request.tran_id,
            request.amount,
            request.currency,
        )

        try:
            response = await self.transport.post(request.to_payload())
        except NetworkError as exc:
            outcome = classify_transport_error(exc)
        else:
            outcome = classify(response.status_code, response.headers, response.body)

        logger.info("Payment %s gateway outcome: %s", request.tran_id, outcome.type)
        return outcome

    def webhook_verify(self, event: CallbackEvent) -> bool:
        return verify(
            event,
            self.settings.PAYWAY_MERCHANT_ID,
            self.settings.secret_key,
            self.settings.PAYWAY_HASH_ENCODING,
        )

    def webhook_rejection_reason(self, event: CallbackEvent) -> Optional[str]:
        return rejection_reason(
            event,
            self.settings.PAYWAY_MERCHANT_ID,
            self.settings.secret_key,
            self.settings.PAYWAY_HASH_ENCODING,
        )

    async def aclose(self) -> None:
        await self.transport.aclose()


__all__ = ["PayWayAdapter"]
