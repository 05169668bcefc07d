import logging
from typing import Any, Awaitable, Callable, Mapping, Optional

import pydantic
from fastapi import status
from fastapi.responses import JSONResponse

from adapters.exceptions import (
    ConfigurationError,
    GatewayFailure,
    GatewayTimeout,
    NetworkError,
    PaymentError,
    ValidationError,
    WebhookError,
)
from adapters.payway import PayWayAdapter
from models import Acknowledgement, CallbackEvent, CreatePaymentBody, Failure

logger = logging.getLogger(__name__)

CallbackSink = Callable[[CallbackEvent], Awaitable[None]]


def _raise_for_failure(outcome: Failure) -> None:
    if outcome.category == "timeout":
        raise GatewayTimeout(
            "The payment gateway did not respond in time. Please try again."
        )
    if outcome.category == "network":
        raise NetworkError(
            "Could not connect to the payment gateway. Please try again."
        )
    raise GatewayFailure(outcome.reason)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message})


def _ack(status_code: int, ack: Acknowledgement) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ack.model_dump())


class PaymentServiceHandler:
    """HTTP-facing orchestration of payment creation and pushbacks."""

    def __init__(
        self,
        payment_adapter: PayWayAdapter,
        callback_sink: Optional[CallbackSink] = None,
    ):
        self._payment_adapter = payment_adapter
        self._callback_sink = callback_sink
        logger.info(f"PaymentServiceHandler initialized with {payment_adapter.__class__.__name__}")

    async def create_payment(self, body: CreatePaymentBody) -> JSONResponse:
        """Build, send and classify a payment; map errors onto HTTP statuses."""
        try:
            outcome = await self._payment_adapter.create_payment(
                amount=body.amount,
                payment_option=body.payment_option,
                items=body.items,
            )
            if isinstance(outcome, Failure):
                _raise_for_failure(outcome)

            return JSONResponse(status_code=status.HTTP_200_OK, content=outcome.model_dump())

        except ValidationError as e:
            logger.warning("Validation error creating payment: %s", e)
            return _error(status.HTTP_400_BAD_REQUEST, str(e))
        except ConfigurationError as e:
            logger.error("Payment service misconfigured: %s", e)
            return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, str(e))
        except GatewayTimeout as e:
            logger.error("Payment gateway timed out: %s", e)
            return _error(status.HTTP_504_GATEWAY_TIMEOUT, str(e))
        except NetworkError as e:
            logger.error("Payment gateway unreachable: %s", e)
            return _error(status.HTTP_503_SERVICE_UNAVAILABLE, str(e))
        except GatewayFailure as e:
            logger.error("Payment gateway rejected request: %s", e)
            return _error(status.HTTP_502_BAD_GATEWAY, str(e))
        except PaymentError as e:
            logger.error("Payment adapter failed: %s", e)
            return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, str(e))
        except Exception as e:
            logger.exception("Error creating payment")
            return _error(
                status.HTTP_500_INTERNAL_SERVER_ERROR, f"Failed to create payment: {e}"
            )

    async def handle_callback(self, fields: Mapping[str, Any]) -> JSONResponse:
        """Authenticate a pushback and acknowledge it in the gateway's format."""
        try:
            event = self._parse_callback(fields)
        except WebhookError as e:
            logger.warning("Malformed pushback: %s", e)
            return _ack(status.HTTP_400_BAD_REQUEST, Acknowledgement.failure(f"Bad request: {e}"))

        missing = event.missing_fields()
        if missing:
            logger.warning("Pushback missing fields %s", missing)
            return _ack(
                status.HTTP_400_BAD_REQUEST,
                Acknowledgement.failure(f"Bad request: missing {', '.join(missing)}"),
            )

        reason = self._payment_adapter.webhook_rejection_reason(event)
        if reason is not None:
            logger.warning("Rejected pushback for tran_id %s: %s", event.tran_id, reason)
            return _ack(status.HTTP_400_BAD_REQUEST, Acknowledgement.failure(reason))

        logger.info(
            "Verified pushback for tran_id %s: status=%s amount=%s",
            event.tran_id,
            event.status,
            event.amount,
        )

        if self._callback_sink is not None:
            try:
                await self._callback_sink(event)
            except Exception:
                logger.exception("Failed to record pushback for tran_id %s", event.tran_id)
                return _ack(
                    status.HTTP_500_INTERNAL_SERVER_ERROR,
                    Acknowledgement.failure("Failed to record transaction status"),
                )

        return _ack(status.HTTP_200_OK, Acknowledgement.success())

    @staticmethod
    def _parse_callback(fields: Mapping[str, Any]) -> CallbackEvent:
        if not isinstance(fields, Mapping):
            raise WebhookError("body must be an object")
        try:
            return CallbackEvent.model_validate(dict(fields))
        except pydantic.ValidationError as exc:
            raise WebhookError(
                "invalid fields: "
                + ", ".join(str(err["loc"][0]) for err in exc.errors() if err["loc"])
            ) from exc
