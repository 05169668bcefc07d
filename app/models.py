from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, ClassVar, Dict, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field


class PaymentOption(str, Enum):
    """Payment methods the UI may request."""

    CARD = "card"
    KHQR = "khqr-qr"

    @property
    def gateway_code(self) -> str:
        return _GATEWAY_CODES[self]


_GATEWAY_CODES = {
    PaymentOption.CARD: "cards",
    PaymentOption.KHQR: "abapay_khqr",
}


class Item(BaseModel):
    name: str = Field(min_length=1)
    quantity: int = Field(ge=1)
    price: Decimal = Field(ge=0)


class PaymentRequest(BaseModel):
    """A signed purchase request, ready to be posted to the gateway."""

    model_config = ConfigDict(frozen=True)

    merchant_id: str
    req_time: str
    tran_id: str
    amount: str
    currency: str = "USD"
    items: str
    payment_option: str
    return_url: str
    cancel_url: str
    pushback_url: str
    hash: str

    def signed_message(self) -> str:
        """Canonical concatenation covered by ``hash``."""
        return signed_message(
            self.req_time,
            self.tran_id,
            self.merchant_id,
            self.amount,
            self.items,
            self.payment_option,
        )

    def to_payload(self) -> Dict[str, str]:
        return self.model_dump()


def signed_message(
    req_time: str,
    tran_id: str,
    merchant_id: str,
    amount: str,
    items: str,
    payment_option: str,
) -> str:
    # Field order is fixed by the gateway.
    return f"{req_time}{tran_id}{merchant_id}{amount}{items}{payment_option}"


# ==================== Gateway outcomes ====================

class FormRedirect(BaseModel):
    type: Literal["form_redirect"] = "form_redirect"
    url: str
    payload: Dict[str, Any] = Field(default_factory=dict)


class InlineImage(BaseModel):
    type: Literal["khqr"] = "khqr"
    khqr_image: str


class RawMarkup(BaseModel):
    type: Literal["html"] = "html"
    html: str


FailureCategory = Literal["gateway", "network", "timeout", "unexpected"]


class Failure(BaseModel):
    type: Literal["failure"] = "failure"
    reason: str
    category: FailureCategory = "gateway"


GatewayOutcome = Annotated[
    Union[FormRedirect, InlineImage, RawMarkup, Failure],
    Field(discriminator="type"),
]


# ==================== HTTP bodies ====================

class CreatePaymentBody(BaseModel):
    """Body posted by the UI to start a payment."""

    model_config = ConfigDict(populate_by_name=True)

    payment_option: str = Field(alias="paymentOption")
    amount: Any
    items: List[Any] = Field(default_factory=list)


class CallbackEvent(BaseModel):
    """Pushback notification fields as sent by the gateway."""

    model_config = ConfigDict(coerce_numbers_to_str=True, extra="ignore")

    tran_id: Optional[str] = None
    status: Optional[str] = None
    amount: Optional[str] = None
    merchant_id: Optional[str] = None
    hash: Optional[str] = None

    REQUIRED_FIELDS: ClassVar[Tuple[str, ...]] = ("tran_id", "status", "amount", "merchant_id", "hash")

    def missing_fields(self) -> List[str]:
        return [name for name in self.REQUIRED_FIELDS if not getattr(self, name)]


class Acknowledgement(BaseModel):
    status: Literal["0", "1"]
    message: str

    @classmethod
    def success(cls) -> "Acknowledgement":
        return cls(status="0", message="Success")

    @classmethod
    def failure(cls, message: str) -> "Acknowledgement":
        return cls(status="1", message=message)
