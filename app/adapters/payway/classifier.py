"""Classification of PayWay responses into ``GatewayOutcome`` variants.

The gateway answers a purchase request in one of several shapes:

* ``text/html``: an auto-submitting checkout form (card payments)
* JSON carrying a base64 QR image (KHQR payments)
* JSON carrying a checkout link to redirect the shopper to
* JSON error body with a ``description`` (or ``status.message``)

The shapes are not formally documented and have been seen to change, so
anything unrecognized becomes a ``Failure`` and the raw body is logged.
"""

import json
import logging
from typing import Any, Dict, Mapping, Optional

from models import Failure, FormRedirect, GatewayOutcome, InlineImage, RawMarkup
from ..exceptions import GatewayTimeout, NetworkError

logger = logging.getLogger(__name__)

IMAGE_FIELDS = ("khqr_image", "qrImage")
LINK_FIELDS = ("checkout_link", "checkout_url", "redirect_url")
FORM_FIELD_CONTAINERS = ("form_fields", "payload")

UNABLE_TO_PROCESS_MESSAGE = (
    "The payment gateway was unable to process the request. "
    "Please check transaction details."
)
NETWORK_FAILURE_MESSAGE = "could not connect to the payment gateway"
MAX_LOGGED_BODY = 2000


def _header(headers: Mapping[str, str], name: str) -> str:
    for key, value in headers.items():
        if key.lower() == name:
            return value
    return ""


def _decode(body: bytes | str) -> str:
    if isinstance(body, bytes):
        return body.decode("utf-8", errors="replace")
    return body


def _parse_json(text: str) -> Optional[Any]:
    try:
        return json.loads(text)
    except (json.JSONDecodeError, ValueError):
        return None


def _error_reason(status_code: int, text: str, data: Any) -> str:
    if isinstance(data, dict):
        if data.get("description"):
            return str(data["description"])
        status = data.get("status")
        if isinstance(status, dict) and status.get("message"):
            return str(status["message"])
    elif "unable to process" in text.lower():
        return UNABLE_TO_PROCESS_MESSAGE
    return f"gateway request failed with status {status_code}"


def _form_fields(data: Dict[str, Any], link_field: str) -> Dict[str, Any]:
    for container in FORM_FIELD_CONTAINERS:
        if isinstance(data.get(container), dict):
            return dict(data[container])
    return {
        key: value
        for key, value in data.items()
        if key != link_field and not isinstance(value, (dict, list))
    }


def classify(
    status_code: int,
    headers: Mapping[str, str],
    body: bytes | str,
) -> GatewayOutcome:
    """Map a gateway HTTP response onto exactly one outcome variant."""
    text = _decode(body)
    data = _parse_json(text)

    if status_code >= 400:
        reason = _error_reason(status_code, text, data)
        logger.error("PayWay API error response (%s): %s", status_code, text[:MAX_LOGGED_BODY])
        return Failure(reason=reason, category="gateway")

    if "text/html" in _header(headers, "content-type").lower():
        return RawMarkup(html=text)

    if isinstance(data, dict):
        for field in IMAGE_FIELDS:
            if data.get(field):
                return InlineImage(khqr_image=str(data[field]))
        for field in LINK_FIELDS:
            if data.get(field):
                return FormRedirect(url=str(data[field]), payload=_form_fields(data, field))

    logger.warning(
        "Unexpected PayWay response shape (status %s): %s",
        status_code,
        text[:MAX_LOGGED_BODY],
    )
    return Failure(reason="unexpected response shape", category="unexpected")


def classify_transport_error(exc: NetworkError) -> Failure:
    """Map a transport failure onto a ``Failure`` outcome."""
    if isinstance(exc, GatewayTimeout):
        return Failure(reason="timeout", category="timeout")
    return Failure(reason=NETWORK_FAILURE_MESSAGE, category="network")
