"""Authentication of PayWay pushback callbacks."""

import logging
from typing import Optional

from models import CallbackEvent
from .signing import HashEncoding, sign, signatures_match

logger = logging.getLogger(__name__)


def callback_message(tran_id: str, merchant_id: str, status: str, amount: str) -> str:
    # Field order is fixed by the gateway.
    return f"{tran_id}{merchant_id}{status}{amount}"


def rejection_reason(
    event: CallbackEvent,
    configured_merchant_id: Optional[str],
    secret_key: bytes,
    encoding: HashEncoding = "base64",
) -> Optional[str]:
    """Return why ``event`` must be rejected, or ``None`` if it is authentic."""
    missing = event.missing_fields()
    if missing:
        return f"Missing required fields: {', '.join(missing)}"

    if not configured_merchant_id or not secret_key:
        return "Merchant is not configured"

    if event.merchant_id != configured_merchant_id:
        return "Merchant ID mismatch"

    expected = sign(
        secret_key,
        callback_message(
            event.tran_id, configured_merchant_id, event.status, event.amount
        ),
        encoding,
    )

    if not signatures_match(expected, event.hash):
        return "Invalid hash"
    return None


def verify(
    event: CallbackEvent,
    configured_merchant_id: Optional[str],
    secret_key: bytes,
    encoding: HashEncoding = "base64",
) -> bool:
    """Authenticate a pushback. Never raises; any doubt means ``False``."""
    reason = rejection_reason(event, configured_merchant_id, secret_key, encoding)
    if reason is not None:
        logger.warning("Rejected pushback for tran_id %s: %s", event.tran_id, reason)
        return False
    return True
