"""HMAC-SHA512 signing for PayWay requests and pushbacks."""

import base64
import hashlib
import hmac
from typing import Literal

from ..exceptions import ConfigurationError

HashEncoding = Literal["base64", "hex"]


def sign(secret_key: bytes, message: str, encoding: HashEncoding = "base64") -> str:
    """Compute the PayWay hash of ``message``.

    Args:
        secret_key: Merchant API key
        message: Canonical concatenation of the signed fields
        encoding: ``"base64"`` for the checkout API, ``"hex"`` for endpoints
            that expect a hex digest

    Raises:
        ConfigurationError: if the key is empty
    """
    if not secret_key:
        raise ConfigurationError("PayWay API key is not configured")

    digest = hmac.new(secret_key, message.encode("utf-8"), hashlib.sha512)
    if encoding == "base64":
        return base64.b64encode(digest.digest()).decode("ascii")
    if encoding == "hex":
        return digest.hexdigest()
    raise ValueError(f"Unsupported hash encoding: {encoding}")


def signatures_match(expected: str, received: str) -> bool:
    """Constant-time comparison of two hash strings."""
    return hmac.compare_digest(expected.encode("utf-8"), received.encode("utf-8"))
