"""
Tests for pushback verification.
"""

import logging

import pytest

from adapters.payway.callback import callback_message, rejection_reason, verify
from adapters.payway.signing import sign
from models import CallbackEvent
from tests.conftest import API_KEY, MERCHANT_ID

KEY = API_KEY.encode()


def signed_event(**overrides) -> CallbackEvent:
    fields = {
        "tran_id": "20250314092653070000",
        "status": "0",
        "amount": "1.00",
        "merchant_id": MERCHANT_ID,
    }
    fields.update(overrides)
    fields["hash"] = sign(
        KEY,
        fields["tran_id"] + fields["merchant_id"] + fields["status"] + fields["amount"],
    )
    return CallbackEvent(**fields)


def test_callback_message_order():
    assert callback_message("T", "M", "S", "A") == "TMSA"


def test_valid_event_accepted():
    assert verify(signed_event(), MERCHANT_ID, KEY) is True
    assert rejection_reason(signed_event(), MERCHANT_ID, KEY) is None


def test_hex_encoded_event_accepted():
    event = signed_event()
    event.hash = sign(KEY, callback_message(event.tran_id, MERCHANT_ID, "0", "1.00"), "hex")

    assert verify(event, MERCHANT_ID, KEY, encoding="hex") is True
    assert verify(event, MERCHANT_ID, KEY) is False


@pytest.mark.parametrize("field, value", [
    ("tran_id", "20250314092653070001"),
    ("status", "1"),
    ("amount", "1.01"),
    ("amount", "2.00"),
    ("hash", "tampered"),
])
def test_single_field_mutation_rejected(field, value):
    event = signed_event()
    setattr(event, field, value)

    assert verify(event, MERCHANT_ID, KEY) is False
    assert rejection_reason(event, MERCHANT_ID, KEY) == "Invalid hash"


def test_merchant_mismatch_rejected_even_with_valid_hash():
    event = signed_event(merchant_id="other-merchant")

    assert verify(event, MERCHANT_ID, KEY) is False
    assert rejection_reason(event, MERCHANT_ID, KEY) == "Merchant ID mismatch"


def test_wrong_key_rejected():
    assert verify(signed_event(), MERCHANT_ID, b"another-key") is False


@pytest.mark.parametrize("missing", ["tran_id", "status", "amount", "merchant_id", "hash"])
def test_missing_field_rejected(missing):
    event = signed_event()
    setattr(event, missing, None)

    assert verify(event, MERCHANT_ID, KEY) is False
    assert missing in rejection_reason(event, MERCHANT_ID, KEY)


@pytest.mark.parametrize("merchant_id, key", [(None, KEY), (MERCHANT_ID, b""), ("", KEY)])
def test_unconfigured_merchant_fails_closed(merchant_id, key):
    assert verify(signed_event(), merchant_id, key) is False


def test_rejection_is_logged(caplog):
    event = signed_event(amount="9.99")
    event.amount = "9.98"

    with caplog.at_level(logging.WARNING):
        verify(event, MERCHANT_ID, KEY)

    assert "Rejected pushback" in caplog.text
    assert event.hash not in caplog.text


def test_numeric_amount_coerced_to_string():
    event = CallbackEvent.model_validate({
        "tran_id": "1", "status": 0, "amount": 5, "merchant_id": MERCHANT_ID, "hash": "x",
    })

    assert event.amount == "5"
    assert event.status == "0"
