import pytest
from pydantic import ValidationError
from birthday_api.schemas.payment import (
    CryptoPayment,
    FiatPayment,
    error_messages,
    payment_adapter,
)

BASE = {"name": "Ama", "email": "ama@x.com", "amount": 25, "currency": "GHS"}
CRYPTO = {"exchange": "Binance", "cryptoSymbol": "USDT", "walletAddress": "TQ9x7ab3"}


def messages_for(payload: dict) -> list:
    with pytest.raises(ValidationError) as info:
        payment_adapter.validate_python(payload)
    return error_messages(info.value.errors())


@pytest.mark.parametrize("method", ["Mobile Money", "Bank Transfer"])
def test_fiat_method_does_not_need_crypto_fields(method):
    payment = payment_adapter.validate_python({**BASE, "method": method})
    assert isinstance(payment, FiatPayment)
    assert payment.exchange is None
    assert payment.wallet_address is None


@pytest.mark.parametrize("method", ["Crypto (Binance)", "Crypto (OKX)"])
def test_crypto_method_with_all_fields(method):
    payment = payment_adapter.validate_python({**BASE, **CRYPTO, "method": method})
    assert isinstance(payment, CryptoPayment)
    assert payment.crypto_symbol == "USDT"


@pytest.mark.parametrize("missing,expected", [
    ("exchange", "Exchange is required for crypto payments"),
    ("cryptoSymbol", "Crypto symbol is required for crypto payments"),
    ("walletAddress", "Wallet address is required for crypto payments"),
])
def test_crypto_method_requires_each_crypto_field(missing, expected):
    payload = {**BASE, **CRYPTO, "method": "Crypto (OKX)"}
    del payload[missing]
    assert messages_for(payload) == [expected]


def test_email_is_trimmed_and_lowercased():
    payment = payment_adapter.validate_python({**BASE, "email": "  Ama.Owusu@Example.COM ", "method": "Mobile Money"})
    assert payment.email == "ama.owusu@example.com"


def test_invalid_email_rejected():
    assert messages_for({**BASE, "email": "not-an-email", "method": "Mobile Money"}) == [
        "Please provide a valid email"
    ]


def test_amount_string_is_coerced():
    payment = payment_adapter.validate_python({**BASE, "amount": "25.5", "method": "Mobile Money"})
    assert payment.amount == 25.5


def test_amount_rules():
    assert messages_for({**BASE, "amount": -1, "method": "Mobile Money"}) == ["Amount must be positive"]
    assert messages_for({**BASE, "amount": "abc", "method": "Mobile Money"}) == ["Amount must be a number"]


def test_defaults_applied():
    payment = payment_adapter.validate_python(
        {"name": "Kofi", "email": "kofi@x.com", "amount": 5, "method": "Bank Transfer"}
    )
    assert payment.currency.value == "GHS"
    assert payment.status.value == "pending"


def test_blank_reference_treated_as_absent():
    payment = payment_adapter.validate_python({**BASE, "reference": "   ", "method": "Mobile Money"})
    assert payment.reference is None


def test_all_violations_reported_together():
    messages = messages_for({
        "name": "x" * 101,
        "email": "bad",
        "amount": -5,
        "currency": "EUR",
        "message": "m" * 501,
    })
    assert "Payment method is required" in messages
    assert "Name cannot exceed 100 characters" in messages
    assert "Please provide a valid email" in messages
    assert "Amount must be positive" in messages
    assert "Message cannot exceed 500 characters" in messages
    assert "'EUR' is not a valid currency" in messages


def test_unknown_method_reported():
    assert messages_for({**BASE, "method": "Cash"}) == ["'Cash' is not a valid payment method"]


def test_null_required_fields_read_as_missing():
    assert messages_for({**BASE, "name": None, "method": "Mobile Money"}) == ["Name is required"]
