import re
from datetime import datetime, timezone
from typing import Annotated, Any, Literal, Optional, Union
from uuid import UUID
from pydantic import (
    BaseModel,
    ConfigDict,
    Discriminator,
    Field,
    RootModel,
    StringConstraints,
    Tag,
    TypeAdapter,
    field_validator,
)
from pydantic.alias_generators import to_camel
from birthday_api.models.payment import Currency, Exchange, PaymentMethod, PaymentStatus

EMAIL_PATTERN = re.compile(r"^\w+([.-]\w+)*@\w+([.-]\w+)*\.\w{2,3}$", re.ASCII)

FIAT_METHODS = tuple(m.value for m in PaymentMethod if not m.is_crypto)
CRYPTO_METHODS = tuple(m.value for m in PaymentMethod if m.is_crypto)

Name = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]
Message = Annotated[str, StringConstraints(strip_whitespace=True, max_length=500)]
Trimmed = Annotated[str, StringConstraints(strip_whitespace=True)]
RequiredText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


def reject_bool_amount(v):
    # JSON true/false would otherwise coerce to 1.0/0.0
    if isinstance(v, bool):
        raise ValueError("Amount must be a number")
    return v


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PaymentFields(CamelModel):
    """Fields shared by every payment method."""

    name: Name
    email: str
    amount: float = Field(ge=0, allow_inf_nan=False)
    currency: Currency = Currency.GHS
    message: Optional[Message] = None
    reference: Optional[Trimmed] = None
    status: PaymentStatus = PaymentStatus.pending
    tx_hash: Optional[Trimmed] = None

    @field_validator("amount", mode="before")
    @classmethod
    def amount_not_bool(cls, v):
        return reject_bool_amount(v)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        v = v.strip().lower()
        if not v:
            raise ValueError("Email is required")
        if not EMAIL_PATTERN.match(v):
            raise ValueError("Please provide a valid email")
        return v

    @field_validator("reference")
    @classmethod
    def blank_reference_is_absent(cls, v: Optional[str]) -> Optional[str]:
        return v or None


class FiatPayment(PaymentFields):
    method: Literal[FIAT_METHODS]
    exchange: Optional[Exchange] = None
    crypto_symbol: Optional[Trimmed] = None
    wallet_address: Optional[Trimmed] = None


class CryptoPayment(PaymentFields):
    method: Literal[CRYPTO_METHODS]
    exchange: Exchange
    crypto_symbol: RequiredText
    wallet_address: RequiredText


class UnresolvedPayment(PaymentFields):
    """Catch-all for a missing or unknown method; never validates.

    Routing here keeps the other field rules running so that every violation
    is reported in one response.
    """

    method: Literal[FIAT_METHODS + CRYPTO_METHODS]


def _method_tag(value: Any) -> str:
    if isinstance(value, dict):
        method = value.get("method")
    else:
        method = getattr(value, "method", None)
    if method in CRYPTO_METHODS:
        return "crypto"
    if method in FIAT_METHODS:
        return "fiat"
    return "unresolved"


PaymentPayload = Annotated[
    Union[
        Annotated[FiatPayment, Tag("fiat")],
        Annotated[CryptoPayment, Tag("crypto")],
        Annotated[UnresolvedPayment, Tag("unresolved")],
    ],
    Discriminator(_method_tag),
]

payment_adapter = TypeAdapter(PaymentPayload)


class PaymentCreate(RootModel[PaymentPayload]):
    """Request body for a new payment, dispatched on ``method``."""


class PaymentUpdate(CamelModel):
    """Fields a client may change after creation.

    Values are only loosely typed here; the merged record goes through
    ``PaymentPayload`` before anything is written.
    """

    name: Optional[str] = None
    email: Optional[str] = None
    amount: Optional[float] = None
    currency: Optional[Currency] = None
    method: Optional[str] = None
    message: Optional[str] = None
    status: Optional[PaymentStatus] = None
    tx_hash: Optional[str] = None

    @field_validator("amount", mode="before")
    @classmethod
    def amount_not_bool(cls, v):
        return reject_bool_amount(v)


class PaymentOut(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    email: str
    amount: float
    currency: str
    method: str
    message: Optional[str] = None
    reference: Optional[str] = None
    status: str
    exchange: Optional[str] = None
    crypto_symbol: Optional[str] = None
    wallet_address: Optional[str] = None
    tx_hash: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @field_validator("created_at", "updated_at")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        return v.replace(tzinfo=timezone.utc) if v.tzinfo is None else v


def serialize_payment(payment) -> dict:
    return PaymentOut.model_validate(payment).model_dump(mode="json", by_alias=True)


REQUIRED_MESSAGES = {
    "name": "Name is required",
    "email": "Email is required",
    "amount": "Amount is required",
    "method": "Payment method is required",
    "exchange": "Exchange is required for crypto payments",
    "cryptoSymbol": "Crypto symbol is required for crypto payments",
    "walletAddress": "Wallet address is required for crypto payments",
}

RULE_MESSAGES = {
    ("name", "string_too_long"): "Name cannot exceed 100 characters",
    ("message", "string_too_long"): "Message cannot exceed 500 characters",
    ("amount", "greater_than_equal"): "Amount must be positive",
    ("amount", "float_parsing"): "Amount must be a number",
    ("amount", "float_type"): "Amount must be a number",
    ("amount", "finite_number"): "Amount must be a number",
}

ENUM_LABELS = {
    "currency": "currency",
    "method": "payment method",
    "status": "status",
    "exchange": "exchange",
}


UNION_TAGS = {"fiat", "crypto", "unresolved"}

NOT_AN_OBJECT = ("model_type", "model_attributes_type", "dict_type")


def _field_of(loc) -> str:
    """Name the offending JSON field, skipping the body marker and union tags."""
    for part in reversed(loc):
        if isinstance(part, str) and part != "body" and part not in UNION_TAGS:
            return to_camel(part) if "_" in part else part
    return "body"


def error_messages(errors: list[dict]) -> list[str]:
    """Render pydantic error dicts as one readable message per broken rule."""
    messages = []
    for err in errors:
        field = _field_of(err.get("loc", ()))
        kind = err.get("type", "")
        if field in REQUIRED_MESSAGES and (
            kind in ("missing", "string_too_short") or err.get("input") is None
        ):
            text = REQUIRED_MESSAGES[field]
        elif (field, kind) in RULE_MESSAGES:
            text = RULE_MESSAGES[(field, kind)]
        elif field == "body" and kind in NOT_AN_OBJECT:
            text = "Request body must be an object"
        elif kind == "value_error":
            text = str(err.get("ctx", {}).get("error", err.get("msg")))
        elif kind in ("enum", "literal_error") and field in ENUM_LABELS:
            text = f"'{err.get('input')}' is not a valid {ENUM_LABELS[field]}"
        else:
            text = f"{field}: {err.get('msg')}"
        if text not in messages:
            messages.append(text)
    return messages
