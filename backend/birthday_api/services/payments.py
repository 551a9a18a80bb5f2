import logging
import math
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional
from pydantic import ValidationError
from sqlalchemy import case, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from birthday_api.core.errors import InvalidPaymentId, PaymentNotFound, PaymentValidationError
from birthday_api.models.payment import Payment, PaymentStatus
from birthday_api.schemas.payment import PaymentFields, error_messages, payment_adapter

logger = logging.getLogger(__name__)

RECORD_FIELDS = (
    "name", "email", "amount", "currency", "method", "message", "reference",
    "status", "exchange", "crypto_symbol", "wallet_address", "tx_hash",
)

EMPTY_OVERVIEW = {
    "totalPayments": 0,
    "totalAmount": 0,
    "averageAmount": 0,
    "completedPayments": 0,
    "pendingPayments": 0,
}


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def stamp_created(payment: Payment, now: Optional[datetime] = None) -> Payment:
    now = now or utcnow()
    payment.created_at = now
    payment.updated_at = now
    return payment


def touch(payment: Payment, now: Optional[datetime] = None) -> Payment:
    """Refresh updated_at, always moving it forward."""
    now = now or utcnow()
    if payment.updated_at is not None and now <= payment.updated_at:
        now = payment.updated_at + timedelta(microseconds=1)
    payment.updated_at = now
    return payment


def parse_payment_id(raw: str) -> uuid.UUID:
    try:
        return uuid.UUID(raw)
    except (ValueError, AttributeError, TypeError):
        raise InvalidPaymentId() from None


def paginate(page: int, limit: int, total: int) -> dict:
    total_pages = math.ceil(total / limit) if limit else 0
    return {
        "currentPage": page,
        "totalPages": total_pages,
        "totalPayments": total,
        "limit": limit,
        "hasNext": page < total_pages,
        "hasPrev": page > 1,
    }


def _apply(payment: Payment, payload: PaymentFields) -> Payment:
    data = payload.model_dump(mode="json")
    for field in RECORD_FIELDS:
        setattr(payment, field, data.get(field))
    return payment


async def _commit(db: AsyncSession, payment: Payment) -> Payment:
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise PaymentValidationError(["Reference already exists"])
    await db.refresh(payment)
    return payment


async def list_payments(
    db: AsyncSession,
    page: int = 1,
    limit: int = 20,
    status: Optional[str] = None,
    method: Optional[str] = None,
    currency: Optional[str] = None,
) -> tuple[list[Payment], int]:
    filters = []
    if status:
        filters.append(Payment.status == status)
    if method:
        filters.append(Payment.method == method)
    if currency:
        filters.append(Payment.currency == currency)

    payments = list(await db.scalars(
        select(Payment).where(*filters)
        .order_by(Payment.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    ))
    total = await db.scalar(select(func.count(Payment.id)).where(*filters))
    return payments, total or 0


async def get_payment(db: AsyncSession, payment_id: uuid.UUID) -> Payment:
    payment = await db.get(Payment, payment_id)
    if not payment:
        raise PaymentNotFound()
    return payment


async def create_payment(db: AsyncSession, payload: PaymentFields) -> Payment:
    payment = stamp_created(_apply(Payment(), payload))
    db.add(payment)
    await _commit(db, payment)
    logger.info("Created payment %s (%s %s via %s)", payment.id, payment.amount, payment.currency, payment.method)
    return payment


async def update_payment(db: AsyncSession, payment_id: uuid.UUID, changes: dict) -> Payment:
    """Apply a partial update, re-validating the merged record."""
    payment = await get_payment(db, payment_id)
    merged = {field: getattr(payment, field) for field in RECORD_FIELDS}
    merged.update(changes)
    try:
        payload = payment_adapter.validate_python(merged)
    except ValidationError as exc:
        raise PaymentValidationError(error_messages(exc.errors())) from exc

    touch(_apply(payment, payload))
    await _commit(db, payment)
    logger.info("Updated payment %s (%s)", payment.id, ", ".join(sorted(changes)) or "no fields")
    return payment


async def delete_payment(db: AsyncSession, payment_id: uuid.UUID) -> None:
    payment = await get_payment(db, payment_id)
    await db.delete(payment)
    await db.commit()
    logger.info("Deleted payment %s", payment_id)


async def _breakdown(db: AsyncSession, column, key: str) -> list[dict]:
    total_amount = func.coalesce(func.sum(Payment.amount), 0).label("total_amount")
    rows = await db.execute(
        select(column, func.count(Payment.id).label("count"), total_amount)
        .group_by(column)
        .order_by(total_amount.desc())
    )
    return [
        {key: value, "count": count, "totalAmount": float(amount)}
        for value, count, amount in rows.all()
    ]


async def payment_summary(db: AsyncSession) -> dict:
    row = (await db.execute(
        select(
            func.count(Payment.id),
            func.coalesce(func.sum(Payment.amount), 0),
            func.coalesce(func.avg(Payment.amount), 0),
            func.coalesce(func.sum(case((Payment.status == PaymentStatus.completed.value, 1), else_=0)), 0),
            func.coalesce(func.sum(case((Payment.status == PaymentStatus.pending.value, 1), else_=0)), 0),
        )
    )).one()
    total, amount, average, completed, pending = row

    if not total:
        overview = dict(EMPTY_OVERVIEW)
    else:
        overview = {
            "totalPayments": total,
            "totalAmount": float(amount),
            "averageAmount": float(average),
            "completedPayments": int(completed),
            "pendingPayments": int(pending),
        }

    return {
        "overview": overview,
        "byMethod": await _breakdown(db, Payment.method, "method"),
        "byCurrency": await _breakdown(db, Payment.currency, "currency"),
    }
