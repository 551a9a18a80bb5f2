from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from birthday_api.config import settings
from birthday_api.core.errors import store_errors
from birthday_api.database import get_db
from birthday_api.models.payment import Currency, PaymentMethod, PaymentStatus
from birthday_api.schemas.payment import PaymentCreate, PaymentUpdate, serialize_payment
from birthday_api.services import payments as service

router = APIRouter(prefix="/api/payments", tags=["payments"])


@router.get("")
@router.get("/", include_in_schema=False)
async def list_payments(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1),
    status: Optional[PaymentStatus] = None,
    method: Optional[PaymentMethod] = None,
    currency: Optional[Currency] = None,
    db: AsyncSession = Depends(get_db),
):
    limit = min(limit, settings.MAX_PAGE_SIZE)
    with store_errors("Error fetching payments"):
        payments, total = await service.list_payments(
            db,
            page=page,
            limit=limit,
            status=status.value if status else None,
            method=method.value if method else None,
            currency=currency.value if currency else None,
        )
    return {
        "success": True,
        "data": [serialize_payment(p) for p in payments],
        "pagination": service.paginate(page, limit, total),
    }


@router.get("/stats/summary")
async def payment_stats(db: AsyncSession = Depends(get_db)):
    with store_errors("Error fetching statistics"):
        summary = await service.payment_summary(db)
    return {"success": True, "data": summary}


@router.get("/{payment_id}")
async def get_payment(payment_id: str, db: AsyncSession = Depends(get_db)):
    pid = service.parse_payment_id(payment_id)
    with store_errors("Error fetching payment"):
        payment = await service.get_payment(db, pid)
    return {"success": True, "data": serialize_payment(payment)}


@router.post("", status_code=201)
@router.post("/", status_code=201, include_in_schema=False)
async def create_payment(body: PaymentCreate, db: AsyncSession = Depends(get_db)):
    with store_errors("Error creating payment"):
        payment = await service.create_payment(db, body.root)
    return {
        "success": True,
        "data": serialize_payment(payment),
        "message": "Payment record created successfully",
    }


@router.put("/{payment_id}")
async def update_payment(payment_id: str, body: PaymentUpdate, db: AsyncSession = Depends(get_db)):
    pid = service.parse_payment_id(payment_id)
    with store_errors("Error updating payment"):
        payment = await service.update_payment(db, pid, body.model_dump(exclude_unset=True))
    return {
        "success": True,
        "data": serialize_payment(payment),
        "message": "Payment updated successfully",
    }


@router.delete("/{payment_id}")
async def delete_payment(payment_id: str, db: AsyncSession = Depends(get_db)):
    pid = service.parse_payment_id(payment_id)
    with store_errors("Error deleting payment"):
        await service.delete_payment(db, pid)
    return {"success": True, "message": "Payment deleted successfully"}
