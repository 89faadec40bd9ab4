# backend/routes/payment.py
import logging
from fastapi import APIRouter, Request, Depends, HTTPException
from sqlalchemy.orm import Session

from config import settings
from database import get_db
from models.order import OrderStatus, PaymentStatus
from schemas.order import OrderOut
from schemas.payment import (
    PaymentCreateRequest, PaymentCreateResponse, PaymentIntentOut,
    PaymentConfirmRequest, PaymentConfirmResponse,
)
from services.errors import PaymentProviderError
from services.order_store import OrderStore
from services.payments import PaymentProvider, get_payment_provider
from utils.audit import write_log

router = APIRouter(prefix="/api/payment/paymob", tags=["Payment"])
logger = logging.getLogger(__name__)


@router.post("/create", response_model=PaymentCreateResponse)
async def create_payment(
    payload: PaymentCreateRequest,
    request: Request,
    db: Session = Depends(get_db),
    provider: PaymentProvider = Depends(get_payment_provider),
):
    orders = OrderStore(db)
    order = orders.get(payload.order_id)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")

    # The stored order total is what gets charged
    if round(payload.amount, 2) != round(order.total, 2):
        logger.warning("Payment amount %.2f for order %s differs from order total %.2f, charging the order total",
                       payload.amount, order.id, order.total)

    try:
        intent = await provider.create_intent(
            order.total, order.id, settings.CURRENCY,
            customer={"name": order.customer_name, "email": order.customer_email,
                      "phone": order.customer_phone, "address": order.shipping_address},
        )
    except PaymentProviderError as e:
        raise HTTPException(status_code=502, detail=e.message)

    orders.set_payment_intent(order.id, intent.id)
    db.commit()

    write_log(db, user_id=order.user_id, action="PAYMENT_CREATE", resource="payment", request=request,
              meta={"order_id": order.id, "intent_id": intent.id, "provider": provider.name})
    return PaymentCreateResponse(payment_intent=PaymentIntentOut(
        id=intent.id, amount=intent.amount, currency=intent.currency, status=intent.status,
    ))


@router.post("/confirm", response_model=PaymentConfirmResponse)
async def confirm_payment(
    payload: PaymentConfirmRequest,
    request: Request,
    db: Session = Depends(get_db),
    provider: PaymentProvider = Depends(get_payment_provider),
):
    orders = OrderStore(db)
    if not orders.get(payload.order_id):
        raise HTTPException(status_code=404, detail="Order not found")

    try:
        confirmation = await provider.confirm_intent(payload.payment_intent_id, payload.order_id)
    except PaymentProviderError as e:
        raise HTTPException(status_code=502, detail=e.message)

    if confirmation.paid:
        order = orders.update_status(payload.order_id, OrderStatus.PROCESSING, PaymentStatus.PAID)
    else:
        # Fulfillment status stays as it was, only the payment is marked failed
        order = orders.update_status(payload.order_id, payment_status=PaymentStatus.FAILED)
    db.commit()

    write_log(db, user_id=order.user_id, action="PAYMENT_CONFIRM", resource="payment",
              status="SUCCESS" if confirmation.paid else "FAIL", request=request,
              meta={"order_id": order.id, "intent_id": payload.payment_intent_id, "provider": provider.name})
    return PaymentConfirmResponse(success=confirmation.paid, order=OrderOut.model_validate(order))
