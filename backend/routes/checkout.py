# backend/routes/checkout.py
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlalchemy.orm import Session

from database import get_db
from models.users import User
from schemas.order import OrderWithItems
from schemas.checkout import (
    CheckoutQuote, CheckoutQuoteRequest, CheckoutRequest, CheckoutResponse,
    PaymentMethodOut, ShippingMethodOut,
)
from services import shipping
from services.cart_store import SqlCartStore
from services.checkout import CheckoutDetails, CheckoutService
from services.errors import StorefrontError
from services.payments import PaymentProvider, get_payment_provider
from utils.audit import write_log
from utils.session import get_cart_session_id
from utils.tokenJWT import get_optional_user

router = APIRouter(prefix="/api/checkout", tags=["Checkout"])
logger = logging.getLogger(__name__)


# Step 1 options
@router.get("/shipping-methods", response_model=List[ShippingMethodOut])
def list_shipping_methods(db: Session = Depends(get_db)):
    return shipping.shipping_methods(db)


# Step 2 options
@router.get("/payment-methods", response_model=List[PaymentMethodOut])
def list_payment_methods(db: Session = Depends(get_db)):
    return shipping.payment_methods(db)


# Totals for the session cart with the chosen shipping method
@router.post("/quote", response_model=CheckoutQuote)
def quote(
    payload: CheckoutQuoteRequest,
    request: Request,
    db: Session = Depends(get_db),
):
    items = SqlCartStore(db).get(get_cart_session_id(request))
    if not items:
        raise HTTPException(status_code=400, detail="Cart is empty")
    return shipping.quote(db, items, payload.shipping_method)


# Final submission: cart -> order -> payment -> cart cleared, in one transaction
@router.post("", response_model=CheckoutResponse, status_code=status.HTTP_201_CREATED)
async def place_order(
    payload: CheckoutRequest,
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user),
    payment_provider: PaymentProvider = Depends(get_payment_provider),
):
    session_id = get_cart_session_id(request)
    user_id = current_user.id if current_user else None

    service = CheckoutService(db, SqlCartStore(db), payment_provider)
    details = CheckoutDetails(
        customer_name=payload.customer_name,
        customer_email=payload.email,
        customer_phone=payload.phone,
        shipping_address=payload.shipping_address,
        shipping_method=payload.shipping_method,
        payment_method=payload.payment_method,
        idempotency_key=payload.idempotency_key,
    )

    try:
        result = await service.place_order(session_id, user_id, details)
    except StorefrontError as e:
        write_log(db, user_id=user_id, session_id=session_id, action="CHECKOUT", resource="orders",
                  status="FAIL", request=request, meta={"reason": e.message, "order_id": getattr(e, "order_id", None)})
        raise HTTPException(status_code=e.status_code, detail=e.message)

    if result.replayed:
        response.status_code = status.HTTP_200_OK
    else:
        write_log(db, user_id=user_id, session_id=session_id, action="CHECKOUT", resource="orders",
                  request=request, meta={"order_id": result.order.id, "total": result.order.total,
                                         "payment_method": payload.payment_method})

    return CheckoutResponse(
        order=OrderWithItems.model_validate(result.order),
        payment_intent_id=result.payment_intent_id,
        replayed=result.replayed,
    )
