# backend/routes/orders.py
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from database import get_db
import logging
from utils.tokenJWT import get_current_user, get_optional_user
from utils.session import get_cart_session_id
from utils.audit import write_log
from models.users import User
from models.order import Order
from schemas.order import OrderOut, OrderWithItems, OrderCreatePayload, OrderTrackRequest
from services import cart_lines, shipping
from services.cart_store import SqlCartStore
from services.order_store import OrderStore

router = APIRouter(prefix="/api/orders", tags=["Orders"])
logger = logging.getLogger(__name__)


# Owner or admin may read an order
def _can_view(order: Order, user: User) -> bool:
    return order.user_id == user.id or bool(user.is_admin)


# Create order + line snapshots from the submitted lines and clear the session cart
@router.post("", response_model=OrderOut, status_code=status.HTTP_201_CREATED)
def create_order(
    payload: OrderCreatePayload,
    request: Request,
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user),
):
    user_id = current_user.id if current_user else None
    session_id = get_cart_session_id(request)

    # Repeated product ids merge into one line, as adding to the cart does
    lines = {}
    for line in payload.items:
        existing = lines.get(str(line.id))
        if existing and float(existing["price"]) != line.price:
            raise HTTPException(status_code=400, detail=f"Conflicting prices for product {line.id}")
        lines = cart_lines.add_line(lines, {"id": line.id, "name": line.name, "price": line.price, "quantity": line.quantity})

    # Total is always derived here, never taken from the client
    totals = shipping.quote(db, lines, payload.shipping_method)

    orders = OrderStore(db)
    try:
        order = orders.create(
            user_id=user_id,
            session_id=session_id,
            customer_name=payload.customer_name,
            customer_email=payload.customer_email,
            customer_phone=payload.customer_phone,
            shipping_address=payload.shipping_address,
            shipping_method=payload.shipping_method,
            shipping_cost=totals["shipping_cost"],
            payment_method=payload.payment_method,
            total=totals["total"],
        )
        for line in lines.values():
            orders.add_item(order.id, product_id=line["id"], name=line["name"], price=line["price"], quantity=line["quantity"])
        SqlCartStore(db).clear(session_id, user_id)
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("Failed to create order for session %s", session_id)
        raise HTTPException(status_code=500, detail="Failed to create order")

    db.refresh(order)
    write_log(db, user_id=user_id, session_id=session_id, action="ORDER_CREATE", resource="orders",
              request=request, meta={"order_id": order.id, "total": order.total, "lines": len(lines)})
    return order


# List the current user's orders
@router.get("", response_model=List[OrderOut])
def list_my_orders(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return OrderStore(db).list_by_user(current_user.id)


# Public tracking: order id + matching email, no account needed
@router.post("/track", response_model=OrderWithItems)
def track_order(
    payload: OrderTrackRequest,
    request: Request,
    db: Session = Depends(get_db),
):
    order = OrderStore(db).get(payload.order_id)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")

    # Mismatch is 403, an unknown id is 404
    if order.customer_email.strip().lower() != payload.email.strip().lower():
        write_log(db, action="ORDER_TRACK", resource="orders", status="FAIL", request=request,
                  meta={"order_id": order.id, "reason": "email mismatch"})
        raise HTTPException(status_code=403, detail="Email doesn't match order record")
    return order


# Get details of a specific order
@router.get("/{order_id}", response_model=OrderWithItems)
def get_order_detail(
    order_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    order = OrderStore(db).get(order_id)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    if not _can_view(order, current_user):
        raise HTTPException(status_code=403, detail="Forbidden")
    return order
