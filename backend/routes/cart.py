# backend/routes/cart.py
from typing import Optional
from fastapi import APIRouter, Body, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from database import get_db
from utils.tokenJWT import get_optional_user
from utils.session import get_cart_session_id
from utils.audit import write_log
from models.users import User
from models.catalog import Product
from schemas.cart import CartItemMap, CartAddItem, CartUpdateItem, CartSummary
from services import cart_lines, shipping
from services.cart_store import SqlCartStore

router = APIRouter(prefix="/api/cart", tags=["Cart"])


def _user_id(user: Optional[User]) -> Optional[int]:
    return user.id if user else None


def _save(db: Session, request: Request, session_id: str, user: Optional[User], items, action: str, meta=None):
    # Full replace of the session cart, then audit
    stored = SqlCartStore(db).put(session_id, _user_id(user), items)
    db.commit()
    write_log(
        db,
        user_id=_user_id(user),
        session_id=session_id,
        action=action,
        resource="cart",
        request=request,
        meta={"lines": len(stored.items), **(meta or {})},
    )
    return stored.items


@router.get("", response_model=CartItemMap)
def get_cart(
    request: Request,
    db: Session = Depends(get_db),
):
    session_id = get_cart_session_id(request)
    return SqlCartStore(db).get(session_id)


@router.post("", response_model=CartItemMap)
def replace_cart(
    request: Request,
    payload: CartItemMap = Body(...),
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user),
):
    # Keys must be the product id of their line
    for key, line in payload.items():
        if key != str(line.id):
            raise HTTPException(status_code=400, detail=f"Cart key {key!r} does not match product id {line.id}")

    session_id = get_cart_session_id(request)
    items = {key: line.model_dump(by_alias=True) for key, line in payload.items()}
    return _save(db, request, session_id, current_user, items, "CART_REPLACE")


@router.get("/summary", response_model=CartSummary)
def cart_summary(
    request: Request,
    shipping_method: Optional[str] = Query(None, alias="shippingMethod"),
    db: Session = Depends(get_db),
):
    items = SqlCartStore(db).get(get_cart_session_id(request))
    totals = shipping.quote(db, items, shipping_method)
    return CartSummary(
        items=list(items.values()),
        item_count=cart_lines.item_count(items),
        **totals,
    )


@router.post("/items", response_model=CartItemMap)
def add_to_cart(
    payload: CartAddItem,
    request: Request,
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user),
):
    product = db.query(Product).filter(Product.id == payload.product_id).first()
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    if not product.in_stock:
        raise HTTPException(status_code=400, detail="Product is out of stock")

    session_id = get_cart_session_id(request)
    current = SqlCartStore(db).get(session_id)
    # Price snapshot is taken from the catalog, not from the client
    items = cart_lines.add_line(current, {
        "id": product.id,
        "name": product.name,
        "price": product.effective_price,
        "quantity": payload.quantity,
        "imageUrl": product.image_url or "",
    })
    return _save(db, request, session_id, current_user, items, "CART_ADD",
                 {"product_id": product.id, "quantity": payload.quantity})


@router.put("/items/{product_id}", response_model=CartItemMap)
def update_cart_item(
    product_id: int,
    payload: CartUpdateItem,
    request: Request,
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user),
):
    session_id = get_cart_session_id(request)
    current = SqlCartStore(db).get(session_id)
    try:
        items = cart_lines.set_quantity(current, product_id, payload.quantity)
    except KeyError:
        raise HTTPException(status_code=404, detail="Cart item not found")
    return _save(db, request, session_id, current_user, items, "CART_UPDATE",
                 {"product_id": product_id, "quantity": payload.quantity})


@router.delete("/items/{product_id}", response_model=CartItemMap)
def delete_cart_item(
    product_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user),
):
    session_id = get_cart_session_id(request)
    current = SqlCartStore(db).get(session_id)
    try:
        items = cart_lines.remove_line(current, product_id)
    except KeyError:
        raise HTTPException(status_code=404, detail="Cart item not found")
    return _save(db, request, session_id, current_user, items, "CART_DELETE", {"product_id": product_id})
