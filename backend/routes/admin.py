# backend/routes/admin.py
import json
from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from typing import List
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from database import get_db
from models.users import User
from models.catalog import Category, Product
from models.setting import SiteSetting
from utils.tokenJWT import admin_required
from utils.audit import write_log
from schemas.catalog import (
    CategoryCreate, CategoryUpdate, CategoryOut,
    ProductCreate, ProductUpdate, ProductOut,
)
from schemas.setting import SiteSettingCreate, SiteSettingUpdate, SiteSettingOut
from schemas.order import OrderOut, OrderWithItems, OrderStatusUpdate
from services.order_store import OrderStore

router = APIRouter(prefix="/api/admin", tags=["Admin"])


def _commit_or_conflict(db: Session, detail: str):
    # Unique name/slug/key violations surface as 409
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=detail)


def _ensure_category(db: Session, category_id: int):
    if not db.get(Category, category_id):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Category {category_id} does not exist")


def _ensure_json(setting_type, value):
    if setting_type == "json" and value is not None:
        try:
            json.loads(value)
        except ValueError:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Value must be valid JSON")


def _audit(db: Session, user: User, request: Request, action: str, resource: str, meta: dict):
    write_log(db, user_id=user.id, action=action, resource=resource, request=request, meta=meta)


# =========================
# CATEGORIES
# =========================
@router.post("/categories", response_model=CategoryOut, status_code=status.HTTP_201_CREATED)
def create_category(
    payload: CategoryCreate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_required),
):
    category = Category(**payload.model_dump())
    db.add(category)
    _commit_or_conflict(db, "Category name or slug already exists")
    db.refresh(category)
    _audit(db, current_user, request, "CATEGORY_CREATE", "catalog", {"category_id": category.id})
    return category


@router.put("/categories/{category_id}", response_model=CategoryOut)
def update_category(
    category_id: int,
    payload: CategoryUpdate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_required),
):
    category = db.get(Category, category_id)
    if not category:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Category not found")

    changes = payload.model_dump(exclude_unset=True)
    for field, value in changes.items():
        setattr(category, field, value)
    _commit_or_conflict(db, "Category name or slug already exists")
    db.refresh(category)
    _audit(db, current_user, request, "CATEGORY_UPDATE", "catalog", {"category_id": category.id, "fields": list(changes)})
    return category


@router.delete("/categories/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_category(
    category_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_required),
):
    category = db.get(Category, category_id)
    if not category:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Category not found")
    db.delete(category)
    db.commit()
    _audit(db, current_user, request, "CATEGORY_DELETE", "catalog", {"category_id": category_id})
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# =========================
# PRODUCTS
# =========================
@router.post("/products", response_model=ProductOut, status_code=status.HTTP_201_CREATED)
def create_product(
    payload: ProductCreate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_required),
):
    _ensure_category(db, payload.category_id)
    product = Product(**payload.model_dump())
    db.add(product)
    _commit_or_conflict(db, "Product slug already exists")
    db.refresh(product)
    _audit(db, current_user, request, "PRODUCT_CREATE", "catalog", {"product_id": product.id})
    return product


@router.put("/products/{product_id}", response_model=ProductOut)
def update_product(
    product_id: int,
    payload: ProductUpdate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_required),
):
    product = db.get(Product, product_id)
    if not product:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")

    changes = payload.model_dump(exclude_unset=True)
    if changes.get("category_id") is not None:
        _ensure_category(db, changes["category_id"])
    for field, value in changes.items():
        setattr(product, field, value)
    _commit_or_conflict(db, "Product slug already exists")
    db.refresh(product)
    _audit(db, current_user, request, "PRODUCT_UPDATE", "catalog", {"product_id": product.id, "fields": list(changes)})
    return product


@router.delete("/products/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_product(
    product_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_required),
):
    product = db.get(Product, product_id)
    if not product:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
    db.delete(product)
    db.commit()
    _audit(db, current_user, request, "PRODUCT_DELETE", "catalog", {"product_id": product_id})
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# =========================
# SETTINGS
# =========================
@router.post("/settings", response_model=SiteSettingOut, status_code=status.HTTP_201_CREATED)
def create_setting(
    payload: SiteSettingCreate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_required),
):
    _ensure_json(payload.type, payload.value)
    setting = SiteSetting(**payload.model_dump())
    db.add(setting)
    _commit_or_conflict(db, "Setting key already exists")
    db.refresh(setting)
    _audit(db, current_user, request, "SETTING_CREATE", "settings", {"key": setting.key})
    return setting


@router.put("/settings/{setting_id}", response_model=SiteSettingOut)
def update_setting(
    setting_id: int,
    payload: SiteSettingUpdate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_required),
):
    setting = db.get(SiteSetting, setting_id)
    if not setting:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Setting not found")

    changes = payload.model_dump(exclude_unset=True)
    _ensure_json(changes.get("type", setting.type), changes.get("value", setting.value))
    for field, value in changes.items():
        setattr(setting, field, value)
    _commit_or_conflict(db, "Setting key already exists")
    db.refresh(setting)
    _audit(db, current_user, request, "SETTING_UPDATE", "settings", {"key": setting.key, "fields": list(changes)})
    return setting


@router.delete("/settings/{setting_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_setting(
    setting_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_required),
):
    setting = db.get(SiteSetting, setting_id)
    if not setting:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Setting not found")
    key = setting.key
    db.delete(setting)
    db.commit()
    _audit(db, current_user, request, "SETTING_DELETE", "settings", {"key": key})
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# =========================
# ORDERS
# =========================
@router.get("/orders", response_model=List[OrderOut])
def list_all_orders(
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_required),
):
    return OrderStore(db).list_all()


@router.get("/orders/{order_id}", response_model=OrderWithItems)
def get_any_order(
    order_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_required),
):
    order = OrderStore(db).get(order_id)
    if not order:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found")
    return order


# Status and payment status move independently; payment status only when sent
@router.put("/orders/{order_id}/status", response_model=OrderOut)
def update_order_status(
    order_id: int,
    payload: OrderStatusUpdate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_required),
):
    orders = OrderStore(db)
    existing = orders.get(order_id)
    if not existing:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found")
    old_status, old_payment = existing.status.value, existing.payment_status.value

    order = orders.update_status(order_id, payload.status, payload.payment_status)
    db.commit()
    db.refresh(order)

    _audit(db, current_user, request, "ORDER_STATUS_CHANGE", "orders", {
        "order_id": order.id,
        "old": old_status, "new": order.status.value,
        "old_payment": old_payment, "new_payment": order.payment_status.value,
    })
    return order
