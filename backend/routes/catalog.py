# backend/routes/catalog.py
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from database import get_db
from models.catalog import Category, Product
from schemas.catalog import CategoryOut, ProductOut

router = APIRouter(prefix="/api", tags=["Catalog"])


@router.get("/categories", response_model=List[CategoryOut])
def list_categories(db: Session = Depends(get_db)):
    return db.query(Category).order_by(Category.id).all()


@router.get("/categories/{slug}", response_model=CategoryOut)
def get_category(slug: str, db: Session = Depends(get_db)):
    category = db.query(Category).filter(Category.slug == slug).first()
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")
    return category


@router.get("/products", response_model=List[ProductOut])
def list_products(db: Session = Depends(get_db)):
    return db.query(Product).order_by(Product.id).all()


# Newest first among products flagged as new arrivals
@router.get("/products/new", response_model=List[ProductOut])
def new_arrivals(limit: int = Query(8, ge=1, le=100), db: Session = Depends(get_db)):
    return (
        db.query(Product)
        .filter(Product.is_new.is_(True))
        .order_by(Product.created_at.desc(), Product.id.desc())
        .limit(limit)
        .all()
    )


@router.get("/products/featured", response_model=List[ProductOut])
def featured_products(limit: int = Query(6, ge=1, le=100), db: Session = Depends(get_db)):
    return db.query(Product).filter(Product.is_featured.is_(True)).order_by(Product.id).limit(limit).all()


# Unknown slug gives an empty list, not 404
@router.get("/products/category/{slug}", response_model=List[ProductOut])
def products_by_category(slug: str, db: Session = Depends(get_db)):
    category = db.query(Category).filter(Category.slug == slug).first()
    if not category:
        return []
    return db.query(Product).filter(Product.category_id == category.id).order_by(Product.id).all()


@router.get("/products/{slug}", response_model=ProductOut)
def get_product(slug: str, db: Session = Depends(get_db)):
    product = db.query(Product).filter(Product.slug == slug).first()
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product
