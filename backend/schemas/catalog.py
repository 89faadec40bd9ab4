# backend/schemas/catalog.py
from datetime import datetime
from typing import List, Optional

from pydantic import Field

from schemas.base import CamelModel


class CategoryBase(CamelModel):
    name: str = Field(min_length=1)
    slug: str = Field(min_length=1)
    description: Optional[str] = None
    image_url: Optional[str] = None


class CategoryCreate(CategoryBase):
    pass


# Partial update, every field optional
class CategoryUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1)
    slug: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    image_url: Optional[str] = None


class CategoryOut(CategoryBase):
    id: int


class ProductBase(CamelModel):
    name: str = Field(min_length=1)
    slug: str = Field(min_length=1)
    description: str = ""
    price: float = Field(ge=0)
    sale_price: Optional[float] = Field(default=None, ge=0)
    image_url: str = ""
    secondary_images: Optional[List[str]] = None
    category_id: int
    in_stock: bool = True
    is_new: bool = False
    is_featured: bool = False


class ProductCreate(ProductBase):
    pass


class ProductUpdate(CamelModel):
    """Schema for PUT requests - all fields optional."""
    name: Optional[str] = Field(None, min_length=1)
    slug: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    sale_price: Optional[float] = Field(None, ge=0)
    image_url: Optional[str] = None
    secondary_images: Optional[List[str]] = None
    category_id: Optional[int] = None
    in_stock: Optional[bool] = None
    is_new: Optional[bool] = None
    is_featured: Optional[bool] = None


class ProductOut(ProductBase):
    id: int
    created_at: Optional[datetime] = None
