# backend/models/catalog.py
from sqlalchemy import Boolean, Column, DateTime, Float, Integer, JSON, String, Text, func
from database import Base

# Product grouping shown in the storefront navigation
class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False)
    slug = Column(String, unique=True, nullable=False, index=True)
    description = Column(Text, nullable=True)
    image_url = Column(String, nullable=True)


# Sellable catalog entry
class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, index=True)
    slug = Column(String, unique=True, nullable=False, index=True)
    description = Column(Text, nullable=False, default="")

    price = Column(Float, nullable=False)
    sale_price = Column(Float, nullable=True)

    image_url = Column(String, nullable=False, default="")
    secondary_images = Column(JSON, nullable=True)

    # Checked by the admin routes, no database constraint
    category_id = Column(Integer, nullable=False, index=True)

    in_stock = Column(Boolean, default=True, nullable=False)
    is_new = Column(Boolean, default=False, nullable=False)
    is_featured = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Price a shopper actually pays
    @property
    def effective_price(self):
        return self.sale_price if self.sale_price is not None else self.price
