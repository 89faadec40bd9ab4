# backend/models/cart.py
from sqlalchemy import Column, Integer, ForeignKey, String, DateTime, JSON, func
from database import Base

# Session-scoped shopping cart; items is replaced wholesale on every write
class Cart(Base):
    __tablename__ = "carts" # Table name

    id = Column(Integer, primary_key=True, index=True) # Primary key
    session_id = Column(String, unique=True, nullable=False, index=True) # Opaque session token
    user_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=True) # Set once the shopper logs in

    # Map of product id (as string) -> {id, name, price, quantity, imageUrl}
    items = Column(JSON, nullable=False, default=dict)

    created_at = Column(DateTime(timezone=True), server_default=func.now()) # Creation timestamp
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
