from pydantic import Field
from typing import Dict, List, Optional

from schemas.base import CamelModel

# One line of the cart item map, keyed by product id string
class CartLine(CamelModel):
    id: int
    name: str
    price: float = Field(ge=0)
    quantity: int
    image_url: str

# Full-replace body and response of /api/cart
CartItemMap = Dict[str, CartLine]

# Request schema for adding a catalog product to the cart
class CartAddItem(CamelModel):
    product_id: int
    quantity: int = Field(default=1, gt=0)

# Request schema for changing one line; 0 or less removes the line
class CartUpdateItem(CamelModel):
    quantity: int

# Cart totals for display, same arithmetic as checkout
class CartSummary(CamelModel):
    items: List[CartLine]
    item_count: int
    subtotal: float
    shipping_method: Optional[str] = None
    shipping_cost: float
    total: float
