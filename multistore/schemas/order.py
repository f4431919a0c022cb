from pydantic import BaseModel, Field
from typing import Dict, Optional

class CartItemAdd(BaseModel):
    product_id: str
    quantity: int = Field(default=1, ge=1)

class CartItemUpdate(BaseModel):
    quantity: int

class OrderCreate(BaseModel):
    shipping_address: Dict[str, str]
    payment_method: str = "cod"
    # Restrict checkout to one vendor's cart lines
    vendor_id: Optional[str] = None

class OrderStatusUpdate(BaseModel):
    status: str

class OrderCancellationRequest(BaseModel):
    reason: Optional[str] = None
