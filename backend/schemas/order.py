from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime


# One cart line sent at checkout
class CartLine(BaseModel):
    variant_id: int
    qty: int = Field(gt=0)


# Checkout payload: the cart contents and the customer it is billed to
class OrderCreatePayload(BaseModel):
    items: List[CartLine]
    customer_id: Optional[int] = None


# Output schema for an individual order line item
class OrderItemOut(BaseModel):
    variant_id: Optional[int] = None
    product_name: str
    unit_size: str
    qty: int
    unit_price: float
    line_total: float


# Output schema representing the full order details
class OrderResponse(BaseModel):
    id: int
    user_id: int
    customer_id: Optional[int] = None
    status: str
    total_amount: float
    created_at: Optional[datetime] = None
    items: List[OrderItemOut]

    class Config:
        from_attributes = True


# Schema for paginated order lists
class OrdersPage(BaseModel):
    items: List[OrderResponse]
    total: int
    page: int
    page_size: int


# Schema for updating order status
class OrderStatusPatch(BaseModel):
    status: str
