from pydantic import BaseModel, Field
from typing import List, Optional

# Request schema for creating a customer
class CustomerCreate(BaseModel):
    name: Optional[str] = None
    mobile: str = Field(min_length=1)
    address: Optional[str] = None
    shop_name: Optional[str] = None

# Request schema for partial customer updates
class CustomerUpdate(BaseModel):
    name: Optional[str] = None
    mobile: Optional[str] = Field(None, min_length=1)
    address: Optional[str] = None
    shop_name: Optional[str] = None

class CustomerOut(BaseModel):
    id: int
    name: str
    mobile: str
    address: Optional[str] = None
    shop_name: Optional[str] = None

    class Config:
        from_attributes = True

class CustomersPage(BaseModel):
    customers: List[CustomerOut]
    totalCount: int
