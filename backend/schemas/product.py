# backend/schemas/product.py
from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, List
from decimal import Decimal


# Base configuration for ORM compatibility
class ORMBase(BaseModel):
    model_config = ConfigDict(from_attributes=True)


# Variant payload used when creating a product
class VariantCreate(ORMBase):
    unit_size: str = Field(min_length=1)
    price: Decimal = Field(ge=0)
    stock_quantity: Optional[int] = Field(default=None, ge=0)


# Schema for creating a new product with its variants
class ProductCreate(ORMBase):
    name: str = Field(min_length=1)
    company: Optional[str] = None
    category: Optional[str] = None
    brand: Optional[str] = None
    image_url: Optional[str] = None
    variants: List[VariantCreate] = Field(min_length=1)


# Schema for partial updates of the descriptive product fields
class ProductUpdate(ORMBase):
    """All fields optional; only the ones sent are changed."""
    name: Optional[str] = Field(None, min_length=1)
    company: Optional[str] = None
    category: Optional[str] = None
    brand: Optional[str] = None
    image_url: Optional[str] = None


# Schema for updating price/stock of one variant
class VariantUpdate(ORMBase):
    price: Optional[Decimal] = Field(None, ge=0)
    stock_quantity: Optional[int] = Field(None, ge=0)


# Result of a CSV import
class ImportSummary(BaseModel):
    message: str
    rows: int
    products_created: int
    variants_created: int
    variants_updated: int
