# backend/models/product.py
from sqlalchemy import Column, Integer, String, Numeric, ForeignKey, CheckConstraint, UniqueConstraint
from sqlalchemy.orm import relationship
from database import Base
from utils.stock import is_available, stock_status

# Model Product
# A catalog entry described by company -> category -> brand.
# Sizes, prices and stock live on its variants.
class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False, index=True)

    company = Column(String, nullable=True, index=True)
    category = Column(String, nullable=True, index=True)
    brand = Column(String, nullable=True, index=True)

    # Optional product image URL.
    image_url = Column(String, nullable=True)

    # The product owns its variants; deleting it deletes them.
    variants = relationship(
        "ProductVariant",
        back_populates="product",
        cascade="all, delete-orphan",
        order_by="ProductVariant.id",
    )


# Model ProductVariant
# One size/price/stock instance of a product.
# stock_quantity = NULL means stock is not tracked for this variant.
class ProductVariant(Base):
    __tablename__ = "product_variants"

    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)

    unit_size = Column(String, nullable=False)
    price = Column(Numeric(10, 2), CheckConstraint("price >= 0"), nullable=False)
    stock_quantity = Column(Integer, CheckConstraint("stock_quantity >= 0"), nullable=True)

    product = relationship("Product", back_populates="variants")

    __table_args__ = (
        UniqueConstraint("product_id", "unit_size", name="uq_variant_product_size"),
    )

    # Derived, never persisted
    @property
    def is_available(self) -> bool:
        return is_available(self.stock_quantity)

    @property
    def stock_status(self):
        return stock_status(self.stock_quantity)
