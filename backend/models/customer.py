# backend/models/customer.py
from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship
from database import Base

# A shop customer managed from the back-office, identified by mobile number
class Customer(Base):
    __tablename__ = "customers"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, default="Unknown Customer", index=True)
    mobile = Column(String, unique=True, nullable=False, index=True)
    address = Column(String, nullable=True)
    shop_name = Column(String, nullable=True)

    orders = relationship("Order", back_populates="customer")
