# backend/routes/customers.py
import re
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from database import get_db
from models.customer import Customer
from models.order import Order
from models.users import User
from utils.tokenJWT import role_required
from utils.audit import write_log
from schemas.customer import CustomerCreate, CustomerUpdate, CustomerOut, CustomersPage

router = APIRouter(prefix="/customers", tags=["Customers"])

DEFAULT_CUSTOMER_NAME = "Unknown Customer"


# "Green Valley  Store" -> "greenValleyStore"
def to_camel_case(text: Optional[str]) -> Optional[str]:
    if not text:
        return None
    text = re.sub(r"\s+(.)", lambda m: m.group(1).upper(), text.strip())
    return text[:1].lower() + text[1:]

def _get_customer_or_404(db: Session, customer_id: int) -> Customer:
    customer = db.query(Customer).filter(Customer.id == customer_id).first()
    if not customer:
        raise HTTPException(status_code=404, detail="Customer not found")
    return customer

def _mobile_taken(db: Session, mobile: str, exclude_id: int = None) -> bool:
    query = db.query(Customer).filter(Customer.mobile == mobile)
    if exclude_id is not None:
        query = query.filter(Customer.id != exclude_id)
    return query.first() is not None


@router.post("", response_model=CustomerOut, status_code=201)
def create_customer(
    payload: CustomerCreate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(role_required("admin", "staff")),
):
    mobile = payload.mobile.strip()
    if _mobile_taken(db, mobile):
        raise HTTPException(status_code=409, detail="A customer with this mobile number already exists.")

    customer = Customer(
        name=(payload.name or "").strip() or DEFAULT_CUSTOMER_NAME,
        mobile=mobile,
        address=payload.address or None,
        shop_name=to_camel_case(payload.shop_name),
    )
    db.add(customer)
    db.commit()
    db.refresh(customer)

    write_log(
        db, user_id=current_user.id, action="CUSTOMER_CREATE", resource="customers", status="SUCCESS",
        ip=request.client.host if request.client else None, resource_id=customer.id,
    )
    return customer


# Customers ordered by name for consistent pagination
@router.get("", response_model=CustomersPage)
def list_customers(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: User = Depends(role_required("admin", "staff")),
):
    query = db.query(Customer).order_by(Customer.name.asc(), Customer.id.asc())
    total = query.count()
    customers = query.offset((page - 1) * limit).limit(limit).all()
    return {"customers": customers, "totalCount": total}


@router.put("/{customer_id}", response_model=CustomerOut)
def update_customer(
    customer_id: int,
    payload: CustomerUpdate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(role_required("admin", "staff")),
):
    customer = _get_customer_or_404(db, customer_id)
    updates = payload.model_dump(exclude_unset=True)

    if updates.get("mobile"):
        updates["mobile"] = updates["mobile"].strip()
        if _mobile_taken(db, updates["mobile"], exclude_id=customer.id):
            raise HTTPException(status_code=409, detail="A customer with this mobile number already exists.")
    elif "mobile" in updates:
        raise HTTPException(status_code=400, detail="Customer mobile number is required.")
    if "shop_name" in updates:
        updates["shop_name"] = to_camel_case(updates["shop_name"])
    if "name" in updates:
        updates["name"] = (updates["name"] or "").strip() or DEFAULT_CUSTOMER_NAME

    for key, value in updates.items():
        setattr(customer, key, value)
    db.commit()
    db.refresh(customer)

    write_log(
        db, user_id=current_user.id, action="CUSTOMER_UPDATE", resource="customers", status="SUCCESS",
        ip=request.client.host if request.client else None, resource_id=customer.id, meta={"fields": sorted(updates)},
    )
    return customer


@router.delete("/{customer_id}")
def delete_customer(
    customer_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(role_required("admin", "staff")),
):
    customer = _get_customer_or_404(db, customer_id)

    # Customers with order history are kept
    if db.query(Order).filter(Order.customer_id == customer.id).count() > 0:
        raise HTTPException(status_code=409, detail="Cannot delete customer: Customer has associated orders.")

    db.delete(customer)
    db.commit()

    write_log(
        db, user_id=current_user.id, action="CUSTOMER_DELETE", resource="customers", status="SUCCESS",
        ip=request.client.host if request.client else None, resource_id=customer.id,
    )
    return {"detail": "Customer deleted"}
