# backend/routes/admin.py
from fastapi import APIRouter, Depends, HTTPException, status, Query, Request
from sqlalchemy import func
from sqlalchemy.orm import Session

from database import get_db
from models.users import User
from models.order import Order
from utils.tokenJWT import role_required
from utils.hashing import generate_password, get_password_hash
from utils.audit import write_log
from schemas.user import (
    PaginatedUsersResponse,
    RoleUpdate,
    UserCreate,
    UserCreated,
    UserListItem,
    UserResponse,
)

router = APIRouter(prefix="/admin", tags=["Admin"])


def _get_user_or_404(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


# Create an account with a generated password (Admin only)
@router.post("/users", response_model=UserCreated, status_code=status.HTTP_201_CREATED)
def create_user(
    payload: UserCreate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(role_required("admin")),
):
    username = payload.username.strip()
    if db.query(User).filter(func.lower(User.username) == username.lower()).first():
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Username already exists")

    password = generate_password()
    user = User(username=username, password_hash=get_password_hash(password), role=payload.role)
    db.add(user)
    db.commit()
    db.refresh(user)

    write_log(
        db, user_id=current_user.id, action="USER_CREATE", resource="users", status="SUCCESS",
        ip=request.client.host if request.client else None, resource_id=user.id, meta={"role": user.role},
    )
    # The plain password is only ever returned here
    return UserCreated(id=user.id, username=user.username, role=user.role, password=password)


# Retrieve users ordered by username, with their order counts (Admin only)
@router.get("/users", response_model=PaginatedUsersResponse)
def get_all_users(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: User = Depends(role_required("admin")),
):
    order_counts = (
        db.query(Order.user_id, func.count(Order.id).label("total"))
        .group_by(Order.user_id)
        .subquery()
    )
    query = (
        db.query(User, func.coalesce(order_counts.c.total, 0))
        .outerjoin(order_counts, order_counts.c.user_id == User.id)
        .order_by(User.username.asc())
    )

    total = db.query(User).count()
    rows = query.offset((page - 1) * limit).limit(limit).all()

    users = [
        UserListItem(id=u.id, username=u.username, role=u.role, total_orders=count)
        for u, count in rows
    ]
    return {"users": users, "totalCount": total}


# Change a user's role (Admin only)
@router.put("/users/{user_id}", response_model=UserResponse)
def update_user_role(
    user_id: int,
    payload: RoleUpdate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(role_required("admin")),
):
    user = _get_user_or_404(db, user_id)
    old_role = user.role
    user.role = payload.role
    db.commit()
    db.refresh(user)

    write_log(
        db, user_id=current_user.id, action="USER_ROLE_CHANGE", resource="users", status="SUCCESS",
        ip=request.client.host if request.client else None,
        resource_id=user_id, meta={"old": old_role, "new": payload.role},
    )
    return user


# Delete a user account (Admin only)
@router.delete("/users/{user_id}")
def delete_user(
    user_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(role_required("admin")),
):
    user = _get_user_or_404(db, user_id)
    if user.id == current_user.id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Cannot delete your own account")
    if db.query(Order).filter(Order.user_id == user.id).count() > 0:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Cannot delete user: user has associated orders.")

    db.delete(user)
    db.commit()

    write_log(
        db, user_id=current_user.id, action="USER_DELETE", resource="users", status="SUCCESS",
        ip=request.client.host if request.client else None, resource_id=user_id,
    )
    return {"detail": "User deleted"}
