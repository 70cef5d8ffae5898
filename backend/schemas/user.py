from pydantic import BaseModel, Field
from typing import List, Literal, Optional

UserRole = Literal["admin", "staff", "customer"]

# Schema for user authentication credentials
class UserLogin(BaseModel):
    username: str
    password: str

# Schema for an admin creating an account (password is generated)
class UserCreate(BaseModel):
    username: str = Field(min_length=1)
    role: UserRole

# Output schema for user profile details
class UserResponse(BaseModel):
    id: int
    username: str
    role: str

    class Config:
        from_attributes = True

# Returned once after account creation, includes the generated password
class UserCreated(BaseModel):
    id: int
    username: str
    role: str
    password: str

# Row of the admin user list
class UserListItem(UserResponse):
    total_orders: int = 0

class PaginatedUsersResponse(BaseModel):
    users: List[UserListItem]
    totalCount: int

# Schema for JWT authentication token response
class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: Optional[UserResponse] = None

# Schema for administrative role updates
class RoleUpdate(BaseModel):
    role: UserRole
