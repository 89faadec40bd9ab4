from pydantic import EmailStr, Field
from typing import Optional

from schemas.base import CamelModel

# Shared properties for user models
class UserBase(CamelModel):
    email: EmailStr

# Schema for user authentication credentials
class UserLogin(UserBase):
    password: str

# Schema for registration; admin rights are never granted here
class UserCreate(UserBase):
    password: str = Field(min_length=6)
    first_name: Optional[str] = None
    last_name: Optional[str] = None

# Output schema for user profile details
class UserResponse(UserBase):
    id: int
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    is_admin: bool = False

# Schema for JWT authentication token response
class Token(CamelModel):
    access_token: str
    token_type: str = "bearer"
