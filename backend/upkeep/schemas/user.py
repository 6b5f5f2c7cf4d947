from typing import Optional
from pydantic import BaseModel, EmailStr, Field, ConfigDict


class UserCreate(BaseModel):
    Username: str = Field(min_length=3, max_length=50)
    Password: str = Field(min_length=6, max_length=128)
    FirstName: str = Field(min_length=1, max_length=100)
    LastName: str = Field(min_length=1, max_length=100)
    Email: EmailStr
    IsAdmin: bool = False
    TicketPermissions: bool = False


class UserUpdate(BaseModel):
    Username: Optional[str] = Field(default=None, min_length=3, max_length=50)
    # Boş parola mevcut hash'i korur
    Password: Optional[str] = Field(default=None, max_length=128)
    FirstName: Optional[str] = None
    LastName: Optional[str] = None
    Email: Optional[EmailStr] = None
    IsAdmin: Optional[bool] = None
    TicketPermissions: Optional[bool] = None


class UserRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    UserID: int
    Username: str
    FirstName: str
    LastName: str
    Email: str
    IsAdmin: bool
    TicketPermissions: bool


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class PasswordResetRequest(BaseModel):
    email: EmailStr


class PasswordResetConfirm(BaseModel):
    email: EmailStr
    code: str = Field(min_length=6, max_length=12)
    new_password: str = Field(min_length=6, max_length=128)
