from pydantic import BaseModel, Field
from typing import Optional
from decimal import Decimal
from datetime import datetime

class UserLogin(BaseModel):
    """Schema para login de usuario"""
    email: str = Field(..., description="Email del usuario")
    password: str = Field(..., min_length=6, description="Contraseña del usuario")

    class Config:
        json_schema_extra = {
            "example": {
                "email": "cliente@routebid.com",
                "password": "cliente123"
            }
        }

class UserRegister(BaseModel):
    """Schema para registro de cliente o conductor"""
    email: str = Field(..., min_length=5, max_length=255, description="Email del usuario")
    password: str = Field(..., min_length=6)
    first_name: str = Field(..., min_length=1, max_length=255)
    last_name: str = Field(..., min_length=1, max_length=255)
    role: str = Field(..., pattern="^(customer|driver)$")
    phone: Optional[str] = Field(None, max_length=50)

    class Config:
        json_schema_extra = {
            "example": {
                "email": "conductor@routebid.com",
                "password": "conductor123",
                "first_name": "Luis",
                "last_name": "Pérez",
                "role": "driver"
            }
        }

class UserResponse(BaseModel):
    """Schema para respuesta de usuario"""
    id: int
    email: str
    first_name: str
    last_name: str
    role: str
    phone: Optional[str] = None
    rating: Optional[Decimal] = None
    completed_deliveries: int = 0
    is_active: bool

    class Config:
        from_attributes = True

class TokenResponse(BaseModel):
    """Schema para respuesta de token"""
    access_token: str
    token_type: str = "bearer"
    user: UserResponse

class TokenPayload(BaseModel):
    """Schema para payload del token"""
    user_id: int
    email: str
    role: str
    exp: Optional[datetime] = None
