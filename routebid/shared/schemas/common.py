# routebid/shared/schemas/common.py
from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class BaseResponse(BaseModel):
    success: bool
    message: str = ""
    timestamp: datetime = Field(default_factory=datetime.now)

class GeoPoint(BaseModel):
    lat: float = Field(..., ge=-90, le=90, description="Latitud")
    lng: float = Field(..., ge=-180, le=180, description="Longitud")

class NamedLocation(GeoPoint):
    address: str = Field(..., min_length=3, max_length=500, description="Dirección")
    name: Optional[str] = Field(None, max_length=255, description="Nombre del lugar")
