# routebid/modules/drivers/schemas.py
from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from routebid.shared.schemas.common import BaseResponse

class DriverLocationUpdate(BaseModel):
    latitude: float = Field(..., ge=-90, le=90, description="Latitud actual")
    longitude: float = Field(..., ge=-180, le=180, description="Longitud actual")

class DriverLocationResponse(BaseResponse):
    driver_id: int
    latitude: float
    longitude: float
    updated_at: Optional[datetime] = None
