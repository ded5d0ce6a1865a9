# routebid/modules/bidding/schemas.py
from pydantic import BaseModel, Field, validator
from typing import Optional, Dict, Any, List
from decimal import Decimal
from datetime import datetime
from routebid.shared.schemas.common import BaseResponse

class BidCreate(BaseModel):
    bid_price: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2, description="Precio ofertado")
    estimated_pickup_time: Optional[datetime] = Field(None, description="Hora estimada de recolección")
    estimated_delivery_time: Optional[datetime] = Field(None, description="Hora estimada de entrega")
    message: Optional[str] = Field(None, max_length=1000, description="Mensaje para el cliente")

    @validator('message')
    def strip_message(cls, v):
        if v is None:
            return v
        return v.strip() or None

    @validator('estimated_delivery_time')
    def delivery_after_pickup(cls, v, values):
        pickup = values.get('estimated_pickup_time')
        if v and pickup and v < pickup:
            raise ValueError("La entrega estimada no puede ser anterior a la recolección")
        return v

    def to_columns(self) -> Dict[str, Any]:
        return {
            'bid_price': self.bid_price,
            'estimated_pickup_time': self.estimated_pickup_time,
            'estimated_delivery_time': self.estimated_delivery_time,
            'message': self.message
        }

class AcceptBidRequest(BaseModel):
    user_id: int = Field(..., description="ID del conductor cuya oferta se acepta")

class BidResponse(BaseResponse):
    bid: Dict[str, Any]
    created: bool

class BidListResponse(BaseResponse):
    bids: List[Dict[str, Any]]
    count: int

class AcceptBidResponse(BaseResponse):
    order: Dict[str, Any]
    accepted_bid: Dict[str, Any]
    rejected_count: int
