# routebid/modules/reviews/schemas.py
from enum import Enum
from pydantic import BaseModel, Field
from typing import Optional, Dict, Any, List
from routebid.shared.schemas.common import BaseResponse


class ReviewType(str, Enum):
    CUSTOMER_TO_DRIVER = "customer_to_driver"
    DRIVER_TO_CUSTOMER = "driver_to_customer"


class ReviewCreate(BaseModel):
    review_type: ReviewType
    rating: int = Field(..., ge=1, le=5, description="Calificación general")
    professionalism_rating: Optional[int] = Field(None, ge=1, le=5)
    communication_rating: Optional[int] = Field(None, ge=1, le=5)
    timeliness_rating: Optional[int] = Field(None, ge=1, le=5)
    condition_rating: Optional[int] = Field(None, ge=1, le=5, description="Estado del paquete al entregar")
    comment: Optional[str] = Field(None, max_length=2000)

class ReviewResponse(BaseResponse):
    review: Dict[str, Any]

class ReviewListResponse(BaseResponse):
    reviews: List[Dict[str, Any]]
    count: int
