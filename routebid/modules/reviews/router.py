# routebid/modules/reviews/router.py
from fastapi import APIRouter, Depends, Path
from sqlalchemy.orm import Session

from routebid.config.database import get_db
from routebid.core.auth.dependencies import get_current_user
from .service import ReviewService
from .schemas import ReviewCreate, ReviewResponse, ReviewListResponse

router = APIRouter()

@router.post("/{order_id}/review", response_model=ReviewResponse)
async def submit_review(
    review_data: ReviewCreate,
    order_id: str = Path(..., description="ID del pedido"),
    current_user = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Calificar un pedido entregado

    - **customer_to_driver**: el cliente califica al conductor
    - **driver_to_customer**: el conductor califica al cliente
    """
    service = ReviewService(db)
    return await service.submit_review(order_id, review_data, current_user)

@router.get("/{order_id}/reviews", response_model=ReviewListResponse)
async def list_reviews(
    order_id: str = Path(..., description="ID del pedido"),
    current_user = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    service = ReviewService(db)
    return await service.list_reviews(order_id, current_user)
