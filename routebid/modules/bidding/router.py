# routebid/modules/bidding/router.py
from fastapi import APIRouter, Depends, Path
from sqlalchemy.orm import Session

from routebid.config.database import get_db
from routebid.core.auth.dependencies import get_current_user, get_customer_user, get_driver_user
from .service import BiddingService
from .schemas import BidCreate, AcceptBidRequest, BidResponse, BidListResponse, AcceptBidResponse

router = APIRouter()

@router.post("/{order_id}/bid", response_model=BidResponse)
async def place_bid(
    bid_data: BidCreate,
    order_id: str = Path(..., description="ID del pedido"),
    current_user = Depends(get_driver_user),
    db: Session = Depends(get_db)
):
    """
    Ofertar sobre un pedido

    **Validaciones:**
    - Solo conductores
    - El pedido debe estar en 'pending_bids'
    - Precio mayor a cero
    - Volver a ofertar actualiza la oferta existente
    """
    service = BiddingService(db)
    return await service.place_bid(order_id, bid_data, current_user)

@router.get("/{order_id}/bids", response_model=BidListResponse)
async def list_bids(
    order_id: str = Path(..., description="ID del pedido"),
    current_user = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Ofertas del pedido, de menor a mayor precio"""
    service = BiddingService(db)
    return await service.list_bids(order_id, current_user)

@router.post("/{order_id}/accept-bid", response_model=AcceptBidResponse)
async def accept_bid(
    acceptance: AcceptBidRequest,
    order_id: str = Path(..., description="ID del pedido"),
    current_user = Depends(get_customer_user),
    db: Session = Depends(get_db)
):
    """
    Aceptar la oferta de un conductor

    **Concurrencia:**
    - Solo una aceptación puede ganar por pedido
    - La perdedora recibe 409 CONFLICT y debe refrescar el pedido
    - El resto de ofertas pendientes quedan rechazadas y sus conductores notificados
    """
    service = BiddingService(db)
    return await service.accept_bid(order_id, acceptance.user_id, current_user)
