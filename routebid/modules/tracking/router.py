# routebid/modules/tracking/router.py
from fastapi import APIRouter, Depends, Path
from sqlalchemy.orm import Session

from routebid.config.database import get_db
from routebid.core.auth.dependencies import get_current_user, get_driver_user
from .service import TrackingService
from .schemas import LocationReport, LocationReportResponse, TrackingResponse

router = APIRouter()

@router.post("/{order_id}/location", response_model=LocationReportResponse)
async def report_location(
    location: LocationReport,
    order_id: str = Path(..., description="ID del pedido"),
    current_user = Depends(get_driver_user),
    db: Session = Depends(get_db)
):
    """
    Reportar la posición del conductor asignado

    Permitido en 'accepted', 'picked_up' e 'in_transit'.
    """
    service = TrackingService(db)
    return await service.report_location(order_id, location, current_user)

@router.get("/{order_id}/tracking", response_model=TrackingResponse)
async def get_tracking(
    order_id: str = Path(..., description="ID del pedido"),
    current_user = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Estado, línea de tiempo e historial de ubicaciones del pedido"""
    service = TrackingService(db)
    return await service.get_tracking(order_id, current_user)
