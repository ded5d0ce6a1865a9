# routebid/modules/notifications/router.py
from typing import Optional
from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session

from routebid.config.database import get_db
from routebid.core.auth.dependencies import get_current_user
from .service import NotificationService
from .schemas import NotificationListResponse, NotificationReadResponse, MarkAllReadResponse

router = APIRouter()

@router.get("", response_model=NotificationListResponse)
async def list_notifications(
    unread_only: bool = Query(False, description="Solo no leídas"),
    limit: Optional[int] = Query(None, ge=1, le=200),
    current_user = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Buzón de notificaciones del usuario (consulta por polling)

    **Tipos conocidos:** new_bid, bid_accepted, bid_rejected, accepted,
    picked_up, in_transit, delivered, order_cancelled. Los tipos desconocidos
    son informativos.
    """
    service = NotificationService(db)
    return await service.list_notifications(current_user, unread_only, limit)

@router.put("/read-all", response_model=MarkAllReadResponse)
async def mark_all_read(
    current_user = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Marcar todas las notificaciones como leídas"""
    service = NotificationService(db)
    return await service.mark_all_read(current_user)

@router.put("/{notification_id}/read", response_model=NotificationReadResponse)
async def mark_read(
    notification_id: int = Path(..., description="ID de la notificación"),
    current_user = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Marcar una notificación como leída"""
    service = NotificationService(db)
    return await service.mark_read(notification_id, current_user)
