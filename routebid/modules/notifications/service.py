# routebid/modules/notifications/service.py
from typing import Optional
import logging

from sqlalchemy.orm import Session

from routebid.config.settings import settings
from routebid.core.exceptions import NotFoundError, ForbiddenError
from .repository import NotificationRepository
from .schemas import (
    NotificationView, NotificationListResponse, NotificationReadResponse, MarkAllReadResponse
)

logger = logging.getLogger(__name__)


class NotificationService:
    def __init__(self, db: Session):
        self.db = db
        self.repository = NotificationRepository(db)

    async def list_notifications(
        self, current_user, unread_only: bool = False, limit: Optional[int] = None
    ) -> NotificationListResponse:
        """Notificaciones del usuario, más recientes primero"""
        notifications = self.repository.list_for_user(
            current_user.id, unread_only, limit or settings.notifications_page_size
        )
        return NotificationListResponse(
            success=True,
            message="Notificaciones del usuario",
            notifications=[NotificationView.model_validate(n) for n in notifications],
            count=len(notifications),
            unread_count=self.repository.count_unread(current_user.id)
        )

    async def mark_read(self, notification_id: int, current_user) -> NotificationReadResponse:
        """Solo el destinatario puede marcar su notificación como leída"""
        notification = self.repository.get(notification_id)
        if notification is None:
            raise NotFoundError("Notificación no encontrada", notification_id=notification_id)
        if notification.user_id != current_user.id:
            raise ForbiddenError("La notificación pertenece a otro usuario", notification_id=notification_id)

        notification = self.repository.mark_read(notification)
        return NotificationReadResponse(
            success=True,
            message="Notificación marcada como leída",
            notification=NotificationView.model_validate(notification)
        )

    async def mark_all_read(self, current_user) -> MarkAllReadResponse:
        updated = self.repository.mark_all_read(current_user.id)
        logger.info(f"Usuario {current_user.id} marcó {updated} notificaciones como leídas")
        return MarkAllReadResponse(
            success=True,
            message="Notificaciones marcadas como leídas",
            updated=updated
        )
