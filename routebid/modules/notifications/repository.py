# routebid/modules/notifications/repository.py
from sqlalchemy.orm import Session
from sqlalchemy import and_, desc, func, update
from typing import List, Optional

from routebid.shared.database.models import Notification, Order, utcnow
from .schemas import NotificationType, TEMPLATES


class NotificationRepository:
    """
    Buzón de notificaciones por usuario.

    ``notify`` solo agrega la fila a la sesión: la confirma la transacción de
    la transición que la generó, así una transición fallida no deja
    notificaciones.
    """

    def __init__(self, db: Session):
        self.db = db

    def notify(
        self,
        user_id: int,
        order: Order,
        notification_type: NotificationType,
        **context
    ) -> Notification:
        title, template = TEMPLATES[notification_type]
        values = {
            "order_number": order.order_number,
            "driver_name": order.assigned_driver_name or "",
            **context
        }
        notification = Notification(
            user_id=user_id,
            order_id=order.id,
            type=notification_type.value,
            title=title,
            message=template.format(**values),
            is_read=False,
            created_at=utcnow()
        )
        self.db.add(notification)
        return notification

    def list_for_user(self, user_id: int, unread_only: bool = False, limit: int = 50) -> List[Notification]:
        query = self.db.query(Notification).filter(Notification.user_id == user_id)
        if unread_only:
            query = query.filter(Notification.is_read.is_(False))
        return query.order_by(desc(Notification.created_at), desc(Notification.id)).limit(limit).all()

    def count_unread(self, user_id: int) -> int:
        return self.db.query(func.count(Notification.id)).filter(
            and_(
                Notification.user_id == user_id,
                Notification.is_read.is_(False)
            )
        ).scalar() or 0

    def get(self, notification_id: int) -> Optional[Notification]:
        return self.db.query(Notification).filter(Notification.id == notification_id).first()

    def mark_read(self, notification: Notification) -> Notification:
        try:
            notification.is_read = True
            self.db.commit()
            self.db.refresh(notification)
            return notification
        except Exception:
            self.db.rollback()
            raise

    def mark_all_read(self, user_id: int) -> int:
        try:
            result = self.db.execute(
                update(Notification)
                .where(
                    and_(
                        Notification.user_id == user_id,
                        Notification.is_read.is_(False)
                    )
                )
                .values(is_read=True)
                .execution_options(synchronize_session=False)
            )
            self.db.commit()
            return result.rowcount or 0
        except Exception:
            self.db.rollback()
            raise
