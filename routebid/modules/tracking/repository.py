# routebid/modules/tracking/repository.py
from sqlalchemy.orm import Session
from typing import List
import logging

from routebid.shared.database.models import Order, LocationUpdate, utcnow
from routebid.core.exceptions import NotFoundError, ForbiddenError, InvalidTransitionError
from routebid.modules.orders.repository import OrderRepository
from routebid.modules.orders.state_machine import OrderStatus, TRACKABLE_STATUSES
from routebid.modules.drivers.repository import DriverRepository

logger = logging.getLogger(__name__)


class TrackingRepository:
    def __init__(self, db: Session):
        self.db = db
        self.orders = OrderRepository(db)
        self.drivers = DriverRepository(db)

    def get_history(self, order_id: str) -> List[LocationUpdate]:
        return self.db.query(LocationUpdate).filter(
            LocationUpdate.order_id == order_id
        ).order_by(LocationUpdate.created_at.asc(), LocationUpdate.id.asc()).all()

    def report_location(self, order_id: str, driver_id: int, lat: float, lng: float) -> Order:
        """
        Registrar una posición del conductor asignado.

        En la misma transacción: agrega el punto al historial, sobrescribe la
        ubicación actual del pedido y la última posición del conductor.
        """
        try:
            order = self.orders.get_order_for_update(order_id)
            if not order:
                raise NotFoundError("Pedido no encontrado", order_id=order_id)

            if order.assigned_driver_id is None or order.assigned_driver_id != driver_id:
                raise ForbiddenError(
                    "Solo el conductor asignado puede reportar ubicación",
                    order_id=order_id
                )

            if OrderStatus(order.status) not in TRACKABLE_STATUSES:
                raise InvalidTransitionError(
                    f"No se reporta ubicación en estado '{order.status}'",
                    current_status=order.status,
                    order_id=order_id
                )

            now = utcnow()
            self.db.add(LocationUpdate(
                order_id=order.id,
                driver_id=driver_id,
                lat=lat,
                lng=lng,
                status=order.status,
                created_at=now
            ))
            order.current_lat = lat
            order.current_lng = lng
            order.current_location_updated_at = now
            self.drivers.stage_position(driver_id, lat, lng, now)

            self.db.commit()
            self.db.refresh(order)
            return order

        except Exception:
            self.db.rollback()
            raise
