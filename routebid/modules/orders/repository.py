# routebid/modules/orders/repository.py
from sqlalchemy.orm import Session
from sqlalchemy import and_, desc, func, update
from typing import List, Dict, Any, Optional
from datetime import datetime
import random
import time
import logging

from routebid.shared.database.models import Order, Bid, utcnow
from routebid.core.exceptions import NotFoundError, ConflictError
from routebid.modules.notifications.repository import NotificationRepository
from routebid.modules.notifications.schemas import NotificationType
from .state_machine import OrderStatus, TIMESTAMP_FIELDS, ensure_transition

logger = logging.getLogger(__name__)


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def _money(value) -> Optional[float]:
    return float(value) if value is not None else None


def generate_order_number() -> str:
    """Formato ORD-<epochMillis>-<3 dígitos>"""
    return f"ORD-{int(time.time() * 1000)}-{random.randint(0, 999):03d}"


def serialize_order(
    order: Order,
    bid_count: Optional[int] = None,
    distance_km: Optional[float] = None
) -> Dict[str, Any]:
    data = {
        'id': order.id,
        'order_number': order.order_number,
        'title': order.title,
        'description': order.description,
        'pickup': {
            'address': order.pickup_address,
            'lat': order.pickup_lat,
            'lng': order.pickup_lng,
            'name': order.pickup_name
        },
        'delivery': {
            'address': order.delivery_address,
            'lat': order.delivery_lat,
            'lng': order.delivery_lng,
            'name': order.delivery_name
        },
        'package': {
            'description': order.package_description,
            'weight': _money(order.package_weight),
            'value': _money(order.package_value)
        },
        'special_instructions': order.special_instructions,
        'price': _money(order.price),
        'status': order.status,
        'customer_id': order.customer_id,
        'customer_name': order.customer_name,
        'assigned_driver_id': order.assigned_driver_id,
        'assigned_driver_name': order.assigned_driver_name,
        'assigned_bid_price': _money(order.assigned_bid_price),
        'created_at': _iso(order.created_at),
        'accepted_at': _iso(order.accepted_at),
        'picked_up_at': _iso(order.picked_up_at),
        'in_transit_at': _iso(order.in_transit_at),
        'delivered_at': _iso(order.delivered_at),
        'cancelled_at': _iso(order.cancelled_at),
        'current_location': {
            'lat': order.current_lat,
            'lng': order.current_lng,
            'updated_at': _iso(order.current_location_updated_at)
        } if order.current_lat is not None else None
    }
    if bid_count is not None:
        data['bid_count'] = bid_count
    if distance_km is not None:
        data['distance_km'] = distance_km
    return data


def serialize_bid(bid: Bid) -> Dict[str, Any]:
    return {
        'id': bid.id,
        'order_id': bid.order_id,
        'user_id': bid.user_id,
        'driver_name': bid.driver_name,
        'bid_price': _money(bid.bid_price),
        'estimated_pickup_time': _iso(bid.estimated_pickup_time),
        'estimated_delivery_time': _iso(bid.estimated_delivery_time),
        'message': bid.message,
        'status': bid.status,
        'created_at': _iso(bid.created_at),
        'updated_at': _iso(bid.updated_at)
    }


class OrderRepository:
    def __init__(self, db: Session):
        self.db = db
        self.notifications = NotificationRepository(db)

    # ==================== LECTURAS ====================

    def get_order(self, order_id: str) -> Optional[Order]:
        return self.db.query(Order).filter(Order.id == order_id).first()

    def get_order_for_update(self, order_id: str) -> Optional[Order]:
        """Leer el pedido bloqueando su fila hasta el commit"""
        return self.db.query(Order).filter(Order.id == order_id).with_for_update().first()

    def get_status(self, order_id: str) -> Optional[str]:
        return self.db.query(Order.status).filter(Order.id == order_id).scalar()

    def list_customer_orders(self, customer_id: int) -> List[Order]:
        return self.db.query(Order).filter(
            Order.customer_id == customer_id
        ).order_by(desc(Order.created_at)).all()

    def list_driver_orders(self, driver_id: int) -> List[Order]:
        return self.db.query(Order).filter(
            Order.assigned_driver_id == driver_id
        ).order_by(desc(Order.accepted_at)).all()

    def list_pending_orders(self) -> List[Order]:
        return self.db.query(Order).filter(
            Order.status == OrderStatus.PENDING_BIDS.value
        ).order_by(desc(Order.created_at)).all()

    def count_bids(self, order_ids: List[str]) -> Dict[str, int]:
        if not order_ids:
            return {}
        rows = self.db.query(Bid.order_id, func.count(Bid.id)).filter(
            Bid.order_id.in_(order_ids)
        ).group_by(Bid.order_id).all()
        return {order_id: count for order_id, count in rows}

    # ==================== ESCRITURAS ====================

    def create_order(self, customer_id: int, customer_name: str, data: Dict[str, Any]) -> Order:
        """Crear pedido en estado pending_bids con número único"""
        try:
            order_number = generate_order_number()
            while self.db.query(Order.id).filter(Order.order_number == order_number).first():
                order_number = generate_order_number()

            now = utcnow()
            order = Order(
                order_number=order_number,
                status=OrderStatus.PENDING_BIDS.value,
                customer_id=customer_id,
                customer_name=customer_name,
                created_at=now,
                updated_at=now,
                **data
            )
            self.db.add(order)
            self.db.commit()
            self.db.refresh(order)

            logger.info(f"📦 Pedido {order.order_number} creado por cliente {customer_id}")
            return order

        except Exception:
            self.db.rollback()
            raise

    def compare_and_set_status(self, order_id: str, expected_status: str, values: Dict[str, Any]) -> bool:
        """
        UPDATE orders SET ... WHERE id = :id AND status = :expected

        Es la compuerta de commit de toda transición: si otra transacción ya
        cambió el estado, no se afecta ninguna fila y devuelve False.
        """
        result = self.db.execute(
            update(Order)
            .where(
                and_(
                    Order.id == order_id,
                    Order.status == expected_status
                )
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def apply_transition(self, order_id: str, actor_id: int, target: OrderStatus) -> Order:
        """
        Transición atómica de progreso o cancelación.

        Bloquea la fila, valida actor y estado, escribe con compare-and-set,
        agrega las notificaciones y confirma todo en una sola transacción.
        """
        try:
            order = self.get_order_for_update(order_id)
            if not order:
                raise NotFoundError("Pedido no encontrado", order_id=order_id)

            ensure_transition(order, actor_id, target)

            expected_status = order.status
            now = utcnow()
            values = {
                'status': target.value,
                TIMESTAMP_FIELDS[target]: now,
                'updated_at': now
            }

            if not self.compare_and_set_status(order.id, expected_status, values):
                raise ConflictError(
                    "El pedido cambió de estado mientras se procesaba la solicitud",
                    current_status=self.get_status(order.id),
                    target_status=target.value,
                    order_id=order.id
                )

            self.db.refresh(order)

            if target == OrderStatus.CANCELLED:
                if order.assigned_driver_id is not None:
                    self.notifications.notify(
                        order.assigned_driver_id, order, NotificationType.ORDER_CANCELLED
                    )
            else:
                self.notifications.notify(
                    order.customer_id, order, NotificationType(target.value)
                )

            self.db.commit()
            self.db.refresh(order)

            logger.info(f"🔄 Pedido {order.order_number}: {expected_status} → {target.value}")
            return order

        except Exception:
            self.db.rollback()
            raise
