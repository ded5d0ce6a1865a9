# routebid/modules/bidding/repository.py
from sqlalchemy.orm import Session
from sqlalchemy import and_
from sqlalchemy.exc import IntegrityError
from typing import List, Optional, Tuple, Dict, Any
import logging

from routebid.shared.database.models import Order, Bid, utcnow
from routebid.core.exceptions import NotFoundError, InvalidTransitionError, ConflictError
from routebid.modules.orders.repository import OrderRepository
from routebid.modules.orders.state_machine import OrderStatus, BidStatus, ensure_actor
from routebid.modules.notifications.repository import NotificationRepository
from routebid.modules.notifications.schemas import NotificationType

logger = logging.getLogger(__name__)


def _price(value) -> str:
    return f"{float(value):.2f}"


class BidRepository:
    def __init__(self, db: Session):
        self.db = db
        self.orders = OrderRepository(db)
        self.notifications = NotificationRepository(db)

    def get_bid(self, order_id: str, user_id: int) -> Optional[Bid]:
        return self.db.query(Bid).filter(
            and_(
                Bid.order_id == order_id,
                Bid.user_id == user_id
            )
        ).first()

    def list_bids(self, order_id: str) -> List[Bid]:
        return self.db.query(Bid).filter(
            Bid.order_id == order_id
        ).order_by(Bid.bid_price.asc(), Bid.created_at.asc()).all()

    def _lock_open_order(self, order_id: str) -> Order:
        order = self.orders.get_order_for_update(order_id)
        if not order:
            raise NotFoundError("Pedido no encontrado", order_id=order_id)
        if order.status != OrderStatus.PENDING_BIDS.value:
            raise InvalidTransitionError(
                "El pedido ya no recibe ofertas",
                current_status=order.status,
                order_id=order_id
            )
        return order

    def place_bid(
        self, order_id: str, driver_id: int, driver_name: str, bid_data: Dict[str, Any]
    ) -> Tuple[Bid, bool]:
        """
        Crear o actualizar la oferta del conductor (una por pedido).

        Si dos solicitudes del mismo conductor insertan a la vez, la que choca
        con la restricción única se reintenta como actualización.
        """
        try:
            return self._place_bid_once(order_id, driver_id, driver_name, bid_data)
        except IntegrityError:
            logger.warning(f"Oferta duplicada concurrente pedido={order_id} conductor={driver_id}, reintentando")
            return self._place_bid_once(order_id, driver_id, driver_name, bid_data)

    def _place_bid_once(
        self, order_id: str, driver_id: int, driver_name: str, bid_data: Dict[str, Any]
    ) -> Tuple[Bid, bool]:
        try:
            order = self._lock_open_order(order_id)
            now = utcnow()

            bid = self.get_bid(order_id, driver_id)
            created = bid is None
            if created:
                bid = Bid(
                    order_id=order_id,
                    user_id=driver_id,
                    driver_name=driver_name,
                    status=BidStatus.PENDING.value,
                    created_at=now,
                    **bid_data
                )
                self.db.add(bid)
            else:
                for field, value in bid_data.items():
                    setattr(bid, field, value)
            bid.updated_at = now
            self.db.flush()

            self.notifications.notify(
                order.customer_id, order, NotificationType.NEW_BID,
                driver_name=driver_name,
                bid_price=_price(bid.bid_price)
            )

            self.db.commit()
            self.db.refresh(bid)
            return bid, created

        except Exception:
            self.db.rollback()
            raise

    def accept_bid(self, order_id: str, customer_id: int, winning_user_id: int) -> Tuple[Order, Bid, List[Bid]]:
        """
        Asignación exclusiva del conductor en una sola transacción:

        1. Bloquear la fila del pedido
        2. UPDATE ... WHERE status = 'pending_bids' como compuerta de commit
        3. Oferta ganadora → accepted, resto de pendientes → rejected
        4. Notificaciones al ganador y a cada perdedor
        """
        try:
            order = self.orders.get_order_for_update(order_id)
            if not order:
                raise NotFoundError("Pedido no encontrado", order_id=order_id)

            ensure_actor(order, customer_id, OrderStatus.ACCEPTED)

            if order.status != OrderStatus.PENDING_BIDS.value:
                if order.assigned_driver_id is not None:
                    raise ConflictError(
                        "El pedido ya tiene un conductor asignado",
                        current_status=order.status,
                        target_status=OrderStatus.ACCEPTED.value,
                        order_id=order_id
                    )
                raise InvalidTransitionError(
                    f"No se puede aceptar ofertas en estado '{order.status}'",
                    current_status=order.status,
                    target_status=OrderStatus.ACCEPTED.value,
                    order_id=order_id
                )

            winning_bid = self.db.query(Bid).filter(
                and_(
                    Bid.order_id == order_id,
                    Bid.user_id == winning_user_id,
                    Bid.status == BidStatus.PENDING.value
                )
            ).first()
            if not winning_bid:
                raise NotFoundError(
                    "No existe una oferta pendiente de ese conductor",
                    field="user_id",
                    order_id=order_id
                )

            now = utcnow()
            assigned = self.orders.compare_and_set_status(
                order_id,
                OrderStatus.PENDING_BIDS.value,
                {
                    'status': OrderStatus.ACCEPTED.value,
                    'assigned_driver_id': winning_bid.user_id,
                    'assigned_driver_name': winning_bid.driver_name,
                    'assigned_bid_price': winning_bid.bid_price,
                    'accepted_at': now,
                    'updated_at': now
                }
            )
            if not assigned:
                raise ConflictError(
                    "Otra solicitud asignó el pedido primero",
                    current_status=self.orders.get_status(order_id),
                    target_status=OrderStatus.ACCEPTED.value,
                    order_id=order_id
                )

            losing_bids = self.db.query(Bid).filter(
                and_(
                    Bid.order_id == order_id,
                    Bid.status == BidStatus.PENDING.value,
                    Bid.id != winning_bid.id
                )
            ).all()

            winning_bid.status = BidStatus.ACCEPTED.value
            winning_bid.updated_at = now
            for bid in losing_bids:
                bid.status = BidStatus.REJECTED.value
                bid.updated_at = now
            self.db.flush()
            self.db.refresh(order)

            self.notifications.notify(
                winning_bid.user_id, order, NotificationType.BID_ACCEPTED,
                bid_price=_price(winning_bid.bid_price)
            )
            for bid in losing_bids:
                self.notifications.notify(bid.user_id, order, NotificationType.BID_REJECTED)

            self.db.commit()
            self.db.refresh(order)
            self.db.refresh(winning_bid)

            logger.info(
                f"✅ Pedido {order.order_number} asignado a conductor {winning_bid.user_id} "
                f"(${_price(winning_bid.bid_price)}), {len(losing_bids)} ofertas rechazadas"
            )
            return order, winning_bid, losing_bids

        except Exception:
            self.db.rollback()
            raise
