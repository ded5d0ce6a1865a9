# routebid/modules/orders/service.py
from typing import Dict, Any, Optional, List
import logging

from sqlalchemy.orm import Session

from routebid.config.settings import settings
from routebid.core.exceptions import NotFoundError, ForbiddenError, OrderValidationError, DomainError
from routebid.shared.services.geo import distance_km
from routebid.modules.drivers.repository import DriverRepository
from routebid.modules.drivers.service import DriverService
from .repository import OrderRepository, serialize_order, serialize_bid
from .schemas import OrderCreate, OrderResponse, OrderDetailResponse, OrderListResponse
from .state_machine import OrderStatus

logger = logging.getLogger(__name__)


def require_role(current_user, role: str, action: str) -> None:
    if current_user.role != role:
        raise ForbiddenError(
            f"Rol '{current_user.role}' no puede {action}",
            required_role=role
        )


class OrderService:
    def __init__(self, db: Session):
        self.db = db
        self.repository = OrderRepository(db)
        self.drivers = DriverRepository(db)

    # ==================== CREACIÓN Y CONSULTAS ====================

    async def create_order(self, order_data: OrderCreate, current_user) -> OrderResponse:
        """Publicar un pedido nuevo (solo clientes)"""
        require_role(current_user, 'customer', 'publicar pedidos')

        order = self.repository.create_order(
            current_user.id, current_user.full_name, order_data.to_columns()
        )
        return OrderResponse(
            success=True,
            message="Pedido publicado - esperando ofertas",
            order=serialize_order(order, bid_count=0)
        )

    async def list_orders(self, current_user, radius_km: Optional[float] = None) -> OrderListResponse:
        """Clientes: sus pedidos. Conductores: pedidos disponibles cercanos."""
        if current_user.role == 'driver':
            return await self.list_available_orders(current_user, radius_km)

        orders = self.repository.list_customer_orders(current_user.id)
        counts = self.repository.count_bids([o.id for o in orders])
        return OrderListResponse(
            success=True,
            message="Pedidos del cliente",
            orders=[serialize_order(o, bid_count=counts.get(o.id, 0)) for o in orders],
            count=len(orders)
        )

    async def list_available_orders(self, current_user, radius_km: Optional[float] = None) -> OrderListResponse:
        """
        Pedidos en pending_bids dentro del radio del conductor.

        Sin posición reportada no se filtra y ``distance_km`` queda nulo.
        """
        require_role(current_user, 'driver', 'buscar pedidos disponibles')
        radius = radius_km if radius_km is not None else settings.proximity_radius_km
        if radius <= 0:
            raise OrderValidationError("El radio debe ser mayor a cero", field="radius_km")

        driver = self.drivers.get_driver(current_user.id)
        pending = self.repository.list_pending_orders()
        counts = self.repository.count_bids([o.id for o in pending])

        if driver is None or not driver.has_location:
            orders = [serialize_order(o, bid_count=counts.get(o.id, 0)) for o in pending]
            return OrderListResponse(
                success=True,
                message="Pedidos disponibles (sin ubicación del conductor)",
                orders=orders,
                count=len(orders),
                filters={"radius_km": None, "driver_location": None}
            )

        nearby = []
        for order in pending:
            distance = distance_km(driver.last_lat, driver.last_lng, order.pickup_lat, order.pickup_lng)
            if distance <= radius:
                nearby.append((distance, order))
        nearby.sort(key=lambda item: item[0])

        logger.debug(f"Conductor {driver.id}: {len(nearby)}/{len(pending)} pedidos dentro de {radius} km")

        return OrderListResponse(
            success=True,
            message=f"Pedidos disponibles a menos de {radius:g} km",
            orders=[
                serialize_order(o, bid_count=counts.get(o.id, 0), distance_km=round(d, 2))
                for d, o in nearby
            ],
            count=len(nearby),
            filters={
                "radius_km": radius,
                "driver_location": {"lat": driver.last_lat, "lng": driver.last_lng}
            }
        )

    async def list_my_orders(self, current_user) -> OrderListResponse:
        """Clientes: pedidos propios. Conductores: pedidos asignados."""
        if current_user.role == 'driver':
            orders = self.repository.list_driver_orders(current_user.id)
            message = "Pedidos asignados al conductor"
        else:
            orders = self.repository.list_customer_orders(current_user.id)
            message = "Pedidos del cliente"

        counts = self.repository.count_bids([o.id for o in orders])
        serialized = [serialize_order(o, bid_count=counts.get(o.id, 0)) for o in orders]
        return OrderListResponse(
            success=True,
            message=message,
            orders=serialized,
            count=len(serialized),
            summary=summarize_statuses(serialized)
        )

    async def get_order(self, order_id: str, current_user) -> OrderDetailResponse:
        """
        Detalle del pedido.

        El cliente dueño ve todas las ofertas; un conductor ve el pedido
        mientras acepta ofertas o si es el asignado, y solo su propia oferta.
        """
        order = self.repository.get_order(order_id)
        if not order:
            raise NotFoundError("Pedido no encontrado", order_id=order_id)

        if order.customer_id == current_user.id:
            bids = sorted(order.bids, key=lambda b: (b.bid_price, b.created_at))
        elif current_user.role == 'driver' and (
            order.status == OrderStatus.PENDING_BIDS.value
            or order.assigned_driver_id == current_user.id
        ):
            bids = [b for b in order.bids if b.user_id == current_user.id]
        else:
            raise ForbiddenError("No tienes acceso a este pedido", order_id=order_id)

        return OrderDetailResponse(
            success=True,
            message="Detalle del pedido",
            order=serialize_order(order, bid_count=len(order.bids)),
            bids=[serialize_bid(b) for b in bids]
        )

    # ==================== TRANSICIONES ====================

    async def _transition(self, order_id: str, current_user, target: OrderStatus) -> Dict[str, Any]:
        try:
            order = self.repository.apply_transition(order_id, current_user.id, target)
        except DomainError as e:
            logger.warning(
                f"Transición rechazada pedido={order_id} usuario={current_user.id} "
                f"destino={target.value}: {e}"
            )
            raise
        return serialize_order(order)

    async def cancel_order(self, order_id: str, current_user) -> OrderResponse:
        """Cancelar mientras el pedido está en pending_bids o accepted"""
        order = await self._transition(order_id, current_user, OrderStatus.CANCELLED)
        return OrderResponse(success=True, message="Pedido cancelado", order=order)

    async def mark_picked_up(self, order_id: str, current_user) -> OrderResponse:
        order = await self._transition(order_id, current_user, OrderStatus.PICKED_UP)
        return OrderResponse(
            success=True,
            message="Recolección confirmada - dirígete al punto de entrega",
            order=order
        )

    async def mark_in_transit(self, order_id: str, current_user) -> OrderResponse:
        order = await self._transition(order_id, current_user, OrderStatus.IN_TRANSIT)
        return OrderResponse(success=True, message="Pedido en tránsito", order=order)

    async def mark_delivered(self, order_id: str, current_user) -> OrderResponse:
        """Entregar e incrementar el contador del conductor después del commit"""
        order = await self._transition(order_id, current_user, OrderStatus.DELIVERED)
        try:
            DriverService(self.db).record_completed_delivery(order['assigned_driver_id'])
        except Exception:
            # La entrega ya está confirmada; el contador no la revierte
            logger.error(
                f"No se pudo registrar la entrega del conductor {order['assigned_driver_id']} "
                f"en pedido {order['order_number']}",
                exc_info=True
            )
        return OrderResponse(success=True, message="Entrega confirmada exitosamente", order=order)


def summarize_statuses(orders: List[Dict[str, Any]]) -> Dict[str, int]:
    summary: Dict[str, int] = {status.value: 0 for status in OrderStatus}
    for order in orders:
        summary[order['status']] = summary.get(order['status'], 0) + 1
    return summary
