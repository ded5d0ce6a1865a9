# routebid/modules/tracking/service.py
import logging
from sqlalchemy.orm import Session

from routebid.core.exceptions import NotFoundError, ForbiddenError, DomainError
from routebid.modules.orders.repository import serialize_order
from .repository import TrackingRepository
from .schemas import LocationReport, LocationReportResponse, TrackingResponse

logger = logging.getLogger(__name__)


class TrackingService:
    def __init__(self, db: Session):
        self.db = db
        self.repository = TrackingRepository(db)

    async def report_location(self, order_id: str, location: LocationReport, current_user) -> LocationReportResponse:
        """Reporte de posición del conductor asignado mientras el pedido está activo"""
        try:
            order = self.repository.report_location(order_id, current_user.id, location.lat, location.lng)
        except DomainError as e:
            logger.warning(f"Ubicación rechazada pedido={order_id} conductor={current_user.id}: {e}")
            raise

        logger.debug(f"📍 Pedido {order.order_number} en ({order.current_lat}, {order.current_lng})")

        return LocationReportResponse(
            success=True,
            message="Ubicación registrada",
            order_id=order.id,
            status=order.status,
            current_location=serialize_order(order)['current_location']
        )

    async def get_tracking(self, order_id: str, current_user) -> TrackingResponse:
        """
        Vista de seguimiento: estado, línea de tiempo, ubicación actual e
        historial completo en orden cronológico.

        Solo el cliente dueño y el conductor asignado.
        """
        order = self.repository.orders.get_order(order_id)
        if not order:
            raise NotFoundError("Pedido no encontrado", order_id=order_id)

        if current_user.id not in (order.customer_id, order.assigned_driver_id):
            raise ForbiddenError("No tienes acceso al seguimiento de este pedido", order_id=order_id)

        data = serialize_order(order)
        history = self.repository.get_history(order_id)

        return TrackingResponse(
            success=True,
            message="Seguimiento del pedido",
            order_id=order.id,
            order_number=order.order_number,
            status=order.status,
            assigned_driver_id=order.assigned_driver_id,
            assigned_driver_name=order.assigned_driver_name,
            timeline={
                field: data[field]
                for field in ('created_at', 'accepted_at', 'picked_up_at',
                              'in_transit_at', 'delivered_at', 'cancelled_at')
            },
            current_location=data['current_location'],
            history=[
                {
                    'lat': point.lat,
                    'lng': point.lng,
                    'status': point.status,
                    'timestamp': point.created_at.isoformat()
                }
                for point in history
            ]
        )
