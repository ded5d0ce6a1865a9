# routebid/modules/notifications/schemas.py
from enum import Enum
from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime
from routebid.shared.schemas.common import BaseResponse


class NotificationType(str, Enum):
    """Vocabulario cerrado de eventos; los clientes deben ignorar tipos desconocidos"""
    NEW_BID = "new_bid"
    BID_ACCEPTED = "bid_accepted"
    BID_REJECTED = "bid_rejected"
    ACCEPTED = "accepted"
    PICKED_UP = "picked_up"
    IN_TRANSIT = "in_transit"
    DELIVERED = "delivered"
    ORDER_CANCELLED = "order_cancelled"


# tipo -> (título, mensaje); el mensaje se formatea con datos del pedido
TEMPLATES = {
    NotificationType.NEW_BID: (
        "Nueva oferta recibida",
        "{driver_name} ofertó ${bid_price} por el pedido {order_number}"
    ),
    NotificationType.BID_ACCEPTED: (
        "¡Tu oferta fue aceptada!",
        "Tu oferta de ${bid_price} para el pedido {order_number} fue aceptada. Dirígete al punto de recolección"
    ),
    NotificationType.BID_REJECTED: (
        "Oferta no seleccionada",
        "El cliente eligió otra oferta para el pedido {order_number}"
    ),
    NotificationType.ACCEPTED: (
        "Pedido asignado",
        "{driver_name} fue asignado al pedido {order_number}"
    ),
    NotificationType.PICKED_UP: (
        "Paquete recolectado",
        "{driver_name} recogió el paquete del pedido {order_number}"
    ),
    NotificationType.IN_TRANSIT: (
        "Pedido en camino",
        "El pedido {order_number} va en camino a su destino"
    ),
    NotificationType.DELIVERED: (
        "Pedido entregado",
        "El pedido {order_number} fue entregado"
    ),
    NotificationType.ORDER_CANCELLED: (
        "Pedido cancelado",
        "El cliente canceló el pedido {order_number}"
    ),
}


class NotificationView(BaseModel):
    id: int
    order_id: Optional[str] = None
    type: str
    title: str
    message: str
    is_read: bool
    created_at: datetime

    class Config:
        from_attributes = True

class NotificationListResponse(BaseResponse):
    notifications: List[NotificationView]
    count: int
    unread_count: int

class NotificationReadResponse(BaseResponse):
    notification: NotificationView

class MarkAllReadResponse(BaseResponse):
    updated: int
