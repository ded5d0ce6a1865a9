# routebid/modules/orders/state_machine.py
r"""
Máquina de estados canónica del pedido.

    pending_bids -> accepted -> picked_up -> in_transit -> delivered
         |             |            \___________________/^
         +-------------+--> cancelled

- ``pending_bids -> accepted`` solo ocurre al aceptar una oferta.
- El conductor asignado mueve ``accepted -> picked_up -> in_transit -> delivered``
  (``delivered`` también es alcanzable directamente desde ``picked_up``).
- El cliente dueño cancela desde ``pending_bids`` o ``accepted``.

Se valida primero quién llama (ForbiddenError) y luego el estado
(InvalidTransitionError). Repetir una transición ya aplicada es un error.
"""
from enum import Enum
from typing import Dict, FrozenSet

from routebid.core.exceptions import ForbiddenError, InvalidTransitionError


class OrderStatus(str, Enum):
    PENDING_BIDS = "pending_bids"
    ACCEPTED = "accepted"
    PICKED_UP = "picked_up"
    IN_TRANSIT = "in_transit"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class BidStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class Actor(str, Enum):
    CUSTOMER = "customer"
    ASSIGNED_DRIVER = "assigned_driver"


# destino -> estados de origen permitidos
ALLOWED_SOURCES: Dict[OrderStatus, FrozenSet[OrderStatus]] = {
    OrderStatus.ACCEPTED: frozenset({OrderStatus.PENDING_BIDS}),
    OrderStatus.PICKED_UP: frozenset({OrderStatus.ACCEPTED}),
    OrderStatus.IN_TRANSIT: frozenset({OrderStatus.PICKED_UP}),
    OrderStatus.DELIVERED: frozenset({OrderStatus.PICKED_UP, OrderStatus.IN_TRANSIT}),
    OrderStatus.CANCELLED: frozenset({OrderStatus.PENDING_BIDS, OrderStatus.ACCEPTED}),
}

# destino -> quién puede ejecutarlo
TRANSITION_ACTOR: Dict[OrderStatus, Actor] = {
    OrderStatus.ACCEPTED: Actor.CUSTOMER,
    OrderStatus.PICKED_UP: Actor.ASSIGNED_DRIVER,
    OrderStatus.IN_TRANSIT: Actor.ASSIGNED_DRIVER,
    OrderStatus.DELIVERED: Actor.ASSIGNED_DRIVER,
    OrderStatus.CANCELLED: Actor.CUSTOMER,
}

TIMESTAMP_FIELDS: Dict[OrderStatus, str] = {
    OrderStatus.ACCEPTED: "accepted_at",
    OrderStatus.PICKED_UP: "picked_up_at",
    OrderStatus.IN_TRANSIT: "in_transit_at",
    OrderStatus.DELIVERED: "delivered_at",
    OrderStatus.CANCELLED: "cancelled_at",
}

TERMINAL_STATUSES = frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED})

# Estados en los que el conductor asignado reporta ubicación
TRACKABLE_STATUSES = frozenset({OrderStatus.ACCEPTED, OrderStatus.PICKED_UP, OrderStatus.IN_TRANSIT})


def can_transition(current: str, target: str) -> bool:
    """True si ``current -> target`` es un movimiento legal del pedido"""
    try:
        return OrderStatus(current) in ALLOWED_SOURCES.get(OrderStatus(target), frozenset())
    except ValueError:
        return False


def ensure_actor(order, actor_id: int, target: OrderStatus) -> None:
    """Verificar que ``actor_id`` puede ejecutar la transición hacia ``target``"""
    actor = TRANSITION_ACTOR[target]

    if actor == Actor.CUSTOMER and order.customer_id != actor_id:
        raise ForbiddenError(
            "Solo el cliente dueño del pedido puede realizar esta acción",
            order_id=order.id
        )

    if actor == Actor.ASSIGNED_DRIVER and (
        order.assigned_driver_id is None or order.assigned_driver_id != actor_id
    ):
        raise ForbiddenError(
            "Solo el conductor asignado puede actualizar este pedido",
            order_id=order.id
        )


def ensure_transition(order, actor_id: int, target: OrderStatus) -> None:
    """Validar actor y luego estado; lanza ForbiddenError o InvalidTransitionError"""
    ensure_actor(order, actor_id, target)

    if not can_transition(order.status, target.value):
        if order.status == target.value:
            message = f"El pedido ya está en estado '{target.value}'"
        else:
            message = f"No se puede pasar de '{order.status}' a '{target.value}'"
        raise InvalidTransitionError(
            message,
            current_status=order.status,
            target_status=target.value,
            order_id=order.id
        )
