# routebid/modules/bidding/service.py
from decimal import Decimal
import logging

from sqlalchemy.orm import Session

from routebid.core.exceptions import NotFoundError, ForbiddenError, OrderValidationError, DomainError
from routebid.modules.orders.repository import serialize_order, serialize_bid
from routebid.modules.orders.service import require_role
from .repository import BidRepository
from .schemas import BidCreate, BidResponse, BidListResponse, AcceptBidResponse

logger = logging.getLogger(__name__)


class BiddingService:
    def __init__(self, db: Session):
        self.db = db
        self.repository = BidRepository(db)

    async def place_bid(self, order_id: str, bid_data: BidCreate, current_user) -> BidResponse:
        """
        Ofertar sobre un pedido en 'pending_bids'.

        Una oferta por conductor y pedido: volver a ofertar actualiza la
        existente. El cliente recibe una notificación 'new_bid'.
        """
        require_role(current_user, 'driver', 'ofertar')
        if bid_data.bid_price is None or Decimal(bid_data.bid_price) <= 0:
            raise OrderValidationError("El precio ofertado debe ser mayor a cero", field="bid_price")

        try:
            bid, created = self.repository.place_bid(
                order_id, current_user.id, current_user.full_name, bid_data.to_columns()
            )
        except DomainError as e:
            logger.warning(f"Oferta rechazada pedido={order_id} conductor={current_user.id}: {e}")
            raise

        logger.info(
            f"💰 Conductor {current_user.id} {'ofertó' if created else 'actualizó oferta'} "
            f"${float(bid.bid_price):.2f} en pedido {order_id}"
        )
        return BidResponse(
            success=True,
            message="Oferta enviada" if created else "Oferta actualizada",
            bid=serialize_bid(bid),
            created=created
        )

    async def list_bids(self, order_id: str, current_user) -> BidListResponse:
        """El cliente ve todas las ofertas; un conductor solo la suya"""
        order = self.repository.orders.get_order(order_id)
        if not order:
            raise NotFoundError("Pedido no encontrado", order_id=order_id)

        if order.customer_id == current_user.id:
            bids = self.repository.list_bids(order_id)
        elif current_user.role == 'driver':
            own = self.repository.get_bid(order_id, current_user.id)
            bids = [own] if own else []
        else:
            raise ForbiddenError("No tienes acceso a las ofertas de este pedido", order_id=order_id)

        return BidListResponse(
            success=True,
            message="Ofertas del pedido",
            bids=[serialize_bid(b) for b in bids],
            count=len(bids)
        )

    async def accept_bid(self, order_id: str, winning_user_id: int, current_user) -> AcceptBidResponse:
        """
        Aceptar una oferta: asigna el conductor de forma exclusiva.

        Si dos aceptaciones compiten, una gana y la otra recibe ConflictError.
        """
        require_role(current_user, 'customer', 'aceptar ofertas')

        try:
            order, winning_bid, losing_bids = self.repository.accept_bid(
                order_id, current_user.id, winning_user_id
            )
        except DomainError as e:
            logger.warning(f"Aceptación rechazada pedido={order_id} cliente={current_user.id}: {e}")
            raise

        return AcceptBidResponse(
            success=True,
            message=f"Oferta de {winning_bid.driver_name} aceptada",
            order=serialize_order(order),
            accepted_bid=serialize_bid(winning_bid),
            rejected_count=len(losing_bids)
        )
