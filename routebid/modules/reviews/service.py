# routebid/modules/reviews/service.py
import logging
from sqlalchemy.orm import Session

from routebid.core.exceptions import NotFoundError, ForbiddenError, InvalidTransitionError, ConflictError
from routebid.modules.orders.repository import OrderRepository
from routebid.modules.orders.state_machine import OrderStatus
from .repository import ReviewRepository, serialize_review
from .schemas import ReviewCreate, ReviewType, ReviewResponse, ReviewListResponse

logger = logging.getLogger(__name__)


class ReviewService:
    def __init__(self, db: Session):
        self.db = db
        self.repository = ReviewRepository(db)
        self.orders = OrderRepository(db)

    async def submit_review(self, order_id: str, review_data: ReviewCreate, current_user) -> ReviewResponse:
        """
        Calificar la contraparte de un pedido entregado.

        - customer_to_driver: solo el cliente dueño
        - driver_to_customer: solo el conductor asignado
        - Una reseña por pedido, autor y tipo
        """
        order = self.orders.get_order(order_id)
        if not order:
            raise NotFoundError("Pedido no encontrado", order_id=order_id)

        if review_data.review_type == ReviewType.CUSTOMER_TO_DRIVER:
            if order.customer_id != current_user.id:
                raise ForbiddenError("Solo el cliente puede calificar al conductor", order_id=order_id)
            reviewee_id = order.assigned_driver_id
        else:
            if order.assigned_driver_id is None or order.assigned_driver_id != current_user.id:
                raise ForbiddenError("Solo el conductor asignado puede calificar al cliente", order_id=order_id)
            reviewee_id = order.customer_id

        if order.status != OrderStatus.DELIVERED.value:
            raise InvalidTransitionError(
                "Solo se califican pedidos entregados",
                current_status=order.status,
                order_id=order_id
            )

        if self.repository.find(order_id, current_user.id, review_data.review_type.value):
            raise ConflictError(
                "Ya calificaste este pedido",
                order_id=order_id,
                review_type=review_data.review_type.value
            )

        data = review_data.model_dump()
        data['review_type'] = review_data.review_type.value
        review = self.repository.create(order_id, current_user.id, reviewee_id, data)

        logger.info(
            f"⭐ Reseña {review.review_type} ({review.rating}/5) en pedido {order.order_number} "
            f"por usuario {current_user.id}"
        )

        return ReviewResponse(
            success=True,
            message="Reseña registrada",
            review=serialize_review(review)
        )

    async def list_reviews(self, order_id: str, current_user) -> ReviewListResponse:
        """Reseñas del pedido, visibles para cliente y conductor asignado"""
        order = self.orders.get_order(order_id)
        if not order:
            raise NotFoundError("Pedido no encontrado", order_id=order_id)

        if current_user.id not in (order.customer_id, order.assigned_driver_id):
            raise ForbiddenError("No tienes acceso a las reseñas de este pedido", order_id=order_id)

        reviews = self.repository.list_for_order(order_id)
        return ReviewListResponse(
            success=True,
            message="Reseñas del pedido",
            reviews=[serialize_review(r) for r in reviews],
            count=len(reviews)
        )
