# routebid/modules/reviews/repository.py
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from typing import List, Dict, Any, Optional

from routebid.shared.database.models import Review, utcnow
from routebid.core.exceptions import ConflictError


def serialize_review(review: Review) -> Dict[str, Any]:
    return {
        'id': review.id,
        'order_id': review.order_id,
        'reviewer_id': review.reviewer_id,
        'reviewee_id': review.reviewee_id,
        'review_type': review.review_type,
        'rating': review.rating,
        'professionalism_rating': review.professionalism_rating,
        'communication_rating': review.communication_rating,
        'timeliness_rating': review.timeliness_rating,
        'condition_rating': review.condition_rating,
        'comment': review.comment,
        'created_at': review.created_at.isoformat() if review.created_at else None
    }


class ReviewRepository:
    def __init__(self, db: Session):
        self.db = db

    def find(self, order_id: str, reviewer_id: int, review_type: str) -> Optional[Review]:
        return self.db.query(Review).filter(
            Review.order_id == order_id,
            Review.reviewer_id == reviewer_id,
            Review.review_type == review_type
        ).first()

    def list_for_order(self, order_id: str) -> List[Review]:
        return self.db.query(Review).filter(
            Review.order_id == order_id
        ).order_by(Review.created_at.asc(), Review.id.asc()).all()

    def create(self, order_id: str, reviewer_id: int, reviewee_id: int, data: Dict[str, Any]) -> Review:
        try:
            review = Review(
                order_id=order_id,
                reviewer_id=reviewer_id,
                reviewee_id=reviewee_id,
                created_at=utcnow(),
                **data
            )
            self.db.add(review)
            self.db.commit()
            self.db.refresh(review)
            return review

        except IntegrityError:
            self.db.rollback()
            raise ConflictError(
                "Ya calificaste este pedido",
                order_id=order_id,
                review_type=data.get('review_type')
            )
        except Exception:
            self.db.rollback()
            raise
