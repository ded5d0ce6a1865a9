# routebid/modules/drivers/repository.py
from sqlalchemy.orm import Session
from sqlalchemy import update
from typing import Optional
from datetime import datetime

from routebid.shared.database.models import User, utcnow


class DriverRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_driver(self, driver_id: int) -> Optional[User]:
        return self.db.query(User).filter(
            User.id == driver_id,
            User.role == 'driver'
        ).first()

    def stage_position(self, driver_id: int, lat: float, lng: float, reported_at: datetime) -> None:
        """Actualizar la última posición sin confirmar (la confirma quien llama)"""
        self.db.execute(
            update(User)
            .where(User.id == driver_id)
            .values(last_lat=lat, last_lng=lng, location_updated_at=reported_at)
            .execution_options(synchronize_session=False)
        )

    def update_position(self, driver_id: int, lat: float, lng: float) -> Optional[User]:
        try:
            self.stage_position(driver_id, lat, lng, utcnow())
            self.db.commit()
            return self.get_driver(driver_id)
        except Exception:
            self.db.rollback()
            raise

    def increment_completed_deliveries(self, driver_id: int) -> None:
        try:
            self.db.execute(
                update(User)
                .where(User.id == driver_id)
                .values(completed_deliveries=User.completed_deliveries + 1)
                .execution_options(synchronize_session=False)
            )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
