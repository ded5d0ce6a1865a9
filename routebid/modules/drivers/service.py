# routebid/modules/drivers/service.py
import logging
from sqlalchemy.orm import Session

from routebid.core.exceptions import ForbiddenError, NotFoundError
from .repository import DriverRepository
from .schemas import DriverLocationUpdate, DriverLocationResponse

logger = logging.getLogger(__name__)


class DriverService:
    def __init__(self, db: Session):
        self.db = db
        self.repository = DriverRepository(db)

    async def update_location(self, location: DriverLocationUpdate, current_user) -> DriverLocationResponse:
        """Registrar la última posición del conductor (base del filtro por cercanía)"""
        if current_user.role != 'driver':
            raise ForbiddenError("Solo los conductores reportan ubicación")

        driver = self.repository.update_position(current_user.id, location.latitude, location.longitude)
        if driver is None:
            raise NotFoundError("Conductor no encontrado", driver_id=current_user.id)

        logger.debug(f"📍 Conductor {driver.id} en ({driver.last_lat}, {driver.last_lng})")

        return DriverLocationResponse(
            success=True,
            message="Ubicación actualizada",
            driver_id=driver.id,
            latitude=driver.last_lat,
            longitude=driver.last_lng,
            updated_at=driver.location_updated_at
        )

    def record_completed_delivery(self, driver_id: int) -> None:
        """Efecto posterior al commit de una entrega"""
        self.repository.increment_completed_deliveries(driver_id)
        logger.info(f"Conductor {driver_id}: entrega completada registrada")
