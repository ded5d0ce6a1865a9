# routebid/modules/drivers/router.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from routebid.config.database import get_db
from routebid.core.auth.dependencies import get_driver_user
from .service import DriverService
from .schemas import DriverLocationUpdate, DriverLocationResponse

router = APIRouter()

@router.post("/location", response_model=DriverLocationResponse)
async def update_driver_location(
    location: DriverLocationUpdate,
    current_user = Depends(get_driver_user),
    db: Session = Depends(get_db)
):
    """
    Reportar la posición actual del conductor

    Se usa para calcular qué pedidos quedan dentro del radio de búsqueda.
    """
    service = DriverService(db)
    return await service.update_location(location, current_user)
