# routebid/modules/drivers/__init__.py
"""
Módulo Drivers - Estado del conductor

- Última posición reportada (descubrimiento de pedidos cercanos)
- Contador de entregas completadas
"""

from .router import router
from .service import DriverService
from .repository import DriverRepository

__all__ = [
    "router",
    "DriverService",
    "DriverRepository"
]
