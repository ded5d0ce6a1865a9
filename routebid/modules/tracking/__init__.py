# routebid/modules/tracking/__init__.py
"""
Módulo Tracking - Seguimiento de pedidos en curso

- El conductor asignado reporta su posición
- El pedido guarda la ubicación actual y un historial de solo agregado
- Cliente y conductor consultan la línea de tiempo
"""

from .router import router
from .service import TrackingService
from .repository import TrackingRepository

__all__ = [
    "router",
    "TrackingService",
    "TrackingRepository"
]
