# routebid/modules/reviews/__init__.py
"""
Módulo Reviews - Calificaciones entre cliente y conductor

Solo escritura y consulta por pedido; no se calculan promedios.
"""

from .router import router
from .service import ReviewService
from .repository import ReviewRepository

__all__ = [
    "router",
    "ReviewService",
    "ReviewRepository"
]
