# routebid/modules/orders/__init__.py
"""
Módulo Orders - Ciclo de vida del pedido

Este módulo implementa:
- Publicación de pedidos por clientes
- Descubrimiento de pedidos cercanos para conductores
- Recolección, tránsito y entrega por el conductor asignado
- Cancelación por el cliente

Arquitectura:
- router.py: Endpoints de pedidos
- service.py: Reglas de negocio y efectos posteriores al commit
- repository.py: Transiciones atómicas (bloqueo + compare-and-set)
- state_machine.py: Estados y transiciones permitidas
- schemas.py: Modelos de request/response
"""

from .router import router
from .service import OrderService
from .repository import OrderRepository

__all__ = [
    "router",
    "OrderService",
    "OrderRepository"
]
