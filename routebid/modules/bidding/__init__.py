# routebid/modules/bidding/__init__.py
"""
Módulo Bidding - Ofertas y asignación exclusiva

- Conductores ofertan sobre pedidos en 'pending_bids' (una oferta por pedido)
- El cliente acepta una oferta y el conductor queda asignado exactamente una vez
- Las ofertas restantes se rechazan en la misma transacción

Arquitectura:
- router.py: Endpoints de ofertas
- service.py: Reglas de rol y respuestas
- repository.py: Transacciones de oferta y aceptación
- schemas.py: Modelos de request/response
"""

from .router import router
from .service import BiddingService
from .repository import BidRepository

__all__ = [
    "router",
    "BiddingService",
    "BidRepository"
]
