# routebid/modules/notifications/__init__.py
"""
Módulo Notifications - Buzón por usuario

- Las notificaciones se escriben como efecto de las transiciones del pedido
- El destinatario las consulta por polling y las marca como leídas

Arquitectura:
- router.py: Endpoints del buzón
- service.py: Reglas de lectura y marcado
- repository.py: Escritura transaccional y consultas
- schemas.py: Vocabulario de tipos y modelos de respuesta
"""

from .router import router
from .service import NotificationService
from .repository import NotificationRepository

__all__ = [
    "router",
    "NotificationService",
    "NotificationRepository"
]
