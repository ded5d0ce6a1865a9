# routebid/modules/orders/router.py
from typing import Optional
from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session

from routebid.config.database import get_db
from routebid.core.auth.dependencies import get_current_user, get_customer_user, get_driver_user
from .service import OrderService
from .schemas import OrderCreate, OrderResponse, OrderDetailResponse, OrderListResponse

router = APIRouter()

@router.post("", response_model=OrderResponse)
async def create_order(
    order_data: OrderCreate,
    current_user = Depends(get_customer_user),
    db: Session = Depends(get_db)
):
    """
    Publicar un pedido de entrega

    **Funcionalidad:**
    - Genera número de pedido ORD-<epochMillis>-<3 dígitos>
    - Estado inicial 'pending_bids'
    - Los conductores cercanos lo ven en su lista de disponibles
    """
    service = OrderService(db)
    return await service.create_order(order_data, current_user)

@router.get("", response_model=OrderListResponse)
async def list_orders(
    radius_km: Optional[float] = Query(None, gt=0, le=500, description="Radio de búsqueda (conductores)"),
    current_user = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Listar pedidos

    - **Cliente:** todos sus pedidos, sin importar la distancia
    - **Conductor:** pedidos en 'pending_bids' dentro del radio, con distancia
    """
    service = OrderService(db)
    return await service.list_orders(current_user, radius_km)

@router.get("/mine", response_model=OrderListResponse)
async def list_my_orders(
    current_user = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Pedidos propios (cliente) o asignados (conductor) con resumen por estado"""
    service = OrderService(db)
    return await service.list_my_orders(current_user)

@router.get("/{order_id}", response_model=OrderDetailResponse)
async def get_order(
    order_id: str = Path(..., description="ID del pedido"),
    current_user = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Detalle del pedido con las ofertas visibles para quien consulta"""
    service = OrderService(db)
    return await service.get_order(order_id, current_user)

@router.post("/{order_id}/cancel", response_model=OrderResponse)
async def cancel_order(
    order_id: str = Path(..., description="ID del pedido"),
    current_user = Depends(get_customer_user),
    db: Session = Depends(get_db)
):
    """
    Cancelar pedido

    **Validaciones:**
    - Solo el cliente dueño
    - Solo en 'pending_bids' o 'accepted' (después de la recolección el paquete ya está en custodia)
    - Si había conductor asignado se le notifica
    """
    service = OrderService(db)
    return await service.cancel_order(order_id, current_user)

@router.post("/{order_id}/pickup", response_model=OrderResponse)
async def mark_picked_up(
    order_id: str = Path(..., description="ID del pedido"),
    current_user = Depends(get_driver_user),
    db: Session = Depends(get_db)
):
    """Confirmar recolección: accepted → picked_up (solo conductor asignado)"""
    service = OrderService(db)
    return await service.mark_picked_up(order_id, current_user)

@router.post("/{order_id}/in-transit", response_model=OrderResponse)
async def mark_in_transit(
    order_id: str = Path(..., description="ID del pedido"),
    current_user = Depends(get_driver_user),
    db: Session = Depends(get_db)
):
    """Marcar en tránsito: picked_up → in_transit (solo conductor asignado)"""
    service = OrderService(db)
    return await service.mark_in_transit(order_id, current_user)

@router.post("/{order_id}/deliver", response_model=OrderResponse)
async def mark_delivered(
    order_id: str = Path(..., description="ID del pedido"),
    current_user = Depends(get_driver_user),
    db: Session = Depends(get_db)
):
    """
    Confirmar entrega: picked_up | in_transit → delivered

    Incrementa el contador de entregas del conductor y notifica al cliente.
    """
    service = OrderService(db)
    return await service.mark_delivered(order_id, current_user)
