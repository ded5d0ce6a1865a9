# routebid/modules/orders/schemas.py
from pydantic import BaseModel, Field
from typing import Optional, Dict, Any, List
from decimal import Decimal
from routebid.shared.schemas.common import BaseResponse, NamedLocation


class PackageInfo(BaseModel):
    description: Optional[str] = Field(None, max_length=1000, description="Descripción del paquete")
    weight: Optional[Decimal] = Field(None, gt=0, max_digits=8, decimal_places=2, description="Peso en kg")
    value: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2, description="Valor estimado")

class OrderCreate(BaseModel):
    title: str = Field(..., min_length=3, max_length=255, description="Título del pedido")
    description: Optional[str] = Field(None, max_length=2000)
    pickup: NamedLocation = Field(..., description="Punto de recolección")
    delivery: NamedLocation = Field(..., description="Punto de entrega")
    package: Optional[PackageInfo] = None
    special_instructions: Optional[str] = Field(None, max_length=1000)
    price: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2, description="Oferta inicial del cliente")

    class Config:
        json_schema_extra = {
            "example": {
                "title": "Documentos a oficina central",
                "pickup": {"address": "350 5th Ave", "lat": 40.7484, "lng": -73.9857, "name": "Empire State"},
                "delivery": {"address": "11 Wall St", "lat": 40.7069, "lng": -74.0113, "name": "NYSE"},
                "package": {"description": "Sobre A4", "weight": 0.5},
                "price": 25.00
            }
        }

    def to_columns(self) -> Dict[str, Any]:
        package = self.package or PackageInfo()
        return {
            'title': self.title,
            'description': self.description,
            'pickup_address': self.pickup.address,
            'pickup_lat': self.pickup.lat,
            'pickup_lng': self.pickup.lng,
            'pickup_name': self.pickup.name,
            'delivery_address': self.delivery.address,
            'delivery_lat': self.delivery.lat,
            'delivery_lng': self.delivery.lng,
            'delivery_name': self.delivery.name,
            'package_description': package.description,
            'package_weight': package.weight,
            'package_value': package.value,
            'special_instructions': self.special_instructions,
            'price': self.price
        }

class OrderResponse(BaseResponse):
    order: Dict[str, Any]

class OrderDetailResponse(OrderResponse):
    bids: List[Dict[str, Any]]

class OrderListResponse(BaseResponse):
    orders: List[Dict[str, Any]]
    count: int
    filters: Dict[str, Any] = {}
    summary: Dict[str, int] = {}
