# routebid/modules/tracking/schemas.py
from typing import Optional, Dict, Any, List
from routebid.shared.schemas.common import BaseResponse, GeoPoint

class LocationReport(GeoPoint):
    """Posición actual del conductor asignado"""
    pass

class LocationReportResponse(BaseResponse):
    order_id: str
    status: str
    current_location: Dict[str, Any]

class TrackingResponse(BaseResponse):
    order_id: str
    order_number: str
    status: str
    assigned_driver_id: Optional[int] = None
    assigned_driver_name: Optional[str] = None
    timeline: Dict[str, Optional[str]]
    current_location: Optional[Dict[str, Any]] = None
    history: List[Dict[str, Any]]
