# routebid/api/v1/router.py
from fastapi import APIRouter
from routebid.api.v1.auth import router as auth_router
from routebid.modules.orders import router as orders_router
from routebid.modules.bidding import router as bidding_router
from routebid.modules.tracking import router as tracking_router
from routebid.modules.reviews import router as reviews_router
from routebid.modules.drivers import router as drivers_router
from routebid.modules.notifications import router as notifications_router


# Crear router principal de la API v1
api_router = APIRouter()

api_router.include_router(auth_router, prefix="/auth", tags=["authentication"])

# ==================== PEDIDOS ====================

api_router.include_router(
    orders_router,
    prefix="/orders",
    tags=["Orders"]
)

api_router.include_router(
    bidding_router,
    prefix="/orders",
    tags=["Bidding"]
)

api_router.include_router(
    tracking_router,
    prefix="/orders",
    tags=["Tracking"]
)

api_router.include_router(
    reviews_router,
    prefix="/orders",
    tags=["Reviews"]
)

# ==================== CONDUCTORES Y NOTIFICACIONES ====================

api_router.include_router(
    drivers_router,
    prefix="/drivers",
    tags=["Drivers"]
)

api_router.include_router(
    notifications_router,
    prefix="/notifications",
    tags=["Notifications"]
)


@api_router.get("/")
async def api_root():
    """Root endpoint de la API"""
    return {
        "message": "RouteBid API v1",
        "status": "active",
        "docs": "/docs",
        "available_endpoints": {
            "authentication": "/api/v1/auth",
            "orders": "/api/v1/orders",
            "drivers": "/api/v1/drivers",
            "notifications": "/api/v1/notifications"
        }
    }
