# routebid/main.py
import logging
from fastapi import FastAPI
from contextlib import asynccontextmanager

from routebid.config.settings import settings
from routebid.config.database import engine
from routebid.core.middleware import setup_middleware
from routebid.api.v1.router import api_router
from routebid.shared.database.models import Base

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info("🚀 RouteBid API Starting...")
    logger.info(f"📍 Version: {settings.version}")
    logger.info(f"🌍 Environment: {'Development' if settings.debug else 'Production'}")
    logger.info(f"🗄️  Database: {'sqlite' if settings.is_sqlite else settings.database_url.split('@')[-1]}")
    logger.info(f"📡 Proximity radius: {settings.proximity_radius_km} km")

    if settings.auto_create_tables:
        Base.metadata.create_all(bind=engine)

    yield

    # Shutdown
    logger.info("🛑 RouteBid API Shutting down...")

# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=settings.version,
    description="Marketplace de entregas con ofertas de conductores y seguimiento en tiempo real",
    docs_url="/docs",
    redoc_url="/redoc" if settings.debug else None,
    lifespan=lifespan
)

# Setup middleware
setup_middleware(app)

# Include routers
app.include_router(api_router, prefix="/api/v1")

# Root endpoint
@app.get("/")
async def root():
    return {
        "message": "🚚 RouteBid API - Entregas con ofertas de conductores",
        "version": settings.version,
        "status": "running",
        "environment": "production" if not settings.debug else "development",
        "docs": "/docs",
        "api": "/api/v1"
    }

@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "version": settings.version,
        "app": settings.app_name,
        "environment": "production" if not settings.debug else "development"
    }

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "routebid.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
