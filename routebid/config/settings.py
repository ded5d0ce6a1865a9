# routebid/config/settings.py
from pydantic_settings import BaseSettings
from typing import Optional
import os

class Settings(BaseSettings):
    # App Info
    app_name: str = "RouteBid API"
    version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"

    # Database - PostgreSQL en producción, SQLite en desarrollo
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./routebid.db")
    sqlite_busy_timeout: int = 30
    auto_create_tables: bool = True

    # Security
    secret_key: str = os.getenv("SECRET_KEY", "change-in-production")
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 43200
    password_hash_rounds: int = 12

    # Descubrimiento de pedidos por cercanía
    proximity_radius_km: float = 5.0
    notifications_page_size: int = 50

    # Server
    host: str = "0.0.0.0"
    port: int = int(os.getenv("PORT", 10000))

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    # SSL para PostgreSQL en producción
    @property
    def database_url_with_ssl(self) -> str:
        """Agregar SSL para conexiones de producción"""
        if self.database_url and "render" in self.database_url:
            if "?sslmode=" not in self.database_url:
                return f"{self.database_url}?sslmode=require"
        return self.database_url

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = 'ignore'

settings = Settings()
