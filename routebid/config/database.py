# routebid/config/database.py
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from .settings import settings


def _enable_sqlite_serialized_writes(engine):
    """
    SQLite no tiene bloqueo por fila: cada transacción se abre con
    BEGIN IMMEDIATE para que los escritores esperen en lugar de fallar.
    """
    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        # El driver deja de emitir su propio BEGIN
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def build_engine(database_url: str, echo: bool = False):
    """Crear engine con la configuración adecuada para el motor"""
    if database_url.startswith("sqlite"):
        engine = create_engine(
            database_url,
            echo=echo,
            connect_args={
                "check_same_thread": False,
                "timeout": settings.sqlite_busy_timeout
            }
        )
        _enable_sqlite_serialized_writes(engine)
        return engine

    engine_kwargs = {
        "pool_pre_ping": True,
        "pool_recycle": 300,
        "echo": echo
    }

    # Agregar SSL para producción en Render
    if "render" in database_url:
        engine_kwargs["connect_args"] = {
            "sslmode": "require"
        }

    return create_engine(database_url, **engine_kwargs)


# Create engine
engine = build_engine(settings.database_url_with_ssl, echo=settings.debug)

# Session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Database dependency
def get_db():
    """Database dependency for FastAPI"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
