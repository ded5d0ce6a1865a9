# routebid/shared/database/models.py
from sqlalchemy import (
    Column, Integer, String, Boolean, DateTime, Text, Float,
    Numeric, ForeignKey, UniqueConstraint, CheckConstraint, Index
)
from sqlalchemy.orm import relationship, declarative_base
from datetime import datetime, timezone
import uuid

Base = declarative_base()


def _new_order_id() -> str:
    return uuid.uuid4().hex


def utcnow() -> datetime:
    """UTC sin tzinfo: las columnas DateTime guardan hora UTC naive"""
    return datetime.now(timezone.utc).replace(tzinfo=None)

# =====================================================
# MIXIN PARA TIMESTAMPS
# =====================================================
class TimestampMixin:
    """Mixin que agrega campos created_at y updated_at"""
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)


# =====================================================
# USUARIOS
# =====================================================

class User(Base):
    """Modelo de Usuario (cliente o conductor)"""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), nullable=False, unique=True)
    password_hash = Column(String(255), nullable=False)
    first_name = Column(String(255), nullable=False)
    last_name = Column(String(255), nullable=False)
    role = Column(String(20), default='customer', nullable=False)
    phone = Column(String(50))
    rating = Column(Numeric(3, 2), default=5)
    completed_deliveries = Column(Integer, default=0, nullable=False)

    # Última posición reportada por el conductor
    last_lat = Column(Float)
    last_lng = Column(Float)
    location_updated_at = Column(DateTime)

    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=utcnow)

    __table_args__ = (
        CheckConstraint("role IN ('customer', 'driver')", name='users_role_check'),
    )

    # Relationships
    orders = relationship("Order", back_populates="customer", foreign_keys="Order.customer_id")
    assigned_orders = relationship("Order", back_populates="assigned_driver", foreign_keys="Order.assigned_driver_id")
    bids = relationship("Bid", back_populates="driver")
    notifications = relationship("Notification", back_populates="user")

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}"

    @property
    def has_location(self) -> bool:
        return self.last_lat is not None and self.last_lng is not None


# =====================================================
# PEDIDOS
# =====================================================

class Order(Base, TimestampMixin):
    """Modelo de Pedido de entrega"""
    __tablename__ = "orders"

    id = Column(String(32), primary_key=True, default=_new_order_id)
    order_number = Column(String(32), unique=True, nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text)

    # Recolección
    pickup_address = Column(String(500), nullable=False)
    pickup_lat = Column(Float, nullable=False)
    pickup_lng = Column(Float, nullable=False)
    pickup_name = Column(String(255))

    # Entrega
    delivery_address = Column(String(500), nullable=False)
    delivery_lat = Column(Float, nullable=False)
    delivery_lng = Column(Float, nullable=False)
    delivery_name = Column(String(255))

    # Paquete
    package_description = Column(Text)
    package_weight = Column(Numeric(8, 2))
    package_value = Column(Numeric(10, 2))
    special_instructions = Column(Text)

    price = Column(Numeric(10, 2), nullable=False)
    status = Column(String(20), default='pending_bids', nullable=False, index=True)

    customer_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    customer_name = Column(String(255))

    assigned_driver_id = Column(Integer, ForeignKey("users.id"), index=True)
    assigned_driver_name = Column(String(255))
    assigned_bid_price = Column(Numeric(10, 2))

    accepted_at = Column(DateTime)
    picked_up_at = Column(DateTime)
    in_transit_at = Column(DateTime)
    delivered_at = Column(DateTime)
    cancelled_at = Column(DateTime)

    # Proyección de ubicación actual
    current_lat = Column(Float)
    current_lng = Column(Float)
    current_location_updated_at = Column(DateTime)

    __table_args__ = (
        CheckConstraint("price > 0", name='orders_price_positive'),
        CheckConstraint(
            "status IN ('pending_bids', 'accepted', 'picked_up', 'in_transit', 'delivered', 'cancelled')",
            name='orders_status_check'
        ),
    )

    # Relationships
    customer = relationship("User", back_populates="orders", foreign_keys=[customer_id])
    assigned_driver = relationship("User", back_populates="assigned_orders", foreign_keys=[assigned_driver_id])
    bids = relationship("Bid", back_populates="order", cascade="all, delete-orphan", passive_deletes=True)
    location_updates = relationship(
        "LocationUpdate", back_populates="order", cascade="all, delete-orphan", passive_deletes=True,
        order_by="LocationUpdate.created_at"
    )
    notifications = relationship("Notification", back_populates="order", cascade="all, delete-orphan", passive_deletes=True)
    reviews = relationship("Review", back_populates="order", cascade="all, delete-orphan", passive_deletes=True)


# =====================================================
# OFERTAS
# =====================================================

class Bid(Base, TimestampMixin):
    """Modelo de Oferta de un conductor sobre un pedido"""
    __tablename__ = "bids"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(String(32), ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    driver_name = Column(String(255), nullable=False)
    bid_price = Column(Numeric(10, 2), nullable=False)
    estimated_pickup_time = Column(DateTime)
    estimated_delivery_time = Column(DateTime)
    message = Column(Text)
    status = Column(String(20), default='pending', nullable=False)

    __table_args__ = (
        UniqueConstraint('order_id', 'user_id', name='bids_order_id_user_id_key'),
        CheckConstraint("bid_price > 0", name='bids_price_positive'),
        CheckConstraint("status IN ('pending', 'accepted', 'rejected')", name='bids_status_check'),
    )

    # Relationships
    order = relationship("Order", back_populates="bids")
    driver = relationship("User", back_populates="bids")


# =====================================================
# NOTIFICACIONES Y SEGUIMIENTO
# =====================================================

class Notification(Base):
    """Modelo de Notificación (buzón por usuario)"""
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    order_id = Column(String(32), ForeignKey("orders.id", ondelete="CASCADE"), index=True)
    type = Column(String(50), nullable=False)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    is_read = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    # Relationships
    user = relationship("User", back_populates="notifications")
    order = relationship("Order", back_populates="notifications")


class LocationUpdate(Base):
    """Historial de posiciones reportadas por el conductor para un pedido"""
    __tablename__ = "location_updates"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(String(32), ForeignKey("orders.id", ondelete="CASCADE"), nullable=False)
    driver_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    lat = Column(Float, nullable=False)
    lng = Column(Float, nullable=False)
    status = Column(String(20), nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    __table_args__ = (
        Index('ix_location_updates_order_created_at', 'order_id', 'created_at'),
    )

    # Relationships
    order = relationship("Order", back_populates="location_updates")


# =====================================================
# RESEÑAS
# =====================================================

class Review(Base):
    """Modelo de Reseña entre cliente y conductor"""
    __tablename__ = "reviews"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(String(32), ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    reviewer_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    reviewee_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    review_type = Column(String(30), nullable=False)
    rating = Column(Integer, nullable=False)
    professionalism_rating = Column(Integer)
    communication_rating = Column(Integer)
    timeliness_rating = Column(Integer)
    condition_rating = Column(Integer)
    comment = Column(Text)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    __table_args__ = (
        UniqueConstraint('order_id', 'reviewer_id', 'review_type', name='reviews_order_reviewer_type_key'),
        CheckConstraint("rating BETWEEN 1 AND 5", name='reviews_rating_range'),
        CheckConstraint(
            "review_type IN ('customer_to_driver', 'driver_to_customer')",
            name='reviews_type_check'
        ),
    )

    # Relationships
    order = relationship("Order", back_populates="reviews")
    reviewer = relationship("User", foreign_keys=[reviewer_id])
    reviewee = relationship("User", foreign_keys=[reviewee_id])
