"""
Modelos de base de datos (ORM).

Categorías, productos y órdenes pertenecen a la tienda; el sincronizador
solo los lee y actualiza. sync_consumers guarda el watermark de cada job.
"""
from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from inventory_sync.infrastructure.database.session import Base


class ProductCategoryModel(Base):
    """Categoría de productos (Product Group en Unleashed)."""

    __tablename__ = "product_categories"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False, index=True)
    url_segment = Column(String(255), nullable=True)
    guid = Column(String(64), nullable=True, index=True)

    products = relationship("ProductModel", back_populates="parent")

    def __repr__(self):
        return f"<ProductCategory(id={self.id}, title={self.title}, guid={self.guid})>"


class ProductModel(Base):
    """Producto de la tienda, identificado por su código de Unleashed."""

    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    internal_item_id = Column(String(100), nullable=True, index=True)
    title = Column(String(255), nullable=False, index=True)
    url_segment = Column(String(255), nullable=True)
    base_price = Column(Float, nullable=True)
    guid = Column(String(64), nullable=True, index=True)
    parent_id = Column(Integer, ForeignKey("product_categories.id"), nullable=True)

    parent = relationship("ProductCategoryModel", back_populates="products")

    def __repr__(self):
        return f"<Product(id={self.id}, internal_item_id={self.internal_item_id}, title={self.title})>"


class OrderModel(Base):
    """Orden de la tienda. Unleashed solo actualiza su estado."""

    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    reference = Column(String(100), nullable=False, index=True)
    status = Column(String(50), nullable=False, default="Unpaid")

    def __repr__(self):
        return f"<Order(id={self.id}, reference={self.reference}, status={self.status})>"


class ConsumerModel(Base):
    """
    Watermark persistido por job.

    external_last_edited se guarda como string ISO8601 con offset.
    """

    __tablename__ = "sync_consumers"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(100), nullable=False, unique=True, index=True)
    external_last_edited_key = Column(String(100), nullable=False)
    external_last_edited = Column(String(64), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<Consumer(title={self.title}, external_last_edited={self.external_last_edited})>"
