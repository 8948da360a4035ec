from sqlalchemy import Column, Integer, String, Float, Text, DateTime, Enum, CheckConstraint
from sqlalchemy.sql import func
import enum

from app.database import Base


class ProductStatus(str, enum.Enum):
    """Enum for product status."""
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    DISCONTINUED = "DISCONTINUED"


class Product(Base):
    """
    Product model representing an item of the catalog.

    Attributes:
        id: Unique identifier for the product (assigned by the database)
        name: Product name (unique across the catalog)
        description: Optional free-text description
        price: Product price (must be positive)
        quantity: Available quantity (must be positive)
        status: Lifecycle status of the product
        created_at: Timestamp when product was created
        updated_at: Timestamp when product was last updated
    """
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, unique=True, index=True)
    description = Column(Text, nullable=True)
    price = Column(Float, nullable=False)
    quantity = Column(Integer, nullable=False)
    status = Column(Enum(ProductStatus), nullable=False, default=ProductStatus.ACTIVE)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Database-level constraints backing up the service-level rules
    __table_args__ = (
        CheckConstraint('price > 0', name='check_price_positive'),
        CheckConstraint('quantity > 0', name='check_quantity_positive'),
        # Never hand a deleted product's id to a new one on SQLite
        {"sqlite_autoincrement": True},
    )

    def __repr__(self):
        return f"<Product(id={self.id}, name='{self.name}', quantity={self.quantity})>"
