from pydantic import BaseModel, Field, ConfigDict
from datetime import datetime
from typing import Optional

from app.models.product import ProductStatus


class ProductInput(BaseModel):
    """
    Schema for creating or replacing a product.

    Field presence and positivity are checked by the field validator so that
    every violation is reported at once; only types are enforced here.
    """
    id: Optional[int] = Field(None, description="Ignored; the id comes from the path or the database")
    name: Optional[str] = Field(None, max_length=255, description="Product name (required, unique)")
    description: Optional[str] = Field(None, description="Free-text description")
    price: Optional[float] = Field(None, description="Product price (required, must be positive)")
    quantity: Optional[int] = Field(None, description="Available quantity (required, must be positive)")
    status: Optional[ProductStatus] = Field(ProductStatus.ACTIVE, description="Product status")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "Sample Product",
                "description": "A detailed description",
                "price": 29.99,
                "quantity": 100,
                "status": "ACTIVE",
            }
        }
    )


class ProductResponse(BaseModel):
    """Schema for product response including all fields."""
    id: Optional[int] = None
    name: str
    description: Optional[str] = None
    price: float
    quantity: int
    status: ProductStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
