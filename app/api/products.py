from fastapi import APIRouter, Depends, Query, status
from typing import Optional, List
import logging

from app.api.dependencies import get_product_service
from app.schemas.error import ErrorResponse
from app.schemas.product import ProductInput, ProductResponse
from app.services.product_service import ProductService
from app.services.validation import check_fields

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/products", tags=["Products"])

NOT_FOUND_RESPONSE = {404: {"model": ErrorResponse, "description": "Product not found"}}
INVALID_INPUT_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid input - missing or invalid fields"},
    422: {"model": ErrorResponse, "description": "Business rule violated (e.g. duplicate name)"},
}


@router.get(
    "/",
    response_model=List[ProductResponse],
    summary="List all products",
    description="Retrieve every product. Results are cached until the next write."
)
def list_products(service: ProductService = Depends(get_product_service)):
    """Get all products."""
    logger.info("Listing products")
    products = service.list_products()
    logger.info(f"Total products: {len(products)}")
    return products


@router.get(
    "/search",
    response_model=List[ProductResponse],
    summary="Search products",
    description="Search products by name, minimum price, and/or maximum price."
)
def search_products(
    name: Optional[str] = Query(None, description="Product name to search for (case-insensitive)"),
    min_price: Optional[float] = Query(None, alias="minPrice", description="Minimum price (inclusive)"),
    max_price: Optional[float] = Query(None, alias="maxPrice", description="Maximum price (inclusive)"),
    service: ProductService = Depends(get_product_service)
):
    """
    Search products.

    All supplied filters must match; omitted filters are ignored.
    """
    logger.info(f"Searching products - name: {name}, min price: {min_price}, max price: {max_price}")
    products = service.search_products(name, min_price, max_price)
    logger.info(f"Products found: {len(products)}")
    return products


@router.post(
    "/",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    responses=INVALID_INPUT_RESPONSES,
    summary="Create a new product",
    description="Create a new product with name, description, price, quantity and status."
)
def create_product(
    product_data: ProductInput,
    service: ProductService = Depends(get_product_service)
):
    """
    Create a new product.

    - **name**: Product name, unique (required)
    - **description**: Free-text description (optional)
    - **price**: Product price, must be positive (required)
    - **quantity**: Quantity, must be positive (required)
    - **status**: ACTIVE, INACTIVE or DISCONTINUED (defaults to ACTIVE)
    """
    check_fields(product_data)
    logger.info(f"Creating product: {product_data.name}")
    product = service.create_product(product_data)
    logger.info(f"Product created - ID: {product.id}, name: {product.name}")
    return product


@router.get(
    "/{product_id}",
    response_model=ProductResponse,
    responses=NOT_FOUND_RESPONSE,
    summary="Get product by ID",
    description="Get detailed information about a specific product. Results are cached."
)
def get_product(
    product_id: int,
    service: ProductService = Depends(get_product_service)
):
    """Get a product by ID."""
    logger.info(f"Fetching product {product_id}")
    return service.get_product(product_id)


@router.put(
    "/{product_id}",
    response_model=ProductResponse,
    responses={**NOT_FOUND_RESPONSE, **INVALID_INPUT_RESPONSES},
    summary="Update a product",
    description="Replace every field of an existing product. Cache is cleared after the update."
)
def update_product(
    product_id: int,
    product_data: ProductInput,
    service: ProductService = Depends(get_product_service)
):
    """
    Update a product.

    This is a full replacement: omitted optional fields are reset
    (description to empty, status to ACTIVE).
    """
    check_fields(product_data)
    logger.info(f"Updating product {product_id}")
    product = service.update_product(product_id, product_data)
    logger.info(f"Product updated - ID: {product_id}, name: {product.name}")
    return product


@router.delete(
    "/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses=NOT_FOUND_RESPONSE,
    summary="Delete a product",
    description="Delete a product by ID. Cache is cleared after the delete."
)
def delete_product(
    product_id: int,
    service: ProductService = Depends(get_product_service)
):
    """Delete a product."""
    logger.info(f"Deleting product {product_id}")
    service.delete_product(product_id)
    logger.info(f"Product deleted - ID: {product_id}")
    return None
