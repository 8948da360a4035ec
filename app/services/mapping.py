from app.models.product import Product, ProductStatus
from app.schemas.product import ProductInput, ProductResponse


def to_external(product: Product) -> ProductResponse:
    """Map a stored product to its API representation."""
    return ProductResponse.model_validate(product)


def to_record(product_input: ProductInput) -> Product:
    """Build a product record from input, defaulting status to ACTIVE."""
    return Product(
        id=product_input.id,
        name=product_input.name,
        description=product_input.description,
        price=product_input.price,
        quantity=product_input.quantity,
        status=product_input.status or ProductStatus.ACTIVE,
    )


def apply_update(product: Product, product_input: ProductInput) -> Product:
    """Overwrite the mutable fields of `product`; id and timestamps are kept."""
    product.name = product_input.name
    product.description = product_input.description
    product.price = product_input.price
    product.quantity = product_input.quantity
    product.status = product_input.status or ProductStatus.ACTIVE
    return product
