class ProductNotFoundError(Exception):
    """Exception raised when the requested product doesn't exist."""

    def __init__(self, product_id: int):
        self.product_id = product_id
        super().__init__(f"Product not found with id: {product_id}")


class BusinessValidationError(Exception):
    """Exception raised when a product breaks a business rule."""
    pass


class StructuralValidationError(Exception):
    """Exception raised when product fields are missing or out of range."""

    def __init__(self, violations: list[str]):
        self.violations = violations
        super().__init__("; ".join(violations))
