"""
Validation rules for product input.

Two independent layers:

- Field checks (`collect_field_violations` / `check_fields`) report every
  missing or out-of-range field at once. They run at the HTTP boundary.
- Business rules (`validate_for_create` / `validate_for_update`) stop at the
  first violated rule and include the name uniqueness check against the
  repository. They run inside the product service.
"""
from typing import Optional, List

from app.models.product import Product
from app.repositories.product_repository import ProductRepository
from app.schemas.product import ProductInput
from app.services.exceptions import BusinessValidationError, StructuralValidationError


def collect_field_violations(product_input: ProductInput) -> List[str]:
    """Return one "<field>: <message>" entry per violated field constraint."""
    violations = []

    if product_input.name is None or not product_input.name.strip():
        violations.append("name: must not be blank")

    if product_input.price is None:
        violations.append("price: is required")
    elif product_input.price <= 0:
        violations.append("price: must be greater than 0")

    if product_input.quantity is None:
        violations.append("quantity: is required")
    elif product_input.quantity <= 0:
        violations.append("quantity: must be greater than 0")

    if product_input.status is None:
        violations.append("status: is required")

    return violations


def collect_remaining_violations(payload: dict, rejected: set) -> List[str]:
    """
    Field violations for a body whose `rejected` fields already failed type checks.

    Only the fields that parsed are re-validated; violations for the rejected
    ones are left out, since they are reported by the type check itself.
    """
    accepted = {
        field: value
        for field, value in payload.items()
        if field in ProductInput.model_fields and field not in rejected
    }
    product_input = ProductInput.model_validate(accepted)
    return [
        violation
        for violation in collect_field_violations(product_input)
        if violation.split(":", 1)[0] not in rejected
    ]


def check_fields(product_input: ProductInput) -> None:
    """Raise StructuralValidationError listing every field violation."""
    violations = collect_field_violations(product_input)
    if violations:
        raise StructuralValidationError(violations)


def _check_required_values(product_input: ProductInput) -> None:
    if product_input.name is None or not product_input.name.strip():
        raise BusinessValidationError("Product name cannot be empty")

    if product_input.price is None or product_input.price <= 0:
        raise BusinessValidationError("Product price must be greater than 0")

    if product_input.quantity is None or product_input.quantity <= 0:
        raise BusinessValidationError("Product quantity must be greater than 0")


def _duplicate_name(name: str) -> BusinessValidationError:
    return BusinessValidationError(f"Product with name '{name}' already exists")


def validate_for_create(product_input: ProductInput, repository: ProductRepository) -> None:
    """
    Check a new product against the business rules.

    Rules are evaluated in order (name, price, quantity, uniqueness) and the
    first failure is raised.

    Raises:
        BusinessValidationError: If any rule is violated
    """
    _check_required_values(product_input)

    if repository.exists_by_name(product_input.name):
        raise _duplicate_name(product_input.name)


def validate_for_update(
    product_input: ProductInput,
    existing: Product,
    repository: ProductRepository,
) -> None:
    """
    Check replacement values for an existing product.

    The name is only checked for uniqueness when it changes, and then only
    against other products.

    Raises:
        BusinessValidationError: If any rule is violated
    """
    _check_required_values(product_input)

    name: Optional[str] = product_input.name
    if name != existing.name and repository.exists_by_name_excluding_id(name, existing.id):
        raise _duplicate_name(name)
