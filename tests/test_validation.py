"""Tests for field checks and business rules."""
import pytest

from app.models.product import Product
from app.schemas.product import ProductInput
from app.services.exceptions import BusinessValidationError, StructuralValidationError
from app.services.validation import (
    check_fields,
    collect_field_violations,
    collect_remaining_violations,
    validate_for_create,
    validate_for_update,
)
from tests.fakes import FakeProductRepository


def test_valid_input_has_no_violations():
    product_input = ProductInput(name="Chair", price=49.0, quantity=2)

    assert collect_field_violations(product_input) == []
    check_fields(product_input)


def test_every_violation_is_reported():
    product_input = ProductInput(name=" ", price=-1, quantity=None, status=None)

    assert collect_field_violations(product_input) == [
        "name: must not be blank",
        "price: must be greater than 0",
        "quantity: is required",
        "status: is required",
    ]


def test_check_fields_raises_with_violations():
    with pytest.raises(StructuralValidationError) as exc_info:
        check_fields(ProductInput())

    assert exc_info.value.violations == [
        "name: must not be blank",
        "price: is required",
        "quantity: is required",
    ]


def test_create_rejects_existing_name():
    repository = FakeProductRepository()
    repository.insert(Product(name="Chair", price=1.0, quantity=1))

    with pytest.raises(BusinessValidationError, match="Product with name 'Chair' already exists"):
        validate_for_create(ProductInput(name="Chair", price=2.0, quantity=1), repository)


def test_create_checks_fields_before_uniqueness():
    repository = FakeProductRepository()
    repository.insert(Product(name="Chair", price=1.0, quantity=1))

    with pytest.raises(BusinessValidationError, match="price must be greater than 0"):
        validate_for_create(ProductInput(name="Chair", price=0, quantity=1), repository)


def test_update_allows_unchanged_name():
    repository = FakeProductRepository()
    existing = repository.insert(Product(name="Chair", price=1.0, quantity=1))

    validate_for_update(ProductInput(name="Chair", price=3.0, quantity=1), existing, repository)


def test_update_rejects_name_of_another_product():
    repository = FakeProductRepository()
    repository.insert(Product(name="Chair", price=1.0, quantity=1))
    table = repository.insert(Product(name="Table", price=1.0, quantity=1))

    with pytest.raises(BusinessValidationError, match="already exists"):
        validate_for_update(ProductInput(name="Chair", price=1.0, quantity=1), table, repository)


def test_remaining_violations_skip_rejected_fields():
    violations = collect_remaining_violations({"price": "abc", "quantity": -2, "extra": 1}, {"price"})

    assert violations == [
        "name: must not be blank",
        "quantity: must be greater than 0",
    ]
