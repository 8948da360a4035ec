from abc import ABC, abstractmethod
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from typing import Optional, List
import logging

from app.models.product import Product

logger = logging.getLogger(__name__)


class ProductRepository(ABC):
    """
    Storage contract consumed by the product service.

    Implementations must be safe to call from concurrent requests; the
    service performs no locking of its own.
    """

    @abstractmethod
    def find_all(self) -> List[Product]:
        """Return every product, in store order."""

    @abstractmethod
    def find_by_id(self, product_id: int, for_update: bool = False) -> Optional[Product]:
        """Return a product by ID, or None if not found."""

    @abstractmethod
    def exists_by_id(self, product_id: int) -> bool:
        """Return True if a product with this ID exists."""

    @abstractmethod
    def exists_by_name(self, name: str) -> bool:
        """Return True if any product uses this exact name."""

    @abstractmethod
    def exists_by_name_excluding_id(self, name: str, product_id: int) -> bool:
        """Return True if a product other than `product_id` uses this name."""

    @abstractmethod
    def find_matching(
        self,
        name: Optional[str] = None,
        min_price: Optional[float] = None,
        max_price: Optional[float] = None,
    ) -> List[Product]:
        """Return products satisfying every supplied filter."""

    @abstractmethod
    def insert(self, product: Product) -> Product:
        """Persist a new product and return it with ID and timestamps."""

    @abstractmethod
    def update(self, product: Product) -> Product:
        """Persist changes to an existing product."""

    @abstractmethod
    def delete_by_id(self, product_id: int) -> None:
        """Remove a product. Callers check existence first."""


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def build_search_filters(
    name: Optional[str] = None,
    min_price: Optional[float] = None,
    max_price: Optional[float] = None,
) -> list:
    """
    Build the conjunctive filter list for a product search.

    Args:
        name: Case-insensitive substring of the product name (blank is ignored)
        min_price: Inclusive lower price bound
        max_price: Inclusive upper price bound

    Returns:
        List of SQLAlchemy criteria; an empty list matches every product
    """
    filters = []

    if name is not None and name.strip():
        filters.append(Product.name.ilike(f"%{_escape_like(name)}%", escape="\\"))

    if min_price is not None:
        filters.append(Product.price >= min_price)

    if max_price is not None:
        filters.append(Product.price <= max_price)

    return filters


class SqlAlchemyProductRepository(ProductRepository):
    """Product repository backed by a SQLAlchemy session."""

    def __init__(self, db: Session):
        self.db = db

    def find_all(self) -> List[Product]:
        return self.db.query(Product).order_by(Product.id).all()

    def find_by_id(self, product_id: int, for_update: bool = False) -> Optional[Product]:
        query = self.db.query(Product).filter(Product.id == product_id)
        if for_update:
            # Row lock so concurrent updates of the same product serialize
            query = query.with_for_update()
        return query.first()

    def exists_by_id(self, product_id: int) -> bool:
        return self.db.query(
            self.db.query(Product).filter(Product.id == product_id).exists()
        ).scalar()

    def exists_by_name(self, name: str) -> bool:
        return self.db.query(
            self.db.query(Product).filter(Product.name == name).exists()
        ).scalar()

    def exists_by_name_excluding_id(self, name: str, product_id: int) -> bool:
        return self.db.query(
            self.db.query(Product)
            .filter(Product.name == name, Product.id != product_id)
            .exists()
        ).scalar()

    def find_matching(
        self,
        name: Optional[str] = None,
        min_price: Optional[float] = None,
        max_price: Optional[float] = None,
    ) -> List[Product]:
        filters = build_search_filters(name, min_price, max_price)
        return self.db.query(Product).filter(*filters).order_by(Product.id).all()

    def insert(self, product: Product) -> Product:
        self.db.add(product)
        self._commit()
        self.db.refresh(product)
        return product

    def update(self, product: Product) -> Product:
        self._commit()
        self.db.refresh(product)
        return product

    def delete_by_id(self, product_id: int) -> None:
        self.db.query(Product).filter(Product.id == product_id).delete(synchronize_session=False)
        self._commit()

    def _commit(self) -> None:
        """Commit the unit of work, rolling back if the database rejects it."""
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error committing product changes: {e}")
            raise
