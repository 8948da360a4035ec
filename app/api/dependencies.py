from fastapi import Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.repositories.product_repository import ProductRepository, SqlAlchemyProductRepository
from app.services.product_service import ProductService
from app.utils.cache import ReadCache, read_cache


def get_cache() -> ReadCache:
    """Dependency returning the shared read cache."""
    return read_cache


def get_product_repository(db: Session = Depends(get_db)) -> ProductRepository:
    """Dependency returning a repository bound to the request's session."""
    return SqlAlchemyProductRepository(db)


def get_product_service(
    repository: ProductRepository = Depends(get_product_repository),
    cache: ReadCache = Depends(get_cache),
) -> ProductService:
    """Dependency wiring the product service for one request."""
    return ProductService(repository, cache)
