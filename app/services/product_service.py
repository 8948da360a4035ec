from typing import Optional, List
import logging

from app.repositories.product_repository import ProductRepository
from app.schemas.product import ProductInput, ProductResponse
from app.services import mapping
from app.services.exceptions import ProductNotFoundError
from app.services.validation import validate_for_create, validate_for_update
from app.utils.cache import ReadCache

logger = logging.getLogger(__name__)


class ProductService:
    """
    Service class for Product CRUD operations.

    This service handles:
    - Listing products (cached under a single key)
    - Searching products by name and price range (never cached)
    - Reading a product by ID (cached per ID)
    - Creating, updating and deleting products
    - Cache invalidation

    CACHE POLICY:
    =============
    Every successful write evicts the whole read cache, after the store has
    committed. The "all products" entry may contain any record, so evicting
    only the written ID would leave it stale. Entries are repopulated lazily
    by the next read. Rejected writes leave the cache untouched.
    """

    LIST_CACHE_KEY = "all"

    def __init__(self, repository: ProductRepository, cache: ReadCache):
        self.repository = repository
        self.cache = cache

    def list_products(self) -> List[ProductResponse]:
        """
        Get every product, served from the cache when possible.

        Returns:
            Products in store order
        """
        cached = self.cache.get(self.LIST_CACHE_KEY)
        if cached is not None:
            return [ProductResponse.model_validate(item) for item in cached]

        products = [mapping.to_external(p) for p in self.repository.find_all()]
        self.cache.put(self.LIST_CACHE_KEY, [p.model_dump(mode="json") for p in products])
        return products

    def search_products(
        self,
        name: Optional[str] = None,
        min_price: Optional[float] = None,
        max_price: Optional[float] = None,
    ) -> List[ProductResponse]:
        """
        Search products. All supplied filters must match; absent filters are ignored.

        Args:
            name: Case-insensitive substring of the product name
            min_price: Inclusive lower price bound
            max_price: Inclusive upper price bound

        Returns:
            Matching products in store order
        """
        products = self.repository.find_matching(name, min_price, max_price)
        return [mapping.to_external(p) for p in products]

    def get_product(self, product_id: int) -> ProductResponse:
        """
        Get a product by ID with caching.

        Raises:
            ProductNotFoundError: If the product doesn't exist
        """
        cache_key = str(product_id)
        cached = self.cache.get(cache_key)
        if cached is not None:
            return ProductResponse.model_validate(cached)

        product = self.repository.find_by_id(product_id)
        if not product:
            raise ProductNotFoundError(product_id)

        response = mapping.to_external(product)
        self.cache.put(cache_key, response.model_dump(mode="json"))
        return response

    def create_product(self, product_input: ProductInput) -> ProductResponse:
        """
        Create a new product.

        Args:
            product_input: Product data; any supplied ID is ignored

        Returns:
            The stored product with its assigned ID and timestamps

        Raises:
            BusinessValidationError: If a business rule is violated
        """
        validate_for_create(product_input, self.repository)

        product = mapping.to_record(product_input)
        product.id = None
        product = self.repository.insert(product)

        self._invalidate_cache()
        logger.info(f"Product #{product.id} '{product.name}' created")
        return mapping.to_external(product)

    def update_product(self, product_id: int, product_input: ProductInput) -> ProductResponse:
        """
        Replace every mutable field of an existing product.

        Raises:
            ProductNotFoundError: If the product doesn't exist
            BusinessValidationError: If a business rule is violated
        """
        product = self.repository.find_by_id(product_id, for_update=True)
        if not product:
            raise ProductNotFoundError(product_id)

        validate_for_update(product_input, product, self.repository)

        mapping.apply_update(product, product_input)
        product = self.repository.update(product)

        self._invalidate_cache()
        logger.info(f"Product #{product.id} updated")
        return mapping.to_external(product)

    def delete_product(self, product_id: int) -> None:
        """
        Delete a product.

        Raises:
            ProductNotFoundError: If the product doesn't exist
        """
        if not self.repository.exists_by_id(product_id):
            raise ProductNotFoundError(product_id)

        self.repository.delete_by_id(product_id)

        self._invalidate_cache()
        logger.info(f"Product #{product_id} deleted")

    def _invalidate_cache(self) -> None:
        """Evict every cached read."""
        self.cache.evict_all()
        logger.debug("Product read cache evicted")
