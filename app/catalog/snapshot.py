from collections import Counter

from app.catalog.repository import CatalogQuery, CategoryQuery
from app.core.config import settings
from app.core.exceptions import CatalogUnavailable
from app.core.logging import get_logger
from app.models.catalog import CatalogSnapshot

logger = get_logger(__name__)


class CatalogSnapshotBuilder:
    """Captures the catalog data the assistant's prompt is grounded on."""

    def __init__(
        self,
        catalog: CatalogQuery,
        categories: CategoryQuery,
        page_size: int = settings.CATALOG_SNAPSHOT_PAGE_SIZE,
    ):
        self.catalog = catalog
        self.categories = categories
        self.page_size = page_size

    def build(self) -> CatalogSnapshot:
        """
        Fetch the first page of products and the category list.

        Raises:
            CatalogUnavailable: If either query fails
        """
        try:
            page = self.catalog.fetch(page=1, page_size=self.page_size)
            categories = self.categories.list_distinct_categories()
        except CatalogUnavailable:
            raise
        except Exception as e:
            logger.error(f"Catalog query failed: {e}")
            raise CatalogUnavailable(e)

        products = page.items
        counts = Counter(p.category for p in products)
        prices = [p.price for p in products]

        snapshot = CatalogSnapshot(
            products=products,
            categories=tuple(categories),
            category_counts=dict(counts),
            pagination=page.pagination,
            total_products=page.total_count,
            min_price=min(prices) if prices else 0.0,
            max_price=max(prices) if prices else 0.0,
        )
        logger.debug(
            f"Catalog snapshot: {len(products)} of {snapshot.total_products} products, "
            f"{snapshot.categories_count} categories"
        )
        return snapshot
