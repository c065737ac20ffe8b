"""
Catalog Query Module

Read-only access to the product catalog used by the chat assistant.

The assistant only needs two queries:
- a paginated product listing, newest first
- the list of distinct category names

``CatalogQuery`` and ``CategoryQuery`` describe those queries; the shop's
relational store is expected to implement them. ``JsonCatalogRepository``
serves both from a JSON export of the products table so the assistant can
run on its own.
"""

import json
import math
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List

from pydantic import ValidationError

from app.core.config import settings
from app.core.exceptions import CatalogUnavailable
from app.core.logging import get_logger
from app.models.catalog import Pagination, Product, ProductPage

logger = get_logger(__name__)


class CatalogQuery(ABC):
    """Paginated product listing"""

    @abstractmethod
    def fetch(self, page: int, page_size: int) -> ProductPage:
        """Return one page of products; raises CatalogUnavailable on failure"""
        pass


class CategoryQuery(ABC):
    """Distinct category listing"""

    @abstractmethod
    def list_distinct_categories(self) -> List[str]:
        """Return distinct category names"""
        pass


class JsonCatalogRepository(CatalogQuery, CategoryQuery):
    """
    Catalog backed by a JSON file holding a list of product objects.

    The file is re-read on every query so edits show up without a restart.
    """

    def __init__(self, path: str = settings.CATALOG_PATH):
        self.path = Path(path)
        logger.info(f"Initialized JSON catalog at: {self.path}")

    def _load(self) -> List[Product]:
        try:
            with self.path.open("r", encoding="utf-8") as f:
                raw = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Failed to read catalog {self.path}: {e}")
            raise CatalogUnavailable(e)

        if not isinstance(raw, list):
            raise CatalogUnavailable(ValueError("catalog file must contain a JSON list"))

        try:
            return [Product(**item) for item in raw]
        except (TypeError, ValidationError) as e:
            logger.error(f"Invalid product record in {self.path}: {e}")
            raise CatalogUnavailable(e)

    def fetch(self, page: int, page_size: int) -> ProductPage:
        """
        Return one page of products ordered by creation time, newest first.

        Args:
            page: 1-based page number
            page_size: Items per page

        Returns:
            ProductPage with items, total count and pagination metadata

        Raises:
            ValueError: If page or page_size is not positive
            CatalogUnavailable: If the catalog cannot be read
        """
        if page < 1 or page_size < 1:
            raise ValueError("page and page_size must be positive")

        products = sorted(self._load(), key=lambda p: p.created_at, reverse=True)
        total = len(products)
        offset = (page - 1) * page_size

        return ProductPage(
            items=tuple(products[offset:offset + page_size]),
            total_count=total,
            pagination=Pagination(
                current_page=page,
                total_pages=math.ceil(total / page_size),
                total_items=total,
                page_size=page_size,
            ),
        )

    def list_distinct_categories(self) -> List[str]:
        """Return distinct category names in alphabetical order"""
        return sorted({p.category for p in self._load()})
