from datetime import datetime
from typing import Dict, Optional, Tuple

from pydantic import BaseModel, Field


class Product(BaseModel):
    """Single catalog entry"""
    id: int = Field(..., ge=1, description="Product identifier")
    name: str = Field(..., min_length=1, description="Product name")
    category: str = Field(..., min_length=1, description="Product category")
    price: float = Field(..., gt=0, description="Unit price")
    thumbnail: Optional[str] = Field(None, description="Thumbnail URL")
    image_link: Optional[str] = Field(None, description="Full-size image URL")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: Optional[datetime] = Field(None, description="Last update timestamp")

    class Config:
        frozen = True


class Pagination(BaseModel):
    """Pagination block of a product listing"""
    current_page: int = Field(..., ge=1, description="Current page")
    total_pages: int = Field(..., ge=0, description="Total number of pages")
    total_items: int = Field(..., ge=0, description="Total number of items")
    page_size: int = Field(..., ge=1, description="Items per page")

    class Config:
        frozen = True


class ProductPage(BaseModel):
    """One page of products as returned by a catalog fetch"""
    items: Tuple[Product, ...] = Field(default=(), description="Products on this page")
    total_count: int = Field(..., ge=0, description="Total products in the catalog")
    pagination: Pagination

    class Config:
        frozen = True


class CatalogSnapshot(BaseModel):
    """
    Read-only view of the catalog captured for a single chat request.

    Per-category counts and the price range only cover the fetched page,
    not the whole catalog.
    """
    products: Tuple[Product, ...] = Field(default=(), description="Fetched products")
    categories: Tuple[str, ...] = Field(default=(), description="Distinct category names")
    category_counts: Dict[str, int] = Field(default_factory=dict, description="Products per category (fetched page)")
    pagination: Pagination
    total_products: int = Field(..., ge=0, description="Total products in the catalog")
    min_price: float = Field(default=0.0, ge=0, description="Lowest price on the fetched page")
    max_price: float = Field(default=0.0, ge=0, description="Highest price on the fetched page")

    class Config:
        frozen = True

    @property
    def categories_count(self) -> int:
        return len(self.categories)
