import json
from pathlib import Path

import pytest

from app.catalog.repository import JsonCatalogRepository
from app.catalog.snapshot import CatalogSnapshotBuilder
from app.core.exceptions import CatalogUnavailable

SAMPLE_CATALOG = Path(__file__).resolve().parent.parent / "data" / "products.json"


def _write_catalog(tmp_path, products):
    path = tmp_path / "products.json"
    path.write_text(json.dumps([p.model_dump(mode="json") for p in products]), encoding="utf-8")
    return path


def test_fetch_orders_newest_first_and_paginates(tmp_path, products):
    repo = JsonCatalogRepository(str(_write_catalog(tmp_path, products)))

    page = repo.fetch(page=1, page_size=4)
    last = repo.fetch(page=2, page_size=4)

    assert [p.id for p in page.items] == [6, 5, 4, 3]
    assert [p.id for p in last.items] == [2, 1]
    assert page.total_count == 6
    assert page.pagination.total_pages == 2
    assert last.pagination.current_page == 2


def test_list_distinct_categories(tmp_path, products):
    repo = JsonCatalogRepository(str(_write_catalog(tmp_path, products)))

    assert repo.list_distinct_categories() == ["Accessories", "Audio", "Laptop", "Smartphone"]


def test_sample_catalog_loads():
    repo = JsonCatalogRepository(str(SAMPLE_CATALOG))

    page = repo.fetch(page=1, page_size=10)

    assert page.total_count == 12
    assert len(page.items) == 10


@pytest.mark.parametrize("content", ["{not json", '{"products": []}', '[{"id": 1, "name": "x"}]'])
def test_unreadable_catalog_is_unavailable(tmp_path, content):
    path = tmp_path / "products.json"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(CatalogUnavailable):
        JsonCatalogRepository(str(path)).fetch(page=1, page_size=10)


def test_missing_catalog_is_unavailable(tmp_path):
    repo = JsonCatalogRepository(str(tmp_path / "missing.json"))

    with pytest.raises(CatalogUnavailable):
        repo.list_distinct_categories()


def test_fetch_rejects_non_positive_page(tmp_path, products):
    repo = JsonCatalogRepository(str(_write_catalog(tmp_path, products)))

    with pytest.raises(ValueError):
        repo.fetch(page=0, page_size=10)


def test_snapshot_counts_only_fetched_page(fake_catalog, make_product):
    catalog = fake_catalog(
        [
            make_product(1, "A1", "A", 1500),
            make_product(2, "A2", "A", 250000),
            make_product(3, "B1", "B", 99000),
        ],
        total=30,
        categories=["A", "B", "C"],
    )

    snapshot = CatalogSnapshotBuilder(catalog, catalog, page_size=10).build()

    assert catalog.calls == [(1, 10)]
    assert snapshot.total_products == 30
    assert snapshot.categories == ("A", "B", "C")
    assert snapshot.categories_count == 3
    assert snapshot.category_counts == {"A": 2, "B": 1}
    assert snapshot.min_price == 1500
    assert snapshot.max_price == 250000
    assert snapshot.pagination.total_pages == 3


def test_snapshot_of_empty_catalog(fake_catalog):
    catalog = fake_catalog([])

    snapshot = CatalogSnapshotBuilder(catalog, catalog).build()

    assert snapshot.products == ()
    assert snapshot.min_price == 0.0
    assert snapshot.max_price == 0.0


def test_snapshot_failure_is_catalog_unavailable(fake_catalog, products):
    catalog = fake_catalog(products)
    categories = fake_catalog([], error=RuntimeError("query timeout"))

    with pytest.raises(CatalogUnavailable) as excinfo:
        CatalogSnapshotBuilder(catalog, categories).build()

    assert "query timeout" in excinfo.value.message
