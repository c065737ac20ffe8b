import json
from datetime import datetime, timedelta, timezone

import pytest

from app.core.exceptions import BackendProtocolError, BackendStreamError, CatalogUnavailable
from app.llm.client import CompletionStream, LLMClient
from app.models.catalog import Pagination, Product, ProductPage


def ndjson(text: str, done: bool = False) -> bytes:
    return json.dumps({"response": text, "done": done}).encode()


class FakeStream(CompletionStream):
    """Backend stream that replays fixed lines, optionally failing at the end"""

    def __init__(self, lines, error=None):
        self.lines = list(lines)
        self.error = error
        self.reads = 0
        self.closed = False

    def iter_lines(self):
        for line in self.lines:
            self.reads += 1
            yield line
        if self.error is not None:
            raise BackendStreamError(self.error)

    def close(self):
        self.closed = True


class FakeLLM(LLMClient):
    model = "fake-model"

    def __init__(self, stream=None, open_error=None, healthy=True):
        self.stream = stream
        self.open_error = open_error
        self.healthy = healthy
        self.prompts = []

    def open_stream(self, prompt, **kwargs):
        self.prompts.append(prompt)
        if self.open_error is not None:
            raise self.open_error
        return self.stream

    def check_connection(self):
        return self.healthy


class FakeCatalog:
    """In-memory CatalogQuery + CategoryQuery"""

    def __init__(self, products, total=None, categories=None, error=None):
        self.products = list(products)
        self.total = len(self.products) if total is None else total
        self.categories = categories
        self.error = error
        self.calls = []

    def fetch(self, page, page_size):
        self.calls.append((page, page_size))
        if self.error is not None:
            raise self.error
        offset = (page - 1) * page_size
        return ProductPage(
            items=tuple(self.products[offset:offset + page_size]),
            total_count=self.total,
            pagination=Pagination(
                current_page=page,
                total_pages=-(-self.total // page_size),
                total_items=self.total,
                page_size=page_size,
            ),
        )

    def list_distinct_categories(self):
        if self.error is not None:
            raise self.error
        if self.categories is not None:
            return list(self.categories)
        return sorted({p.category for p in self.products})


def _make_product(id, name, category, price, day=1):
    return Product(
        id=id,
        name=name,
        category=category,
        price=price,
        created_at=datetime(2024, 3, 1, tzinfo=timezone.utc) + timedelta(days=day),
    )


@pytest.fixture
def make_product():
    return _make_product


@pytest.fixture
def products():
    return [
        _make_product(1, "Samsung Galaxy S24", "Smartphone", 13999000, day=1),
        _make_product(2, "iPhone 15", "Smartphone", 15499000, day=2),
        _make_product(3, "ASUS Vivobook 14", "Laptop", 8499000, day=3),
        _make_product(4, "JBL Flip 6", "Audio", 1899000, day=4),
        _make_product(5, "Anker PowerCore", "Accessories", 649000, day=5),
        _make_product(6, "Lenovo ThinkPad E14", "Laptop", 12750000, day=6),
    ]


@pytest.fixture
def fake_stream():
    return FakeStream


@pytest.fixture
def fake_llm():
    return FakeLLM


@pytest.fixture
def fake_catalog():
    return FakeCatalog


@pytest.fixture
def line():
    return ndjson


@pytest.fixture
def backend_errors():
    return {
        "catalog": CatalogUnavailable(RuntimeError("database is down")),
        "connect": BackendProtocolError("Failed to connect to generation backend: refused"),
    }
