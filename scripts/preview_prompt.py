#!/usr/bin/env python3
"""
CLI for previewing the prompt the assistant would send for a message.

Usage examples:
  python preview_prompt.py "Which laptops do you sell?"
  python preview_prompt.py --catalog ./data/products.json --page-size 5 "Cheapest phone?"

Prints the assembled prompt and exits with non-zero if the catalog cannot be read.
"""
import argparse
import sys
from pathlib import Path

# Add parent directory to Python path
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.catalog.repository import JsonCatalogRepository
from app.catalog.snapshot import CatalogSnapshotBuilder
from app.chat.prompt import PromptBuilder
from app.core.config import settings
from app.core.exceptions import CatalogUnavailable
from app.core.logging import get_logger

logger = get_logger(__name__)


def main() -> int:
    parser = argparse.ArgumentParser(description="Preview the assistant prompt for a message")
    parser.add_argument("message", help="User message to embed in the prompt")
    parser.add_argument("--catalog", "-c", default=settings.CATALOG_PATH, help="Path to the catalog JSON file")
    parser.add_argument("--page-size", type=int, default=settings.CATALOG_SNAPSHOT_PAGE_SIZE, help="Products fetched for the snapshot")

    args = parser.parse_args()

    repository = JsonCatalogRepository(args.catalog)
    builder = CatalogSnapshotBuilder(repository, repository, page_size=args.page_size)

    try:
        snapshot = builder.build()
    except CatalogUnavailable as e:
        logger.error("Catalog unavailable: %s", e.message)
        print(e.message, file=sys.stderr)
        return 1

    print(PromptBuilder().build_chat_prompt(snapshot, args.message))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
