import argparse
import json
import logging
import sys
from pathlib import Path

from pydantic import ValidationError
from pymongo import MongoClient

from catalog.config import get_settings
from catalog.products.models import ProductCreate

logger = logging.getLogger(__name__)


def load_products(path: Path) -> list[dict]:
    """Read a JSON array of products, validating each entry."""
    raw = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(raw, list):
        raise ValueError(f"{path} must contain a JSON array")

    products = []
    for i, item in enumerate(raw):
        try:
            products.append(ProductCreate.model_validate(item).model_dump())
        except ValidationError as e:
            raise ValueError(f"entry {i} is not a valid product: {e}") from e
    return products


def seed(collection, products: list[dict], drop: bool = False) -> int:
    if drop:
        deleted = collection.delete_many({}).deleted_count
        logger.info("Removed %d existing products", deleted)
    if not products:
        return 0
    result = collection.insert_many(products)
    return len(result.inserted_ids)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Load products from a JSON file into MongoDB")
    parser.add_argument("file", type=Path)
    parser.add_argument("--drop", action="store_true", help="delete existing products first")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    settings = get_settings()

    try:
        products = load_products(args.file)
    except (OSError, ValueError) as e:
        logger.error("Cannot load %s: %s", args.file, e)
        return 1

    client = MongoClient(settings.MONGO_URI, serverSelectionTimeoutMS=settings.MONGO_TIMEOUT_MS)
    try:
        collection = client[settings.MONGO_DB][settings.PRODUCTS_COLLECTION]
        inserted = seed(collection, products, drop=args.drop)
    finally:
        client.close()

    logger.info("Inserted %d products into %s.%s", inserted, settings.MONGO_DB, settings.PRODUCTS_COLLECTION)
    return 0


if __name__ == "__main__":
    sys.exit(main())
