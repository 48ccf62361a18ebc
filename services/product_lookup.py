"""
Product lookup clients used by the multi-category search.
"""
import logging
from typing import Dict, Any, List, Optional
import httpx

from data.products import ProductCatalog
from models.results import Product, PLACEHOLDER_IMAGE
from config import PRODUCT_SOURCE_CONFIG

logger = logging.getLogger(__name__)

class ProductLookupError(Exception):
    """Raised when a product source cannot answer a query."""


def normalize_product(raw: Dict[str, Any], category: str, query: str, index: int) -> Product:
    """
    Convert a raw product record into a Product, filling missing fields.

    Args:
        raw: Raw product record from a product source
        category: Category the record was searched under
        query: Query that produced the record
        index: Position of the record in the result list

    Returns:
        Normalized product
    """
    product_id = raw.get("id") or raw.get("product_id") or f"{category}-{index}"
    name = raw.get("name") or raw.get("title") or query

    return Product(
        id=str(product_id),
        name=name,
        price=raw.get("price") or 0.0,
        image=raw.get("image") or PLACEHOLDER_IMAGE,
        category=raw.get("category") or category,
        brand=raw.get("brand"),
        description=raw.get("description") or f"{query} product",
        rating=raw.get("rating")
    )


class CatalogProductLookup:
    """Product lookup backed by the local product catalog."""

    def __init__(self, catalog=None):
        self.catalog = catalog if catalog is not None else ProductCatalog()

    async def search_products(self, query: str, max_results: int, category: str = "general") -> List[Product]:
        """
        Search the catalog.

        Args:
            query: Free-text query
            max_results: Maximum number of products to return
            category: Category used to fill missing product fields

        Returns:
            Normalized products
        """
        raw_products = self.catalog.search(query, limit=max_results)
        return [
            normalize_product(raw, category, query, index)
            for index, raw in enumerate(raw_products)
        ]


class HttpProductLookup:
    """Product lookup against a remote product search API."""

    def __init__(self, base_url: Optional[str] = None, api_key: Optional[str] = None,
                 timeout: Optional[float] = None):
        self.base_url = (base_url or PRODUCT_SOURCE_CONFIG["api_url"]).rstrip("/")
        self.api_key = api_key if api_key is not None else PRODUCT_SOURCE_CONFIG["api_key"]
        self.timeout = timeout or PRODUCT_SOURCE_CONFIG["timeout"]

    async def search_products(self, query: str, max_results: int, category: str = "general") -> List[Product]:
        """
        Query the remote product search endpoint.

        Args:
            query: Free-text query
            max_results: Maximum number of products to return
            category: Category used to fill missing product fields

        Returns:
            Normalized products

        Raises:
            ProductLookupError: If the API is unreachable or answers with an error
        """
        headers = {"Authorization": f"Bearer {self.api_key}"} if self.api_key else {}
        payload = {"query": query, "max_results": max_results}

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.post(f"{self.base_url}/api/search", json=payload, headers=headers)
        except httpx.HTTPError as e:
            raise ProductLookupError(f"Product API request failed: {str(e)}") from e

        if resp.status_code != 200:
            raise ProductLookupError(f"Product API returned {resp.status_code}: {resp.text}")

        data = resp.json()
        raw_products = data.get("results", []) if isinstance(data, dict) else data

        return [
            normalize_product(raw, category, query, index)
            for index, raw in enumerate(raw_products[:max_results])
        ]


def get_product_lookup():
    """
    Initialize and return the configured product lookup.

    Returns:
        CatalogProductLookup or HttpProductLookup
    """
    source = PRODUCT_SOURCE_CONFIG["type"]
    logger.info(f"Using product source: {source}")

    if source == "http":
        return HttpProductLookup()
    return CatalogProductLookup()
