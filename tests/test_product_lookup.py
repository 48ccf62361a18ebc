"""
Tests for the product catalog and product lookup clients.
"""
import unittest
import sys
import os
import json
import tempfile
from unittest.mock import MagicMock, AsyncMock, patch
import logging

import httpx

# Add parent directory to path to allow imports
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from data.products import ProductCatalog
from models.results import PLACEHOLDER_IMAGE
from services.product_lookup import (
    CatalogProductLookup,
    HttpProductLookup,
    ProductLookupError,
    normalize_product,
)

# Disable logging during tests
logging.disable(logging.CRITICAL)

SAMPLE_PRODUCTS = [
    {"id": "kit-1", "name": "Chef Knife", "price": 90.0, "category": "kitchen", "description": "knife for cooking"},
    {"id": "kit-2", "name": "Stand Mixer", "price": 350.0, "category": "kitchen", "description": "mixer for baking"},
    {"id": "fit-1", "name": "Yoga Mat", "price": 40.0, "category": "fitness", "description": "mat for yoga"},
    {"id": "fit-2", "name": "Yoga Blocks", "price": 25.0, "category": "fitness", "description": "blocks for yoga and cooking breaks"},
]

class TestProductCatalog(unittest.TestCase):
    """Tests for the file-backed product catalog."""

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.data_file = os.path.join(self.temp_dir.name, "products.json")
        with open(self.data_file, "w") as f:
            json.dump(SAMPLE_PRODUCTS, f)
        self.catalog = ProductCatalog(data_file=self.data_file, use_database=False)

    def tearDown(self):
        self.temp_dir.cleanup()

    def test_get_all_products(self):
        self.assertEqual(len(self.catalog.get_all_products()), 4)

    def test_missing_data_file(self):
        catalog = ProductCatalog(data_file=os.path.join(self.temp_dir.name, "missing.json"), use_database=False)

        self.assertEqual(catalog.search("yoga"), [])

    def test_search_keyword_overlap(self):
        results = self.catalog.search("yoga mat for spouse", limit=10)

        self.assertEqual([p["id"] for p in results], ["fit-1", "fit-2"])

    def test_search_price_ceiling(self):
        """Test that an 'under $N' phrase filters out pricier products."""
        results = self.catalog.search("cooking for spouse birthday under $130", limit=10)

        self.assertEqual([p["id"] for p in results], ["kit-1", "fit-2"])

class TestCatalogProductLookup(unittest.IsolatedAsyncioTestCase):
    """Tests for the catalog-backed lookup."""

    async def test_search_products_normalizes(self):
        catalog = MagicMock()
        catalog.search.return_value = [{"name": "Yoga Mat", "price": 40.0}]
        lookup = CatalogProductLookup(catalog)

        products = await lookup.search_products("yoga", 4, category="fitness")

        catalog.search.assert_called_once_with("yoga", limit=4)
        self.assertEqual(products[0].id, "fitness-0")
        self.assertEqual(products[0].category, "fitness")
        self.assertEqual(products[0].image, PLACEHOLDER_IMAGE)

class TestHttpProductLookup(unittest.IsolatedAsyncioTestCase):
    """Tests for the remote product API lookup."""

    def make_client(self, response=None, error=None):
        client = MagicMock()
        client.post = AsyncMock(return_value=response, side_effect=error)
        client_cls = MagicMock()
        client_cls.return_value.__aenter__.return_value = client
        return client_cls, client

    async def test_search_products(self):
        response = MagicMock()
        response.status_code = 200
        response.json.return_value = {"results": [{"id": 7, "title": "Camera Strap", "price": 19.5}]}
        client_cls, client = self.make_client(response)

        with patch('services.product_lookup.httpx.AsyncClient', client_cls):
            lookup = HttpProductLookup(base_url="http://products.test/", api_key="secret")
            products = await lookup.search_products("camera", 4, category="electronics")

        args, kwargs = client.post.call_args
        self.assertEqual(args[0], "http://products.test/api/search")
        self.assertEqual(kwargs["json"], {"query": "camera", "max_results": 4})
        self.assertEqual(kwargs["headers"], {"Authorization": "Bearer secret"})
        self.assertEqual(products[0].id, "7")
        self.assertEqual(products[0].name, "Camera Strap")
        self.assertEqual(products[0].category, "electronics")

    async def test_error_status_raises(self):
        response = MagicMock()
        response.status_code = 503
        response.text = "unavailable"
        client_cls, _ = self.make_client(response)

        with patch('services.product_lookup.httpx.AsyncClient', client_cls):
            lookup = HttpProductLookup(base_url="http://products.test")
            with self.assertRaises(ProductLookupError):
                await lookup.search_products("camera", 4)

    async def test_connection_error_raises(self):
        client_cls, _ = self.make_client(error=httpx.ConnectError("connection refused"))

        with patch('services.product_lookup.httpx.AsyncClient', client_cls):
            lookup = HttpProductLookup(base_url="http://products.test")
            with self.assertRaises(ProductLookupError):
                await lookup.search_products("camera", 4)

class TestNormalizeProduct(unittest.TestCase):
    """Tests for product normalization."""

    def test_fills_missing_fields(self):
        product = normalize_product({}, "travel", "luggage", 2)

        self.assertEqual(product.id, "travel-2")
        self.assertEqual(product.name, "luggage")
        self.assertEqual(product.price, 0.0)
        self.assertEqual(product.description, "luggage product")


if __name__ == '__main__':
    unittest.main()
