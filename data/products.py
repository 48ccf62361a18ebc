"""
Product catalog handling for the gift context search system.
"""
import logging
import json
import os
import re
from typing import List, Dict, Any, Optional
import sqlalchemy as sa
from sqlalchemy.orm import sessionmaker

from config import DB_CONFIG, PRODUCT_SOURCE_CONFIG

logger = logging.getLogger(__name__)

# Words that carry no product meaning in generated queries
QUERY_STOP_WORDS = {"for", "under", "a", "an", "the", "and", "of", "gift", "gifts"}

PRICE_CEILING_IN_QUERY = re.compile(r"under \$(\d+)", re.IGNORECASE)


class ProductCatalog:
    """Local product catalog backed by a JSON file or a SQL database."""

    def __init__(self, data_file: Optional[str] = None, use_database: Optional[bool] = None):
        """
        Initialize the product catalog.

        Args:
            data_file: Path to product data file (used only for file-based storage)
            use_database: Force database storage on or off; defaults to USE_DATABASE env
        """
        self.data_file = data_file or PRODUCT_SOURCE_CONFIG["catalog_file"]
        self._products = []

        if use_database is None:
            use_database = os.environ.get("USE_DATABASE", "False").lower() == "true"

        if use_database:
            self._use_db = True
            self._init_db_connection()
            logger.info("Using database for product catalog")
        else:
            self._use_db = False
            self._load_products()
            logger.info("Using file-based storage for product catalog")

    def _init_db_connection(self):
        """Initialize database connection and tables."""
        try:
            engine = sa.create_engine(DB_CONFIG["connection_string"])
            metadata = sa.MetaData()

            self.products_table = sa.Table(
                'products', metadata,
                sa.Column('id', sa.String(64), primary_key=True),
                sa.Column('name', sa.String(255), nullable=False),
                sa.Column('description', sa.Text),
                sa.Column('price', sa.Float),
                sa.Column('image', sa.String(512)),
                sa.Column('category', sa.String(100)),
                sa.Column('brand', sa.String(100)),
                sa.Column('rating', sa.Float)
            )

            metadata.create_all(engine)
            self.Session = sessionmaker(bind=engine)

            logger.info("Database connection initialized")
        except Exception as e:
            logger.error(f"Error initializing database: {str(e)}")
            self._use_db = False
            self._load_products()

    def _load_products(self):
        """Load products from data file (used only for file-based storage)."""
        try:
            if os.path.exists(self.data_file):
                with open(self.data_file, 'r') as f:
                    self._products = json.load(f)
                logger.info(f"Loaded {len(self._products)} products from {self.data_file}")
            else:
                logger.warning(f"Product data file not found: {self.data_file}")
                self._products = []
        except Exception as e:
            logger.error(f"Error loading products: {str(e)}")
            self._products = []

    def get_all_products(self) -> List[Dict[str, Any]]:
        """
        Get all products.

        Returns:
            List of all product dictionaries
        """
        if not self._use_db:
            return [dict(p) for p in self._products]

        session = self.Session()
        try:
            result = session.execute(sa.select(self.products_table))
            return [dict(row._mapping) for row in result]
        finally:
            session.close()

    def search(self, query: str, limit: int = 10) -> List[Dict[str, Any]]:
        """
        Keyword search over name, description, category and brand.

        An 'under $N' phrase in the query is applied as a price ceiling.

        Args:
            query: Free-text query
            limit: Maximum number of products to return

        Returns:
            Matching products, best keyword overlap first
        """
        terms = [t for t in re.findall(r"[a-z0-9'-]+", query.lower())
                 if t not in QUERY_STOP_WORDS and not t.isdigit()]
        ceiling_match = PRICE_CEILING_IN_QUERY.search(query)
        max_price = float(ceiling_match.group(1)) if ceiling_match else None

        scored = []
        for product in self.get_all_products():
            if max_price is not None and (product.get("price") or 0) > max_price:
                continue

            haystack = " ".join(
                str(product.get(field) or "") for field in ("name", "description", "category", "brand")
            ).lower()
            score = sum(1 for term in terms if term in haystack)
            if score > 0:
                scored.append((score, product))

        scored.sort(key=lambda item: item[0], reverse=True)
        logger.debug(f"Catalog search '{query}' matched {len(scored)} products")

        return [product for _, product in scored[:limit]]
