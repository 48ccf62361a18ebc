"""
Result models for grouped multi-category product search.
"""
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator

PLACEHOLDER_IMAGE = "/placeholder.svg"

class Product(BaseModel):
    """Product record returned by a product lookup."""
    id: str
    name: str
    price: float = 0.0
    image: str = PLACEHOLDER_IMAGE
    category: Optional[str] = None
    brand: Optional[str] = None
    description: Optional[str] = None
    rating: Optional[float] = None

    @field_validator('price')
    @classmethod
    def validate_price(cls, v):
        """Ensure prices are non-negative."""
        if v < 0:
            raise ValueError("Price cannot be negative")
        return v

class CategoryResults(BaseModel):
    """Products found for one category query."""
    category_name: str
    display_name: str
    search_query: str
    products: List[Product] = Field(default_factory=list)
    result_count: int = 0
    search_time: float = 0.0
    relevance_score: float = 0.0

class SearchMetrics(BaseModel):
    """Aggregate timing and success counters for a multi-category search."""
    total_search_time: float = 0.0
    categories_searched: int = 0
    successful_searches: int = 0
    failed_searches: int = 0
    average_results_per_category: float = 0.0

class GroupedSearchResults(BaseModel):
    """Category results ordered by descending relevance."""
    categories: List[CategoryResults] = Field(default_factory=list)
    total_results: int = 0
    search_queries: List[str] = Field(default_factory=list)
    search_metrics: SearchMetrics = Field(default_factory=SearchMetrics)

    @classmethod
    def empty(cls) -> "GroupedSearchResults":
        return cls()

    def get_category(self, category_name: str) -> Optional[CategoryResults]:
        for category in self.categories:
            if category.category_name == category_name:
                return category
        return None

    def product_ids(self) -> List[str]:
        return [p.id for category in self.categories for p in category.products]
