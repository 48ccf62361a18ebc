"""
Context models for structured signals extracted from gift requests.
"""
from typing import List, Optional, Tuple
from pydantic import BaseModel, Field, field_validator

class CategoryMapping(BaseModel):
    """Link between a detected interest or brand and a product category."""
    interest: str
    category: str
    search_terms: List[str]
    priority: int = 1

class ParsedContext(BaseModel):
    """
    Structured signals extracted from a conversation.

    interests and detected_brands only ever grow across turns, while
    category_mappings reflects the latest message alone.
    """
    recipient: Optional[str] = None
    relationship: Optional[str] = None
    occasion: Optional[str] = None
    exact_age: Optional[int] = None
    interests: List[str] = Field(default_factory=list)
    detected_brands: List[str] = Field(default_factory=list)
    category_mappings: List[CategoryMapping] = Field(default_factory=list)
    budget: Optional[Tuple[int, int]] = None

    @field_validator('budget')
    @classmethod
    def validate_budget(cls, v):
        """
        Ensure both budget bounds are positive.

        The lower bound is clamped to a minimum, so for small amounts it
        can exceed the upper bound.
        """
        if v is not None:
            low, high = v
            if low <= 0 or high <= 0:
                raise ValueError(f"Invalid budget range: {v}")
        return v

    @property
    def budget_max(self) -> Optional[int]:
        return self.budget[1] if self.budget else None

class CategoryQuery(BaseModel):
    """A search query targeted at a single product category."""
    query: str
    category: str
    priority: int = 1
