"""
Conversation models for category interactions and follow-up requests.
"""
import time
from typing import List, Literal, Optional, Tuple
from pydantic import BaseModel, Field

from models.results import Product

InteractionAction = Literal["viewed", "expanded", "requested_more", "dismissed"]
FollowUpType = Literal["show_more", "refine", "cross_category", "similar"]

# Actions that mark a category as preferred
PREFERENCE_ACTIONS = ("expanded", "requested_more")

class CategoryInteraction(BaseModel):
    """A single user interaction with a result category."""
    category_name: str
    action: InteractionAction
    timestamp: float = Field(default_factory=time.time)
    products: List[Product] = Field(default_factory=list)

class RefinementCriteria(BaseModel):
    """Constraints attached to a follow-up request."""
    price_range: Optional[Tuple[int, int]] = None
    brands: Optional[List[str]] = None
    exclude_viewed: bool = False

class FollowUpRequest(BaseModel):
    """A category-specific follow-up detected in a user message."""
    type: FollowUpType
    category_name: str
    refinement_criteria: RefinementCriteria = Field(default_factory=RefinementCriteria)

class CrossCategorySuggestion(BaseModel):
    """Suggestion to explore a category related to the current one."""
    from_category: str
    to_category: str
    reasoning: str
    confidence: float
