"""
State definitions for the conversation search pipeline.
"""
from typing import Dict, List, Any, Optional, TypedDict

from models.context import ParsedContext, CategoryQuery
from models.conversation import FollowUpRequest
from models.results import GroupedSearchResults

class ConversationSearchState(TypedDict):
    """
    Represents the state of our search graph.
    Maintains all information as it flows through the pipeline.
    """
    # Core message information
    message: str  # Original user message
    prior_context: ParsedContext  # Context carried from previous turns
    parsed_context: Optional[ParsedContext]  # Context after parsing this message
    queries: List[CategoryQuery]  # Generated per-category queries

    # Results and response
    results: Optional[GroupedSearchResults]  # Grouped search results
    previous_results: Optional[GroupedSearchResults]  # Results shown last turn
    follow_up: Optional[FollowUpRequest]  # Detected follow-up request
    response: Optional[str]  # Response to return to user

    # Error handling
    input_validation_error: Optional[str]  # Error from input validation
    error: Optional[str]  # Any error that occurred

    # Metadata about the search process
    metadata: Dict[str, Any]
