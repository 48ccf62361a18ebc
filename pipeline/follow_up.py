"""
Follow-up handling component for the search pipeline.

Detects category-specific follow-ups ("show me more cooking items",
"cheaper travel options") and builds cross-category suggestions.
"""
import logging
from typing import List, Optional

from models.context import ParsedContext
from models.conversation import FollowUpRequest, RefinementCriteria, CrossCategorySuggestion
from models.results import GroupedSearchResults, SearchMetrics
from models.state import ConversationSearchState
from pipeline.query_generation import generate_fallback_query
from utils.lookup_tables import (
    SHOW_MORE_PATTERNS,
    REFINE_PATTERNS,
    PRICE_CEILING_PATTERN,
    FOLLOW_UP_KEYWORDS,
    CROSS_CATEGORY_MAPPINGS,
    CROSS_CATEGORY_REASONING,
    FOLLOW_UP_DISPLAY_NAMES,
)
from config import FEATURES, SEARCH_CONFIG

logger = logging.getLogger(__name__)

GENERAL_CATEGORY = "general"

def parse_follow_up(message: str,
                    previous_results: Optional[GroupedSearchResults]) -> Optional[FollowUpRequest]:
    """
    Detect a category-specific follow-up request.

    Args:
        message: The user message
        previous_results: Results shown in the previous turn

    Returns:
        The follow-up request, or None when the message is not a follow-up
    """
    for pattern in SHOW_MORE_PATTERNS:
        match = pattern.search(message)
        if not match or not match.group("hint").strip():
            continue

        category = find_matching_category(match.group("hint").strip(), previous_results)
        if category:
            return FollowUpRequest(
                type="show_more",
                category_name=category,
                refinement_criteria=RefinementCriteria(exclude_viewed=True)
            )

    for pattern in REFINE_PATTERNS:
        match = pattern.search(message)
        if not match:
            continue

        hint = match.group("hint").strip() or GENERAL_CATEGORY
        category = find_matching_category(hint, previous_results)

        criteria = RefinementCriteria()
        price_match = PRICE_CEILING_PATTERN.search(message)
        if price_match:
            criteria.price_range = (0, int(price_match.group(1)))

        return FollowUpRequest(
            type="refine",
            category_name=category or GENERAL_CATEGORY,
            refinement_criteria=criteria
        )

    return None

def find_matching_category(hint: str, previous_results: Optional[GroupedSearchResults]) -> Optional[str]:
    """
    Resolve a free-text hint to a category shown in the previous results.

    Args:
        hint: Category hint from the user message
        previous_results: Results shown in the previous turn

    Returns:
        The category name, or None if nothing matches
    """
    if not previous_results:
        return None

    hint = hint.lower()

    for category in previous_results.categories:
        name = category.category_name.lower()
        if name in hint or hint in name or hint in category.display_name.lower():
            return category.category_name

    present = {category.category_name for category in previous_results.categories}
    for category, keywords in FOLLOW_UP_KEYWORDS.items():
        if any(keyword in hint for keyword in keywords) and category in present:
            return category

    return None

def generate_cross_category_suggestions(current_category: str,
                                        context: ParsedContext) -> List[CrossCategorySuggestion]:
    """
    Suggest up to two categories related to the current one.

    Args:
        current_category: Category the user is looking at
        context: The parsed context

    Returns:
        Suggestions sorted by descending confidence
    """
    suggestions = []

    for related in CROSS_CATEGORY_MAPPINGS.get(current_category, ()):
        reasoning = CROSS_CATEGORY_REASONING.get(current_category, {}).get(related)
        if not reasoning:
            continue

        confidence = 0.6
        if any(current_category in interest.lower() or related in interest.lower()
               for interest in context.interests):
            confidence += 0.2
        if context.recipient and context.occasion:
            confidence += 0.1

        suggestions.append(CrossCategorySuggestion(
            from_category=current_category,
            to_category=related,
            reasoning=reasoning,
            confidence=min(round(confidence, 2), 1.0)
        ))

    return sorted(suggestions, key=lambda s: s.confidence, reverse=True)[:2]

def generate_follow_up_message(request: FollowUpRequest) -> str:
    """Build the assistant reply for a follow-up request."""
    display_name = FOLLOW_UP_DISPLAY_NAMES.get(request.category_name, request.category_name)

    if request.type == "show_more":
        return f"I'll find more {display_name} options for you. Let me search for additional items that might be perfect!"
    if request.type == "refine":
        if request.refinement_criteria.price_range:
            _, max_price = request.refinement_criteria.price_range
            return f"Looking for {display_name} under ${max_price}. Let me find some great budget-friendly options!"
        return f"I'll refine the {display_name} results to better match what you're looking for."
    if request.type == "cross_category":
        return f"Based on your interest in {display_name}, I think you might also like some related items from other categories!"
    return f"Let me help you explore more {display_name} options."

def detect_follow_up(state: ConversationSearchState) -> ConversationSearchState:
    """
    Checks whether the message refers to results from the previous turn.

    Args:
        state: The current search state

    Returns:
        Updated state with the detected follow-up, if any
    """
    previous_results = state.get("previous_results")
    follow_up = None

    if FEATURES["follow_up_detection"] and previous_results and previous_results.categories:
        follow_up = parse_follow_up(state["message"], previous_results)

    if follow_up:
        logger.info(f"Detected follow-up: type={follow_up.type}, category={follow_up.category_name}")

    return {
        **state,
        "follow_up": follow_up,
        "metadata": {
            **(state.get("metadata", {})),
            "follow_up_detected": follow_up is not None
        }
    }

async def handle_follow_up(state: ConversationSearchState, executor) -> ConversationSearchState:
    """
    Re-runs the search for the category a follow-up refers to.

    Args:
        state: The current search state with a follow-up request
        executor: The multi-category search executor

    Returns:
        Updated state with refreshed results for that category
    """
    follow_up = state["follow_up"]
    previous_results = state["previous_results"]
    context = state.get("prior_context") or ParsedContext()
    criteria = follow_up.refinement_criteria

    previous_category = previous_results.get_category(follow_up.category_name)
    query = previous_category.search_query if previous_category else generate_fallback_query(context)
    exclude_ids = previous_results.product_ids() if criteria.exclude_viewed else []
    max_price = criteria.price_range[1] if criteria.price_range else None

    category_results = await executor.search_category(
        query,
        follow_up.category_name,
        context,
        limit=SEARCH_CONFIG["per_category_limit"],
        exclude_ids=exclude_ids,
        max_price=max_price
    )

    if category_results and category_results.products:
        if previous_category:
            category_results.display_name = previous_category.display_name
        results = GroupedSearchResults(
            categories=[category_results],
            total_results=category_results.result_count,
            search_queries=[query],
            search_metrics=SearchMetrics(
                categories_searched=1,
                successful_searches=1,
                average_results_per_category=float(category_results.result_count)
            )
        )
        error = None
    else:
        failed = category_results is None
        results = GroupedSearchResults(
            search_queries=[query],
            search_metrics=SearchMetrics(
                categories_searched=1,
                successful_searches=0 if failed else 1,
                failed_searches=1 if failed else 0
            )
        )
        error = "NO_FOLLOW_UP_RESULTS"
        logger.warning(f"Follow-up search found nothing for category {follow_up.category_name}")

    return {
        **state,
        "parsed_context": context,
        "results": results,
        "response": generate_follow_up_message(follow_up),
        "error": error,
        "metadata": {
            **(state.get("metadata", {})),
            "category_count": len(results.categories),
            "total_results": results.total_results
        }
    }
