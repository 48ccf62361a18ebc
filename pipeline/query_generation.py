"""
Category query generation component for the search pipeline.
"""
import logging
from typing import List

from models.context import ParsedContext, CategoryQuery
from models.state import ConversationSearchState
from config import SEARCH_CONFIG

logger = logging.getLogger(__name__)

def generate_queries(state: ConversationSearchState) -> ConversationSearchState:
    """
    Generates per-category search queries from the parsed context.

    Args:
        state: The current search state with parsed context

    Returns:
        Updated state with generated queries
    """
    context = state["parsed_context"]
    queries = generate_category_queries(context, SEARCH_CONFIG["max_categories"])

    logger.info(f"Generated {len(queries)} category queries: {[q.query for q in queries]}")

    return {
        **state,
        "queries": queries,
        "metadata": {
            **(state.get("metadata", {})),
            "generated_query_count": len(queries)
        }
    }

def generate_category_queries(context: ParsedContext, max_queries: int = 4) -> List[CategoryQuery]:
    """
    Build one search query per category mapping.

    Args:
        context: The parsed context
        max_queries: Maximum number of queries to return

    Returns:
        Queries sorted by descending priority, original order kept for ties
    """
    queries = []

    for mapping in context.category_mappings:
        query = mapping.search_terms[0]

        if context.recipient and "for" not in query:
            query += f" for {context.recipient}"

        if context.occasion:
            query += f" {context.occasion}"

        if context.budget:
            query += f" under ${context.budget_max}"

        queries.append(CategoryQuery(
            query=query.strip(),
            category=mapping.category,
            priority=mapping.priority
        ))

    # sorted() is stable, so equal priorities keep parser order
    return sorted(queries, key=lambda q: q.priority, reverse=True)[:max_queries]

def generate_fallback_query(context: ParsedContext) -> str:
    """
    Build a generic gift query when no category could be detected.

    Args:
        context: The parsed context

    Returns:
        Query such as 'gifts for parent birthday under $50'
    """
    query = "gifts"

    if context.recipient:
        query += f" for {context.recipient}"
    elif context.relationship:
        query += f" for {context.relationship}"

    if context.occasion:
        query += f" {context.occasion}"

    if context.budget:
        query += f" under ${context.budget_max}"

    return query.strip()
