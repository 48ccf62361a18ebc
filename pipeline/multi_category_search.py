"""
Multi-category search component for the search pipeline.

Runs one product lookup per category query concurrently and groups the
results by category, ranked by a lexical relevance score.
"""
import asyncio
import logging
import time
from typing import Iterable, List, Optional

from models.context import ParsedContext, CategoryQuery
from models.results import Product, CategoryResults, GroupedSearchResults, SearchMetrics
from models.state import ConversationSearchState
from pipeline.query_generation import generate_category_queries, generate_fallback_query
from utils.lookup_tables import (
    BRAND_CATEGORIES,
    BRAND_DISPLAY_NAMES,
    CATEGORY_DISPLAY_NAMES,
    CONTEXTUAL_DISPLAY_NAMES,
)
from config import SEARCH_CONFIG, FEATURES

logger = logging.getLogger(__name__)

FALLBACK_CATEGORY = "general"
FALLBACK_DISPLAY_NAME = "Gift Ideas"
FALLBACK_RELEVANCE = 50


class MultiCategorySearchExecutor:
    """Executes grouped product searches against a product lookup."""

    def __init__(self,
                 product_lookup,
                 query_timeout: Optional[float] = None,
                 max_categories: Optional[int] = None,
                 fallback_search: Optional[bool] = None):
        """
        Initialize the executor.

        Args:
            product_lookup: Object with an async search_products(query, max_results, category)
            query_timeout: Seconds allowed per category lookup
            max_categories: Maximum number of category queries per search
            fallback_search: Run a generic gift query when no category is detected
        """
        self.product_lookup = product_lookup
        self.query_timeout = query_timeout if query_timeout is not None else SEARCH_CONFIG["query_timeout"]
        self.max_categories = max_categories or SEARCH_CONFIG["max_categories"]
        self.fallback_search = FEATURES["fallback_search"] if fallback_search is None else fallback_search

    async def search(self, context: ParsedContext, per_category_limit: int = 4) -> GroupedSearchResults:
        """
        Search every category implied by the context.

        Args:
            context: The parsed context
            per_category_limit: Maximum products kept per category

        Returns:
            Grouped results; lookup failures are counted, never raised
        """
        start_time = time.perf_counter()
        queries = generate_category_queries(context, self.max_categories)

        if not queries:
            if self.fallback_search:
                return await self._search_fallback(context, per_category_limit)
            logger.info("No category queries generated, returning empty results")
            return GroupedSearchResults.empty()

        logger.info(f"Starting multi-category search for {len(queries)} categories")

        # All lookups are dispatched together
        outcomes = await asyncio.gather(*[
            self._run_query(query, context, per_category_limit)
            for query in queries
        ])

        successful = [result for result in outcomes if result is not None]
        failed_count = len(outcomes) - len(successful)

        categories = sorted(
            [result for result in successful if result.products],
            key=lambda result: result.relevance_score,
            reverse=True
        )

        total_results = sum(category.result_count for category in categories)
        metrics = SearchMetrics(
            total_search_time=time.perf_counter() - start_time,
            categories_searched=len(queries),
            successful_searches=len(successful),
            failed_searches=failed_count,
            average_results_per_category=(
                sum(r.result_count for r in successful) / len(successful) if successful else 0.0
            )
        )

        logger.info(f"Multi-category search complete: {len(categories)} categories, "
                    f"{total_results} results, {failed_count} failed, "
                    f"time={metrics.total_search_time:.2f}s")

        return GroupedSearchResults(
            categories=categories,
            total_results=total_results,
            search_queries=[q.query for q in queries],
            search_metrics=metrics
        )

    async def search_category(self,
                              query: str,
                              category: str,
                              context: ParsedContext,
                              limit: int = 4,
                              exclude_ids: Iterable[str] = (),
                              max_price: Optional[float] = None) -> Optional[CategoryResults]:
        """
        Re-run a single category search, e.g. for a follow-up request.

        Args:
            query: Query to run
            category: Category the query belongs to
            context: The parsed context, used for display name and score
            limit: Maximum products to keep
            exclude_ids: Product IDs already shown to the user
            max_price: Optional price ceiling

        Returns:
            Category results, or None if the lookup failed
        """
        excluded = set(exclude_ids)
        # Over-fetch so filtered products can be replaced
        fetch_size = limit * 2 + len(excluded)
        category_query = CategoryQuery(query=query, category=category, priority=1)

        products = await self._lookup(category_query, fetch_size)
        if products is None:
            return None

        products = [p for p in products if p.id not in excluded]
        if max_price is not None:
            products = [p for p in products if p.price <= max_price]

        return self._build_category_results(category_query, context, products[:limit], 0.0)

    async def _run_query(self,
                         category_query: CategoryQuery,
                         context: ParsedContext,
                         per_category_limit: int) -> Optional[CategoryResults]:
        search_start = time.perf_counter()

        # A failure here must not abort the sibling queries in gather()
        try:
            products = await self._lookup(category_query, per_category_limit * 2)
            if products is None:
                return None

            return self._build_category_results(
                category_query,
                context,
                products[:per_category_limit],
                time.perf_counter() - search_start
            )
        except Exception as e:
            logger.error(f"Error building results for category {category_query.category}: {str(e)}")
            return None

    async def _lookup(self, category_query: CategoryQuery, max_results: int) -> Optional[List[Product]]:
        logger.debug(f"Searching category {category_query.category} with query: '{category_query.query}'")

        try:
            products = await asyncio.wait_for(
                self.product_lookup.search_products(
                    category_query.query,
                    max_results,
                    category=category_query.category
                ),
                timeout=self.query_timeout
            )
            return [p if isinstance(p, Product) else Product.model_validate(p) for p in products]
        except asyncio.TimeoutError:
            logger.error(f"Search timed out for category {category_query.category} "
                         f"after {self.query_timeout}s")
        except Exception as e:
            logger.error(f"Error searching category {category_query.category}: {str(e)}")
        return None

    def _build_category_results(self, category_query, context, products, search_time) -> CategoryResults:
        return CategoryResults(
            category_name=category_query.category,
            display_name=build_display_name(category_query.category, context),
            search_query=category_query.query,
            products=products,
            result_count=len(products),
            search_time=search_time,
            relevance_score=calculate_relevance_score(category_query, context)
        )

    async def _search_fallback(self, context: ParsedContext, limit: int) -> GroupedSearchResults:
        start_time = time.perf_counter()
        fallback_query = CategoryQuery(
            query=generate_fallback_query(context),
            category=FALLBACK_CATEGORY,
            priority=1
        )
        logger.info(f"Running fallback search: '{fallback_query.query}'")

        products = await self._lookup(fallback_query, limit)
        elapsed = time.perf_counter() - start_time

        if products is None:
            return GroupedSearchResults(
                search_queries=[fallback_query.query],
                search_metrics=SearchMetrics(
                    total_search_time=elapsed,
                    categories_searched=1,
                    failed_searches=1
                )
            )

        products = products[:limit]
        categories = []
        if products:
            categories.append(CategoryResults(
                category_name=FALLBACK_CATEGORY,
                display_name=FALLBACK_DISPLAY_NAME,
                search_query=fallback_query.query,
                products=products,
                result_count=len(products),
                search_time=elapsed,
                relevance_score=FALLBACK_RELEVANCE
            ))

        return GroupedSearchResults(
            categories=categories,
            total_results=len(products),
            search_queries=[fallback_query.query],
            search_metrics=SearchMetrics(
                total_search_time=elapsed,
                categories_searched=1,
                successful_searches=1,
                average_results_per_category=float(len(products))
            )
        )


def calculate_relevance_score(category_query: CategoryQuery, context: ParsedContext) -> float:
    """
    Score how well a category query reflects the conversation context.

    The score is derived from the query text only, not from the products.

    Args:
        category_query: The category query
        context: The parsed context

    Returns:
        Score between 0 and 100
    """
    query = category_query.query.lower()
    score = category_query.priority * 20

    if any(brand.lower() in query for brand in context.detected_brands):
        score += 30

    if any(interest.lower() in query for interest in context.interests):
        score += 25

    if context.recipient and "for" in query:
        score += 15

    if context.occasion and context.occasion.lower() in query:
        score += 20

    return float(max(0, min(100, score)))


def build_display_name(category: str, context: ParsedContext) -> str:
    """
    Build the human-readable name of a category group.

    Args:
        category: Category slug
        context: The parsed context

    Returns:
        Brand-specific, contextual or generic display name
    """
    for brand in context.detected_brands:
        brand_config = BRAND_CATEGORIES.get(brand.lower())
        if brand_config and brand_config["category"] == category and brand.lower() in BRAND_DISPLAY_NAMES:
            return BRAND_DISPLAY_NAMES[brand.lower()]

    if category in CONTEXTUAL_DISPLAY_NAMES:
        field, template = CONTEXTUAL_DISPLAY_NAMES[category]
        value = getattr(context, field)
        if value:
            return template.format(**{field: value})

    if category in CATEGORY_DISPLAY_NAMES:
        return CATEGORY_DISPLAY_NAMES[category]

    return category.replace("-", " ").title()


async def search_categories(state: ConversationSearchState,
                            executor: MultiCategorySearchExecutor) -> ConversationSearchState:
    """
    Runs the multi-category search for the parsed context.

    Args:
        state: The current search state with parsed context
        executor: The search executor

    Returns:
        Updated state with grouped results
    """
    context = state["parsed_context"]

    results = await executor.search(context, SEARCH_CONFIG["per_category_limit"])

    metadata = {
        **(state.get("metadata", {})),
        "category_count": len(results.categories),
        "total_results": results.total_results,
        "successful_searches": results.search_metrics.successful_searches,
        "failed_searches": results.search_metrics.failed_searches
    }

    if not results.categories:
        metadata["no_results_found"] = True
        logger.warning("Multi-category search returned no categories")

    return {
        **state,
        "results": results,
        "metadata": metadata
    }
