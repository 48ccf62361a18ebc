"""
Graph structure for the LangGraph conversation search pipeline.
"""
import logging
from langgraph.graph import StateGraph, END

from models.state import ConversationSearchState
from pipeline.input_validation import validate_input, handle_validation_error
from pipeline.follow_up import detect_follow_up, handle_follow_up
from pipeline.context_parser import parse_message
from pipeline.query_generation import generate_queries
from pipeline.multi_category_search import MultiCategorySearchExecutor, search_categories
from pipeline.response_generation import build_response, handle_no_results
from pipeline.telemetry import add_telemetry

logger = logging.getLogger(__name__)

def build_search_graph(executor: MultiCategorySearchExecutor):
    """
    Create the LangGraph for our conversation search system.

    Args:
        executor: Executor used for the multi-category and follow-up searches

    Returns:
        Compiled graph; run it with ainvoke
    """
    graph = StateGraph(ConversationSearchState)

    async def search_node(state):
        return await search_categories(state, executor)

    async def follow_up_node(state):
        return await handle_follow_up(state, executor)

    # Add all nodes
    graph.add_node("validate_input", validate_input)
    graph.add_node("handle_validation_error", handle_validation_error)
    graph.add_node("detect_follow_up", detect_follow_up)
    graph.add_node("handle_follow_up", follow_up_node)
    graph.add_node("parse_message", parse_message)
    graph.add_node("generate_queries", generate_queries)
    graph.add_node("search_categories", search_node)
    graph.add_node("build_response", build_response)
    graph.add_node("handle_no_results", handle_no_results)
    graph.add_node("add_telemetry", add_telemetry)

    # Define simple edges
    graph.add_edge("parse_message", "generate_queries")
    graph.add_edge("generate_queries", "search_categories")

    # Add conditional edge for input validation
    def has_validation_error(state):
        return state.get("input_validation_error") is not None

    graph.add_conditional_edges(
        "validate_input",
        has_validation_error,
        {True: "handle_validation_error", False: "detect_follow_up"}
    )

    # Follow-ups re-use the previous turn's context instead of parsing anew
    def has_follow_up(state):
        return state.get("follow_up") is not None

    graph.add_conditional_edges(
        "detect_follow_up",
        has_follow_up,
        {True: "handle_follow_up", False: "parse_message"}
    )

    def check_no_results(state):
        results = state.get("results")
        return results is None or not results.categories

    graph.add_conditional_edges(
        "search_categories",
        check_no_results,
        {True: "handle_no_results", False: "build_response"}
    )

    # Connect all endpoints to telemetry
    graph.add_edge("handle_validation_error", "add_telemetry")
    graph.add_edge("handle_follow_up", "add_telemetry")
    graph.add_edge("handle_no_results", "add_telemetry")
    graph.add_edge("build_response", "add_telemetry")

    # Connect telemetry to end
    graph.add_edge("add_telemetry", END)

    # Set entry point
    graph.set_entry_point("validate_input")

    logger.info("Conversation search graph built successfully")
    return graph.compile()
