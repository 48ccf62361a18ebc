"""
Response generation component for the search pipeline.
"""
import logging

from models.context import ParsedContext
from models.state import ConversationSearchState
from pipeline.context_parser import determine_conversation_step

logger = logging.getLogger(__name__)

# Prompts for the information still missing at each conversation step
NEXT_STEP_PROMPTS = {
    "discovery": "Who are you shopping for? Tell me a bit about them and what they enjoy.",
    "occasion": "What's the occasion? A birthday, anniversary, holiday?",
    "preferences": "What are they into? Hobbies, favorite brands or a budget would help me narrow it down.",
    "search_ready": "Could you tell me a bit more about what they like?"
}

def build_response(state: ConversationSearchState) -> ConversationSearchState:
    """
    Builds a short reply summarizing the grouped results.

    Args:
        state: The current search state with results

    Returns:
        Updated state with generated response
    """
    results = state["results"]
    context = state.get("parsed_context") or ParsedContext()

    logger.info(f"Building response for {len(results.categories)} categories")

    intro = "Here are some ideas"
    if context.recipient:
        intro += f" for your {context.recipient}"
    if context.occasion:
        intro += f" for {context.occasion}"
    if context.budget:
        intro += f" between ${context.budget[0]} and ${context.budget[1]}"

    lines = [f"{intro}:"]
    for category in results.categories:
        lines.append(f"- {category.display_name} ({category.result_count} picks)")

    response = "\n".join(lines)

    return {
        **state,
        "response": response,
        "metadata": {
            **(state.get("metadata", {})),
            "response_word_count": len(response.split())
        }
    }

def handle_no_results(state: ConversationSearchState) -> ConversationSearchState:
    """
    Handles searches that produced no categories by asking for more detail.

    Args:
        state: The current search state

    Returns:
        Updated state with a clarifying response
    """
    context = state.get("parsed_context") or ParsedContext()
    step = determine_conversation_step(context)
    results = state.get("results")

    if results and results.search_metrics.failed_searches and not results.search_metrics.successful_searches:
        response = "I'm having trouble reaching the product catalog right now. Please try again in a moment."
        error = "ALL_SEARCHES_FAILED"
    elif context.category_mappings:
        response = f"I couldn't find anything matching that yet. {NEXT_STEP_PROMPTS['search_ready']}"
        error = "NO_RESULTS_FOUND"
    else:
        response = NEXT_STEP_PROMPTS[step]
        error = None

    logger.info(f"No results to show, conversation step: {step}")

    return {
        **state,
        "response": response,
        "error": error
    }
