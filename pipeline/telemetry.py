"""
Telemetry component for the search pipeline.
"""
import logging
import time

from models.state import ConversationSearchState

logger = logging.getLogger(__name__)

def add_telemetry(state: ConversationSearchState) -> ConversationSearchState:
    """
    Adds telemetry data to the search state.

    Args:
        state: The current search state

    Returns:
        Updated state with telemetry data
    """
    metadata = dict(state.get("metadata", {}))

    metadata["process_complete_timestamp"] = time.time()

    # Calculate execution time if we have start timestamp
    if "message_timestamp" in metadata:
        metadata["total_execution_time"] = metadata["process_complete_timestamp"] - metadata["message_timestamp"]

    results = state.get("results")
    if results is not None:
        metadata["search_time"] = results.search_metrics.total_search_time

    metadata["pipeline_components_executed"] = _count_components_executed(state)

    logger.debug(f"Added telemetry data: components={metadata['pipeline_components_executed']}, "
                 f"has_error={state.get('error') is not None}")

    return {**state, "metadata": metadata}

def _count_components_executed(state: ConversationSearchState) -> int:
    """
    Count how many pipeline components produced output.

    Args:
        state: The current search state

    Returns:
        Number of components executed
    """
    count = 0

    if state.get("follow_up"):
        count += 1  # Follow-up detection

    if state.get("parsed_context"):
        count += 1  # Context parsing

    if state.get("queries"):
        count += 1  # Query generation

    if state.get("results") is not None:
        count += 1  # Multi-category search

    if state.get("response"):
        count += 1  # Response generation

    return count
