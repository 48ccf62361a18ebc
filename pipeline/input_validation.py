"""
Input validation components for the search pipeline.
"""
import logging

from models.state import ConversationSearchState
from config import SEARCH_CONFIG

logger = logging.getLogger(__name__)

def validate_input(state: ConversationSearchState) -> ConversationSearchState:
    """
    Validates the user message.

    Args:
        state: The current search state

    Returns:
        Updated state with validation results
    """
    message = state["message"]
    validation_error = None

    logger.debug(f"Validating message: {message}")

    # Check for empty message
    if not message or message.strip() == "":
        validation_error = "EMPTY_MESSAGE"
        logger.info("Message validation failed: Empty message")

    # Check for message length
    elif len(message) > SEARCH_CONFIG["max_message_length"]:
        validation_error = "MESSAGE_TOO_LONG"
        logger.info(f"Message validation failed: Message too long ({len(message)} chars)")

    return {
        **state,
        "input_validation_error": validation_error,
        "metadata": {
            **(state.get("metadata", {})),
            "message_length": len(message or "")
        }
    }

def handle_validation_error(state: ConversationSearchState) -> ConversationSearchState:
    """
    Handles input validation errors by creating appropriate responses.

    Args:
        state: The current search state with validation error

    Returns:
        Updated state with error response
    """
    error_type = state.get("input_validation_error")

    error_messages = {
        "EMPTY_MESSAGE": "Tell me a little about who you're shopping for and I'll find some gift ideas.",
        "MESSAGE_TOO_LONG": "That's a lot of detail! Could you sum up who the gift is for and what they enjoy?"
    }

    response = error_messages.get(error_type, "I couldn't process your message. Could you try rephrasing it?")
    logger.info(f"Generating validation error response for: {error_type}")

    return {
        **state,
        "response": response,
        "error": f"Input validation failed: {error_type}"
    }
