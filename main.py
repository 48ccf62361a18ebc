"""
Main entry point for the gift context search system.
"""
import asyncio
import logging
from typing import Dict, Any, Optional

from services.search_service import SearchService
from config import get_config, APP_CONFIG

# Configure logging
logging.basicConfig(
    level=APP_CONFIG["log_level"],
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)

def initialize_system(product_lookup=None) -> Dict[str, Any]:
    """Initialize the search system."""
    logger.info("Initializing gift context search system")
    config = get_config()

    logger.info(f"System configured with: product_source={config['product_source']['type']}, "
                f"Features={config['features']}")

    return {
        "search_service": SearchService(product_lookup),
        "config": config
    }

async def execute_search(search_service: SearchService, message: str, session_id: Optional[str] = None):
    """
    Execute a search for one conversation turn.

    Args:
        search_service: The search service
        message: The user message
        session_id: Optional session identifier for multi-turn conversations

    Returns:
        The formatted search response
    """
    logger.info(f"Executing search for message: '{message}'")
    return await search_service.search(message, session_id=session_id)

async def run_demo():
    system = initialize_system()
    search_service = system["search_service"]

    # A short conversation, each turn building on the previous one
    test_conversation = [
        "I need a birthday gift for my wife who loves cooking and yoga, budget around $100",
        "she's also into photography",
        "show me more cooking items",
        "cheaper yoga options under $40",
    ]

    print("\n=== TESTING CONVERSATION FLOW ===")
    for idx, message in enumerate(test_conversation):
        print(f"\nCONVERSATION STEP {idx + 1}: {message}")
        result = await execute_search(search_service, message, session_id="demo-session")

        print(f"Response: {result['response']}")
        print(f"Context: recipient={result['context']['recipient']}, "
              f"occasion={result['context']['occasion']}, budget={result['context']['budget']}")
        for category in result["categories"]:
            print(f"  [{category['relevance_score']:.0f}] {category['display_name']}: "
                  f"{category['search_query']} ({category['result_count']} products)")
        print(f"Follow-up: {result['follow_up']}")
        print(f"Error: {result['error']}")
        print("-" * 80)

    print("\n=== SYSTEM HEALTH METRICS ===")
    health_metrics = search_service.telemetry_service.get_system_health()
    for metric, value in health_metrics.items():
        print(f"{metric}: {value}")
    print("-" * 80)


if __name__ == "__main__":
    asyncio.run(run_demo())
