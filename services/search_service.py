"""
Main search service for handling conversational gift searches.
"""
import logging
import time
from typing import Dict, Any, List, Optional
from fastapi import HTTPException

from models.context import ParsedContext
from models.conversation import CategoryInteraction, CrossCategorySuggestion
from models.state import ConversationSearchState
from pipeline.graph import build_search_graph
from pipeline.follow_up import generate_cross_category_suggestions
from pipeline.multi_category_search import MultiCategorySearchExecutor
from services.conversation_service import ConversationService, ConversationStateTracker
from services.product_lookup import get_product_lookup
from services.telemetry_service import TelemetryService
from config import get_config, FEATURES

logger = logging.getLogger(__name__)

class SearchService:
    """Service for handling conversational search requests."""

    def __init__(self, product_lookup=None):
        """
        Initialize the search service.

        Args:
            product_lookup: Optional product lookup; defaults to the configured source
        """
        logger.info("Initializing search service")
        self.executor = MultiCategorySearchExecutor(product_lookup or get_product_lookup())
        self.search_executor = build_search_graph(self.executor)
        self.conversation_service = ConversationService()
        self.telemetry_service = TelemetryService()
        self.config = get_config()

    async def search(self, message: str, session_id: Optional[str] = None) -> Dict[str, Any]:
        """
        Execute a search for the given message.

        Args:
            message: The user message
            session_id: Optional session identifier for conversation context

        Returns:
            Search results with response
        """
        start_time = time.time()

        if session_id:
            tracker = self.conversation_service.get_tracker(session_id)
        else:
            tracker = ConversationStateTracker()

        try:
            result = await self._execute_search(message, tracker)

            # Carry context and results into the next turn
            if result.get("parsed_context") is not None:
                tracker.update_context(result["parsed_context"])
            if result.get("results") is not None:
                tracker.update_from_results(result["results"])

            execution_time = time.time() - start_time
            if FEATURES["log_telemetry"]:
                await self.telemetry_service.log_search(
                    message=message,
                    result=result,
                    execution_time=execution_time,
                    session_id=session_id
                )

            return self._prepare_response(result, tracker, session_id)

        except Exception as e:
            logger.error(f"Search failed: {str(e)}")

            await self.telemetry_service.log_error(
                error_type="SEARCH_ERROR",
                error_message=str(e),
                message=message,
                session_id=session_id
            )

            raise HTTPException(
                status_code=500,
                detail=f"Search failed: {str(e)}"
            )

    async def _execute_search(self, message: str, tracker: ConversationStateTracker) -> Dict[str, Any]:
        """
        Execute the search pipeline.

        Args:
            message: The user message
            tracker: Conversation tracker of the session

        Returns:
            Final pipeline state
        """
        initial_state = ConversationSearchState(
            message=message.strip() if message else "",
            prior_context=tracker.context,
            parsed_context=None,
            queries=[],
            results=None,
            previous_results=tracker.previous_results,
            follow_up=None,
            response=None,
            input_validation_error=None,
            error=None,
            metadata={
                "message_timestamp": time.time(),
                "conversation_aware": tracker.previous_results is not None,
                "preferred_categories": tracker.get_preferred_categories()
            }
        )

        result = await self.search_executor.ainvoke(initial_state)

        if not result.get("response"):
            result["response"] = "I couldn't find any gift ideas for that. Could you tell me more about who it's for?"
            result["error"] = result.get("error") or "EMPTY_RESPONSE"

        return result

    async def track_interaction(self, session_id: str, interaction: CategoryInteraction) -> List[str]:
        """
        Record a category interaction for a session.

        Args:
            session_id: The session identifier
            interaction: The interaction to record

        Returns:
            The session's preferred categories after the update
        """
        tracker = self.conversation_service.get_tracker(session_id)
        tracker.track(interaction)

        await self.telemetry_service.log_interaction(
            session_id=session_id,
            category_name=interaction.category_name,
            action=interaction.action
        )

        return tracker.get_preferred_categories()

    def get_preferred_categories(self, session_id: str) -> List[str]:
        # Lookups never create a session
        if not self.conversation_service.has_session(session_id):
            return []
        return self.conversation_service.get_tracker(session_id).get_preferred_categories()

    def get_suggestions(self, session_id: str, category: str) -> List[CrossCategorySuggestion]:
        """
        Get cross-category suggestions for the session's current context.

        Args:
            session_id: The session identifier
            category: Category the user is looking at

        Returns:
            Up to two suggestions; none for unknown sessions
        """
        if not self.conversation_service.has_session(session_id):
            return []

        tracker = self.conversation_service.get_tracker(session_id)
        return generate_cross_category_suggestions(category, tracker.context)

    def clear_session(self, session_id: str):
        self.conversation_service.clear_session(session_id)

    def _prepare_response(self,
                          result: Dict[str, Any],
                          tracker: ConversationStateTracker,
                          session_id: Optional[str]) -> Dict[str, Any]:
        """
        Prepare the response object from the pipeline state.

        Args:
            result: The final pipeline state
            tracker: Conversation tracker of the session
            session_id: Session identifier

        Returns:
            Formatted response suitable for API return
        """
        context = result.get("parsed_context") or ParsedContext()
        results = result.get("results")
        follow_up = result.get("follow_up")

        suggestions = []
        if results and results.categories:
            suggestions = generate_cross_category_suggestions(results.categories[0].category_name, context)

        return {
            "response": result.get("response", ""),
            "session_id": session_id,
            "context": context.model_dump(),
            "categories": [c.model_dump() for c in results.categories] if results else [],
            "total_results": results.total_results if results else 0,
            "search_metrics": results.search_metrics.model_dump() if results else None,
            "follow_up": follow_up.model_dump() if follow_up else None,
            "suggestions": [s.model_dump() for s in suggestions],
            "preferred_categories": tracker.get_preferred_categories(),
            "conversation_step": result.get("metadata", {}).get("conversation_step"),
            "error": result.get("error")
        }
