"""
Service for collecting telemetry and monitoring data.
"""
import logging
import time
from typing import Dict, Any, List, Optional
from utils.monitoring import SearchSystemMonitor

logger = logging.getLogger(__name__)

class TelemetryService:
    """Service for collecting telemetry and monitoring search performance."""

    def __init__(self):
        """Initialize the telemetry service."""
        logger.info("Initializing telemetry service")
        self.monitor = SearchSystemMonitor()

        # In-memory storage for events
        self._search_events = []
        self._error_events = []
        self._interaction_events = []

    async def log_search(self,
                         message: str,
                         result: Dict[str, Any],
                         execution_time: float,
                         session_id: Optional[str] = None):
        """
        Log a search event.

        Args:
            message: The user message
            result: The final pipeline state
            execution_time: Time taken to execute in seconds
            session_id: Optional session identifier
        """
        results = result.get("results")
        event = {
            "timestamp": time.time(),
            "message": message,
            "session_id": session_id,
            "execution_time": execution_time,
            "category_count": len(results.categories) if results else 0,
            "failed_searches": results.search_metrics.failed_searches if results else 0,
            "follow_up": result.get("follow_up") is not None,
            "error": result.get("error")
        }

        self._search_events.append(event)
        self.monitor.log_search(message, result, execution_time)

        logger.debug(f"Logged search event: '{message}', time={execution_time:.2f}s")

    async def log_error(self,
                        error_type: str,
                        error_message: str,
                        message: Optional[str] = None,
                        session_id: Optional[str] = None):
        """
        Log an error event.

        Args:
            error_type: Type of error
            error_message: Error message
            message: Optional user message that caused the error
            session_id: Optional session identifier
        """
        event = {
            "timestamp": time.time(),
            "error_type": error_type,
            "error_message": error_message,
            "message": message,
            "session_id": session_id
        }

        self._error_events.append(event)

        logger.debug(f"Logged error event: {error_type}, message: {error_message}")

    async def log_interaction(self, session_id: str, category_name: str, action: str):
        """
        Log a category interaction.

        Args:
            session_id: Session identifier
            category_name: Category the user interacted with
            action: Interaction action
        """
        self._interaction_events.append({
            "timestamp": time.time(),
            "session_id": session_id,
            "category_name": category_name,
            "action": action
        })

        logger.debug(f"Logged interaction event: {category_name} {action}")

    def get_system_health(self) -> Dict[str, Any]:
        """Get system health metrics."""
        return self.monitor.get_system_health()

    def get_performance_report(self) -> Dict[str, Any]:
        """Get detailed performance report."""
        report = self.monitor.get_performance_report()
        report["interactions"] = self.get_interaction_statistics()
        return report

    def get_recent_errors(self, limit: int = 10) -> List[Dict[str, Any]]:
        """
        Get recent error events.

        Args:
            limit: Maximum number of events to return

        Returns:
            List of recent error events, most recent first
        """
        sorted_errors = sorted(
            self._error_events,
            key=lambda e: e.get("timestamp", 0),
            reverse=True
        )
        return sorted_errors[:limit]

    def get_interaction_statistics(self) -> Dict[str, Any]:
        """
        Get statistics about category interactions.

        Returns:
            Dictionary with counts per action and per category
        """
        by_action = {}
        by_category = {}

        for event in self._interaction_events:
            by_action[event["action"]] = by_action.get(event["action"], 0) + 1
            by_category[event["category_name"]] = by_category.get(event["category_name"], 0) + 1

        return {
            "count": len(self._interaction_events),
            "by_action": by_action,
            "by_category": by_category
        }
