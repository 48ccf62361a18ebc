"""
Monitoring and metrics for the conversation search system.
"""
import logging
import time
from typing import Dict, Any

logger = logging.getLogger(__name__)

class SearchSystemMonitor:
    """Monitor and evaluate search system performance."""

    def __init__(self):
        """Initialize the monitoring system."""
        logger.info("Initializing search system monitor")
        self.searches_processed = 0
        self.error_count = 0
        self.follow_up_count = 0
        self.avg_response_time = 0

        # Lookup counters across all categories
        self.successful_lookups = 0
        self.failed_lookups = 0

        # Performance metrics
        self.results_by_category = {}
        self.step_distribution = {}
        self.hourly_search_count = {}

    def log_search(self, message: str, result: Dict[str, Any], execution_time: float):
        """
        Log and analyze a search execution.

        Args:
            message: The user message
            result: The final pipeline state
            execution_time: Time taken to execute the search in seconds
        """
        self.searches_processed += 1

        if result.get("error"):
            self.error_count += 1

        if result.get("follow_up"):
            self.follow_up_count += 1

        # Update average response time
        self.avg_response_time = (
            (self.avg_response_time * (self.searches_processed - 1) + execution_time) /
            self.searches_processed
        )

        metadata = result.get("metadata", {})
        step = metadata.get("conversation_step", "unknown")
        self.step_distribution[step] = self.step_distribution.get(step, 0) + 1

        results = result.get("results")
        if results is not None:
            self.successful_lookups += results.search_metrics.successful_searches
            self.failed_lookups += results.search_metrics.failed_searches

            for category in results.categories:
                stats = self.results_by_category.setdefault(
                    category.category_name,
                    {"count": 0, "avg_results": 0, "avg_relevance": 0}
                )
                stats["count"] += 1
                stats["avg_results"] = (
                    (stats["avg_results"] * (stats["count"] - 1) + category.result_count) /
                    stats["count"]
                )
                stats["avg_relevance"] = (
                    (stats["avg_relevance"] * (stats["count"] - 1) + category.relevance_score) /
                    stats["count"]
                )

        # Track hourly distribution
        current_hour = time.strftime("%Y-%m-%d-%H")
        self.hourly_search_count[current_hour] = self.hourly_search_count.get(current_hour, 0) + 1

        logger.debug(f"Logged search metrics for message: '{message}', time: {execution_time:.2f}s")

    def get_system_health(self) -> Dict[str, Any]:
        """
        Get system health metrics.

        Returns:
            Dictionary of health metrics
        """
        total_lookups = self.successful_lookups + self.failed_lookups
        return {
            "searches_processed": self.searches_processed,
            "error_rate": self.error_count / max(1, self.searches_processed),
            "lookup_failure_rate": self.failed_lookups / max(1, total_lookups),
            "avg_response_time": self.avg_response_time,
            "follow_up_count": self.follow_up_count
        }

    def get_performance_report(self) -> Dict[str, Any]:
        """
        Generate a comprehensive performance report.

        Returns:
            Dictionary with performance metrics
        """
        return {
            "summary": self.get_system_health(),
            "lookups": {
                "successful": self.successful_lookups,
                "failed": self.failed_lookups
            },
            "conversation_steps": {
                step: {
                    "count": count,
                    "percentage": (count / max(1, self.searches_processed)) * 100
                }
                for step, count in self.step_distribution.items()
            },
            "performance": {
                "by_category": self.results_by_category,
                "hourly_distribution": self.hourly_search_count
            }
        }
