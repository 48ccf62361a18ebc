"""
Integration tests for the search service and API.
"""
import unittest
import sys
import os
from unittest.mock import MagicMock, AsyncMock, patch
import logging

from fastapi import HTTPException
from fastapi.testclient import TestClient

# Add parent directory to path to allow imports
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from main import execute_search
from models.conversation import CategoryInteraction
from models.results import Product
from services.search_service import SearchService

# Disable logging during tests
logging.disable(logging.CRITICAL)

def make_lookup():
    async def search_products(query, max_results, category="general"):
        return [
            Product(id=f"{category}-{i}", name=f"{query} {i}", price=20.0 + i * 10, category=category)
            for i in range(max_results)
        ]

    lookup = MagicMock()
    lookup.search_products = AsyncMock(side_effect=search_products)
    return lookup

class TestSearchService(unittest.IsolatedAsyncioTestCase):
    """Integration tests for multi-turn conversations."""

    def setUp(self):
        """Set up test fixtures."""
        self.lookup = make_lookup()
        self.service = SearchService(product_lookup=self.lookup)

    async def test_multi_turn_conversation(self):
        """Test that context and results carry over between turns of a session."""
        first = await execute_search(
            self.service,
            "I need a birthday gift for my wife who loves cooking and yoga, budget around $100",
            session_id="session-1"
        )

        self.assertEqual(first["context"]["recipient"], "spouse")
        self.assertEqual(first["context"]["budget"], (70, 130))
        self.assertEqual({c["category_name"] for c in first["categories"]}, {"kitchen", "fitness"})
        self.assertEqual(first["total_results"], 8)
        self.assertEqual(first["conversation_step"], "search_ready")
        self.assertIsNone(first["error"])

        second = await execute_search(self.service, "she's also into photography", session_id="session-1")

        self.assertEqual(second["context"]["interests"], ["cooking", "yoga", "photography"])
        self.assertEqual(second["context"]["occasion"], "birthday")
        self.assertEqual([c["category_name"] for c in second["categories"]], ["electronics"])
        self.assertEqual(second["categories"][0]["search_query"], "camera for spouse birthday under $130")

        third = await execute_search(self.service, "cheaper tech options under $40", session_id="session-1")

        self.assertEqual(third["follow_up"]["type"], "refine")
        self.assertEqual(third["follow_up"]["category_name"], "electronics")
        self.assertEqual(third["context"]["interests"], ["cooking", "yoga", "photography"])
        self.assertEqual(len(third["categories"][0]["products"]), 3)
        for product in third["categories"][0]["products"]:
            self.assertLessEqual(product["price"], 40)

    async def test_show_more_follow_up(self):
        await self.service.search("my wife loves cooking and yoga", session_id="session-2")

        result = await self.service.search("show me more cooking items", session_id="session-2")

        self.assertEqual(result["follow_up"]["type"], "show_more")
        self.assertEqual(result["follow_up"]["category_name"], "kitchen")
        self.assertEqual([c["category_name"] for c in result["categories"]], ["kitchen"])
        self.assertEqual(result["context"]["recipient"], "spouse")

    async def test_without_session_nothing_carries_over(self):
        await self.service.search("my wife loves cooking and yoga")

        result = await self.service.search("show me more cooking items")

        self.assertIsNone(result["follow_up"])
        self.assertIsNone(result["context"]["recipient"])

    async def test_sessions_do_not_share_context(self):
        await self.service.search("gift for my wife", session_id="session-a")

        result = await self.service.search("she loves yoga", session_id="session-b")

        self.assertIsNone(result["context"]["recipient"])

    async def test_suggestions_included(self):
        result = await self.service.search("my dad loves fitness, birthday", session_id="session-3")

        self.assertEqual(result["categories"][0]["category_name"], "fitness")
        self.assertEqual(result["suggestions"][0]["from_category"], "fitness")

    async def test_track_interaction(self):
        preferred = await self.service.track_interaction(
            "session-4", CategoryInteraction(category_name="kitchen", action="expanded")
        )

        self.assertEqual(preferred, ["kitchen"])
        self.assertEqual(self.service.get_preferred_categories("session-4"), ["kitchen"])
        stats = self.service.telemetry_service.get_interaction_statistics()
        self.assertEqual(stats["by_action"], {"expanded": 1})

    async def test_small_budget_search(self):
        """Test that a budget below the minimum still produces a normal search."""
        result = await self.service.search(
            "stocking stuffer for my friend who loves cooking under $5", session_id="session-6"
        )

        self.assertEqual(result["context"]["budget"], (10, 5))
        self.assertEqual([c["category_name"] for c in result["categories"]], ["kitchen"])
        self.assertEqual(result["categories"][0]["search_query"], "cooking for friend under $5")

    def test_unknown_session_lookups_do_not_create_sessions(self):
        self.assertEqual(self.service.get_preferred_categories("unknown"), [])
        self.assertEqual(self.service.get_suggestions("unknown", "cooking"), [])
        self.assertFalse(self.service.conversation_service.has_session("unknown"))

    async def test_suggestions_for_known_session(self):
        await self.service.search("birthday gift for my wife who loves cooking", session_id="session-7")

        suggestions = self.service.get_suggestions("session-7", "cooking")

        self.assertEqual([s.to_category for s in suggestions], ["travel", "outdoor-gear"])

    async def test_telemetry_recorded(self):
        await self.service.search("my wife loves cooking", session_id="session-5")

        health = self.service.telemetry_service.get_system_health()

        self.assertEqual(health["searches_processed"], 1)
        self.assertEqual(health["lookup_failure_rate"], 0)

    async def test_exception_handling(self):
        """Test that pipeline failures surface as HTTP errors and are logged."""
        self.service.search_executor = MagicMock()
        self.service.search_executor.ainvoke = AsyncMock(side_effect=RuntimeError("graph failure"))

        with self.assertRaises(HTTPException) as ctx:
            await self.service.search("my wife loves cooking")

        self.assertEqual(ctx.exception.status_code, 500)
        errors = self.service.telemetry_service.get_recent_errors()
        self.assertEqual(errors[0]["error_type"], "SEARCH_ERROR")

class TestApi(unittest.TestCase):
    """Tests for the HTTP API."""

    def setUp(self):
        from api.main import app

        self.service_patcher = patch('api.main.search_service')
        self.mock_service = self.service_patcher.start()
        self.client = TestClient(app)

    def tearDown(self):
        self.service_patcher.stop()

    def test_search_endpoint(self):
        self.mock_service.search = AsyncMock(return_value={
            "response": "Here are some ideas:",
            "session_id": "abc",
            "context": {"recipient": "spouse"},
            "categories": [],
            "total_results": 0,
            "search_metrics": None,
            "follow_up": None,
            "suggestions": [],
            "preferred_categories": [],
            "conversation_step": "occasion",
            "error": None
        })

        resp = self.client.post("/ai/search", json={"message": "gift for my wife"}, headers={"session-id": "abc"})

        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["response"], "Here are some ideas:")
        self.assertIn("request_id", body)
        self.mock_service.search.assert_called_once_with(message="gift for my wife", session_id="abc")

    def test_interaction_endpoint(self):
        self.mock_service.track_interaction = AsyncMock(return_value=["kitchen"])

        resp = self.client.post(
            "/ai/interactions",
            json={"category_name": "kitchen", "action": "expanded"},
            headers={"session-id": "abc"}
        )

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["preferred_categories"], ["kitchen"])

    def test_invalid_interaction_action(self):
        resp = self.client.post("/ai/interactions", json={"category_name": "kitchen", "action": "liked"})

        self.assertEqual(resp.status_code, 422)

    def test_clear_session(self):
        resp = self.client.delete("/ai/session/abc")

        self.assertEqual(resp.status_code, 200)
        self.mock_service.clear_session.assert_called_once_with("abc")

    def test_unknown_session_routes(self):
        """Test that reading an unknown session returns empty results without creating it."""
        service = SearchService(product_lookup=make_lookup())

        with patch('api.main.search_service', service):
            preferences = self.client.get("/ai/session/unknown/preferences")
            suggestions = self.client.get("/ai/session/unknown/suggestions/cooking")

        self.assertEqual(preferences.json()["preferred_categories"], [])
        self.assertEqual(suggestions.json()["suggestions"], [])
        self.assertFalse(service.conversation_service.has_session("unknown"))

    def test_health(self):
        self.mock_service.telemetry_service.get_system_health.return_value = {"searches_processed": 3}

        resp = self.client.get("/ai/health")

        self.assertEqual(resp.json()["status"], "healthy")
        self.assertEqual(resp.json()["searches_processed"], 3)


if __name__ == '__main__':
    unittest.main()
