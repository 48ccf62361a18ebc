"""
Tests for the category query generation component.
"""
import unittest
import sys
import os
import logging

# Add parent directory to path to allow imports
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from models.context import ParsedContext, CategoryMapping
from pipeline.context_parser import parse_context
from pipeline.query_generation import generate_queries, generate_category_queries, generate_fallback_query

# Disable logging during tests
logging.disable(logging.CRITICAL)

def make_mapping(term, category, priority=1):
    return CategoryMapping(interest=term, category=category, search_terms=[term], priority=priority)

class TestCategoryQueries(unittest.TestCase):
    """Tests for per-category query generation."""

    def test_queries_include_context(self):
        """Test that recipient, occasion and budget ceiling are appended."""
        context = parse_context(
            "I need a birthday gift for my wife who loves cooking and yoga, budget around $100"
        )

        queries = generate_category_queries(context)

        self.assertEqual(
            [q.query for q in queries],
            ["cooking for spouse birthday under $130", "yoga for spouse birthday under $130"]
        )
        self.assertEqual([q.category for q in queries], ["kitchen", "fitness"])

    def test_query_without_context(self):
        """Test that a bare mapping produces its first search term."""
        context = ParsedContext(category_mappings=[make_mapping("camera", "electronics")])

        queries = generate_category_queries(context)

        self.assertEqual(queries[0].query, "camera")

    def test_recipient_not_repeated(self):
        """Test that terms already containing 'for' do not get the recipient appended."""
        context = ParsedContext(
            recipient="friend",
            category_mappings=[make_mapping("gifts for runners", "athletic-wear")]
        )

        queries = generate_category_queries(context)

        self.assertEqual(queries[0].query, "gifts for runners")

    def test_max_queries(self):
        """Test that no more than the maximum number of queries is produced."""
        context = ParsedContext(category_mappings=[
            make_mapping(f"term{i}", f"category{i}") for i in range(6)
        ])

        self.assertEqual(len(generate_category_queries(context)), 4)
        self.assertEqual(len(generate_category_queries(context, max_queries=2)), 2)

    def test_stable_priority_sort(self):
        """Test that higher priorities come first and ties keep their order."""
        context = ParsedContext(category_mappings=[
            make_mapping("a", "cat-a", 1),
            make_mapping("b", "cat-b", 2),
            make_mapping("c", "cat-c", 1),
            make_mapping("d", "cat-d", 2),
            make_mapping("e", "cat-e", 1),
        ])

        queries = generate_category_queries(context)

        self.assertEqual([q.query for q in queries], ["b", "d", "a", "c"])

    def test_no_mappings(self):
        self.assertEqual(generate_category_queries(ParsedContext()), [])

class TestFallbackQuery(unittest.TestCase):
    """Tests for the generic gift query."""

    def test_fallback_query_with_context(self):
        context = ParsedContext(recipient="parent", occasion="birthday", budget=(25, 50))

        self.assertEqual(generate_fallback_query(context), "gifts for parent birthday under $50")

    def test_fallback_query_empty_context(self):
        self.assertEqual(generate_fallback_query(ParsedContext()), "gifts")

class TestGenerateQueriesNode(unittest.TestCase):
    """Tests for the generate_queries pipeline node."""

    def test_generate_queries_updates_state(self):
        state = {
            "parsed_context": parse_context("my friend loves reading and music"),
            "metadata": {}
        }

        result = generate_queries(state)

        self.assertEqual(len(result["queries"]), 2)
        self.assertEqual(result["metadata"]["generated_query_count"], 2)


if __name__ == '__main__':
    unittest.main()
