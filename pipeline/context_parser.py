"""
Context parsing component for the search pipeline.

Extracts recipient, occasion, budget, interests and brands from a free-text
gift request and merges them with the context of earlier turns.
"""
import logging
from typing import List, Optional, Tuple

from models.context import ParsedContext, CategoryMapping
from models.state import ConversationSearchState
from utils.lookup_tables import (
    BRAND_CATEGORIES,
    INTEREST_CATEGORIES,
    RELATIONSHIP_PATTERNS,
    OCCASION_PATTERNS,
    BUDGET_PATTERNS,
    AGE_PATTERNS,
)

logger = logging.getLogger(__name__)

MIN_BUDGET = 10

def parse_message(state: ConversationSearchState) -> ConversationSearchState:
    """
    Parses the user message into a structured context.

    Args:
        state: The current search state

    Returns:
        Updated state with the parsed context
    """
    message = state["message"]
    prior_context = state.get("prior_context") or ParsedContext()

    logger.info(f"Parsing context from message: '{message}'")

    parsed_context = parse_context(message, prior_context)

    logger.info(f"Parsed context: recipient={parsed_context.recipient}, "
                f"occasion={parsed_context.occasion}, budget={parsed_context.budget}, "
                f"interests={parsed_context.interests}, brands={parsed_context.detected_brands}")

    return {
        **state,
        "parsed_context": parsed_context,
        "metadata": {
            **(state.get("metadata", {})),
            "category_mapping_count": len(parsed_context.category_mappings),
            "conversation_step": determine_conversation_step(parsed_context)
        }
    }

def parse_context(message: str, prior_context: Optional[ParsedContext] = None) -> ParsedContext:
    """
    Parse a message into a context, carrying over signals from prior turns.

    Args:
        message: The raw user message
        prior_context: Context accumulated over previous turns

    Returns:
        A new ParsedContext; prior_context is not modified
    """
    prior_context = prior_context or ParsedContext()
    lower_message = message.lower()

    brand_mappings = detect_brands(lower_message)
    interest_mappings = detect_interests(lower_message)

    # Relationship from this message replaces the prior one when present
    detected_role = detect_relationship(message)
    recipient = detected_role or prior_context.recipient
    relationship = detected_role or prior_context.relationship

    occasion = prior_context.occasion or detect_occasion(message)

    budget = prior_context.budget
    if budget is None:
        budget = extract_budget(message)

    exact_age = prior_context.exact_age
    if exact_age is None:
        exact_age = extract_age(message)

    return ParsedContext(
        recipient=recipient,
        relationship=relationship,
        occasion=occasion,
        exact_age=exact_age,
        interests=_union(prior_context.interests, [m.interest for m in interest_mappings]),
        detected_brands=_union(prior_context.detected_brands, [m.interest for m in brand_mappings]),
        category_mappings=brand_mappings + interest_mappings,
        budget=budget
    )

def detect_brands(lower_message: str) -> List[CategoryMapping]:
    """Return a priority 1 mapping for every known brand named in the message."""
    return [
        CategoryMapping(
            interest=brand,
            category=config["category"],
            search_terms=list(config["terms"]),
            priority=1
        )
        for brand, config in BRAND_CATEGORIES.items()
        if brand in lower_message
    ]

def detect_interests(lower_message: str) -> List[CategoryMapping]:
    """Return a mapping for every known interest keyword in the message."""
    return [
        CategoryMapping(
            interest=interest,
            category=config["category"],
            search_terms=list(config["terms"]),
            priority=config["priority"]
        )
        for interest, config in INTEREST_CATEGORIES.items()
        if interest in lower_message
    ]

def detect_relationship(message: str) -> Optional[str]:
    """Return the recipient role of the first matching relationship pattern."""
    for pattern, role in RELATIONSHIP_PATTERNS:
        if pattern.search(message):
            return role
    return None

def detect_occasion(message: str) -> Optional[str]:
    """Return the first matching occasion."""
    for pattern, occasion in OCCASION_PATTERNS:
        if pattern.search(message):
            return occasion
    return None

def extract_budget(message: str) -> Optional[Tuple[int, int]]:
    """
    Extract a (min, max) budget from the message.

    Patterns are tried in order (max, range, around, exact) and the first one
    yielding a valid amount wins. Lower bounds never drop below MIN_BUDGET.
    """
    for pattern, kind in BUDGET_PATTERNS:
        match = pattern.search(message)
        if not match:
            continue

        if kind == "max":
            amount = _to_amount(match.group(1))
            if amount:
                return (max(MIN_BUDGET, amount // 2), amount)

        elif kind == "range":
            low = _to_amount(match.group(1))
            high = _to_amount(match.group(2))
            if low and high and high > low:
                return (low, high)

        elif kind == "around":
            amount = _to_amount(match.group(1))
            if amount:
                return (max(MIN_BUDGET, amount * 7 // 10), _ceil_div(amount * 13, 10))

        elif kind == "exact":
            amount = _to_amount(match.group(1) or match.group(2))
            if amount:
                return (max(MIN_BUDGET, amount * 8 // 10), _ceil_div(amount * 12, 10))

    return None

def extract_age(message: str) -> Optional[int]:
    """Extract the recipient's age from phrases like 'turning 30'."""
    for pattern in AGE_PATTERNS:
        match = pattern.search(message)
        if match:
            age = _to_amount(match.group(1))
            if age and age <= 120:
                return age
    return None

def determine_conversation_step(context: ParsedContext) -> str:
    """
    Determine how far along the gift conversation is.

    Args:
        context: The parsed context

    Returns:
        One of discovery, occasion, preferences, search_ready
    """
    if context.recipient and context.occasion and (context.interests or context.budget):
        return "search_ready"
    if context.recipient and context.occasion:
        return "preferences"
    if context.recipient or context.relationship:
        return "occasion"
    return "discovery"

def _to_amount(value: Optional[str]) -> Optional[int]:
    # Non-numeric and non-positive amounts are rejected
    try:
        amount = int(value)
    except (TypeError, ValueError):
        return None
    return amount if amount > 0 else None

def _ceil_div(numerator: int, denominator: int) -> int:
    return -(-numerator // denominator)

def _union(existing: List[str], new: List[str]) -> List[str]:
    merged = list(existing)
    for item in new:
        if item not in merged:
            merged.append(item)
    return merged
