"""
Service for managing conversation state and session history.
"""
import logging
import time
from collections import deque
from typing import Dict, List, Optional

from models.context import ParsedContext
from models.conversation import CategoryInteraction, PREFERENCE_ACTIONS
from models.results import GroupedSearchResults
from config import CONVERSATION_CONFIG

logger = logging.getLogger(__name__)


class ConversationStateTracker:
    """
    Tracks category interactions and results for a single conversation.

    Only the most recent interactions are kept; preferred categories are an
    append-only, de-duplicated list of categories the user expanded or asked
    more of.
    """

    def __init__(self, max_interactions: Optional[int] = None):
        self.max_interactions = max_interactions or CONVERSATION_CONFIG["max_interactions"]
        self._interactions = deque(maxlen=self.max_interactions)
        self._preferred_categories: List[str] = []
        self.previous_results: Optional[GroupedSearchResults] = None
        self.context = ParsedContext()

    def track(self, interaction: CategoryInteraction):
        """
        Record a user interaction with a category.

        Args:
            interaction: The interaction to record
        """
        self._interactions.append(interaction)

        if interaction.action in PREFERENCE_ACTIONS and \
                interaction.category_name not in self._preferred_categories:
            self._preferred_categories.append(interaction.category_name)
            logger.debug(f"Added preferred category: {interaction.category_name}")

    def get_preferred_categories(self) -> List[str]:
        """Return a copy of the preferred categories in first-seen order."""
        return list(self._preferred_categories)

    @property
    def interactions(self) -> List[CategoryInteraction]:
        """Recorded interactions, oldest first."""
        return list(self._interactions)

    def update_from_results(self, results: GroupedSearchResults):
        """Replace the results the next follow-up will refer to."""
        self.previous_results = results

    def update_context(self, context: ParsedContext):
        """Replace the context carried into the next turn."""
        self.context = context


class ConversationService:
    """Service for managing per-session conversation trackers."""

    def __init__(self, session_ttl: Optional[int] = None):
        """
        Initialize the conversation service.

        Args:
            session_ttl: Time-to-live for idle sessions in seconds
        """
        logger.info("Initializing conversation service")
        self.session_ttl = session_ttl or CONVERSATION_CONFIG["session_ttl"]

        # In-memory session store, one tracker per conversation
        self._sessions: Dict[str, ConversationStateTracker] = {}
        self._session_timestamps: Dict[str, float] = {}

    def get_tracker(self, session_id: str) -> ConversationStateTracker:
        """
        Get the tracker for a session, creating it for new sessions.

        Args:
            session_id: The session identifier

        Returns:
            The session's conversation tracker
        """
        self._clean_expired_sessions()

        if session_id not in self._sessions:
            logger.debug(f"Starting new conversation for session: {session_id}")
            self._sessions[session_id] = ConversationStateTracker()

        self._session_timestamps[session_id] = time.time()
        return self._sessions[session_id]

    def has_session(self, session_id: str) -> bool:
        self._clean_expired_sessions()
        return session_id in self._sessions

    def clear_session(self, session_id: str):
        """
        Discard the conversation state of a session.

        Args:
            session_id: The session identifier
        """
        self._sessions.pop(session_id, None)
        self._session_timestamps.pop(session_id, None)

        logger.info(f"Cleared session: {session_id}")

    def _clean_expired_sessions(self):
        """Remove expired sessions from memory."""
        current_time = time.time()
        expired_sessions = [
            session_id for session_id, timestamp in self._session_timestamps.items()
            if current_time - timestamp > self.session_ttl
        ]

        for session_id in expired_sessions:
            self._sessions.pop(session_id, None)
            del self._session_timestamps[session_id]

        if expired_sessions:
            logger.info(f"Cleaned {len(expired_sessions)} expired sessions")
