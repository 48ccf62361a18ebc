"""
FastAPI implementation for the gift context search system.
"""
import logging
from typing import Dict, Any, List, Optional
from fastapi import FastAPI, HTTPException, Depends, Header
from pydantic import BaseModel
import uvicorn
import time
import uuid

from models.conversation import CategoryInteraction, InteractionAction
from services.search_service import SearchService
from config import APP_CONFIG

# Configure logging
logging.basicConfig(
    level=APP_CONFIG["log_level"],
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)

# Initialize FastAPI
app = FastAPI(
    title="Gift Context Search API",
    description="API for conversational multi-category gift search",
    version="1.0.0"
)

# Initialize services
search_service = SearchService()

# API Models
class SearchRequest(BaseModel):
    """Search request model."""
    message: str

class SearchResponse(BaseModel):
    """Search response model."""
    response: str
    session_id: Optional[str] = None
    context: Dict[str, Any]
    categories: List[Dict[str, Any]]
    total_results: int
    search_metrics: Optional[Dict[str, Any]] = None
    follow_up: Optional[Dict[str, Any]] = None
    suggestions: List[Dict[str, Any]] = []
    preferred_categories: List[str] = []
    conversation_step: Optional[str] = None
    error: Optional[str] = None
    request_id: str

class InteractionRequest(BaseModel):
    """Category interaction request."""
    category_name: str
    action: InteractionAction

# Dependency for extracting the session ID
async def get_session_id(
    session_id: Optional[str] = Header(None, description="Session ID for conversation tracking")
) -> str:
    """Extract the session ID, generating one for new conversations."""
    return session_id or str(uuid.uuid4())

# API Routes
@app.get("/")
async def root():
    """Root endpoint."""
    return {"message": "Gift Context Search API"}

@app.post("/ai/search", response_model=SearchResponse)
async def search(request: SearchRequest, session_id: str = Depends(get_session_id)):
    """
    Execute a conversational search.

    Args:
        request: Search request object
        session_id: Session identifier from headers

    Returns:
        Search response
    """
    request_id = str(uuid.uuid4())
    logger.info(f"Search request: ID={request_id}, Session={session_id}, Message='{request.message}'")

    start_time = time.time()
    result = await search_service.search(message=request.message, session_id=session_id)
    result["request_id"] = request_id

    execution_time = time.time() - start_time
    logger.info(f"Search completed: ID={request_id}, Time={execution_time:.2f}s")

    return result

@app.post("/ai/interactions")
async def track_interaction(request: InteractionRequest, session_id: str = Depends(get_session_id)):
    """
    Record a user interaction with a result category.

    Args:
        request: Interaction request
        session_id: Session identifier from headers

    Returns:
        The session's preferred categories
    """
    try:
        interaction = CategoryInteraction(category_name=request.category_name, action=request.action)
        preferred = await search_service.track_interaction(session_id, interaction)
        return {"session_id": session_id, "preferred_categories": preferred}

    except Exception as e:
        logger.error(f"Error tracking interaction: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))

@app.get("/ai/session/{session_id}/preferences")
async def get_preferences(session_id: str):
    """
    Get the preferred categories of a session.

    Args:
        session_id: Session identifier

    Returns:
        Preferred categories
    """
    return {
        "session_id": session_id,
        "preferred_categories": search_service.get_preferred_categories(session_id)
    }

@app.get("/ai/session/{session_id}/suggestions/{category}")
async def get_suggestions(session_id: str, category: str):
    """
    Get cross-category suggestions for a session.

    Args:
        session_id: Session identifier
        category: Category the user is looking at

    Returns:
        Suggestions sorted by confidence
    """
    suggestions = search_service.get_suggestions(session_id, category)
    return {"suggestions": [s.model_dump() for s in suggestions]}

@app.delete("/ai/session/{session_id}")
async def clear_session(session_id: str):
    """
    Clear a conversation session.

    Args:
        session_id: Session identifier

    Returns:
        Success message
    """
    search_service.clear_session(session_id)
    return {"message": f"Session {session_id} cleared successfully"}

@app.get("/ai/health")
async def health_check():
    """
    Health check endpoint.

    Returns:
        Health status
    """
    try:
        health_metrics = search_service.telemetry_service.get_system_health()
        health_metrics["status"] = "healthy"
        health_metrics["timestamp"] = time.time()
        return health_metrics

    except Exception as e:
        logger.error(f"Health check failed: {str(e)}")
        return {
            "status": "unhealthy",
            "error": str(e),
            "timestamp": time.time()
        }

@app.get("/ai/metrics")
async def get_metrics():
    """
    Get system metrics.

    Returns:
        System metrics
    """
    try:
        return search_service.telemetry_service.get_performance_report()

    except Exception as e:
        logger.error(f"Error getting metrics: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))

if __name__ == "__main__":
    # Run the API using Uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
