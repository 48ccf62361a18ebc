"""
Configuration settings for the gift context search system.
"""
import os
from typing import Dict, Any
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Database configuration (product catalog)
DB_CONFIG = {
    "type": os.environ.get("DB_TYPE", "sqlite"),
    "host": os.environ.get("DB_HOST", "localhost"),
    "port": int(os.environ.get("DB_PORT", "5432")),
    "user": os.environ.get("DB_USER", ""),
    "password": os.environ.get("DB_PASSWORD", ""),
    "database": os.environ.get("DB_NAME", "gift_search"),
    "connection_string": ""
}

# Set database connection string based on type
if DB_CONFIG["type"] == "postgres":
    DB_CONFIG["connection_string"] = f"postgresql://{DB_CONFIG['user']}:{DB_CONFIG['password']}@{DB_CONFIG['host']}:{DB_CONFIG['port']}/{DB_CONFIG['database']}"
elif DB_CONFIG["type"] == "mysql":
    DB_CONFIG["connection_string"] = f"mysql+pymysql://{DB_CONFIG['user']}:{DB_CONFIG['password']}@{DB_CONFIG['host']}:{DB_CONFIG['port']}/{DB_CONFIG['database']}"
elif DB_CONFIG["type"] == "sqlite":
    DB_CONFIG["connection_string"] = f"sqlite:///data/gift_search.db"

# Product source configuration
PRODUCT_SOURCE_CONFIG = {
    "type": os.environ.get("PRODUCT_SOURCE", "catalog"),  # "catalog" or "http"
    "catalog_file": os.environ.get("PRODUCT_CATALOG_FILE", "data/products.json"),
    "api_url": os.environ.get("PRODUCT_API_URL", "http://localhost:8080"),
    "api_key": os.environ.get("PRODUCT_API_KEY", ""),
    "timeout": float(os.environ.get("PRODUCT_API_TIMEOUT", "10.0")),
}

# Multi-category search configuration
SEARCH_CONFIG = {
    "per_category_limit": int(os.environ.get("SEARCH_PER_CATEGORY_LIMIT", "4")),
    "max_categories": int(os.environ.get("SEARCH_MAX_CATEGORIES", "4")),
    "query_timeout": float(os.environ.get("SEARCH_QUERY_TIMEOUT", "5.0")),  # in seconds
    "max_message_length": int(os.environ.get("SEARCH_MAX_MESSAGE_LENGTH", "500")),
}

# Conversation configuration
CONVERSATION_CONFIG = {
    "max_interactions": int(os.environ.get("CONVERSATION_MAX_INTERACTIONS", "10")),
    "session_ttl": int(os.environ.get("CONVERSATION_SESSION_TTL", "3600")),  # in seconds
}

# Application configuration
APP_CONFIG = {
    "debug": os.environ.get("DEBUG", "False").lower() == "true",
    "log_level": os.environ.get("LOG_LEVEL", "INFO"),
}

# Feature flags
FEATURES = {
    "fallback_search": os.environ.get("USE_FALLBACK_SEARCH", "False").lower() == "true",
    "follow_up_detection": os.environ.get("USE_FOLLOW_UP_DETECTION", "True").lower() == "true",
    "log_telemetry": os.environ.get("LOG_TELEMETRY", "True").lower() == "true",
}

def get_config() -> Dict[str, Any]:
    """Return the complete configuration dictionary."""
    return {
        "search": SEARCH_CONFIG,
        "product_source": PRODUCT_SOURCE_CONFIG,
        "conversation": CONVERSATION_CONFIG,
        "db": DB_CONFIG,
        "app": APP_CONFIG,
        "features": FEATURES
    }
