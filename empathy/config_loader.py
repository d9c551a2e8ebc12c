"""
Configuration Loader for Empathy Service

This module loads configuration from JSON file and provides fallback defaults.
Provider credentials are not part of this file; they are read from environment
variables by the lookup clients.
"""

import json
import os
import logging
from typing import Dict, Any

logger = logging.getLogger(__name__)

# Default configuration (used as fallback)
DEFAULT_CONFIG = {
    "retry": {
        "initial_delay_seconds": 1.0,
        "max_delay_seconds": 10.0,
        "backoff_factor": 2.0
    },
    "lookup_max_attempts": 2,
    "request_timeout_seconds": 10.0,
    "context_tail_chars": 600,
    "request_context_tail_chars": 2000,
    "llm": {
        "base_url": "https://api.openai.com",
        "model": "gpt-4o-mini",
        "temperature": 0.7,
        "max_tokens": 300,
        "text_analysis_temperature": 0.2
    },
    "provider_urls": {
        "spotify_token": "https://accounts.spotify.com/api/token",
        "spotify_recommendations": "https://api.spotify.com/v1/recommendations",
        "open_library_search": "https://openlibrary.org/search.json",
        "open_library_covers": "https://covers.openlibrary.org/b/id",
        "quotable_random": "https://api.quotable.io/quotes/random",
        "foursquare_search": "https://api.foursquare.com/v3/places/search"
    },
    "music_seed_genres": "ambient,classical,acoustic",
    "book_min_rating": 3.8,
    "place_radius_meters": 5000
}

# Cache for loaded config
_config_cache: Dict[str, Any] = None


def load_config(config_path: str = None) -> Dict[str, Any]:
    """
    Load configuration from JSON file.

    Args:
        config_path: Path to config file. If None, uses default path relative to this module.

    Returns:
        Configuration dictionary. Returns default config if file not found or invalid.
    """
    global _config_cache

    if _config_cache is not None:
        return _config_cache

    if config_path is None:
        module_dir = os.path.dirname(os.path.abspath(__file__))
        config_path = os.path.join(module_dir, "config.json")

    try:
        if os.path.exists(config_path):
            with open(config_path, 'r', encoding='utf-8') as f:
                config = json.load(f)
            logger.info(f"Loaded configuration from {config_path}")
            _config_cache = config
            return config
        else:
            logger.warning(f"Config file not found at {config_path}, using default configuration")
            _config_cache = DEFAULT_CONFIG
            return DEFAULT_CONFIG
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON in config file {config_path}: {e}. Using default configuration.")
        _config_cache = DEFAULT_CONFIG
        return DEFAULT_CONFIG
    except OSError as e:
        logger.error(f"Error loading config file {config_path}: {e}. Using default configuration.")
        _config_cache = DEFAULT_CONFIG
        return DEFAULT_CONFIG


def get_section(name: str) -> Dict[str, Any]:
    """Return a config section, filling missing keys from DEFAULT_CONFIG."""
    section = dict(DEFAULT_CONFIG.get(name, {}))
    section.update(load_config().get(name, {}))
    return section


def get_value(name: str) -> Any:
    """Return a top-level config value, falling back to DEFAULT_CONFIG."""
    return load_config().get(name, DEFAULT_CONFIG.get(name))
