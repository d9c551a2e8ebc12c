"""
Empathy package for mood analysis and recommendation service.

This package provides:
- API endpoints: POST /empathy/recommendations, POST /empathy/analyze/text, GET /empathy/health
- Orchestrator: Runs the enrichment lookups concurrently and merges results
- Lookup clients: HTTP lookups for message, music, book, quote and place content
- Mood resolver: Category detection from emotions, scores and free text
- Analysis: Confidence, summary and source attribution
"""

from . import api
from . import orchestrator
from . import lookup_clients
from . import mood_resolver
from . import analysis
from . import models

__all__ = [
    'api',
    'orchestrator',
    'lookup_clients',
    'mood_resolver',
    'analysis',
    'models'
]
