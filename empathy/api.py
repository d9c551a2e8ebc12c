"""
API Layer for Empathy Service

This module provides FastAPI endpoints for the mood analysis and
recommendation service.
"""

import os
import logging
from datetime import datetime
from typing import Literal, Optional
from fastapi import APIRouter, HTTPException, Query
from fastapi.responses import JSONResponse

from empathy.models import (
    EmpathyRequest,
    EmpathyResponse,
    TextAnalysisRequest,
    TextAnalysis,
    LookupRequest,
    MusicLookupResponse,
    BookLookupResponse,
    QuoteLookupResponse,
    PlaceLookupResponse,
)
from empathy.orchestrator import process_empathy_request, run_single_lookup
from empathy.text_analysis import analyze_text
from utils import activity_logger

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/empathy", tags=["empathy"])

PROVIDER_CREDENTIALS = {
    "openai": ["OPENAI_API_KEY"],
    "spotify": ["SPOTIFY_CLIENT_ID", "SPOTIFY_CLIENT_SECRET"],
    "foursquare": ["FOURSQUARE_API_KEY"],
}


@router.post("/recommendations", response_model=EmpathyResponse, response_model_exclude_none=True)
async def empathy_recommendations(request: EmpathyRequest):
    """
    Analyze the user's mood and return personalized recommendations.

    This endpoint:
    1. Resolves mood, score, energy and emotions from the request signals
    2. Computes confidence, summary and analysis sources
    3. Calls the enrichment lookups (message, music, book, quote, place) in parallel
    4. Substitutes saved content for any lookup that failed
    5. Returns the combined response (warnings only when something fell back)

    Args:
        request: EmpathyRequest with mood signals and optional therapeutic context

    Returns:
        EmpathyResponse
    """
    logger.info("POST /empathy/recommendations - Endpoint called")
    start_time = datetime.now()

    try:
        result = await process_empathy_request(request)
    except Exception as e:
        logger.error(f"POST /empathy/recommendations - Exception: {e}", exc_info=True)
        activity_logger.log_empathy_activity(
            status="error",
            has_location=request.latitude is not None and request.longitude is not None,
            error=f"Exception: {str(e)}",
            duration_seconds=(datetime.now() - start_time).total_seconds()
        )
        raise HTTPException(status_code=500, detail="Failed to generate recommendations")

    activity_logger.log_empathy_activity(
        status="degraded" if result.warnings else "success",
        detected_mood=result.detected_mood,
        confidence=result.confidence,
        warnings=result.warnings,
        sources=[source.model_dump() for source in result.analysis_sources],
        has_location=request.latitude is not None and request.longitude is not None,
        duration_seconds=(datetime.now() - start_time).total_seconds()
    )

    logger.info(f"POST /empathy/recommendations - Responded with mood '{result.detected_mood}' "
                f"(confidence: {result.confidence})")
    return result


async def _single_lookup_response(kind: str, request: LookupRequest, response_class):
    route = f"POST /empathy/recommendations/{kind}"
    logger.info(f"{route} - Endpoint called (mood: '{request.detected_mood}')")

    try:
        result, warnings = await run_single_lookup(
            kind,
            request.detected_mood,
            latitude=request.latitude,
            longitude=request.longitude
        )
    except Exception as e:
        logger.error(f"{route} - Exception: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Failed to generate {kind} recommendation")

    if warnings:
        logger.warning(f"{route} - Responded with saved content")
    return response_class(**result.model_dump(), warnings=warnings or None)


@router.post("/recommendations/music", response_model=MusicLookupResponse, response_model_exclude_none=True)
async def music_recommendation(request: LookupRequest):
    """Music pick for a mood, or the saved entry when Spotify is unavailable."""
    return await _single_lookup_response("music", request, MusicLookupResponse)


@router.post("/recommendations/book", response_model=BookLookupResponse, response_model_exclude_none=True)
async def book_recommendation(request: LookupRequest):
    """Book pick for a mood, or the saved entry when Open Library is unavailable."""
    return await _single_lookup_response("book", request, BookLookupResponse)


@router.post("/recommendations/quote", response_model=QuoteLookupResponse, response_model_exclude_none=True)
async def quote_recommendation(request: LookupRequest):
    """Quote for a mood, or the saved entry when Quotable is unavailable."""
    return await _single_lookup_response("quote", request, QuoteLookupResponse)


@router.post("/recommendations/place", response_model=PlaceLookupResponse, response_model_exclude_none=True)
async def place_recommendation(request: LookupRequest):
    """
    Place suggestion for a mood.

    Searches nearby only when both coordinates are given; otherwise returns
    the mood's place type without a warning.
    """
    return await _single_lookup_response("place", request, PlaceLookupResponse)


@router.post("/analyze/text", response_model=TextAnalysis)
async def analyze_text_reflection(request: TextAnalysisRequest):
    """
    Quick mood read of a short text reflection.

    Falls back to keyword heuristics when the text-generation provider is
    unavailable, so this endpoint does not fail on provider errors.
    """
    logger.info(f"POST /empathy/analyze/text - Endpoint called ({len(request.text)} chars)")

    try:
        return await analyze_text(request.text)
    except Exception as e:
        logger.error(f"POST /empathy/analyze/text - Exception: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to analyze text")


@router.get("/health")
async def health():
    """
    Health check endpoint for empathy service.

    Checks:
    - Which provider credentials are configured

    Returns:
        Dictionary with health status
    """
    logger.info("GET /empathy/health - Health check called")

    providers = {
        name: all(os.getenv(var) for var in env_vars)
        for name, env_vars in PROVIDER_CREDENTIALS.items()
    }

    return JSONResponse(
        status_code=200,
        content={
            "status": "healthy",
            "service": "empathy",
            "providers": providers,
            "timestamp": datetime.now().isoformat()
        }
    )


@router.get("/activity")
async def recent_activity(
    limit: int = Query(default=50, ge=1, le=500),
    status: Optional[Literal["success", "degraded", "error"]] = None
):
    """
    Recent recommendation activity from the JSONL logs, newest first.

    Args:
        limit: Maximum number of entries to return
        status: Optional filter (success, degraded or error)

    Returns:
        Dictionary with the entries and their count
    """
    logger.info(f"GET /empathy/activity - Endpoint called (limit: {limit}, status: {status})")

    activities = activity_logger.read_activity_logs(
        activity_logger.EMPATHY_LOG_DIR,
        limit=limit,
        status=status
    )
    return {"activities": activities, "count": len(activities)}
