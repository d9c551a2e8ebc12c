"""
Orchestrator Layer for Empathy Service

This module orchestrates the complete recommendation flow:
1. Resolve and coerce the mood category
2. Truncate context to its most recent characters
3. Compute confidence, summary and sources
4. Call the five enrichment lookups in parallel
5. Substitute static fallbacks for unusable results
6. Return response
"""

import logging
import asyncio
from typing import Any, Optional, List, Tuple

import httpx

from empathy.models import EmpathyInput, EmpathyRequest, EmpathyResponse, RecommendationSet
from empathy.mood_resolver import resolve_mood, ensure_valid_mood
from empathy.analysis import calculate_confidence, build_analysis_summary, build_analysis_sources
from empathy.lookup_clients import EmpathyMessageLookup, MusicLookup, BookLookup, QuoteLookup, PlaceLookup
from empathy.request_resolver import resolve_request
from empathy.fallbacks import fallback_recommendation_set
from empathy.config_loader import load_config

logger = logging.getLogger(__name__)

# Load configuration
_config = load_config()
_context_tail_chars = _config.get("context_tail_chars", 600)
_request_timeout = _config.get("request_timeout_seconds", 10.0)

GENERIC_FALLBACK_WARNING = "Displayed saved recommendations because live services were unavailable."

# Lookups that can also be requested on their own
SINGLE_LOOKUPS = {
    "music": MusicLookup,
    "book": BookLookup,
    "quote": QuoteLookup,
    "place": PlaceLookup,
}


def prepare_input(empathy_input: EmpathyInput) -> EmpathyInput:
    """
    Resolve the mood and bound the context before analysis.

    A missing detected_mood runs the resolution cascade (no score or energy
    defaults are filled); a supplied mood is coerced to a valid category.
    """
    updates = {}

    if empathy_input.detected_mood is None:
        inference = resolve_mood(
            None,
            empathy_input.emotions,
            empathy_input.mood_score,
            empathy_input.context
        )
        updates["detected_mood"] = inference.mood
        updates["mood_score"] = inference.score
        updates["emotions"] = inference.emotions
    else:
        updates["detected_mood"] = ensure_valid_mood(empathy_input.detected_mood)

    if empathy_input.context and len(empathy_input.context) > _context_tail_chars:
        updates["context"] = empathy_input.context[-_context_tail_chars:]

    return empathy_input.model_copy(update=updates)


def _build_response(
    mood: str,
    recommendations: RecommendationSet,
    confidence: int,
    summary: str,
    sources,
    warnings: List[str]
) -> EmpathyResponse:
    return EmpathyResponse(
        **recommendations.model_dump(),
        detected_mood=mood,
        confidence=confidence,
        analysis_summary=summary,
        analysis_sources=sources,
        warnings=warnings or None
    )


async def _run_lookups(
    empathy_input: EmpathyInput,
    client: httpx.AsyncClient,
    warnings: List[str]
) -> RecommendationSet:
    mood = empathy_input.detected_mood

    empathy_lookup = EmpathyMessageLookup(client)
    music_lookup = MusicLookup(client)
    book_lookup = BookLookup(client)
    quote_lookup = QuoteLookup(client)
    place_lookup = PlaceLookup(client)

    logger.info(f"Calling enrichment lookups in parallel for mood '{mood}'...")

    empathy_result, music, book, quote, place = await asyncio.gather(
        empathy_lookup.lookup(mood, warnings, empathy_input),
        music_lookup.lookup(mood, warnings),
        book_lookup.lookup(mood, warnings),
        quote_lookup.lookup(mood, warnings),
        place_lookup.lookup(mood, warnings, empathy_input.latitude, empathy_input.longitude),
        return_exceptions=True
    )

    # Lookups absorb their own errors; anything unusable here gets the static entry
    static = fallback_recommendation_set(mood)

    if isinstance(empathy_result, Exception) or empathy_result is None:
        logger.warning(f"Empathy message lookup raised exception: {empathy_result}")
        empathy_message, recommendation = static.empathy_message, static.recommendation
    else:
        empathy_message, recommendation = empathy_result.empathy_message, empathy_result.recommendation

    if isinstance(music, Exception) or music is None:
        logger.warning(f"Music lookup raised exception: {music}")
        music = static.music

    if isinstance(book, Exception) or book is None:
        logger.warning(f"Book lookup raised exception: {book}")
        book = static.book

    if isinstance(quote, Exception) or quote is None:
        logger.warning(f"Quote lookup raised exception: {quote}")
        quote = static.quote

    if isinstance(place, Exception) or place is None:
        logger.warning(f"Place lookup raised exception: {place}")
        place = static.place

    return RecommendationSet(
        empathy_message=empathy_message,
        recommendation=recommendation,
        quote=quote,
        music=music,
        book=book,
        place=place
    )


async def generate_empathy_recommendations(
    empathy_input: EmpathyInput,
    client: Optional[httpx.AsyncClient] = None
) -> EmpathyResponse:
    """
    Generate mood analysis and personalized recommendations.

    This never raises: failed lookups are replaced by static content and
    reported in `warnings`. If the fan-out itself fails, every recommendation
    comes from the static table with a single generic warning, while the
    analysis fields are still computed from the real input.

    Args:
        empathy_input: Normalized input (detected_mood may be absent or unknown)
        client: Optional shared AsyncClient; one is created per call if None

    Returns:
        EmpathyResponse (warnings omitted when every lookup succeeded)
    """
    empathy_input = prepare_input(empathy_input)
    mood = empathy_input.detected_mood

    confidence = calculate_confidence(empathy_input)
    summary = build_analysis_summary(empathy_input, mood, confidence)
    sources = build_analysis_sources(empathy_input)

    logger.info(f"Generating recommendations for mood '{mood}' (confidence: {confidence})")

    warnings: List[str] = []
    try:
        if client is not None:
            recommendations = await _run_lookups(empathy_input, client, warnings)
        else:
            async with httpx.AsyncClient(timeout=_request_timeout) as owned_client:
                recommendations = await _run_lookups(empathy_input, owned_client, warnings)
    except Exception as e:
        logger.error(f"Recommendation fan-out failed for mood '{mood}': {e}", exc_info=True)
        return _build_response(
            mood,
            fallback_recommendation_set(mood),
            confidence,
            summary,
            sources,
            [GENERIC_FALLBACK_WARNING]
        )

    response = _build_response(mood, recommendations, confidence, summary, sources, warnings)
    logger.info(f"Recommendations ready for mood '{mood}' with {len(warnings)} warning(s)")
    return response


async def process_empathy_request(
    request: EmpathyRequest,
    client: Optional[httpx.AsyncClient] = None
) -> EmpathyResponse:
    """
    Resolve an external request into an EmpathyInput and run the orchestrator.

    Args:
        request: Validated EmpathyRequest
        client: Optional shared AsyncClient

    Returns:
        EmpathyResponse
    """
    empathy_input = resolve_request(request)
    logger.info(f"Resolved request to mood '{empathy_input.detected_mood}' "
                f"(score: {empathy_input.mood_score}, energy: {empathy_input.energy_level})")
    return await generate_empathy_recommendations(empathy_input, client=client)


async def run_single_lookup(
    kind: str,
    mood: str,
    latitude: Optional[float] = None,
    longitude: Optional[float] = None,
    client: Optional[httpx.AsyncClient] = None
) -> Tuple[Any, List[str]]:
    """
    Run one enrichment lookup by itself.

    Like the full fan-out this never fails on provider errors: the lookup
    returns its saved entry and the warning list says so. Coordinates are
    only used by the place lookup.

    Args:
        kind: One of SINGLE_LOOKUPS
        mood: Mood label (coerced to a valid category)
        latitude: Optional latitude for the place lookup
        longitude: Optional longitude for the place lookup
        client: Optional shared AsyncClient; one is created per call if None

    Returns:
        Tuple of (normalized output model, warnings)
    """
    lookup_class = SINGLE_LOOKUPS[kind]
    mood = ensure_valid_mood(mood)
    args = (latitude, longitude) if kind == "place" else ()
    warnings: List[str] = []

    if client is not None:
        result = await lookup_class(client).lookup(mood, warnings, *args)
    else:
        async with httpx.AsyncClient(timeout=_request_timeout) as owned_client:
            result = await lookup_class(owned_client).lookup(mood, warnings, *args)

    logger.info(f"{kind.capitalize()} lookup for mood '{mood}' done with {len(warnings)} warning(s)")
    return result, warnings
