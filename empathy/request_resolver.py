"""
Request Resolver

Turns a validated EmpathyRequest (explicit fields plus optional voice/image
insights and mood history) into the normalized EmpathyInput consumed by the
orchestrator, filling every gap with the next available signal.
"""

import logging
from typing import List, Optional

from empathy.models import EmpathyRequest, EmpathyInput
from empathy.mood_resolver import resolve_mood
from empathy.analysis import round_half_up
from empathy.config_loader import get_value

logger = logging.getLogger(__name__)

DEFAULT_MOOD_SCORE = 5
DEFAULT_ENERGY_LEVEL = 5


def _lower(value: Optional[str]) -> Optional[str]:
    return value.lower() if value else None


def _dedupe(values: List[str]) -> List[str]:
    """Drop blank entries and duplicates, keeping first-seen order."""
    return list(dict.fromkeys(value for value in values if value and value.strip()))


def combine_context(request: EmpathyRequest) -> str:
    """Join the typed context with voice and image insight text, one part per line."""
    parts = []

    if request.context and request.context.strip():
        parts.append(request.context.strip())

    voice = request.voice_insights
    if voice is not None:
        if voice.summary:
            parts.append(f"Voice insight: {voice.summary}")
        elif voice.transcript:
            parts.append(f"Voice transcript: {voice.transcript}")

    image = request.image_insights
    if image is not None and image.summary:
        parts.append(f"Image insight: {image.summary}")

    return "\n".join(parts)


def resolve_request(request: EmpathyRequest) -> EmpathyInput:
    """
    Resolve an EmpathyRequest into an EmpathyInput.

    Mood label: explicit mood, then voice label, then image label; when none
    is present the mood is resolved from emotions + score, then from the
    combined context. Score falls back to the rounded mean of recent_moods
    (else 5) and energy to 5.

    Args:
        request: Validated EmpathyRequest

    Returns:
        EmpathyInput with detected_mood, mood_score and energy_level always set
    """
    voice = request.voice_insights
    image = request.image_insights

    mood_label = request.mood or _lower(voice.mood_label if voice else None) or _lower(image.mood_label if image else None)

    mood_score = request.mood_score
    if mood_score is None and voice is not None:
        mood_score = voice.mood_score

    energy_level = request.energy_level
    if energy_level is None and voice is not None:
        energy_level = voice.energy_level

    emotions = [emotion.lower() for emotion in (request.emotions or [])]
    if voice is not None and voice.emotions:
        emotions.extend(emotion.lower() for emotion in voice.emotions)
    if image is not None and image.emotions:
        emotions.extend(emotion.lower() for emotion in image.emotions)

    combined_context = combine_context(request)

    inference = resolve_mood(mood_label, emotions, mood_score, combined_context)
    mood_score = inference.score
    emotions = _dedupe(inference.emotions)

    if mood_score is None:
        if request.recent_moods:
            mood_score = round_half_up(sum(request.recent_moods) / len(request.recent_moods))
            logger.debug(f"Mood score defaulted from {len(request.recent_moods)} recent moods: {mood_score}")
        else:
            mood_score = DEFAULT_MOOD_SCORE
    if energy_level is None:
        energy_level = DEFAULT_ENERGY_LEVEL

    tail_chars = get_value("request_context_tail_chars")
    if combined_context:
        context = combined_context[-tail_chars:]
    else:
        context = ", ".join(emotions) or None

    return EmpathyInput(
        mood_score=mood_score,
        detected_mood=inference.mood,
        emotions=emotions,
        energy_level=energy_level,
        context=context,
        latitude=request.latitude,
        longitude=request.longitude,
        voice_transcript=voice.transcript if voice else None,
        image_mood=image.mood_label if image else None,
        image_confidence=image.confidence if image else None,
        symptom_ratings=request.symptom_ratings,
        therapy_history=request.therapy_history,
        therapeutic_relationship_importance=request.therapeutic_relationship_importance,
        patient_readiness=request.patient_readiness,
        presenting_problem=request.presenting_problem
    )
