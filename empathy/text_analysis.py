"""
Quick Text Analysis

Classifies a short text reflection into a mood label, score, energy and
emotion keywords. Uses the text-generation provider when a key is configured
and the keyword heuristic otherwise. analyze_text() never raises.
"""

import os
import math
import logging
from typing import Any, Dict, Optional

import httpx

from empathy.models import MOOD_CATEGORIES, DEFAULT_MOOD, TextAnalysis
from empathy.mood_resolver import infer_mood_from_text
from empathy.config_loader import get_section, get_value
from utils.llm import ChatCompletionClient

logger = logging.getLogger(__name__)

MIN_TEXT_LENGTH = 3
DEFAULT_ENERGY_LEVEL = 5
DEFAULT_LLM_CONFIDENCE = 60
MIN_LLM_CONFIDENCE = 40
MAX_LLM_CONFIDENCE = 100

EMPTY_TEXT_CONFIDENCE = 50
HEURISTIC_CONFIDENCE = 55

EMPTY_TEXT_SUMMARY = "You shared a quick update. We'll keep checking in as you add more detail."
HEURISTIC_SUMMARY = "Captured your note and added it to your check-in history."
DEFAULT_LLM_SUMMARY = "We captured your reflection and will tailor recommendations accordingly."

TEXT_ANALYSIS_SYSTEM_PROMPT = (
    "You analyze how someone is feeling from a short text reflection. Return JSON with fields: "
    "moodLabel (one of anxious, happy, sad, tired, stressed, excited), moodScore (1-10), "
    "energyLevel (1-10), emotions (array of up to 5 lowercase descriptors), "
    "summary (<=120 characters, empathetic tone), confidence (0-100)."
)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and not math.isnan(value)


def heuristic_analysis(text: str) -> TextAnalysis:
    """Keyword-based analysis used for very short text or when the provider is unavailable."""
    trimmed = text.strip()
    if not trimmed:
        return TextAnalysis(
            mood_label=DEFAULT_MOOD,
            mood_score=5,
            energy_level=DEFAULT_ENERGY_LEVEL,
            emotions=[],
            summary=EMPTY_TEXT_SUMMARY,
            confidence=EMPTY_TEXT_CONFIDENCE
        )

    inference = infer_mood_from_text(trimmed)
    return TextAnalysis(
        mood_label=inference.mood,
        mood_score=inference.score,
        energy_level=DEFAULT_ENERGY_LEVEL,
        emotions=inference.emotions,
        summary=HEURISTIC_SUMMARY,
        confidence=HEURISTIC_CONFIDENCE
    )


def normalize_classification(parsed: Dict[str, Any], text: str) -> TextAnalysis:
    """
    Merge the provider's classification with heuristic values.

    Any missing or invalid field is replaced: label and score by the keyword
    inference, energy by 5, summary by a canned line, confidence by 60.
    Confidence is clamped to [40, 100].
    """
    fallback = infer_mood_from_text(text)

    label = parsed.get("moodLabel")
    label = label.lower() if isinstance(label, str) else ""
    mood_label = label if label in MOOD_CATEGORIES else fallback.mood

    mood_score = parsed.get("moodScore")
    energy_level = parsed.get("energyLevel")
    emotions = parsed.get("emotions")
    summary = parsed.get("summary")
    confidence = parsed.get("confidence")

    if isinstance(emotions, list):
        emotions = [str(emotion).lower() for emotion in emotions]
    else:
        emotions = fallback.emotions

    if _is_number(confidence):
        confidence = max(MIN_LLM_CONFIDENCE, min(MAX_LLM_CONFIDENCE, int(math.floor(confidence + 0.5))))
    else:
        confidence = DEFAULT_LLM_CONFIDENCE

    return TextAnalysis(
        mood_label=mood_label,
        mood_score=mood_score if _is_number(mood_score) else fallback.score,
        energy_level=energy_level if _is_number(energy_level) else DEFAULT_ENERGY_LEVEL,
        emotions=emotions,
        summary=summary if isinstance(summary, str) and summary else DEFAULT_LLM_SUMMARY,
        confidence=confidence
    )


async def classify_text(text: str, client: Optional[httpx.AsyncClient] = None) -> TextAnalysis:
    """
    Classify text with the text-generation provider.

    Raises:
        ValueError: If no API key is configured or the output is not a JSON object
        utils.retry.HTTPStatusFailure: If the provider returns a non-2xx status
    """
    api_key = os.getenv("OPENAI_API_KEY")
    if not api_key:
        raise ValueError("OpenAI API key not configured")

    trimmed = text.strip()
    llm_config = get_section("llm")
    llm = ChatCompletionClient(
        api_key=api_key,
        base_url=llm_config["base_url"],
        model=llm_config["model"],
        timeout=get_value("request_timeout_seconds"),
        max_attempts=get_value("lookup_max_attempts"),
        client=client
    )

    parsed = await llm.chat_json(
        [
            {"role": "system", "content": TEXT_ANALYSIS_SYSTEM_PROMPT},
            {"role": "user", "content": f'Reflect on this text and classify the emotional state:\n"""{trimmed}"""'},
        ],
        temperature=llm_config["text_analysis_temperature"]
    )
    return normalize_classification(parsed, trimmed)


async def analyze_text(text: str, client: Optional[httpx.AsyncClient] = None) -> TextAnalysis:
    """
    Analyze a short text reflection.

    Args:
        text: Reflection text
        client: Optional shared AsyncClient

    Returns:
        TextAnalysis from the provider, or the heuristic analysis on any failure
    """
    if len(text.strip()) < MIN_TEXT_LENGTH:
        return heuristic_analysis(text)

    try:
        return await classify_text(text, client=client)
    except Exception as e:
        logger.warning(f"Primary text analysis failed, using heuristic fallback: {e}")
        return heuristic_analysis(text)
