"""
Mood Category Resolver

This module maps ambiguous, partially-present mood signals onto one of the six
mood categories:
- detect_mood_category(): emotion tags first, mood score bands second
- infer_mood_from_text(): keyword counting over free text
- ensure_valid_mood(): coercion of arbitrary mood strings
- resolve_mood(): the cascade used when no mood label was supplied

All functions are pure and deterministic.
"""

import logging
from typing import List, NamedTuple, Optional

from empathy.models import MOOD_CATEGORIES, DEFAULT_MOOD

logger = logging.getLogger(__name__)

# Specific emotion words that pin a category regardless of score
EMOTION_CATEGORY_MAP = {
    "worried": "anxious",
    "nervous": "anxious",
    "stressed": "stressed",
    "overwhelmed": "anxious",
    "tense": "anxious",
    "joyful": "happy",
    "content": "happy",
    "excited": "excited",
    "grateful": "happy",
    "peaceful": "happy",
    "down": "sad",
    "depressed": "sad",
    "lonely": "sad",
    "hopeless": "sad",
    "disappointed": "sad",
    "exhausted": "tired",
    "drained": "tired",
    "fatigued": "tired",
    "burnt out": "tired",
    "lethargic": "tired",
    "pressured": "stressed",
    "frustrated": "stressed",
    "irritated": "stressed",
    "agitated": "stressed",
    "energized": "excited",
    "motivated": "excited",
    "enthusiastic": "excited",
    "inspired": "excited",
}

# Score bands, checked top-down (inclusive lower bounds)
SCORE_BANDS = [
    (8, "happy"),
    (6, "excited"),
    (4, "tired"),
    (2, "sad"),
]
LOWEST_BAND_MOOD = "anxious"

# Keyword phrases counted as substrings of the lowercased text
TEXT_MOOD_KEYWORDS = {
    "anxious": ["anxious", "worried", "nervous", "uneasy", "on edge", "overwhelmed", "panic"],
    "happy": ["happy", "grateful", "calm", "content", "peaceful", "good", "smiling"],
    "sad": ["sad", "down", "low", "blue", "lonely", "upset", "heartbroken"],
    "tired": ["tired", "exhausted", "fatigued", "drained", "sleepy", "worn out", "burned out"],
    "stressed": ["stressed", "pressure", "tense", "frustrated", "irritated", "rushed"],
    "excited": ["excited", "energized", "pumped", "thrilled", "motivated", "inspired"],
}

MOOD_BASE_SCORE = {
    "anxious": 3,
    "happy": 8,
    "sad": 3,
    "tired": 4,
    "stressed": 4,
    "excited": 8,
}

INTENSIFIERS = ("very", "really", "extremely")
SOFTENERS = ("slightly", "kind of", "a little")

MIN_INFERRED_SCORE = 2
MAX_INFERRED_SCORE = 10
MAX_INFERRED_EMOTIONS = 5

# Used when no keyword matched at all
SHORT_TEXT_LENGTH = 6
SHORT_TEXT_FALLBACK = ("excited", 7)
LONG_TEXT_FALLBACK = ("happy", 6)


class MoodInference(NamedTuple):
    mood: str
    score: Optional[float]
    emotions: List[str]


def detect_mood_category(emotions: List[str], mood_score: float) -> str:
    """
    Detect mood category from emotion tags and a mood score.

    The first emotion found in EMOTION_CATEGORY_MAP wins. Without a match the
    score decides: >=8 happy, >=6 excited, >=4 tired, >=2 sad, else anxious.

    Args:
        emotions: Free-form emotion tags (case-insensitive, otherwise exact)
        mood_score: Mood score, nominally 1-10

    Returns:
        One of MOOD_CATEGORIES
    """
    for emotion in emotions:
        normalized = emotion.lower()
        if normalized in EMOTION_CATEGORY_MAP:
            return EMOTION_CATEGORY_MAP[normalized]

    for threshold, mood in SCORE_BANDS:
        if mood_score >= threshold:
            return mood
    return LOWEST_BAND_MOOD


def infer_mood_from_text(text: str) -> MoodInference:
    """
    Infer mood, score and emotion keywords from free text.

    Categories are scored by how many of their keywords occur in the text;
    ties keep the category that comes first in MOOD_CATEGORIES. The score
    starts from the category's base score, moves +1 for intensifiers and -1
    for softeners, and is clamped to [2, 10]. Text with no keyword at all gets
    a length-based default instead.

    Args:
        text: Free text (journal note, transcript, ...)

    Returns:
        MoodInference(mood, score, emotions) with at most 5 emotions
    """
    normalized = text.lower()
    best_mood = DEFAULT_MOOD
    best_matches = 0
    matched_emotions: List[str] = []

    for mood in MOOD_CATEGORIES:
        matches = 0
        for keyword in TEXT_MOOD_KEYWORDS[mood]:
            if keyword in normalized:
                matches += 1
                if keyword not in matched_emotions:
                    matched_emotions.append(keyword)
        if matches > best_matches:
            best_matches = matches
            best_mood = mood

    if not matched_emotions:
        mood, score = SHORT_TEXT_FALLBACK if len(normalized) <= SHORT_TEXT_LENGTH else LONG_TEXT_FALLBACK
        return MoodInference(mood=mood, score=score, emotions=[])

    score = MOOD_BASE_SCORE[best_mood]
    if any(word in normalized for word in INTENSIFIERS):
        score += 1
    if any(word in normalized for word in SOFTENERS):
        score -= 1
    score = min(MAX_INFERRED_SCORE, max(MIN_INFERRED_SCORE, score))

    return MoodInference(
        mood=best_mood,
        score=score,
        emotions=matched_emotions[:MAX_INFERRED_EMOTIONS]
    )


def ensure_valid_mood(mood: Optional[str]) -> str:
    """Return `mood` if it is a known category, else the neutral default ('tired')."""
    if mood in MOOD_CATEGORIES:
        return mood
    if mood is not None:
        logger.warning(f"Unknown mood '{mood}', defaulting to '{DEFAULT_MOOD}'")
    return DEFAULT_MOOD


def resolve_mood(
    mood: Optional[str],
    emotions: List[str],
    mood_score: Optional[float],
    context: Optional[str]
) -> MoodInference:
    """
    Resolve a mood category from whatever signals are present.

    Order: an explicit mood label (coerced), then emotions + score, then text
    inference over the context, then the neutral default. Text inference only
    fills the score when none was given and merges its keywords into the
    emotion list.

    Returns:
        MoodInference with a valid mood, the (possibly inferred) score and the
        deduplicated emotion list
    """
    emotions = list(emotions)

    if mood:
        return MoodInference(mood=ensure_valid_mood(mood), score=mood_score, emotions=emotions)

    if mood_score is not None and emotions:
        detected = detect_mood_category(emotions, mood_score)
        logger.info(f"Detected mood from emotions+score: {detected}")
        return MoodInference(mood=detected, score=mood_score, emotions=emotions)

    if context and context.strip():
        inference = infer_mood_from_text(context)
        logger.info(f"Detected mood from text inference: {inference.mood}")
        merged = list(dict.fromkeys(emotions + inference.emotions))
        score = mood_score if mood_score is not None else inference.score
        return MoodInference(mood=inference.mood, score=score, emotions=merged)

    logger.info(f"No mood signal available, defaulting to '{DEFAULT_MOOD}'")
    return MoodInference(mood=DEFAULT_MOOD, score=mood_score, emotions=emotions)
