"""
Confidence & Summary Builder

This module derives the human-facing part of the analysis from the normalized
input: a 45-95 confidence score, a short narrative summary, and the weighted
list of input channels that contributed to the read.
"""

import math
import re
import logging
from typing import List

from empathy.models import EmpathyInput, AnalysisSource

logger = logging.getLogger(__name__)

BASE_CONFIDENCE = 60
MIN_CONFIDENCE = 45
MAX_CONFIDENCE = 95
NEUTRAL_SCORE = 5
DEFAULT_ENERGY = 5

# Additive confidence bonuses
SCORE_DISTANCE_MULTIPLIER = 3
MAX_SCORE_BONUS = 15
LONG_CONTEXT_CHARS = 80
LONG_CONTEXT_BONUS = 10
EMOTIONS_BONUS = 5
ENERGY_BONUS = 5
VOICE_TRANSCRIPT_CHARS = 20
VOICE_BONUS = 5
IMAGE_BONUS = 5
SYMPTOMS_BONUS = 8
PRESENTING_PROBLEM_BONUS = 7
THERAPY_HISTORY_BONUS = 3

MOOD_DESCRIPTORS = {
    "anxious": "Signals suggest your nervous system is running high, pointing toward an anxious state.",
    "happy": "Your tone and word choices lean warm and appreciative, suggesting a happy mood.",
    "sad": "There are cues of heaviness and inward focus, consistent with a sad or reflective mood.",
    "tired": "Recurring mentions of fatigue and slowed momentum hint at mental or physical tiredness.",
    "stressed": "Mentions of pressure and tight timelines align with a stressed emotional profile.",
    "excited": "Elevated language and momentum signal an excited, forward-looking energy.",
}

PRESENTING_PROBLEM_CHARS = 100
CONTEXT_NOTE_CHARS = 120
ELEVATED_SYMPTOM_THRESHOLD = 2
SUMMARY_SYMPTOMS = ("anxiety", "sadness", "stress", "loneliness")
SUMMARY_EMOTIONS = 3
HIGH_READINESS = 4

# (channel, label, raw weight) before normalization
SOURCE_TEXT = ("text", "Text reflection", 0.6)
SOURCE_EMOJI = ("emoji", "Mood tags", 0.2)
SOURCE_SCORE = ("history", "Mood score", 0.15)
SOURCE_ENERGY = ("history", "Energy level", 0.1)
SOURCE_VOICE = ("voice", "Voice tone", 0.25)
SOURCE_PHOTO = ("photo", "Expression analysis", 0.2)
BASELINE_SOURCE = ("text", "Baseline wellness model", 100)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _format_number(value: float) -> str:
    """Render 4.0 as '4' and 4.5 as '4.5'."""
    if float(value).is_integer():
        return str(int(value))
    return f"{value:g}"


def truncate(text: str, max_length: int) -> str:
    """Collapse whitespace and cut to max_length, ending with '...' when cut."""
    normalized = re.sub(r"\s+", " ", text).strip()
    if len(normalized) <= max_length:
        return normalized
    return f"{normalized[:max_length - 3]}..."


def calculate_confidence(empathy_input: EmpathyInput) -> int:
    """
    Calculate a confidence score for the mood read.

    Starts at 60, adds a bonus for each informative signal and clamps the
    total to [45, 95].
    """
    confidence = BASE_CONFIDENCE

    if empathy_input.mood_score is not None and not math.isnan(empathy_input.mood_score):
        confidence += min(MAX_SCORE_BONUS, abs(empathy_input.mood_score - NEUTRAL_SCORE) * SCORE_DISTANCE_MULTIPLIER)
    if empathy_input.context and len(empathy_input.context) > LONG_CONTEXT_CHARS:
        confidence += LONG_CONTEXT_BONUS
    if empathy_input.emotions:
        confidence += EMOTIONS_BONUS
    if empathy_input.energy_level is not None and empathy_input.energy_level != DEFAULT_ENERGY:
        confidence += ENERGY_BONUS
    if empathy_input.voice_transcript and len(empathy_input.voice_transcript) > VOICE_TRANSCRIPT_CHARS:
        confidence += VOICE_BONUS
    if empathy_input.image_mood:
        confidence += IMAGE_BONUS
    if empathy_input.symptom_ratings is not None and empathy_input.symptom_ratings.has_any():
        confidence += SYMPTOMS_BONUS
    if empathy_input.presenting_problem:
        confidence += PRESENTING_PROBLEM_BONUS
    if empathy_input.therapy_history is not None and empathy_input.therapy_history.has_previous_therapy is not None:
        confidence += THERAPY_HISTORY_BONUS

    return max(MIN_CONFIDENCE, min(MAX_CONFIDENCE, round_half_up(confidence)))


def build_analysis_summary(empathy_input: EmpathyInput, mood: str, confidence: int) -> str:
    """
    Build the narrative analysis summary.

    The mood descriptor comes first, followed by whichever of these clauses
    apply, in order: chief concern or recent note, elevated symptoms, emotions,
    energy, previous therapy, readiness. `confidence` is accepted but not
    rendered.
    """
    parts = [MOOD_DESCRIPTORS[mood]]

    if empathy_input.presenting_problem:
        parts.append(f'Chief concern: "{truncate(empathy_input.presenting_problem, PRESENTING_PROBLEM_CHARS)}".')
    elif empathy_input.context:
        parts.append(f'Recent note: "{truncate(empathy_input.context, CONTEXT_NOTE_CHARS)}".')

    if empathy_input.symptom_ratings is not None:
        symptoms = []
        for name in SUMMARY_SYMPTOMS:
            value = getattr(empathy_input.symptom_ratings, name)
            if value is not None and value > ELEVATED_SYMPTOM_THRESHOLD:
                symptoms.append(f"{name} ({_format_number(value)}/5)")
        if symptoms:
            parts.append(f"Elevated symptoms: {', '.join(symptoms)}.")

    if empathy_input.emotions:
        parts.append(f"Emotions mentioned: {', '.join(empathy_input.emotions[:SUMMARY_EMOTIONS])}.")

    if empathy_input.energy_level is not None:
        parts.append(f"Energy around {_format_number(empathy_input.energy_level)}/10.")

    if empathy_input.therapy_history is not None and empathy_input.therapy_history.has_previous_therapy:
        parts.append("Previous therapy experience noted.")

    if empathy_input.patient_readiness is not None and empathy_input.patient_readiness >= HIGH_READINESS:
        parts.append(f"High engagement readiness ({_format_number(empathy_input.patient_readiness)}/5).")

    return " ".join(parts)


def normalize_sources(sources: List[AnalysisSource]) -> List[AnalysisSource]:
    """Scale weights so they sum to 100, or return the baseline source if empty."""
    if not sources:
        source_type, label, weight = BASELINE_SOURCE
        return [AnalysisSource(type=source_type, label=label, weight=weight)]

    total = sum(source.weight for source in sources)
    return [
        AnalysisSource(
            type=source.type,
            label=source.label,
            weight=round_half_up(source.weight / total * 100)
        )
        for source in sources
    ]


def build_analysis_sources(empathy_input: EmpathyInput) -> List[AnalysisSource]:
    """List the input channels present in `empathy_input`, with normalized weights."""
    present = []

    if empathy_input.context:
        present.append(SOURCE_TEXT)
    if empathy_input.emotions:
        present.append(SOURCE_EMOJI)
    if empathy_input.mood_score is not None:
        present.append(SOURCE_SCORE)
    if empathy_input.energy_level is not None:
        present.append(SOURCE_ENERGY)
    if empathy_input.voice_transcript:
        present.append(SOURCE_VOICE)
    if empathy_input.image_mood:
        present.append(SOURCE_PHOTO)

    sources = [AnalysisSource(type=source_type, label=label, weight=weight) for source_type, label, weight in present]
    return normalize_sources(sources)
