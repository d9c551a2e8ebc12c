"""
Unit Tests: Confidence & Summary Builder

Tests calculate_confidence(), build_analysis_summary() and
build_analysis_sources().

Confidence: 60 + bonuses, clamped to [45, 95].

Run with: pytest test_analysis.py -v
"""

import pytest
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from empathy.models import EmpathyInput, SymptomRatings, TherapyHistory
from empathy.analysis import (
    MOOD_DESCRIPTORS,
    calculate_confidence,
    build_analysis_summary,
    build_analysis_sources,
    truncate,
)


def make_full_input() -> EmpathyInput:
    """Input with every signal present."""
    return EmpathyInput(
        mood_score=1,
        detected_mood="sad",
        emotions=["lonely", "down", "hopeless", "tired"],
        energy_level=2,
        context="I have been feeling low for weeks and it is getting harder to get out of bed in the morning.",
        voice_transcript="I just don't have the energy for anything lately",
        image_mood="sad",
        image_confidence=80,
        symptom_ratings=SymptomRatings(anxiety=4, sadness=5, stress=2, loneliness=3),
        therapy_history=TherapyHistory(has_previous_therapy=True, duration="6 months", type="CBT"),
        patient_readiness=5,
        presenting_problem="Persistent low mood since changing jobs"
    )


# =============================================================================
# calculate_confidence()
# =============================================================================

class TestCalculateConfidence:

    def test_empty_input_is_baseline(self):
        assert calculate_confidence(EmpathyInput()) == 60

    def test_joyful_scenario(self):
        """
        Base 60 + score bonus min(15, |8-5|*3) = 9 + emotions 5 = 74.
        Context is shorter than 80 chars, so no context bonus.
        """
        empathy_input = EmpathyInput(emotions=["joyful"], mood_score=8, context="Had a great day with friends")
        assert calculate_confidence(empathy_input) == 74

    def test_neutral_score_and_energy_add_nothing(self):
        assert calculate_confidence(EmpathyInput(mood_score=5, energy_level=5)) == 60

    def test_score_bonus_is_capped(self):
        # |10-5|*3 = 15, |1-5|*3 = 12
        assert calculate_confidence(EmpathyInput(mood_score=10)) == 75
        assert calculate_confidence(EmpathyInput(mood_score=1)) == 72

    def test_maximal_input_is_clamped(self):
        assert calculate_confidence(make_full_input()) == 95

    def test_therapy_history_counts_even_when_false(self):
        empathy_input = EmpathyInput(therapy_history=TherapyHistory(has_previous_therapy=False))
        assert calculate_confidence(empathy_input) == 63

    @pytest.mark.parametrize("empathy_input", [
        EmpathyInput(),
        EmpathyInput(mood_score=1, energy_level=10),
        EmpathyInput(context="x" * 500, emotions=["a"], image_mood="happy"),
        make_full_input(),
    ])
    def test_always_within_bounds(self, empathy_input):
        assert 45 <= calculate_confidence(empathy_input) <= 95


# =============================================================================
# build_analysis_summary()
# =============================================================================

class TestBuildAnalysisSummary:

    def test_starts_with_mood_descriptor(self):
        empathy_input = EmpathyInput(emotions=["joyful"], mood_score=8, context="Had a great day with friends")
        summary = build_analysis_summary(empathy_input, "happy", 74)
        assert summary.startswith(MOOD_DESCRIPTORS["happy"])
        assert 'Recent note: "Had a great day with friends".' in summary
        assert "Emotions mentioned: joyful." in summary
        assert "Energy around" not in summary

    def test_presenting_problem_replaces_context_note(self):
        summary = build_analysis_summary(make_full_input(), "sad", 95)
        assert 'Chief concern: "Persistent low mood since changing jobs".' in summary
        assert "Recent note" not in summary

    def test_full_clause_order(self):
        summary = build_analysis_summary(make_full_input(), "sad", 95)
        expected = " ".join([
            MOOD_DESCRIPTORS["sad"],
            'Chief concern: "Persistent low mood since changing jobs".',
            "Elevated symptoms: anxiety (4/5), sadness (5/5), loneliness (3/5).",
            "Emotions mentioned: lonely, down, hopeless.",
            "Energy around 2/10.",
            "Previous therapy experience noted.",
            "High engagement readiness (5/5).",
        ])
        assert summary == expected

    def test_long_context_is_truncated(self):
        empathy_input = EmpathyInput(context="word " * 100)
        summary = build_analysis_summary(empathy_input, "tired", 70)
        note = summary.split("Recent note: ")[1]
        assert note.startswith('"word word')
        assert note.endswith('...".')

    def test_fractional_energy_is_rendered(self):
        summary = build_analysis_summary(EmpathyInput(energy_level=6.5), "excited", 65)
        assert "Energy around 6.5/10." in summary


def test_truncate_collapses_whitespace():
    assert truncate("a   b\n\nc", 20) == "a b c"
    assert truncate("abcdefghij", 8) == "abcde..."


# =============================================================================
# build_analysis_sources()
# =============================================================================

class TestBuildAnalysisSources:

    def test_no_channels_gives_baseline(self):
        sources = build_analysis_sources(EmpathyInput())
        assert len(sources) == 1
        assert sources[0].type == "text"
        assert sources[0].label == "Baseline wellness model"
        assert sources[0].weight == 100

    def test_context_and_emotions_split_proportionally(self):
        sources = build_analysis_sources(EmpathyInput(context="busy day", emotions=["tense"]))
        assert [(s.type, s.weight) for s in sources] == [("text", 75), ("emoji", 25)]

    def test_score_and_energy_are_history_channels(self):
        sources = build_analysis_sources(EmpathyInput(mood_score=3, energy_level=4))
        assert [s.label for s in sources] == ["Mood score", "Energy level"]
        assert all(s.type == "history" for s in sources)

    @pytest.mark.parametrize("empathy_input", [
        EmpathyInput(context="hello"),
        EmpathyInput(mood_score=3, energy_level=4, image_mood="sad"),
        EmpathyInput(emotions=["calm"], voice_transcript="hi", image_mood="happy"),
        make_full_input(),
    ])
    def test_weights_sum_to_100(self, empathy_input):
        total = sum(source.weight for source in build_analysis_sources(empathy_input))
        assert 99 <= total <= 101
