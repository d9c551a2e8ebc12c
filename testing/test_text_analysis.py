"""
Unit Tests: Quick Text Analysis

Tests analyze_text() with and without a configured provider key, and the
normalization of partial provider classifications.

Run with: pytest test_text_analysis.py -v
"""

import asyncio
import json
import sys
import os
from unittest.mock import patch, AsyncMock

import httpx

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from empathy.text_analysis import analyze_text, normalize_classification, heuristic_analysis


def analyze_with(handler, text):
    async def _run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            return await analyze_text(text, client=client)

    return asyncio.run(_run())


def classification(content: dict):
    def handler(request):
        return httpx.Response(200, json={"choices": [{"message": {"content": json.dumps(content)}}]})
    return handler


def test_short_text_uses_heuristic_without_request():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200)

    with patch.dict(os.environ, {"OPENAI_API_KEY": "sk-test"}):
        result = analyze_with(handler, " ok ")
    assert calls == []
    assert result.mood_label == "excited"
    assert result.confidence == 55


def test_blank_text_heuristic():
    result = heuristic_analysis("   ")
    assert (result.mood_label, result.mood_score, result.energy_level) == ("tired", 5, 5)
    assert result.emotions == []
    assert result.confidence == 50


def test_without_key_uses_heuristic():
    with patch.dict(os.environ, {"OPENAI_API_KEY": ""}):
        result = analyze_with(classification({}), "I feel very anxious")
    assert result.mood_label == "anxious"
    assert result.mood_score == 4
    assert result.energy_level == 5
    assert result.confidence == 55


def test_provider_classification_is_used():
    seen = {}

    def handler(request):
        seen["body"] = json.loads(request.content)
        return classification({
            "moodLabel": "Stressed",
            "moodScore": 4,
            "energyLevel": 6,
            "emotions": ["Rushed", "tense"],
            "summary": "Sounds like a packed day.",
            "confidence": 120,
        })(request)

    with patch.dict(os.environ, {"OPENAI_API_KEY": "sk-test"}):
        result = analyze_with(handler, "Deadlines everywhere today")

    assert result.mood_label == "stressed"
    assert result.mood_score == 4
    assert result.energy_level == 6
    assert result.emotions == ["rushed", "tense"]
    assert result.summary == "Sounds like a packed day."
    assert result.confidence == 100
    assert seen["body"]["temperature"] == 0.2
    assert seen["body"]["response_format"] == {"type": "json_object"}


@patch("utils.retry.asyncio.sleep", new_callable=AsyncMock)
def test_provider_failure_uses_heuristic(mock_sleep):
    with patch.dict(os.environ, {"OPENAI_API_KEY": "sk-test"}):
        result = analyze_with(lambda r: httpx.Response(500), "I am sad and tired")
    assert result.mood_label == "sad"
    assert result.confidence == 55


def test_non_json_output_uses_heuristic():
    def handler(request):
        return httpx.Response(200, json={"choices": [{"message": {"content": "not json"}}]})

    with patch.dict(os.environ, {"OPENAI_API_KEY": "sk-test"}):
        result = analyze_with(handler, "I feel very anxious")
    assert result.mood_label == "anxious"
    assert result.confidence == 55


def test_normalize_fills_invalid_fields():
    result = normalize_classification({"moodLabel": "euphoric", "confidence": 10, "summary": ""}, "I feel very anxious")
    assert result.mood_label == "anxious"
    assert result.mood_score == 4
    assert result.energy_level == 5
    assert result.emotions == ["anxious"]
    assert result.summary == "We captured your reflection and will tailor recommendations accordingly."
    assert result.confidence == 40


def test_normalize_default_confidence():
    assert normalize_classification({}, "hello there").confidence == 60
