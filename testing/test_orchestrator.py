"""
Integration Tests: Recommendation Orchestrator

Runs generate_empathy_recommendations() end to end against mock providers:
full outage (every lookup falls back), full success (no warnings), mood
coercion, and the catch-all path when the fan-out itself fails.

Run with: pytest test_orchestrator.py -v
"""

import asyncio
import json
import pytest
import sys
import os
from unittest.mock import patch, AsyncMock

import httpx

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from empathy.models import EmpathyInput, EmpathyRequest
from empathy.analysis import MOOD_DESCRIPTORS
from empathy import fallbacks
from empathy.orchestrator import (
    GENERIC_FALLBACK_WARNING,
    generate_empathy_recommendations,
    prepare_input,
    process_empathy_request,
    run_single_lookup,
)


FAKE_CREDENTIALS = {
    "OPENAI_API_KEY": "sk-test",
    "SPOTIFY_CLIENT_ID": "id",
    "SPOTIFY_CLIENT_SECRET": "secret",
    "FOURSQUARE_API_KEY": "fsq-key",
}

ALL_WARNINGS = {
    "Generated empathy message using fallback copy.",
    "Served saved music recommendation while Spotify was unavailable.",
    "Provided saved reading suggestion due to book API issues.",
    "Displayed saved quote due to quote service unavailability.",
    "Provided saved place suggestion due to place lookup failure.",
}


# =============================================================================
# Test Fixtures & Helpers
# =============================================================================

@pytest.fixture(autouse=True)
def environment():
    """Fake credentials and no real backoff delays."""
    with patch.dict(os.environ, FAKE_CREDENTIALS), \
            patch("utils.retry.asyncio.sleep", new_callable=AsyncMock):
        yield


def unreachable(request):
    raise httpx.ConnectError("connection refused", request=request)


def healthy_provider(request):
    """Answer every provider endpoint with a valid payload."""
    host = request.url.host
    if host == "api.openai.com":
        content = {
            "empathyMessage": "That sounds like a lovely day.",
            "recommendation": {
                "title": "Savor it",
                "description": "Write down three highlights for 5 minutes.",
                "actionLabel": "Open journal",
                "actionType": "journal",
            },
        }
        return httpx.Response(200, json={"choices": [{"message": {"content": json.dumps(content)}}]})
    if host == "accounts.spotify.com":
        return httpx.Response(200, json={"access_token": "tok"})
    if host == "api.spotify.com":
        return httpx.Response(200, json={"tracks": [{
            "name": "Walking on Sunshine",
            "artists": [{"name": "Katrina and the Waves"}],
            "external_urls": {"spotify": "https://open.spotify.com/track/sun"},
        }]})
    if host == "openlibrary.org":
        return httpx.Response(200, json={"docs": [
            {"title": "Joy Daily", "author_name": ["J. Writer"], "cover_i": 9, "ratings_average": 4.5},
        ]})
    if host == "api.quotable.io":
        return httpx.Response(200, json=[{"content": "Enjoy the little things.", "author": "Robert Brault"}])
    if host == "api.foursquare.com":
        return httpx.Response(200, json={"results": [{
            "name": "Hilltop Lookout",
            "location": {"formatted_address": "Summit Rd", "lat": 3.1, "lng": 101.6},
        }]})
    return httpx.Response(404)


def generate(empathy_input, handler):
    async def _run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            return await generate_empathy_recommendations(empathy_input, client=client)

    return asyncio.run(_run())


JOYFUL_INPUT = EmpathyInput(emotions=["joyful"], mood_score=8, context="Had a great day with friends",
                            latitude=3.1, longitude=101.6)


# =============================================================================
# Outage and success scenarios
# =============================================================================

class TestGenerateEmpathyRecommendations:

    def test_all_providers_unreachable(self):
        response = generate(JOYFUL_INPUT, unreachable)

        assert response.detected_mood == "happy"
        assert response.confidence == 74
        assert response.analysis_summary.startswith(MOOD_DESCRIPTORS["happy"])
        assert len(response.warnings) == 5
        assert set(response.warnings) == ALL_WARNINGS

        assert response.empathy_message == fallbacks.fallback_empathy_message("happy").empathy_message
        assert response.music == fallbacks.fallback_music("happy")
        assert response.book == fallbacks.fallback_book("happy")
        assert response.quote == fallbacks.fallback_quote("happy")
        assert response.place == fallbacks.fallback_place("happy")

    def test_all_providers_healthy(self):
        response = generate(JOYFUL_INPUT, healthy_provider)

        assert response.warnings is None
        assert response.empathy_message == "That sounds like a lovely day."
        assert response.recommendation.action_type == "journal"
        assert response.music.title == "Walking on Sunshine"
        assert response.book.title == "Joy Daily"
        assert response.quote.author == "Robert Brault"
        assert response.place.type == "Hilltop Lookout"
        assert "warnings" not in response.model_dump(exclude_none=True)

    def test_partial_outage_reports_only_failed_lookups(self):
        def handler(request):
            if request.url.host == "api.quotable.io":
                return httpx.Response(500)
            return healthy_provider(request)

        response = generate(JOYFUL_INPUT, handler)
        assert response.warnings == ["Displayed saved quote due to quote service unavailability."]
        assert response.quote == fallbacks.fallback_quote("happy")
        assert response.music.title == "Walking on Sunshine"

    def test_unknown_mood_is_coerced_to_tired(self):
        response = generate(EmpathyInput(detected_mood="euphoric"), unreachable)
        assert response.detected_mood == "tired"
        assert response.music == fallbacks.fallback_music("tired")

    def test_empty_input(self):
        response = generate(EmpathyInput(), unreachable)
        assert response.detected_mood == "tired"
        assert response.confidence == 60
        assert response.warnings
        assert len(response.analysis_sources) == 1
        assert response.analysis_sources[0].label == "Baseline wellness model"

    def test_no_coordinates_skips_place_warning(self):
        response = generate(EmpathyInput(detected_mood="sad"), unreachable)
        assert len(response.warnings) == 4
        assert "Provided saved place suggestion due to place lookup failure." not in response.warnings

    def test_fan_out_failure_returns_static_set(self):
        with patch("empathy.orchestrator._run_lookups", side_effect=RuntimeError("boom")):
            response = generate(JOYFUL_INPUT, healthy_provider)

        assert response.warnings == [GENERIC_FALLBACK_WARNING]
        assert response.confidence == 74
        static = fallbacks.fallback_recommendation_set("happy")
        assert response.empathy_message == static.empathy_message
        assert response.music == static.music
        assert response.place == static.place


# =============================================================================
# Input preparation
# =============================================================================

class TestPrepareInput:

    def test_context_keeps_last_600_chars(self):
        context = "a" * 100 + "b" * 600
        prepared = prepare_input(EmpathyInput(detected_mood="happy", context=context))
        assert prepared.context == "b" * 600

    def test_missing_mood_runs_text_inference_without_defaults(self):
        prepared = prepare_input(EmpathyInput(context="I feel very anxious"))
        assert prepared.detected_mood == "anxious"
        assert prepared.mood_score == 4
        assert prepared.energy_level is None


def test_process_request_resolves_then_generates():
    request = EmpathyRequest(mood="Sad", context="rough week", recent_moods=[3, 4])

    async def _run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(unreachable)) as client:
            return await process_empathy_request(request, client=client)

    response = asyncio.run(_run())
    # Explicit labels are not lowercased, so "Sad" is coerced
    assert response.detected_mood == "tired"


# =============================================================================
# run_single_lookup()
# =============================================================================

def single_lookup_with(handler, kind, mood, *args):
    async def _run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            return await run_single_lookup(kind, mood, *args, client=client)

    return asyncio.run(_run())


class TestRunSingleLookup:

    def test_outage_returns_fallback_and_warning(self):
        result, warnings = single_lookup_with(unreachable, "quote", "excited")
        assert result == fallbacks.fallback_quote("excited")
        assert warnings == ["Displayed saved quote due to quote service unavailability."]

    def test_place_uses_coordinates(self):
        seen = {}

        def handler(request):
            seen["ll"] = request.url.params["ll"]
            return httpx.Response(200, json={"results": [{"name": "Riverside Park", "location": {}}]})

        result, warnings = single_lookup_with(handler, "place", "stressed", 1.3, 103.8)
        assert warnings == []
        assert result.type == "Riverside Park"
        assert seen["ll"] == "1.3,103.8"

    def test_coordinates_ignored_for_other_lookups(self):
        handler = lambda r: httpx.Response(200, json=[{"content": "Onward.", "author": "A"}])
        result, warnings = single_lookup_with(handler, "quote", "happy", 1.3, 103.8)
        assert (result.text, warnings) == ("Onward.", [])

    def test_unknown_mood_is_coerced(self):
        result, _ = single_lookup_with(unreachable, "book", "euphoric")
        assert result == fallbacks.fallback_book("tired")

    def test_unknown_kind_raises(self):
        with pytest.raises(KeyError):
            single_lookup_with(unreachable, "podcast", "happy")
