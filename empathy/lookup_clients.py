"""
Enrichment Lookup Clients for Empathy Service

This module provides the five content lookups (empathy message, music, book,
quote, place). Each client derives its provider request from a per-mood
parameter table, calls the provider through retry_fetch(), and maps the payload
into a normalized model. On any failure (network, non-2xx, empty result,
malformed payload, missing credentials) it records its warning and returns the
static fallback for the mood. lookup() never raises.
"""

import os
import base64
import random
import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote as url_quote

import httpx

from empathy.config_loader import get_section, get_value
from empathy.models import (
    EmpathyInput,
    EmpathyMessage,
    Recommendation,
    MusicRecommendation,
    BookRecommendation,
    Quote,
    PlaceRecommendation,
    Coordinates,
)
from empathy import fallbacks
from empathy.mood_resolver import ensure_valid_mood
from utils.llm import ChatCompletionClient
from utils.retry import retry_fetch

logger = logging.getLogger(__name__)

# Load configuration
_retry_config = get_section("retry")
_llm_config = get_section("llm")
_provider_urls = get_section("provider_urls")
_lookup_max_attempts = get_value("lookup_max_attempts")
_request_timeout = get_value("request_timeout_seconds")


# =============================================================================
# Per-mood request parameters
# =============================================================================

MOOD_AUDIO_FEATURES = {
    "anxious": {"valence": 0.3, "energy": 0.35, "tempo": {"min": 60, "max": 80}},
    "happy": {"valence": 0.85, "energy": 0.75, "tempo": {"min": 120, "max": 140}},
    "sad": {"valence": 0.2, "energy": 0.3, "tempo": {"min": 50, "max": 75}},
    "tired": {"valence": 0.45, "energy": 0.2, "tempo": {"min": 60, "max": 90}},
    "stressed": {"valence": 0.4, "energy": 0.4, "tempo": {"min": 70, "max": 100}},
    "excited": {"valence": 0.9, "energy": 0.85, "tempo": {"min": 130, "max": 160}},
}
UPLIFTING_VALENCE = 0.6

MOOD_BOOK_SUBJECTS = {
    "anxious": ["anxiety", "mindfulness", "cognitive behavioral therapy"],
    "happy": ["joy", "gratitude", "positive psychology"],
    "sad": ["depression", "resilience", "healing"],
    "tired": ["rest", "sleep", "burnout recovery"],
    "stressed": ["stress relief", "meditation", "mental health"],
    "excited": ["motivation", "creativity", "personal growth"],
}
BOOK_SEARCH_LIMIT = 20
BOOK_PICK_FROM_TOP = 5

MOOD_QUOTE_TAGS = {
    "anxious": "courage|wisdom|peace",
    "happy": "happiness|success|life",
    "sad": "adversity|healing|hope",
    "tired": "self|rest|patience",
    "stressed": "wisdom|peace|perseverance",
    "excited": "inspirational|success|opportunity",
}
QUOTE_MAX_LENGTH = 150

MOOD_PLACES = {
    "anxious": {
        "categories": "16032",
        "type": "A botanical garden",
        "reason": "Nature exposure reduces cortisol by 21%",
        "benefits": "Green spaces calm the nervous system and promote grounding",
    },
    "happy": {
        "categories": "13035",
        "type": "A scenic viewpoint",
        "reason": "Expansive views amplify positive emotions",
        "benefits": "Height enhances feelings of possibility and freedom",
    },
    "sad": {
        "categories": "13035",
        "type": "A cozy café with natural light",
        "reason": "Gentle social exposure and warm atmosphere",
        "benefits": "Soft ambient noise eases loneliness without pressure",
    },
    "tired": {
        "categories": "16032",
        "type": "A quiet park bench under trees",
        "reason": "Restorative environment with nature sounds",
        "benefits": "Passive rest recharges mental energy naturally",
    },
    "stressed": {
        "categories": "16021",
        "type": "A nearby body of water",
        "reason": "Blue spaces calm the nervous system",
        "benefits": "Water sounds lower blood pressure and reduce tension",
    },
    "excited": {
        "categories": "10027",
        "type": "An art museum or gallery",
        "reason": "Channel energy into inspiration",
        "benefits": "Visual engagement sustains positive momentum",
    },
}

EMPATHY_SYSTEM_PROMPT = """You are a warm, supportive wellbeing companion. Write a short validating message (2-3 sentences) to the person, using 'you' pronouns, that acknowledges how they feel without clinical labels or diagnosis. Then suggest exactly one concrete, time-boxed activity they can do right now (for example "a 5-minute breathing exercise"). Never give crisis intervention advice; if symptoms sound severe, gently encourage reaching out to a professional. Return ONLY valid JSON with this structure:
{
  "empathyMessage": "string",
  "recommendation": {
    "title": "string",
    "description": "string (what to do and for how long)",
    "actionLabel": "string (call to action)",
    "actionType": "breathing" | "journal" | "timer" | "contact"
  }
}"""


class LookupFailure(Exception):
    """Deterministic lookup failure (missing credentials, empty or malformed result)."""
    pass


def encode_component(text: str) -> str:
    """Percent-encode a URL component (spaces become %20)."""
    return url_quote(text, safe="!'()*")


def _json_object(response: httpx.Response) -> Dict[str, Any]:
    data = response.json()
    if not isinstance(data, dict):
        raise LookupFailure("Expected a JSON object from provider")
    return data


class BaseLookup:
    """Base class for enrichment lookups with fallback handling."""

    name = "Lookup"
    warning = "Served saved content while a live service was unavailable."

    def __init__(self, client: httpx.AsyncClient, max_attempts: Optional[int] = None):
        """
        Initialize base lookup.

        Args:
            client: Shared AsyncClient used for every provider call
            max_attempts: Attempts per provider call (defaults to config value)
        """
        self.client = client
        self.max_attempts = max_attempts or _lookup_max_attempts

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        return await retry_fetch(
            self.client,
            method,
            url,
            max_attempts=self.max_attempts,
            initial_delay=_retry_config["initial_delay_seconds"],
            max_delay=_retry_config["max_delay_seconds"],
            backoff_factor=_retry_config["backoff_factor"],
            **kwargs
        )

    async def fetch(self, mood: str, *args: Any) -> Any:
        raise NotImplementedError

    def fallback(self, mood: str) -> Any:
        raise NotImplementedError

    async def lookup(self, mood: str, warnings: List[str], *args: Any) -> Any:
        """
        Fetch live content for `mood`, or the static fallback on any failure.

        Args:
            mood: Resolved mood category
            warnings: Shared warning list; this lookup's warning is appended on fallback
            *args: Lookup-specific arguments passed to fetch()

        Returns:
            Normalized output model (live or fallback)
        """
        mood = ensure_valid_mood(mood)
        try:
            result = await self.fetch(mood, *args)
            logger.debug(f"{self.name} lookup succeeded for mood '{mood}'")
            return result
        except Exception as e:
            logger.warning(f"{self.name} lookup failed for mood '{mood}', using fallback: {e}")
            warnings.append(self.warning)
            return self.fallback(mood)


class EmpathyMessageLookup(BaseLookup):
    """Personalized validation message and recommendation from the text-generation provider."""

    name = "EmpathyMessage"
    warning = "Generated empathy message using fallback copy."

    def __init__(self, client: httpx.AsyncClient, api_key: Optional[str] = None, max_attempts: Optional[int] = None):
        super().__init__(client, max_attempts)
        self.api_key = api_key or os.getenv("OPENAI_API_KEY")

    async def fetch(self, mood: str, empathy_input: EmpathyInput) -> EmpathyMessage:
        if not self.api_key:
            raise LookupFailure("OpenAI API key not configured")

        llm = ChatCompletionClient(
            api_key=self.api_key,
            base_url=_llm_config["base_url"],
            model=_llm_config["model"],
            timeout=_request_timeout,
            max_attempts=self.max_attempts,
            client=self.client
        )
        result = await llm.chat_json(
            [
                {"role": "system", "content": EMPATHY_SYSTEM_PROMPT},
                {"role": "user", "content": build_user_prompt(empathy_input, mood)},
            ],
            temperature=_llm_config["temperature"],
            max_tokens=_llm_config["max_tokens"]
        )
        return parse_empathy_payload(result)

    def fallback(self, mood: str) -> EmpathyMessage:
        return fallbacks.fallback_empathy_message(mood)


def build_user_prompt(empathy_input: EmpathyInput, mood: str) -> str:
    """Render the client profile sent to the text-generation provider."""
    lines = [
        "Client Profile:",
        f"- Presenting Problem: {empathy_input.presenting_problem or 'Not specified'}",
        f"- Current Mood: {mood}, Score: {_num(empathy_input.mood_score)}/10, "
        f"Energy: {_num(empathy_input.energy_level)}/10",
    ]

    ratings = empathy_input.symptom_ratings
    if ratings is not None:
        symptoms = []
        for label, value in (
            ("Anxiety", ratings.anxiety),
            ("Sadness", ratings.sadness),
            ("Stress", ratings.stress),
            ("Loneliness", ratings.loneliness),
        ):
            if value is not None:
                symptoms.append(f"{label}: {_num(value)}/5")
        if ratings.suicide_trends is not None and ratings.suicide_trends > 0:
            symptoms.append(f"Suicidal Ideation: {_num(ratings.suicide_trends)}/5 - ALERT")
        if symptoms:
            lines.append(f"- Symptom Severity (past 2 weeks): {', '.join(symptoms)}")

    history = empathy_input.therapy_history
    if history is not None:
        if history.has_previous_therapy:
            lines.append(
                f"- Previous Therapy: Yes ({history.duration or 'duration unspecified'}, "
                f"{history.type or 'type unspecified'})"
            )
        else:
            lines.append("- Previous Therapy: No")

    if empathy_input.patient_readiness is not None:
        lines.append(f"- Treatment Readiness: {_num(empathy_input.patient_readiness)}/5")
    if empathy_input.therapeutic_relationship_importance is not None:
        lines.append(f"- Therapeutic Alliance Importance: {_num(empathy_input.therapeutic_relationship_importance)}/5")
    if empathy_input.context:
        lines.append(f'- Additional Context: "{empathy_input.context}"')

    return "\n".join(lines)


def _num(value: Optional[float]) -> str:
    if value is None:
        return "unknown"
    if float(value).is_integer():
        return str(int(value))
    return f"{value:g}"


def parse_empathy_payload(payload: Dict[str, Any]) -> EmpathyMessage:
    """
    Validate the JSON returned by the text-generation provider.

    Raises:
        LookupFailure: If a required field is missing or empty
        pydantic.ValidationError: If actionType is outside the allowed set
    """
    message = payload.get("empathyMessage")
    recommendation = payload.get("recommendation")
    if not isinstance(message, str) or not message.strip():
        raise LookupFailure("Provider response missing empathyMessage")
    if not isinstance(recommendation, dict):
        raise LookupFailure("Provider response missing recommendation")

    required = ("title", "description", "actionLabel", "actionType")
    missing = [key for key in required if not recommendation.get(key)]
    if missing:
        raise LookupFailure(f"Recommendation missing fields: {', '.join(missing)}")

    return EmpathyMessage(
        empathy_message=message,
        recommendation=Recommendation(
            title=recommendation["title"],
            description=recommendation["description"],
            action_label=recommendation["actionLabel"],
            action_type=recommendation["actionType"]
        )
    )


class MusicLookup(BaseLookup):
    """Track recommendation from Spotify (client-credentials flow)."""

    name = "Music"
    warning = "Served saved music recommendation while Spotify was unavailable."

    def __init__(
        self,
        client: httpx.AsyncClient,
        client_id: Optional[str] = None,
        client_secret: Optional[str] = None,
        max_attempts: Optional[int] = None
    ):
        super().__init__(client, max_attempts)
        self.client_id = client_id or os.getenv("SPOTIFY_CLIENT_ID")
        self.client_secret = client_secret or os.getenv("SPOTIFY_CLIENT_SECRET")

    async def _get_access_token(self) -> str:
        auth_str = f"{self.client_id}:{self.client_secret}"
        b64_auth = base64.b64encode(auth_str.encode()).decode()
        response = await self._request(
            "POST",
            _provider_urls["spotify_token"],
            headers={
                "Authorization": f"Basic {b64_auth}",
                "Content-Type": "application/x-www-form-urlencoded"
            },
            data={"grant_type": "client_credentials"}
        )
        token = _json_object(response).get("access_token")
        if not token:
            raise LookupFailure("Spotify token response missing access_token")
        return token

    async def fetch(self, mood: str) -> MusicRecommendation:
        features = MOOD_AUDIO_FEATURES[mood]

        if not self.client_id or not self.client_secret:
            raise LookupFailure("Spotify credentials not configured")

        access_token = await self._get_access_token()
        response = await self._request(
            "GET",
            _provider_urls["spotify_recommendations"],
            params={
                "limit": 1,
                "seed_genres": get_value("music_seed_genres"),
                "target_valence": features["valence"],
                "target_energy": features["energy"],
                "min_tempo": features["tempo"]["min"],
                "max_tempo": features["tempo"]["max"],
            },
            headers={"Authorization": f"Bearer {access_token}"}
        )

        tracks = _json_object(response).get("tracks") or []
        if not tracks:
            raise LookupFailure("No tracks found")

        track = tracks[0]
        artists = track.get("artists") or []
        title = track.get("name")
        artist = artists[0].get("name") if artists else None
        spotify_url = (track.get("external_urls") or {}).get("spotify")
        if not title or not artist or not spotify_url:
            raise LookupFailure("Track payload missing name, artist or URL")

        quality = "uplifting" if features["valence"] > UPLIFTING_VALENCE else "calming"
        return MusicRecommendation(
            title=title,
            artist=artist,
            reason=f"Selected for its {quality} qualities to match your mood",
            spotify_url=spotify_url,
            apple_music_url=f"https://music.apple.com/search?term={encode_component(f'{title} {artist}')}"
        )

    def fallback(self, mood: str) -> MusicRecommendation:
        return fallbacks.fallback_music(mood)


class BookLookup(BaseLookup):
    """Book recommendation from the Open Library subject search."""

    name = "Book"
    warning = "Provided saved reading suggestion due to book API issues."

    def __init__(self, client: httpx.AsyncClient, rng: Optional[random.Random] = None, max_attempts: Optional[int] = None):
        super().__init__(client, max_attempts)
        self.rng = rng or random.Random()

    async def fetch(self, mood: str) -> BookRecommendation:
        subject = self.rng.choice(MOOD_BOOK_SUBJECTS[mood])
        response = await self._request(
            "GET",
            _provider_urls["open_library_search"],
            params={"subject": subject, "limit": BOOK_SEARCH_LIMIT, "sort": "rating"}
        )

        min_rating = get_value("book_min_rating")
        docs = _json_object(response).get("docs") or []
        quality_books = [
            doc for doc in docs
            if doc.get("title")
            and doc.get("cover_i")
            and doc.get("author_name")
            and doc.get("ratings_average")
            and doc["ratings_average"] >= min_rating
        ]
        if not quality_books:
            raise LookupFailure("No quality books found")

        book = self.rng.choice(quality_books[:BOOK_PICK_FROM_TOP])
        return BookRecommendation(
            title=book["title"],
            author=book["author_name"][0],
            relevance=f"Recommended for {subject} - rated {book['ratings_average']:.1f}/5",
            amazon_url=f"https://www.amazon.com/s?k={encode_component(book['title'])}",
            cover_url=f"{_provider_urls['open_library_covers']}/{book['cover_i']}-M.jpg"
        )

    def fallback(self, mood: str) -> BookRecommendation:
        return fallbacks.fallback_book(mood)


class QuoteLookup(BaseLookup):
    """Random quote by mood tag from Quotable."""

    name = "Quote"
    warning = "Displayed saved quote due to quote service unavailability."

    async def fetch(self, mood: str) -> Quote:
        response = await self._request(
            "GET",
            _provider_urls["quotable_random"],
            params={"tags": MOOD_QUOTE_TAGS[mood], "maxLength": QUOTE_MAX_LENGTH}
        )

        data = response.json()
        if not isinstance(data, list) or not data:
            raise LookupFailure("No quote found")

        quote = data[0]
        if not isinstance(quote, dict) or not quote.get("content") or not quote.get("author"):
            raise LookupFailure("Quote payload missing content or author")
        return Quote(text=quote["content"], author=quote["author"])

    def fallback(self, mood: str) -> Quote:
        return fallbacks.fallback_quote(mood)


class PlaceLookup(BaseLookup):
    """Nearby place from the Foursquare Places search (needs coordinates and a key)."""

    name = "Place"
    warning = "Provided saved place suggestion due to place lookup failure."

    def __init__(self, client: httpx.AsyncClient, api_key: Optional[str] = None, max_attempts: Optional[int] = None):
        super().__init__(client, max_attempts)
        self.api_key = api_key or os.getenv("FOURSQUARE_API_KEY")

    async def fetch(self, mood: str, latitude: Optional[float] = None, longitude: Optional[float] = None) -> PlaceRecommendation:
        place_data = MOOD_PLACES[mood]
        suggestion = PlaceRecommendation(
            type=place_data["type"],
            reason=place_data["reason"],
            benefits=place_data["benefits"]
        )

        # No location shared: nothing to look up
        if latitude is None or longitude is None:
            return suggestion

        if not self.api_key:
            raise LookupFailure("Foursquare API key not configured")

        response = await self._request(
            "GET",
            _provider_urls["foursquare_search"],
            params={
                "categories": place_data["categories"],
                "ll": f"{latitude},{longitude}",
                "radius": get_value("place_radius_meters"),
                "limit": 1,
                "sort": "POPULARITY",
            },
            headers={"Authorization": self.api_key, "Accept": "application/json"}
        )

        results = _json_object(response).get("results") or []
        if not results:
            raise LookupFailure("No places found")

        place = results[0]
        location = place.get("location") or {}
        coordinates = None
        if location.get("lat") is not None and location.get("lng") is not None:
            coordinates = Coordinates(lat=location["lat"], lng=location["lng"])

        return PlaceRecommendation(
            type=place.get("name") or place_data["type"],
            reason=place_data["reason"],
            benefits=place_data["benefits"],
            address=location.get("formatted_address"),
            coordinates=coordinates
        )

    def fallback(self, mood: str) -> PlaceRecommendation:
        return fallbacks.fallback_place(mood)
