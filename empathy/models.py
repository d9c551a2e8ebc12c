"""
Pydantic Models for Empathy Service

This module defines request/response models and internal data structures
for the mood resolution and recommendation service.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Annotated, Optional, List, Literal


# Closed set of mood categories, in tie-break order
MOOD_CATEGORIES = ["anxious", "happy", "sad", "tired", "stressed", "excited"]
DEFAULT_MOOD = "tired"

MoodCategory = Literal["anxious", "happy", "sad", "tired", "stressed", "excited"]
ActionType = Literal["breathing", "journal", "timer", "contact"]
SourceType = Literal["text", "emoji", "voice", "photo", "history"]


# =============================================================================
# Therapeutic questionnaire data
# =============================================================================

class SymptomRatings(BaseModel):
    """Self-reported symptom severity over the past two weeks (0-5)."""
    anxiety: Optional[float] = Field(default=None, ge=0, le=5)
    sadness: Optional[float] = Field(default=None, ge=0, le=5)
    stress: Optional[float] = Field(default=None, ge=0, le=5)
    loneliness: Optional[float] = Field(default=None, ge=0, le=5)
    suicide_trends: Optional[float] = Field(default=None, ge=0, le=5)

    def has_any(self) -> bool:
        return any(value is not None for value in self.model_dump().values())


class TherapyHistory(BaseModel):
    has_previous_therapy: Optional[bool] = None
    duration: Optional[str] = None
    type: Optional[str] = None


# =============================================================================
# Core input
# =============================================================================

class EmpathyInput(BaseModel):
    """
    Normalized input consumed by the recommendation orchestrator.

    Every field is optional except emotions; detected_mood may be any string
    and is coerced to one of MOOD_CATEGORIES before use.
    """
    model_config = ConfigDict(frozen=True)

    mood_score: Optional[float] = None
    detected_mood: Optional[str] = None
    emotions: List[str] = Field(default_factory=list)
    energy_level: Optional[float] = None
    context: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    voice_transcript: Optional[str] = None
    image_mood: Optional[str] = None
    image_confidence: Optional[float] = None
    symptom_ratings: Optional[SymptomRatings] = None
    therapy_history: Optional[TherapyHistory] = None
    therapeutic_relationship_importance: Optional[float] = None
    patient_readiness: Optional[float] = None
    presenting_problem: Optional[str] = None


# =============================================================================
# Recommendation outputs
# =============================================================================

class AnalysisSource(BaseModel):
    """Attribution of one input channel to the analysis (weights sum to 100)."""
    type: SourceType
    label: str
    weight: float


class Recommendation(BaseModel):
    title: str
    description: str
    action_label: str
    action_type: ActionType


class EmpathyMessage(BaseModel):
    """Output of the empathy-message lookup."""
    empathy_message: str
    recommendation: Recommendation


class Quote(BaseModel):
    text: str
    author: str


class MusicRecommendation(BaseModel):
    title: str
    artist: str
    reason: str
    spotify_url: str
    apple_music_url: str


class BookRecommendation(BaseModel):
    title: str
    author: str
    relevance: str
    amazon_url: str
    cover_url: Optional[str] = None


class Coordinates(BaseModel):
    lat: float
    lng: float


class PlaceRecommendation(BaseModel):
    type: str
    reason: str
    benefits: str
    address: Optional[str] = None
    coordinates: Optional[Coordinates] = None


class RecommendationSet(BaseModel):
    """Bundle of the five enrichment outputs."""
    empathy_message: str
    recommendation: Recommendation
    quote: Quote
    music: MusicRecommendation
    book: BookRecommendation
    place: PlaceRecommendation


class EmpathyResponse(RecommendationSet):
    """Response model for the recommendations endpoint."""
    detected_mood: MoodCategory
    confidence: int = Field(ge=45, le=95, description="Confidence in the mood read (45-95)")
    analysis_summary: str
    analysis_sources: List[AnalysisSource] = Field(default_factory=list)
    warnings: Optional[List[str]] = Field(default=None, description="Present only when a lookup fell back")


# =============================================================================
# Request models (external payload)
# =============================================================================

EmotionTag = Annotated[str, Field(max_length=50)]
TriggerTag = Annotated[str, Field(max_length=100)]
RecentMood = Annotated[float, Field(ge=1, le=10)]


class VoiceInsights(BaseModel):
    """Already-computed analysis of a voice note."""
    transcript: str = Field(..., max_length=2000)
    mood_label: Optional[str] = Field(default=None, max_length=50)
    mood_score: Optional[float] = Field(default=None, ge=1, le=10)
    energy_level: Optional[float] = Field(default=None, ge=1, le=10)
    emotions: Optional[List[EmotionTag]] = Field(default=None, max_length=10)
    summary: Optional[str] = Field(default=None, max_length=500)


class ImageInsights(BaseModel):
    """Already-computed analysis of a photo."""
    mood_label: Optional[str] = Field(default=None, max_length=50)
    confidence: Optional[float] = Field(default=None, ge=0, le=100)
    emotions: Optional[List[EmotionTag]] = Field(default=None, max_length=10)
    summary: Optional[str] = Field(default=None, max_length=500)


class EmpathyRequest(BaseModel):
    """Request model for the recommendations endpoint."""
    mood: Optional[str] = Field(default=None, min_length=1, max_length=50)
    context: Optional[str] = Field(default=None, max_length=2000)
    mood_score: Optional[float] = Field(default=None, ge=1, le=10)
    emotions: Optional[List[EmotionTag]] = Field(default=None, max_length=10)
    energy_level: Optional[float] = Field(default=None, ge=1, le=10)
    triggers: Optional[List[TriggerTag]] = Field(default=None, max_length=20)
    recent_moods: Optional[List[RecentMood]] = Field(default=None, max_length=30)
    voice_insights: Optional[VoiceInsights] = None
    image_insights: Optional[ImageInsights] = None
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)
    symptom_ratings: Optional[SymptomRatings] = None
    therapy_history: Optional[TherapyHistory] = None
    therapeutic_relationship_importance: Optional[float] = Field(default=None, ge=1, le=5)
    patient_readiness: Optional[float] = Field(default=None, ge=1, le=5)
    presenting_problem: Optional[str] = Field(default=None, max_length=1000)


class TextAnalysisRequest(BaseModel):
    text: str = Field(..., min_length=1, max_length=4000)


class TextAnalysis(BaseModel):
    """Quick mood read of a short text reflection."""
    mood_label: MoodCategory
    mood_score: float
    energy_level: float
    emotions: List[str] = Field(default_factory=list)
    summary: str
    confidence: int = Field(ge=0, le=100)


# =============================================================================
# Single lookup routes
# =============================================================================

# Mood used by the single lookup routes when the request names none
LOOKUP_DEFAULT_MOOD = "anxious"


class LookupRequest(BaseModel):
    """Request body for one enrichment lookup; unknown moods are coerced."""
    detected_mood: str = Field(default=LOOKUP_DEFAULT_MOOD, min_length=1, max_length=50)
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)


class MusicLookupResponse(MusicRecommendation):
    warnings: Optional[List[str]] = None


class BookLookupResponse(BookRecommendation):
    warnings: Optional[List[str]] = None


class QuoteLookupResponse(Quote):
    warnings: Optional[List[str]] = None


class PlaceLookupResponse(PlaceRecommendation):
    warnings: Optional[List[str]] = None
