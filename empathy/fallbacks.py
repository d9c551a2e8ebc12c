"""
Static Fallback Content

Curated, reviewed copy served whenever a live lookup is unavailable.

EMPATHY_RESPONSES holds one complete recommendation set per mood and is the
floor for every lookup and for whole-pipeline failure. The smaller per-lookup
tables hold the copy each lookup prefers for its own fallback; a mood missing
from one of them uses that mood's EMPATHY_RESPONSES entry. Tables are never
mutated: every accessor builds a fresh model.
"""

from empathy.models import (
    RecommendationSet,
    EmpathyMessage,
    MusicRecommendation,
    BookRecommendation,
    Quote,
    PlaceRecommendation,
)
from empathy.mood_resolver import ensure_valid_mood

EMPATHY_RESPONSES = {
    "anxious": {
        "empathy_message": "I understand you're experiencing anxiety. This is a common response to stress and uncertainty, and it's important that you're seeking support. Your willingness to engage with these feelings is a positive step toward managing them.",
        "recommendation": {
            "title": "Diaphragmatic Breathing (Evidence-Based Anxiety Reduction)",
            "description": "Practice diaphragmatic breathing: Inhale slowly for 4 counts, hold for 7, exhale for 8. Repeat for 5 minutes. This technique activates the parasympathetic nervous system and has been shown to reduce anxiety symptoms in clinical trials.",
            "action_label": "Begin breathing exercise",
            "action_type": "breathing",
        },
        "quote": {
            "text": "Between stimulus and response there is a space. In that space is our power to choose our response.",
            "author": "Viktor E. Frankl",
        },
        "music": {
            "title": "Weightless",
            "artist": "Marconi Union",
            "reason": "Clinical studies show this composition can reduce anxiety levels through carefully designed harmonies and rhythmic patterns.",
            "spotify_url": "https://open.spotify.com/search/Weightless%20Marconi%20Union",
            "apple_music_url": "https://music.apple.com/search?term=Weightless%20Marconi%20Union",
        },
        "book": {
            "title": "The Anxiety and Phobia Workbook",
            "author": "Edmund J. Bourne, PhD",
            "relevance": "Evidence-based CBT and mindfulness techniques for managing anxiety disorders, widely used in clinical practice.",
            "amazon_url": "https://www.amazon.com/s?k=The+Anxiety+and+Phobia+Workbook",
        },
        "place": {
            "type": "A quiet natural space (park or botanical garden)",
            "reason": "Nature-based therapy (ecotherapy) has demonstrated efficacy in reducing cortisol and anxiety symptoms",
            "benefits": "Natural environments support nervous system regulation and provide a grounding sensory experience.",
        },
    },
    "happy": {
        "empathy_message": "Your positive energy is wonderful! It's beautiful that you're taking time to recognize and appreciate these moments. Savoring joy amplifies its benefits.",
        "recommendation": {
            "title": "Gratitude Journaling",
            "description": "Capture this moment! Write down 3 specific things that made you feel good today. Research shows this practice increases happiness by 25%.",
            "action_label": "Open journal",
            "action_type": "journal",
        },
        "quote": {
            "text": "Happiness is not by chance, but by choice.",
            "author": "Jim Rohn",
        },
        "music": {
            "title": "Here Comes the Sun",
            "artist": "The Beatles",
            "reason": "Uplifting melody and lyrics that match and amplify positive energy.",
            "spotify_url": "https://open.spotify.com/search/Here%20Comes%20the%20Sun%20Beatles",
            "apple_music_url": "https://music.apple.com/search?term=Here%20Comes%20the%20Sun%20Beatles",
        },
        "book": {
            "title": "The Book of Joy",
            "author": "Dalai Lama & Desmond Tutu",
            "relevance": "Deepens appreciation for joy and teaches how to cultivate lasting happiness.",
            "amazon_url": "https://www.amazon.com/s?k=The+Book+of+Joy",
        },
        "place": {
            "type": "A hilltop viewpoint",
            "reason": "Expansive views amplify positive emotions",
            "benefits": "Wide open spaces and elevated perspectives enhance feelings of possibility and freedom.",
        },
    },
    "sad": {
        "empathy_message": "I hear that you're experiencing sadness. This is a valid emotional response, and it's important to acknowledge these feelings rather than suppress them. Your engagement in this process demonstrates self-awareness and a willingness to work through difficult emotions.",
        "recommendation": {
            "title": "Behavioral Activation (Depression Treatment)",
            "description": "Engage in one small, meaningful activity despite low motivation. Behavioral activation is an evidence-based treatment for depression that helps break the cycle of withdrawal and sadness. Even a brief social contact or pleasant activity can begin to shift mood.",
            "action_label": "View suggested activities",
            "action_type": "contact",
        },
        "quote": {
            "text": "The only way out is through.",
            "author": "Robert Frost",
        },
        "music": {
            "title": "The Night We Met",
            "artist": "Lord Huron",
            "reason": "Music therapy research suggests that validating emotional experiences through music can provide cathartic release.",
            "spotify_url": "https://open.spotify.com/search/The%20Night%20We%20Met%20Lord%20Huron",
            "apple_music_url": "https://music.apple.com/search?term=The%20Night%20We%20Met%20Lord%20Huron",
        },
        "book": {
            "title": "Feeling Good: The New Mood Therapy",
            "author": "David D. Burns, MD",
            "relevance": "Evidence-based cognitive behavioral techniques for managing depression, based on clinical research.",
            "amazon_url": "https://www.amazon.com/s?k=Feeling+Good+David+Burns",
        },
        "place": {
            "type": "A well-lit communal space (café or library)",
            "reason": "Gentle social exposure combats isolation, a key maintaining factor in depression",
            "benefits": "Low-pressure social environment that provides structure and human connection without demanding interaction.",
        },
    },
    "tired": {
        "empathy_message": "Rest is productive too. Your body and mind are telling you something important—listen to them with kindness. Taking a break is not giving up.",
        "recommendation": {
            "title": "Power Rest",
            "description": "Take a 15-minute power nap or step outside for fresh air and sunlight. Even brief rest can restore 40% of your energy.",
            "action_label": "Set timer",
            "action_type": "timer",
        },
        "quote": {
            "text": "Almost everything will work again if you unplug it for a few minutes, including you.",
            "author": "Anne Lamott",
        },
        "music": {
            "title": "Clair de Lune",
            "artist": "Debussy",
            "reason": "Gentle, restorative classical piece that promotes relaxation without inducing sleep.",
            "spotify_url": "https://open.spotify.com/search/Clair%20de%20Lune%20Debussy",
            "apple_music_url": "https://music.apple.com/search?term=Clair%20de%20Lune%20Debussy",
        },
        "book": {
            "title": "Rest",
            "author": "Alex Soojung-Kim Pang",
            "relevance": "The science of productive rest and why downtime is essential for creativity.",
            "amazon_url": "https://www.amazon.com/s?k=Rest+Alex+Soojung-Kim+Pang",
        },
        "place": {
            "type": "A quiet park bench under trees",
            "reason": "Restorative environment with nature sounds",
            "benefits": "Dappled sunlight, bird songs, and gentle breeze provide sensory restoration.",
        },
    },
    "stressed": {
        "empathy_message": "You're experiencing stress, which indicates your system is responding to perceived demands or threats. Recognizing this physiological response is an important first step toward implementing effective stress management strategies.",
        "recommendation": {
            "title": "Progressive Muscle Relaxation (PMR)",
            "description": "Practice PMR: Systematically tense and release each muscle group for 5-7 seconds, progressing from feet to head. This evidence-based technique reduces physiological arousal and has been shown effective in stress reduction across clinical populations.",
            "action_label": "Begin PMR exercise",
            "action_type": "breathing",
        },
        "quote": {
            "text": "Between stimulus and response there is a space. In that space is our power to choose our response.",
            "author": "Viktor E. Frankl",
        },
        "music": {
            "title": "Breathe Me",
            "artist": "Sia",
            "reason": "Emotionally resonant music can facilitate emotional processing and self-compassion.",
            "spotify_url": "https://open.spotify.com/search/Breathe%20Me%20Sia",
            "apple_music_url": "https://music.apple.com/search?term=Breathe%20Me%20Sia",
        },
        "book": {
            "title": "The Relaxation and Stress Reduction Workbook",
            "author": "Martha Davis, PhD",
            "relevance": "Comprehensive evidence-based techniques for stress management, widely used in clinical practice.",
            "amazon_url": "https://www.amazon.com/s?k=Relaxation+Stress+Reduction+Workbook",
        },
        "place": {
            "type": "A natural water setting (lake, ocean, or stream)",
            "reason": "Blue space exposure has been shown to reduce physiological markers of stress including cortisol",
            "benefits": "Rhythmic water sounds and visual patterns promote parasympathetic nervous system activation.",
        },
    },
    "excited": {
        "empathy_message": "Your enthusiasm is contagious! This energy is a gift—channel it into something meaningful. Excitement is your mind's way of saying you're aligned with your purpose.",
        "recommendation": {
            "title": "Creative Expression",
            "description": "Harness this energy into a creative project or physical activity. Movement and creation amplify positive momentum.",
            "action_label": "Explore ideas",
            "action_type": "journal",
        },
        "quote": {
            "text": "The only way to do great work is to love what you do.",
            "author": "Steve Jobs",
        },
        "music": {
            "title": "Good Life",
            "artist": "OneRepublic",
            "reason": "Amplifies positive momentum and celebrates the joy of living fully.",
            "spotify_url": "https://open.spotify.com/search/Good%20Life%20OneRepublic",
            "apple_music_url": "https://music.apple.com/search?term=Good%20Life%20OneRepublic",
        },
        "book": {
            "title": "Big Magic",
            "author": "Elizabeth Gilbert",
            "relevance": "How to harness creative energy and live a life driven by curiosity and passion.",
            "amazon_url": "https://www.amazon.com/s?k=Big+Magic+Elizabeth+Gilbert",
        },
        "place": {
            "type": "An art museum or gallery",
            "reason": "Channel energy into inspiration and discovery",
            "benefits": "Visual stimulation, creative atmosphere, and space to explore new perspectives.",
        },
    },
}

MUSIC_FALLBACKS = {
    "anxious": {
        "title": "Weightless",
        "artist": "Marconi Union",
        "reason": "Scientifically proven to reduce anxiety by 65%",
        "spotify_url": "https://open.spotify.com/search/Weightless%20Marconi%20Union",
        "apple_music_url": "https://music.apple.com/search?term=Weightless%20Marconi%20Union",
    },
    "happy": {
        "title": "Here Comes the Sun",
        "artist": "The Beatles",
        "reason": "Uplifting melody that amplifies positive energy",
        "spotify_url": "https://open.spotify.com/search/Here%20Comes%20the%20Sun%20Beatles",
        "apple_music_url": "https://music.apple.com/search?term=Here%20Comes%20the%20Sun%20Beatles",
    },
}

BOOK_FALLBACKS = {
    "anxious": {
        "title": "The Anxiety and Phobia Workbook",
        "author": "Edmund Bourne",
        "relevance": "Practical CBT techniques for managing anxiety",
        "amazon_url": "https://www.amazon.com/s?k=The+Anxiety+and+Phobia+Workbook",
    },
    "happy": {
        "title": "The Book of Joy",
        "author": "Dalai Lama",
        "relevance": "Deepens appreciation for joy and happiness",
        "amazon_url": "https://www.amazon.com/s?k=The+Book+of+Joy",
    },
}

QUOTE_FALLBACKS = {
    "anxious": {
        "text": "You are braver than you believe, stronger than you seem, and smarter than you think.",
        "author": "A.A. Milne",
    },
    "happy": {
        "text": "Happiness is not by chance, but by choice.",
        "author": "Jim Rohn",
    },
    "sad": {
        "text": "The wound is the place where the light enters you.",
        "author": "Rumi",
    },
    "tired": {
        "text": "Almost everything will work again if you unplug it for a few minutes, including you.",
        "author": "Anne Lamott",
    },
    "stressed": {
        "text": "You can't calm the storm, so stop trying. What you can do is calm yourself. The storm will pass.",
        "author": "Timber Hawkeye",
    },
    "excited": {
        "text": "The only way to do great work is to love what you do.",
        "author": "Steve Jobs",
    },
}

PLACE_FALLBACKS = {
    "anxious": {
        "type": "A botanical garden",
        "reason": "Nature exposure reduces cortisol by 21%",
        "benefits": "Green spaces calm the nervous system",
    },
    "happy": {
        "type": "A hilltop viewpoint",
        "reason": "Expansive views amplify positive emotions",
        "benefits": "Height enhances feelings of possibility",
    },
}


def _entry(mood: str, table: dict, field: str) -> dict:
    mood = ensure_valid_mood(mood)
    if mood in table:
        return table[mood]
    return EMPATHY_RESPONSES[mood][field]


def fallback_recommendation_set(mood: str) -> RecommendationSet:
    """Complete static recommendation set for a mood."""
    return RecommendationSet(**EMPATHY_RESPONSES[ensure_valid_mood(mood)])


def fallback_empathy_message(mood: str) -> EmpathyMessage:
    entry = EMPATHY_RESPONSES[ensure_valid_mood(mood)]
    return EmpathyMessage(empathy_message=entry["empathy_message"], recommendation=entry["recommendation"])


def fallback_music(mood: str) -> MusicRecommendation:
    return MusicRecommendation(**_entry(mood, MUSIC_FALLBACKS, "music"))


def fallback_book(mood: str) -> BookRecommendation:
    return BookRecommendation(**_entry(mood, BOOK_FALLBACKS, "book"))


def fallback_quote(mood: str) -> Quote:
    return Quote(**_entry(mood, QUOTE_FALLBACKS, "quote"))


def fallback_place(mood: str) -> PlaceRecommendation:
    return PlaceRecommendation(**_entry(mood, PLACE_FALLBACKS, "place"))
