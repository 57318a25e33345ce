"""API Constants

Brand guidelines, pricing and provider defaults shared across the pipeline.
"""

# Brand guidelines rendered into the system prompt
BRAND_GUIDELINES: dict[str, object] = {
    "business_model": {
        "type": "Ticket Aggregation Platform",
        "description": "We aggregate tickets from multiple sources to provide the best selection and prices",
        "emphasis": "We don't sell tickets directly - we help fans find the best available options",
    },
    "tone": [
        "Write as fellow fans, not corporate marketers",
        "Be passionate and knowledgeable about events",
        "Position as trusted experts who understand fan needs",
        "Use active voice throughout",
        "Maintain enthusiasm without excessive exclamation points",
    ],
    "format": {
        "first_mention": "Bold the first mention of main keywords",
        "headings": "Use sentence case for all headings",
        "evergreen": "Avoid dates, prices, or time-sensitive information",
    },
    "avoid": [
        "Excessive exclamation points (max 1-2 per description)",
        "Generic marketing speak",
        "Direct selling language",
        "Time-sensitive information",
        "Specific prices or dates",
    ],
    "include": [
        "Fan perspective and emotions",
        "Event atmosphere descriptions",
        "Venue information when relevant",
        "Artist/team history and significance",
        "Ticket-buying guidance",
    ],
}

DEFAULT_MIN_WORDS = 350
DEFAULT_MAX_WORDS = 500
DEFAULT_BRAND_DOMAIN = "seatpick.com"

# Batch policy
MAX_PAGES_PER_BATCH = 10

# Cost rates (USD per 1K tokens)
DEFAULT_COST_RATES: dict[str, dict[str, float]] = {
    "gpt-4o": {"input": 0.0025, "output": 0.01},
    "gpt-4o-mini": {"input": 0.00015, "output": 0.0006},
    "gpt-4-turbo": {"input": 0.01, "output": 0.03},
    "gpt-4-turbo-preview": {"input": 0.01, "output": 0.03},
    "gpt-4": {"input": 0.03, "output": 0.06},
    "gpt-3.5-turbo": {"input": 0.001, "output": 0.002},
    "gemini-2.5-pro": {"input": 0.00125, "output": 0.01},
    "gemini-2.5-flash": {"input": 0.0003, "output": 0.0025},
    "gemini-1.5-pro": {"input": 0.00125, "output": 0.00375},
    "gemini-1.5-flash": {"input": 0.000075, "output": 0.0003},
}

# Generation request defaults
DESCRIPTION_MAX_TOKENS = 800
DESCRIPTION_TEMPERATURE = 0.7
ANALYSIS_MAX_TOKENS = 400
ANALYSIS_TEMPERATURE = 0.3

# DataForSEO endpoints
DATAFORSEO_ENDPOINTS: dict[str, str] = {
    "serp": "/v3/serp/google/organic/live/advanced",
    "search_volume_live": "/v3/keywords_data/google_ads/search_volume/live",
    "search_volume_task_post": "/v3/keywords_data/google_ads/search_volume/task_post",
    "search_volume_task_get": "/v3/keywords_data/google_ads/search_volume/task_get",
}

# Language codes accepted by DataForSEO, keyed by prompt-facing name
LANGUAGE_CODES: dict[str, str] = {
    "english": "en",
    "spanish": "es",
    "french": "fr",
    "german": "de",
    "italian": "it",
    "portuguese": "pt",
    "dutch": "nl",
    "japanese": "ja",
}

# Placeholder values shipped in the sample .env file
PLACEHOLDER_CREDENTIALS: frozenset[str] = frozenset(
    {
        "your_openai_api_key_here",
        "your_gemini_api_key_here",
        "your_dataforseo_login_here",
        "your_dataforseo_password_here",
    }
)
