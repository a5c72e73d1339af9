"""Closed value sets shared by the store, the capabilities and the pipeline."""

from enum import Enum


class ArticleCategory(str, Enum):
    """Editorial categories a processed article can carry."""

    POLITICS = "politics"
    ECONOMY = "economy"
    SOCIETY = "society"
    SPORT = "sport"
    CULTURE = "culture"
    HEALTH = "health"
    EDUCATION = "education"
    TECHNOLOGY = "technology"
    INTERNATIONAL = "international"
    ENVIRONMENT = "environment"


DEFAULT_CATEGORY = ArticleCategory.SOCIETY

CATEGORY_SYNONYMS = {
    "politique": ArticleCategory.POLITICS,
    "political": ArticleCategory.POLITICS,
    "economie": ArticleCategory.ECONOMY,
    "économie": ArticleCategory.ECONOMY,
    "economics": ArticleCategory.ECONOMY,
    "business": ArticleCategory.ECONOMY,
    "societe": ArticleCategory.SOCIETY,
    "société": ArticleCategory.SOCIETY,
    "sports": ArticleCategory.SPORT,
    "sante": ArticleCategory.HEALTH,
    "santé": ArticleCategory.HEALTH,
    "éducation": ArticleCategory.EDUCATION,
    "technologie": ArticleCategory.TECHNOLOGY,
    "tech": ArticleCategory.TECHNOLOGY,
    "world": ArticleCategory.INTERNATIONAL,
    "environnement": ArticleCategory.ENVIRONMENT,
}


def normalize_category(value: object) -> ArticleCategory:
    """Map a free-text category onto the closed set, defaulting to society."""
    if isinstance(value, ArticleCategory):
        return value
    if not isinstance(value, str):
        return DEFAULT_CATEGORY

    cleaned = value.strip().lower()
    try:
        return ArticleCategory(cleaned)
    except ValueError:
        return CATEGORY_SYNONYMS.get(cleaned, DEFAULT_CATEGORY)


class ReliabilityTier(str, Enum):
    """Static trust ranking assigned per source."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        """Sort key, most reliable first."""
        return {"high": 0, "medium": 1, "low": 2}[self.value]


class UrgencyLevel(str, Enum):
    """Breaking-news urgency tiers."""

    CRITICAL = "CRITICAL"
    HIGH = "HIGH"
    NORMAL = "NORMAL"
    LOW = "LOW"


class Recommendation(str, Enum):
    """What to do with a new article relative to earlier coverage."""

    SKIP = "SKIP"
    MERGE = "MERGE"
    UPDATE = "UPDATE"
    SEPARATE = "SEPARATE"
