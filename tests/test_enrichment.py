from newsmerge.config import EnrichmentConfig
from newsmerge.llm import MockLLMProvider
from newsmerge.models import ArticleCategory, UrgencyLevel
from newsmerge.pipeline import ArticleEnricher

from tests.conftest import BREAKING_KEYWORDS, make_raw_article


def enricher_with(responses=None, config=None):
    llm = MockLLMProvider(responses)
    return ArticleEnricher(llm, BREAKING_KEYWORDS, config), llm


# ---------------------------------------------------------------------------
# Categorization and entities
# ---------------------------------------------------------------------------

class TestCategorize:
    def test_uses_capability_result(self):
        enricher, llm = enricher_with(
            {"categorize": {"mainCategory": "économie", "secondaryCategories": ["politics"], "confidence": 0.9}}
        )
        article = make_raw_article("Budget adopte")

        result = enricher.categorize(article)

        assert result.categories == [ArticleCategory.ECONOMY, ArticleCategory.POLITICS]
        assert llm.calls_for("categorize")[0]["source"] == "Info241"

    def test_failure_defaults_to_society(self):
        enricher, _ = enricher_with({"categorize": TimeoutError("timed out")})

        result = enricher.categorize(make_raw_article("Budget adopte"))

        assert result.main_category == ArticleCategory.SOCIETY
        assert result.confidence == 0.5

    def test_content_is_truncated(self):
        enricher, llm = enricher_with(
            {"categorize": {"mainCategory": "sport"}},
            EnrichmentConfig(max_article_length=300),
        )

        enricher.categorize(make_raw_article("Panthers", content="y" * 1000))

        assert len(llm.calls_for("categorize")[0]["content"]) == 300


class TestExtractEntities:
    def test_maps_locations_to_places(self):
        enricher, _ = enricher_with(
            {
                "extract_entities": {
                    "people": [{"name": "Brice Oligui Nguema", "title": "President"}],
                    "organizations": ["Assemblée nationale"],
                    "locations": [{"name": "Libreville", "type": "city"}],
                    "keywords": ["budget"],
                }
            }
        )

        entities = enricher.extract_entities(make_raw_article("Budget adopte"))

        assert entities.people == ["Brice Oligui Nguema"]
        assert entities.places == ["Libreville"]
        assert entities.keywords == ["budget"]

    def test_failure_gives_empty_entities(self):
        enricher, _ = enricher_with()

        entities = enricher.extract_entities(make_raw_article("Budget adopte"))

        assert entities.people == [] and entities.places == [] and entities.keywords == []


# ---------------------------------------------------------------------------
# Rewrite
# ---------------------------------------------------------------------------

class TestRewrite:
    def test_passes_category_value(self):
        enricher, llm = enricher_with({"rewrite": {"optimizedTitle": "Titre", "shortVersion": "Court"}})

        enricher.rewrite(make_raw_article("Budget adopte"), ArticleCategory.ECONOMY)

        assert llm.calls_for("rewrite")[0]["category"] == "economy"

    def test_missing_parts_come_from_original(self):
        enricher, _ = enricher_with({"rewrite": {"shortVersion": "Court"}})
        article = make_raw_article("Budget adopte", content="z" * 6000)

        result = enricher.rewrite(article, ArticleCategory.ECONOMY)

        assert result.optimized_title == "Budget adopte"
        assert result.short_version == "Court"
        assert result.medium_version == "z" * 800
        assert result.long_version == "z" * 5000

    def test_failure_falls_back_entirely(self):
        enricher, _ = enricher_with({"rewrite": ValueError("bad")})
        article = make_raw_article("Budget adopte", content="w" * 1000)

        result = enricher.rewrite(article, ArticleCategory.ECONOMY)

        assert result.optimized_title == "Budget adopte"
        assert result.short_version == "w" * 200
        assert result.medium_version == "w" * 800
        assert result.long_version == "w" * 1000
        assert result.suggested_tags == []


# ---------------------------------------------------------------------------
# Breaking news
# ---------------------------------------------------------------------------

class TestScoreBreaking:
    def test_keyword_match_is_case_insensitive(self):
        enricher, _ = enricher_with()
        assert enricher.has_breaking_keyword("ALERTE: crue à Libreville")
        assert not enricher.has_breaking_keyword("Budget adopte")

    def test_no_keyword_skips_the_call(self):
        enricher, llm = enricher_with({"score_breaking_news": {"isBreakingNews": True, "urgencyLevel": "HIGH"}})

        result = enricher.score_breaking(make_raw_article("Budget adopte"), ArticleCategory.ECONOMY)

        assert result.is_breaking_news is False
        assert result.urgency_level == UrgencyLevel.NORMAL
        assert result.confidence == 0.95
        assert llm.calls == []

    def test_keyword_triggers_scoring(self):
        enricher, llm = enricher_with(
            {"score_breaking_news": {"isBreakingNews": True, "urgencyLevel": "critical", "confidence": 0.9}}
        )
        article = make_raw_article("Décès du ministre de la Santé")

        result = enricher.score_breaking(article, ArticleCategory.HEALTH)

        assert result.is_breaking_news is True
        assert result.urgency_level == UrgencyLevel.CRITICAL
        call = llm.calls_for("score_breaking_news")[0]
        assert call["category"] == "health"
        assert call["published_at"] == article.published_at.isoformat()

    def test_scoring_failure_is_not_breaking(self):
        enricher, _ = enricher_with()

        result = enricher.score_breaking(make_raw_article("Urgent: coupure d'eau"), ArticleCategory.SOCIETY)

        assert result.is_breaking_news is False
        assert result.confidence == 0.5
