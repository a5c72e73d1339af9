import pytest
from pydantic import ValidationError

from newsmerge.llm import (
    BreakingNewsResult,
    CategorizationResult,
    DuplicateJudgment,
    EntityExtractionResult,
    SynthesisResult,
    parse_json_response,
)
from newsmerge.models import ArticleCategory, Recommendation, UrgencyLevel


# ---------------------------------------------------------------------------
# parse_json_response
# ---------------------------------------------------------------------------

class TestParseJsonResponse:
    def test_plain_json(self):
        assert parse_json_response('{"a": 1}') == {"a": 1}

    def test_markdown_fence(self):
        assert parse_json_response('```json\n{"a": 1}\n```') == {"a": 1}

    def test_prose_around_object(self):
        assert parse_json_response('Here you go: {"a": {"b": 2}} Thanks!') == {"a": {"b": 2}}

    def test_no_object_raises(self):
        with pytest.raises(ValueError):
            parse_json_response("I cannot help with that")

    def test_broken_object_raises(self):
        with pytest.raises(ValueError):
            parse_json_response('{"a": 1,')


# ---------------------------------------------------------------------------
# decode models
# ---------------------------------------------------------------------------

class TestCategorizationResult:
    def test_french_synonyms_are_mapped(self):
        result = CategorizationResult.model_validate(
            {"mainCategory": "Économie", "secondaryCategories": ["politique", "sante", "sport"], "confidence": 0.9}
        )
        assert result.main_category == ArticleCategory.ECONOMY
        assert result.secondary_categories == [ArticleCategory.POLITICS, ArticleCategory.HEALTH]

    def test_unknown_category_becomes_society(self):
        result = CategorizationResult.model_validate({"mainCategory": "faits divers"})
        assert result.main_category == ArticleCategory.SOCIETY

    def test_confidence_is_clamped(self):
        assert CategorizationResult.model_validate({"confidence": 3}).confidence == 1.0
        assert CategorizationResult.model_validate({"confidence": -1}).confidence == 0.0

    def test_categories_lists_main_first_without_repeats(self):
        result = CategorizationResult(
            main_category=ArticleCategory.SPORT,
            secondary_categories=[ArticleCategory.SPORT, ArticleCategory.CULTURE],
        )
        assert result.categories == [ArticleCategory.SPORT, ArticleCategory.CULTURE]


class TestEntityExtractionResult:
    def test_accepts_objects_and_strings(self):
        result = EntityExtractionResult.model_validate(
            {
                "people": [{"name": "Brice Oligui Nguema", "title": "Président"}, "Raymond Ndong Sima"],
                "organizations": [{"name": "CTRI"}],
                "locations": [{"name": "Libreville"}, {"type": "ville"}],
                "keywords": ["transition"],
            }
        )
        entities = result.to_entities()
        assert entities.people == ["Brice Oligui Nguema", "Raymond Ndong Sima"]
        assert entities.organizations == ["CTRI"]
        assert entities.places == ["Libreville"]
        assert entities.keywords == ["transition"]


class TestDuplicateJudgment:
    def test_scores_are_clamped(self):
        judgment = DuplicateJudgment.model_validate({"similarityScore": 1.7, "confidence": -0.2})
        assert judgment.similarity_score == 1.0
        assert judgment.confidence == 0.0

    def test_unknown_recommendation_is_separate(self):
        judgment = DuplicateJudgment.model_validate({"recommendation": "FUSIONNER"})
        assert judgment.recommendation == Recommendation.SEPARATE

    def test_recommendation_case_is_ignored(self):
        assert DuplicateJudgment.model_validate({"recommendation": "merge"}).recommendation == Recommendation.MERGE

    def test_non_integer_ids_are_dropped(self):
        judgment = DuplicateJudgment.model_validate({"matchingArticleIds": ["12", 15, "abc", None]})
        assert judgment.matching_article_ids == [12, 15]

    def test_single_id_outside_a_list(self):
        assert DuplicateJudgment.model_validate({"matchingArticleIds": "12"}).matching_article_ids == [12]
        assert DuplicateJudgment.model_validate({"matchingArticleIds": 7}).matching_article_ids == [7]

    def test_non_numeric_score_is_rejected(self):
        with pytest.raises(ValidationError):
            DuplicateJudgment.model_validate({"similarityScore": "high"})


class TestSynthesisResult:
    def test_defaults(self):
        result = SynthesisResult.model_validate({"synthesizedTitle": "Budget 2026"})
        assert result.factual_consensus == 0.8
        assert result.confidence == 0.7
        assert result.contradictions == []

    def test_title_is_required(self):
        with pytest.raises(ValidationError):
            SynthesisResult.model_validate({"synthesizedShort": "..."})

    def test_contradictions_decode(self):
        result = SynthesisResult.model_validate(
            {
                "synthesizedTitle": "Manifestation",
                "contradictions": [
                    {
                        "topic": "Participants",
                        "sources": [{"name": "A", "value": "500"}, {"name": "B", "value": "800"}],
                        "resolution": "Both estimates reported",
                    }
                ],
            }
        )
        assert result.contradictions[0].sources[1].value == "800"

    def test_numeric_contradiction_values_become_text(self):
        result = SynthesisResult.model_validate(
            {
                "synthesizedTitle": "Manifestation",
                "contradictions": [
                    {"topic": "Participants", "sources": [{"name": "AGP", "value": 800}, {"name": "B", "value": 1.5}]}
                ],
            }
        )
        values = [s.value for s in result.contradictions[0].sources]
        assert values == ["800", "1.5"]


class TestBreakingNewsResult:
    def test_unknown_urgency_is_normal(self):
        assert BreakingNewsResult.model_validate({"urgencyLevel": "EXTREME"}).urgency_level == UrgencyLevel.NORMAL

    def test_decodes_wire_format(self):
        result = BreakingNewsResult.model_validate(
            {"isBreakingNews": True, "urgencyLevel": "high", "targetAudience": "politics", "confidence": 0.9}
        )
        assert result.is_breaking_news is True
        assert result.urgency_level == UrgencyLevel.HIGH
