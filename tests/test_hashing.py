from newsmerge.dedup import content_hash, jaccard, normalize_text, title_similarity, title_tokens


# ---------------------------------------------------------------------------
# normalize_text
# ---------------------------------------------------------------------------

class TestNormalizeText:
    def test_strips_accents_and_case(self):
        assert normalize_text("Décès du Ministre") == "deces du ministre"

    def test_drops_punctuation_without_inserting_spaces(self):
        assert normalize_text("L'Union : budget 2026 !") == "lunion budget 2026"

    def test_collapses_whitespace(self):
        assert normalize_text("  Gabon \n\t budget   ") == "gabon budget"

    def test_none_is_empty(self):
        assert normalize_text(None) == ""


# ---------------------------------------------------------------------------
# content_hash
# ---------------------------------------------------------------------------

class TestContentHash:
    def test_is_md5_hex(self):
        digest = content_hash("Titre", "Contenu")
        assert len(digest) == 32
        int(digest, 16)

    def test_insensitive_to_accents_and_punctuation(self):
        assert content_hash("Décès à Libreville", "Le corps...") == content_hash("deces a libreville", "le corps")

    def test_only_content_prefix_counts(self):
        prefix = "x" * 200
        assert content_hash("Titre", prefix + " first tail") == content_hash("Titre", prefix + " other tail")

    def test_different_titles_differ(self):
        assert content_hash("Budget adopté", "Texte") != content_hash("Budget rejeté", "Texte")


# ---------------------------------------------------------------------------
# title similarity
# ---------------------------------------------------------------------------

class TestTitleSimilarity:
    def test_short_tokens_are_ignored(self):
        assert title_tokens("Le Gabon et la CAN") == frozenset({"gabon"})

    def test_empty_token_set_scores_zero(self):
        assert jaccard(frozenset(), frozenset({"gabon"})) == 0.0
        assert title_similarity("Le un de", "Le un de") == 0.0

    def test_identical_titles_score_one(self):
        assert title_similarity("Gabon budget 2026 adopte", "Gabon budget 2026 adopte") == 1.0

    def test_budget_headlines_overlap_only_moderately(self):
        score = title_similarity(
            "Le Gabon annonce un nouveau budget 2026",
            "Budget 2026 : le gouvernement dévoile ses priorités",
        )
        assert score == 2 / 8

    def test_one_extra_word(self):
        score = title_similarity(
            "Gabon budget 2026 adopte parlement libreville",
            "Gabon budget 2026 adopte parlement vendredi matin",
        )
        assert score == 5 / 8
