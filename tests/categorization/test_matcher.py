import pytest

from categorization.matcher import KeywordMatcher
from categorization.tables import AmountRange
from models.category import Category
from services.category_cache import CategoryCache


@pytest.fixture
def categories():
    """In-memory catalog mirroring tests.helpers.CATALOG."""
    return [
        Category(1, "food_dining", "Food & Dining", keywords=["comida", "food", "restaurante"]),
        Category(2, "coffee_shops", "Coffee Shops", parent_id=1,
                 keywords=["starbucks", "cafe", "café", "coffee"]),
        Category(3, "groceries", "Groceries", parent_id=1,
                 keywords=["oxxo", "walmart", "soriana"]),
        Category(4, "transportation", "Transportation", keywords=["uber", "taxi"]),
        Category(5, "fuel", "Fuel", parent_id=4, keywords=["gasolina", "pemex"]),
    ]


@pytest.fixture
def amount_ranges():
    return {
        "coffee_shops": AmountRange(30, 200),
        "groceries": AmountRange(100, 3000),
        "transportation": AmountRange(40, 500),
    }


@pytest.fixture
def matcher(categories, amount_ranges):
    return KeywordMatcher(CategoryCache(lambda: categories), amount_ranges)


class TestKeywordMatcher:
    """Tests for KeywordMatcher.match_by_keywords."""

    def test_whole_word_with_amount_in_band(self, matcher):
        """Test that whole-word hit, merchant bonus and amount band add up."""
        match = matcher.match_by_keywords("compré café en el oxxo", 35)

        # café: 0.3 + 0.04, merchant 0.4, amount 0.2 (oxxo scores 0.74)
        assert match.category_id == 2
        assert match.confidence == pytest.approx(0.94)
        assert match.matched_keywords == ["café"]

    def test_amount_outside_band_gets_no_bonus(self, matcher):
        """Test that an amount outside the band doesn't add the bonus."""
        match = matcher.match_by_keywords("cafeteria", 500)

        assert match.category_id == 2
        assert match.confidence == pytest.approx(0.59)

    def test_substring_hit_scores_lower(self, matcher):
        """Test that a keyword inside a longer word counts as a substring hit."""
        match = matcher.match_by_keywords("cafeteria del centro")

        # cafe: 0.15 + 0.04, merchant 0.4
        assert match.category_id == 2
        assert match.confidence == pytest.approx(0.59)
        assert match.matched_keywords == ["cafe"]

    def test_confidence_is_capped(self, matcher):
        """Test that confidence never reaches 1.0."""
        match = matcher.match_by_keywords("starbucks coffee cafe", 50)

        assert match.category_id == 2
        assert match.confidence == pytest.approx(0.95)

    def test_parent_keywords_boost_child(self, matcher):
        """Test that parent keywords in the text favor the subcategory."""
        match = matcher.match_by_keywords("gasolina para el taxi")

        # fuel: 0.38 + 0.4 + 0.1 parent "taxi"; transportation: 0.74
        assert match.category_id == 5
        assert match.confidence == pytest.approx(0.88)

    def test_amount_band_falls_back_to_parent(self, matcher):
        """Test that a category without a band uses its parent's."""
        # fuel has no band here; transportation's 40-500 applies
        with_amount = matcher.match_by_keywords("pemex", 300)
        without_amount = matcher.match_by_keywords("pemex")

        assert with_amount.category_id == 5
        assert with_amount.confidence == pytest.approx(without_amount.confidence + 0.2)

    def test_case_insensitive(self, matcher):
        """Test that matching ignores case."""
        match = matcher.match_by_keywords("STARBUCKS")

        assert match.category_id == 2
        assert match.matched_keywords == ["starbucks"]

    def test_no_match(self, matcher):
        """Test that an unrelated description has no match."""
        assert matcher.match_by_keywords("regalo para mamá") is None

    def test_empty_catalog(self, amount_ranges):
        """Test that an empty catalog never matches."""
        matcher = KeywordMatcher(CategoryCache(lambda: []), amount_ranges)

        assert matcher.match_by_keywords("starbucks", 50) is None

    def test_amount_only_scores_in_band_categories(self, matcher):
        """Test that an in-band amount alone still yields a weak match."""
        match = matcher.match_by_keywords("algo", 150)

        # coffee_shops is the first category whose band contains 150
        assert match.category_id == 2
        assert match.confidence == pytest.approx(0.2)
        assert match.matched_keywords == []

    def test_ties_keep_first_category(self, categories, amount_ranges):
        """Test that on equal scores the first category in catalog order wins."""
        twins = [
            Category(10, "a", "A", keywords=["tienda"]),
            Category(11, "b", "B", keywords=["tienda"]),
        ]
        matcher = KeywordMatcher(CategoryCache(lambda: twins), amount_ranges)

        assert matcher.match_by_keywords("tienda").category_id == 10

    def test_blank_keywords_ignored(self, amount_ranges):
        """Test that empty keyword strings never match."""
        catalog = [Category(1, "x", "X", keywords=["", "  "])]
        matcher = KeywordMatcher(CategoryCache(lambda: catalog), amount_ranges)

        assert matcher.match_by_keywords("anything") is None
