import pytest

from categorization.tables import AmountRange, load_amount_ranges, load_stop_words


class TestStopWords:
    """Tests for load_stop_words."""

    def test_merges_all_lists(self):
        """Test that every language and filler list is included."""
        words = load_stop_words()

        assert {"el", "de", "the", "at", "pesos", "gasté", "hoy", "today"} <= words

    def test_yaml_booleans_kept_as_words(self):
        """Test that 'no' and 'on' load as words rather than booleans."""
        words = load_stop_words()

        assert "no" in words
        assert "on" in words

    def test_alternate_file(self, tmp_path):
        """Test loading a custom stop-word file."""
        path = tmp_path / "stop.yaml"
        path.write_text("custom:\n  - Foo\n  - bar\n", encoding="utf-8")

        assert load_stop_words(path) == frozenset({"foo", "bar"})

    def test_missing_file(self, tmp_path):
        """Test that a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_stop_words(tmp_path / "missing.yaml")


class TestAmountRanges:
    """Tests for load_amount_ranges."""

    def test_default_table(self):
        """Test the bundled peso bands."""
        ranges = load_amount_ranges()

        assert ranges["coffee_shops"] == AmountRange(30, 200)
        assert ranges["rent_mortgage"] == AmountRange(3000, 50000)
        assert ranges["phone"] == AmountRange(200, 1000)

    def test_contains_is_inclusive(self):
        """Test that both bounds are inside the band."""
        band = AmountRange(30, 200)

        assert band.contains(30)
        assert band.contains(200)
        assert not band.contains(29.99)
        assert not band.contains(200.01)

    def test_min_greater_than_max(self, tmp_path):
        """Test that an inverted band is rejected."""
        path = tmp_path / "ranges.yaml"
        path.write_text("ranges:\n  bad: {min: 10, max: 5}\n", encoding="utf-8")

        with pytest.raises(ValueError, match="min > max"):
            load_amount_ranges(path)

    def test_missing_bound(self, tmp_path):
        """Test that a band without max is rejected."""
        path = tmp_path / "ranges.yaml"
        path.write_text("ranges:\n  bad: {min: 10}\n", encoding="utf-8")

        with pytest.raises(ValueError, match="Invalid amount range"):
            load_amount_ranges(path)

    def test_empty_file(self, tmp_path):
        """Test that an empty file yields no bands."""
        path = tmp_path / "ranges.yaml"
        path.write_text("", encoding="utf-8")

        assert load_amount_ranges(str(path)) == {}
