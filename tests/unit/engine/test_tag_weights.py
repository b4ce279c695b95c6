"""Tests for tag-cloud weights."""
import pytest

from interne.engine.tag_weights import TagWeight, compute_tag_weights


class TestComputeTagWeights:
    def test_monotonic_in_count(self):
        small, medium, large = compute_tag_weights([("a", 1), ("b", 5), ("c", 50)])

        assert small.size < medium.size < large.size
        assert small.lightness > medium.lightness > large.lightness
        assert small.ratio == 0.0
        assert large.ratio == 1.0

    def test_log_scale(self):
        _, medium, _ = compute_tag_weights([("a", 1), ("b", 10), ("c", 100)])
        assert medium.ratio == pytest.approx(0.5)

    def test_equal_counts_get_midpoint(self):
        weights = compute_tag_weights([("a", 4), ("b", 4), ("c", 4)])

        assert {w.ratio for w in weights} == {0.5}
        assert len({(w.size, w.lightness, w.hue) for w in weights}) == 1

    def test_single_tag_gets_midpoint(self):
        (weight,) = compute_tag_weights([("solo", 12)])
        assert weight.ratio == 0.5

    def test_order_preserved(self):
        weights = compute_tag_weights([("zeta", 3), ("alpha", 1)])
        assert [w.name for w in weights] == ["zeta", "alpha"]

    def test_zero_count_clamped(self):
        (weight,) = compute_tag_weights([("x", 0)])
        assert weight.count == 1

    def test_empty(self):
        assert compute_tag_weights([]) == []


class TestTagWeightFormatting:
    def test_css_strings(self):
        weight = TagWeight(
            name="x", count=1, ratio=0.0, size=0.75, hue=180.0, saturation=40.0, lightness=70.0
        )
        assert weight.font_size == "0.75rem"
        assert weight.color == "hsl(180, 40%, 70%)"
