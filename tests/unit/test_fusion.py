"""Tests for weight tables and score aggregation."""

import pytest


class TestWeightTables:
    def test_signal_tables_sum_to_one(self):
        from humanmark.core.fusion.weights import SIGNAL_WEIGHTS

        for table in SIGNAL_WEIGHTS.values():
            assert table.is_normalized()
            assert table.total == pytest.approx(1.0)

    def test_validate_passes(self):
        from humanmark.core.fusion.weights import validate_weight_tables

        validate_weight_tables()

    def test_non_positive_weight_rejected(self):
        from humanmark.core.fusion.weights import WeightTable

        with pytest.raises(ValueError):
            WeightTable("bad", {"a": 0.0})

    def test_table_is_read_only(self):
        from humanmark.core.fusion.weights import TEXT_WEIGHTS

        with pytest.raises(TypeError):
            TEXT_WEIGHTS["ai_phrases"] = 0.5  # type: ignore[index]

    def test_unnormalized_table(self):
        from humanmark.core.fusion.weights import WeightTable

        table = WeightTable("half", {"a": 0.25, "b": 0.25})
        assert table.total == pytest.approx(0.5)
        assert not table.is_normalized()

    def test_every_category_has_detector_weights(self):
        from humanmark.core.fusion.weights import DETECTOR_WEIGHTS, INTERNAL_DETECTOR
        from humanmark.models.enums import ContentCategory

        for category in (ContentCategory.TEXT, ContentCategory.IMAGE, ContentCategory.AUDIO, ContentCategory.VIDEO):
            assert DETECTOR_WEIGHTS[category][INTERNAL_DETECTOR] == 1.0


class TestScoreAggregator:
    def test_weighted_mean(self):
        from humanmark.core.fusion.score_aggregator import ScoreAggregator

        score = ScoreAggregator.aggregate({"a": 1.0, "b": 0.0}, {"a": 0.75, "b": 0.25})
        assert score == pytest.approx(0.75)

    def test_unweighted_signals_ignored(self):
        from humanmark.core.fusion.score_aggregator import ScoreAggregator

        score = ScoreAggregator.aggregate({"a": 0.2, "extra": 1.0}, {"a": 1.0})
        assert score == pytest.approx(0.2)

    def test_no_weight_is_neutral(self):
        from humanmark.core.fusion.score_aggregator import ScoreAggregator

        assert ScoreAggregator.aggregate({"x": 1.0}, {}) == 0.5
        assert ScoreAggregator.aggregate({}, {"a": 1.0}) == 0.5

    def test_out_of_range_signal_clamped(self):
        from humanmark.core.fusion.score_aggregator import ScoreAggregator

        assert ScoreAggregator.aggregate({"a": 3.0}, {"a": 1.0}) == 1.0

    def test_fuse_uses_detector_weights(self):
        from humanmark.core.fusion.score_aggregator import ScoreAggregator

        score = ScoreAggregator.fuse({"humanmark": 0.0, "hive": 1.0}, {"humanmark": 1.0, "hive": 3.0})
        assert score == pytest.approx(0.75)

    def test_fuse_default_weight(self):
        from humanmark.core.fusion.score_aggregator import ScoreAggregator

        score = ScoreAggregator.fuse({"humanmark": 0.2, "other": 0.8}, {"humanmark": 1.0})
        assert score == pytest.approx(0.5)

    def test_fuse_empty_is_neutral(self):
        from humanmark.core.fusion.score_aggregator import ScoreAggregator

        assert ScoreAggregator.fuse({}, {}) == 0.5

    def test_verdict(self):
        from humanmark.core.fusion.score_aggregator import ScoreAggregator

        v = ScoreAggregator.verdict(0.9)
        assert v["human"] is False
        assert v["confidence"] == pytest.approx(0.8)

        v = ScoreAggregator.verdict(0.2)
        assert v["human"] is True
        assert v["confidence"] == pytest.approx(0.6)

    def test_verdict_at_threshold_is_ai(self):
        from humanmark.core.fusion.score_aggregator import ScoreAggregator

        v = ScoreAggregator.verdict(0.5)
        assert v["human"] is False
        assert v["confidence"] == 0.0
