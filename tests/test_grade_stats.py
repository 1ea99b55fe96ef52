"""
Tests for services/grade_stats.py (학습자별 가중 평균 / 통과율 통계)
"""
import pytest

from conftest import make_record
from services.exceptions import AggregationFailure
from services.grade_stats import compute_learner_averages, compute_stats


def _stats_tuple(stats):
    return stats.total_learners, stats.learners_above_50, stats.percentage_above_50


class TestEmptyInput:
    def test_no_records_returns_zeros(self):
        assert _stats_tuple(compute_stats([])) == (0, 0, 0)

    def test_class_filter_without_match_returns_zeros(self):
        records = [make_record(1, 10, ("exam", 90))]
        assert _stats_tuple(compute_stats(records, class_filter=99)) == (0, 0, 0)

    def test_records_without_scores_are_not_learners(self):
        records = [make_record(1, 10), make_record(2, 10)]
        assert _stats_tuple(compute_stats(records)) == (0, 0, 0)


class TestLearnerAverages:
    def test_single_exam_score_is_not_renormalized(self):
        # exam 80만 있으면 80 * 0.65 = 52 (재정규화하지 않음)
        [learner] = compute_learner_averages([make_record(1, 10, ("exam", 80))])
        assert learner.learner_id == 1
        assert learner.avg == pytest.approx(52)

    def test_equal_scores_in_all_categories(self):
        records = [make_record(1, 10, ("exam", 40), ("quiz", 40), ("homework", 40))]
        [learner] = compute_learner_averages(records)
        assert learner.avg == pytest.approx(40)

    def test_category_uses_mean_of_scores(self):
        records = [make_record(1, 10, ("exam", 90), ("exam", 70), ("quiz", 60))]
        [learner] = compute_learner_averages(records)
        assert learner.avg == pytest.approx(80 * 0.65 + 60 * 0.25)

    def test_missing_category_contributes_nothing(self):
        records = [make_record(1, 10, ("exam", 60), ("homework", 60))]
        [learner] = compute_learner_averages(records)
        assert learner.avg == pytest.approx(60 * 0.65 + 60 * 0.10)

    def test_scores_grouped_across_records_of_same_learner(self):
        records = [
            make_record(1, 10, ("exam", 100)),
            make_record(1, 20, ("exam", 60), ("quiz", 80)),
        ]
        [learner] = compute_learner_averages(records)
        assert learner.avg == pytest.approx(80 * 0.65 + 80 * 0.25)

    def test_non_numeric_scores_are_skipped(self):
        records = [make_record(1, 10, ("exam", "abc"), ("exam", 80), ("quiz", None))]
        [learner] = compute_learner_averages(records)
        assert learner.avg == pytest.approx(52)

    def test_unrecognized_type_counts_learner_with_zero_average(self):
        records = [make_record(1, 10, ("project", 100)), make_record(2, 10, (None, 90))]
        learners = compute_learner_averages(records)
        assert [(l.learner_id, l.avg) for l in learners] == [(1, 0.0), (2, 0.0)]

    def test_class_filter_limits_records(self):
        records = [
            make_record(1, 10, ("exam", 100)),
            make_record(1, 20, ("exam", 0)),
            make_record(2, 20, ("quiz", 100)),
        ]
        learners = compute_learner_averages(records, class_filter=10)
        assert [(l.learner_id, l.avg) for l in learners] == [(1, pytest.approx(65))]


class TestComputeStats:
    def test_single_exam_80_counts_above_50(self):
        stats = compute_stats([make_record(1, 10, ("exam", 80))])
        assert _stats_tuple(stats) == (1, 1, 100)

    def test_forty_everywhere_is_not_above_50(self):
        records = [make_record(1, 10, ("exam", 40), ("quiz", 40), ("homework", 40))]
        assert _stats_tuple(compute_stats(records)) == (1, 0, 0)

    def test_exactly_50_is_not_above(self):
        records = [make_record(1, 10, ("exam", 50), ("quiz", 50), ("homework", 50))]
        stats = compute_stats(records)
        assert stats.learners_above_50 == 0

    def test_percentage_matches_ratio(self):
        records = [
            make_record(1, 10, ("exam", 90)),
            make_record(2, 10, ("exam", 20)),
            make_record(3, 10, ("quiz", 100)),
        ]
        stats = compute_stats(records)
        assert stats.total_learners == 3
        assert stats.learners_above_50 == 1
        assert stats.percentage_above_50 == pytest.approx(1 / 3 * 100)
        assert 0 <= stats.learners_above_50 <= stats.total_learners

    def test_class_scoped_stats(self):
        records = [
            make_record(1, 10, ("exam", 90)),
            make_record(2, 20, ("exam", 90)),
            make_record(3, 20, ("exam", 10)),
        ]
        assert _stats_tuple(compute_stats(records, class_filter=20)) == (2, 1, 50)

    def test_serializes_with_wire_names(self):
        stats = compute_stats([make_record(1, 10, ("exam", 80))])
        assert stats.model_dump(by_alias=True) == {
            "totalLearners": 1,
            "learnersAbove50": 1,
            "percentageAbove50": 100,
        }

    def test_input_records_are_not_modified(self):
        records = [make_record(1, 10, ("exam", 80), ("bonus", 5))]
        before = [r.model_dump() for r in records]
        compute_stats(records)
        assert [r.model_dump() for r in records] == before

    def test_malformed_record_raises_aggregation_failure(self):
        with pytest.raises(AggregationFailure):
            compute_stats([object()])


def test_non_string_types_are_skipped():
    records = [make_record(1, 10, (5, 100), (["exam"], 100), ({"t": "quiz"}, 100), ("exam", 80))]
    [learner] = compute_learner_averages(records)
    assert learner.avg == pytest.approx(52)
    assert compute_stats(records).learners_above_50 == 1
