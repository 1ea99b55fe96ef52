"""
services/grade_stats.py

학습자별 가중 평균과 통과율(가중 평균 50 초과) 통계를 계산합니다.

- 유형별 점수는 '평균'을 내어 가중치를 곱합니다.
- 점수가 하나도 없는 유형은 0점이 아니라 '없음'(None)으로 보고 합산에서 빠집니다.
  (가중치 재정규화는 하지 않음: exam 80 하나만 있으면 80 * 0.65 = 52)
- 입력 기록은 변경하지 않습니다.
"""

from typing import Dict, Iterable, List, Optional

from schemas.grades import ClassStats, GradeRecord, LearnerStat
from services.exceptions import AggregationFailure
from services.grade_weights import PASS_THRESHOLD, SCORE_TYPES, SCORE_WEIGHTS, is_numeric_score, score_category


def _category_mean(values: List) -> Optional[float]:
    numbers = [v for v in values if is_numeric_score(v)]
    if not numbers:
        return None
    return sum(numbers) / len(numbers)


def _weighted_average(buckets: Dict[str, list]) -> float:
    total = 0.0
    for category in SCORE_TYPES:
        mean = _category_mean(buckets[category])
        if mean is not None:
            total += mean * SCORE_WEIGHTS[category]
    return total


def compute_learner_averages(
    records: Iterable[GradeRecord], class_filter: Optional[int] = None
) -> List[LearnerStat]:
    """
    학습자(learner_id)별 가중 평균 목록

    - class_filter가 주어지면 해당 반 기록만 사용
    - 점수 항목이 하나라도 있는 학습자만 포함 (유형을 인식하지 못해도 포함되며 평균 0)
    """
    grouped: Dict[int, Dict[str, list]] = {}
    for record in records:
        if class_filter is not None and record.class_id != class_filter:
            continue
        for entry in record.scores:
            buckets = grouped.setdefault(record.learner_id, {c: [] for c in SCORE_TYPES})
            category = score_category(entry.type)
            if category is not None:
                buckets[category].append(entry.score)

    return [
        LearnerStat(learner_id=learner_id, avg=_weighted_average(buckets))
        for learner_id, buckets in grouped.items()
    ]


def compute_stats(
    records: Iterable[GradeRecord], class_filter: Optional[int] = None
) -> ClassStats:
    """가중 평균 50 초과 학습자 수/비율. 대상이 없으면 0으로 채운 통계"""
    try:
        learners = compute_learner_averages(records, class_filter)
    except (AttributeError, TypeError) as exc:
        raise AggregationFailure() from exc

    total = len(learners)
    if total == 0:
        return ClassStats(total_learners=0, learners_above_50=0, percentage_above_50=0)

    above = sum(1 for learner in learners if learner.avg > PASS_THRESHOLD)
    return ClassStats(
        total_learners=total,
        learners_above_50=above,
        percentage_above_50=above / total * 100,
    )
