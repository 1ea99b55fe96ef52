"""
services/class_average.py

한 반의 가중 평균 점수를 계산합니다.

학습자 통계(grade_stats)와 달리 유형별 점수의 '합계'에 가중치를 곱합니다.
두 계산은 가중치만 공유하고 서로 다른 지표이므로 합치지 않습니다.
"""

from typing import Sequence

from schemas.grades import GradeRecord
from services.exceptions import GradeNotFound, NoValidScores
from services.grade_weights import SCORE_TYPES, SCORE_WEIGHTS, is_numeric_score, score_category


def compute_class_average(records: Sequence[GradeRecord]) -> float:
    if not records:
        raise GradeNotFound()

    total_weighted_score = 0.0
    total_students = 0

    for record in records:
        sums = dict.fromkeys(SCORE_TYPES, 0)
        for entry in record.scores:
            category = score_category(entry.type)
            if is_numeric_score(entry.score) and category is not None:
                sums[category] += entry.score

        # 양수 합계가 하나도 없으면 분모에서 제외
        if not any(value > 0 for value in sums.values()):
            continue

        total_weighted_score += (
            sums["exam"] * SCORE_WEIGHTS["exam"]
            + sums["homework"] * SCORE_WEIGHTS["homework"]
            + sums["quiz"] * SCORE_WEIGHTS["quiz"]
        )
        total_students += 1

    if total_students == 0:
        raise NoValidScores()

    return total_weighted_score / total_students
