"""
services/grade_weights.py

- 점수 유형별 가중치와 통과 기준을 한곳에서 정의합니다.
- 학습자 통계(grade_stats)와 반 평균(class_average)이 같은 값을 공유하며 설정으로 바꿀 수 없습니다.
"""

from types import MappingProxyType

EXAM_WEIGHT = 0.65
QUIZ_WEIGHT = 0.25
HOMEWORK_WEIGHT = 0.10

# 합산 순서: exam → quiz → homework
SCORE_WEIGHTS = MappingProxyType({
    "exam": EXAM_WEIGHT,
    "quiz": QUIZ_WEIGHT,
    "homework": HOMEWORK_WEIGHT,
})

SCORE_TYPES = tuple(SCORE_WEIGHTS)

# 가중 평균이 이 값보다 커야 통과로 집계
PASS_THRESHOLD = 50


def is_numeric_score(value) -> bool:
    # bool은 int의 하위 타입이지만 점수로 보지 않음
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def score_category(value):
    """저장된 유형 값이 가중치 대상이면 그 이름, 아니면 None (숫자/목록 등 비정상 값 포함)"""
    if isinstance(value, str) and value in SCORE_WEIGHTS:
        return value
    return None
