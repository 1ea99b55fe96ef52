import logging
import re
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import RedirectResponse
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from schemas.grades import (
    ClassAverage, ClassMove, ClassStats, DeleteResult, GradeCreate, GradeRecord,
    ScoreCreate, ScoreMatch, UpdateResult,
)
from services.class_average import compute_class_average
from services.exceptions import AggregationFailure, GradeNotFound, InvalidGradeId
from services.grade_stats import compute_stats
from services.grade_store import GradeStore, get_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/grades", tags=["grades"])

_GRADE_ID_PATTERN = re.compile(r"^[1-9][0-9]*$")


def _parse_grade_id(raw: str) -> int:
    # 정규형 양의 정수만 허용 ("007", "1.0", "abc" → 400)
    if not _GRADE_ID_PATTERN.match(raw):
        raise InvalidGradeId()
    return int(raw)


def _require(records: list) -> list:
    if not records:
        raise GradeNotFound()
    return records


def _calculate_stats(store: GradeStore, class_id: Optional[int] = None) -> ClassStats:
    try:
        records = store.find_records(class_id=class_id)
    except (SQLAlchemyError, ValidationError) as exc:
        logger.exception(f"통계용 성적 조회 실패: class_id={class_id}")
        raise AggregationFailure() from exc

    stats = compute_stats(records, class_id)
    logger.info(
        f"통계 계산 완료: class_id={class_id}, records={len(records)}, "
        f"learners={stats.total_learners}, above50={stats.learners_above_50}"
    )
    return stats


# ==========================================================
# [1단계] 생성
# ==========================================================

# ✅ [CREATE] 성적 기록 추가 (student_id → learner_id 하위 호환)
@router.post("", response_model=GradeRecord, status_code=status.HTTP_201_CREATED)
def create_grade(grade: GradeCreate, store: GradeStore = Depends(get_store)):
    return store.create(
        learner_id=grade.learner_id,
        class_id=grade.class_id,
        scores=[s.model_dump() for s in grade.scores],
    )


# ==========================================================
# [2단계] 통계 라우터
# - 대상 기록이 없으면 404가 아니라 0으로 채운 통계 반환
# ==========================================================

# ✅ [STATS] 전체 학습자 중 가중 평균 50 초과 비율
@router.get("/stats", response_model=ClassStats)
def get_stats(store: GradeStore = Depends(get_store)):
    return _calculate_stats(store)


# ✅ [STATS] 반 단위 통계
@router.get("/stats/{class_id}", response_model=ClassStats)
def get_class_stats(class_id: int, store: GradeStore = Depends(get_store)):
    logger.info(f"반 통계 요청: class_id={class_id}")
    return _calculate_stats(store, class_id)


# ==========================================================
# [3단계] 학습자 단위 라우터
# ==========================================================

# ✅ 하위 호환: /student/{id} → /learner/{id}
@router.get("/student/{learner_id}")
def redirect_student(learner_id: int, request: Request):
    return RedirectResponse(
        url=str(request.url_for("get_learner_grades", learner_id=learner_id)),
        status_code=status.HTTP_302_FOUND,
    )


# ✅ [READ] 학습자 성적 조회 (?class= 로 반 필터)
@router.get("/learner/{learner_id}", response_model=List[GradeRecord])
def get_learner_grades(
    learner_id: int,
    class_id: Optional[int] = Query(None, alias="class"),
    store: GradeStore = Depends(get_store),
):
    return _require(store.find(learner_id=learner_id, class_id=class_id))


# ✅ [DELETE] 학습자 기록 삭제 (첫 번째 기록 한 건)
@router.delete("/learner/{learner_id}", response_model=DeleteResult)
def delete_learner_grade(learner_id: int, store: GradeStore = Depends(get_store)):
    deleted = store.delete_first_for_learner(learner_id)
    if deleted == 0:
        raise GradeNotFound()
    return DeleteResult(deleted_count=deleted)


# ==========================================================
# [4단계] 반 단위 라우터
# ==========================================================

# ✅ [READ] 반 성적 조회 (?learner= 로 학습자 필터)
@router.get("/class/{class_id}", response_model=List[GradeRecord])
def get_class_grades(
    class_id: int,
    learner_id: Optional[int] = Query(None, alias="learner"),
    store: GradeStore = Depends(get_store),
):
    return _require(store.find(learner_id=learner_id, class_id=class_id))


# ✅ [UPDATE] 반 ID 변경
@router.patch("/class/{class_id}", response_model=UpdateResult)
def move_class(class_id: int, body: ClassMove, store: GradeStore = Depends(get_store)):
    modified = store.move_class(class_id, body.class_id)
    if modified == 0:
        raise GradeNotFound()
    logger.info(f"반 ID 변경: {class_id} → {body.class_id} ({modified}건)")
    return UpdateResult(modified_count=modified)


# ✅ [DELETE] 반 전체 기록 삭제
@router.delete("/class/{class_id}", response_model=DeleteResult)
def delete_class(class_id: int, store: GradeStore = Depends(get_store)):
    deleted = store.delete_class(class_id)
    if deleted == 0:
        raise GradeNotFound()
    return DeleteResult(deleted_count=deleted)


# ✅ [AVERAGE] 반 가중 평균 (기록 없음 → 404 Not found, 유효 점수 없음 → 404 No valid scores found)
@router.get("/class/{class_id}/average", response_model=ClassAverage)
def get_class_average(class_id: int, store: GradeStore = Depends(get_store)):
    logger.info(f"반 평균 조회: class_id={class_id}")
    records = store.find_records(class_id=class_id)
    logger.debug(f"조회된 기록 수: {len(records)}")
    return ClassAverage(class_average=compute_class_average(records))


# ==========================================================
# [5단계] 기록 ID 단위 라우터 (고정 경로보다 뒤에 등록)
# ==========================================================

# ✅ [READ] 성적 기록 조회
@router.get("/{grade_id}", response_model=GradeRecord)
def read_grade(grade_id: str, store: GradeStore = Depends(get_store)):
    grade = store.get(_parse_grade_id(grade_id))
    if grade is None:
        raise GradeNotFound()
    return grade


# ✅ [UPDATE] 점수 추가
@router.patch("/{grade_id}/add", response_model=GradeRecord)
def add_score(grade_id: str, score: ScoreCreate, store: GradeStore = Depends(get_store)):
    grade = store.push_score(_parse_grade_id(grade_id), score.model_dump())
    if grade is None:
        raise GradeNotFound()
    return grade


# ✅ [UPDATE] 점수 제거 (지정한 필드가 모두 같은 항목 전부)
@router.patch("/{grade_id}/remove", response_model=GradeRecord)
def remove_score(grade_id: str, match: ScoreMatch, store: GradeStore = Depends(get_store)):
    parsed_id = _parse_grade_id(grade_id)
    if store.pull_scores(parsed_id, match.as_filter()) == 0:
        raise GradeNotFound()
    return store.get(parsed_id)


# ✅ [DELETE] 성적 기록 삭제
@router.delete("/{grade_id}", response_model=DeleteResult)
def delete_grade(grade_id: str, store: GradeStore = Depends(get_store)):
    deleted = store.delete(_parse_grade_id(grade_id))
    if deleted == 0:
        raise GradeNotFound()
    return DeleteResult(deleted_count=deleted)
