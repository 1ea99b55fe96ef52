"""
services/grade_store.py

성적 기록 저장소 (SQLAlchemy 세션 래퍼)

- 라우터는 이 클래스로만 grades 테이블에 접근
- scores 컬럼은 JSON 배열이므로 수정 시 새 리스트를 대입해야 변경이 감지됨
- 변경 메서드는 영향받은 건수를 반환 (0이면 라우터에서 404 처리)
"""

import logging
from typing import List, Optional

from fastapi import Depends
from sqlalchemy.orm import Session

from database.db import get_db
from models.grades import Grade as GradeModel
from schemas.grades import GradeRecord

logger = logging.getLogger(__name__)


class GradeStore:
    def __init__(self, db: Session):
        self.db = db

    # ==========================================================
    # [READ]
    # ==========================================================
    def get(self, grade_id: int) -> Optional[GradeModel]:
        return self.db.query(GradeModel).filter(GradeModel.id == grade_id).first()

    def find(self, learner_id: Optional[int] = None, class_id: Optional[int] = None) -> List[GradeModel]:
        query = self.db.query(GradeModel)
        if learner_id is not None:
            query = query.filter(GradeModel.learner_id == learner_id)
        if class_id is not None:
            query = query.filter(GradeModel.class_id == class_id)
        return query.order_by(GradeModel.id).all()

    def find_records(self, learner_id: Optional[int] = None, class_id: Optional[int] = None) -> List[GradeRecord]:
        """집계용 읽기 전용 스냅샷"""
        return [GradeRecord.model_validate(row) for row in self.find(learner_id, class_id)]

    # ==========================================================
    # [CREATE]
    # ==========================================================
    def create(self, learner_id: int, class_id: int, scores: List[dict]) -> GradeModel:
        grade = GradeModel(learner_id=learner_id, class_id=class_id, scores=list(scores))
        self.db.add(grade)
        self.db.commit()
        self.db.refresh(grade)
        logger.info(f"성적 기록 생성: id={grade.id}, learner_id={learner_id}, class_id={class_id}")
        return grade

    # ==========================================================
    # [UPDATE]
    # ==========================================================
    def push_score(self, grade_id: int, entry: dict) -> Optional[GradeModel]:
        grade = self.get(grade_id)
        if grade is None:
            return None
        grade.scores = [*(grade.scores or []), entry]
        self.db.commit()
        self.db.refresh(grade)
        return grade

    def pull_scores(self, grade_id: int, match: dict) -> int:
        """match의 모든 필드가 같은 점수 항목을 전부 제거하고 제거 건수 반환"""
        grade = self.get(grade_id)
        if grade is None:
            return 0

        current = grade.scores or []
        kept = [
            entry for entry in current
            if not (isinstance(entry, dict) and all(entry.get(k) == v for k, v in match.items()))
        ]
        removed = len(current) - len(kept)
        if removed:
            grade.scores = kept
            self.db.commit()
        return removed

    def move_class(self, class_id: int, new_class_id: int) -> int:
        """반 전체 기록의 class_id 변경. 같은 반으로 옮기면 변경 건수 0"""
        if class_id == new_class_id:
            return 0
        modified = (
            self.db.query(GradeModel)
            .filter(GradeModel.class_id == class_id)
            .update({GradeModel.class_id: new_class_id}, synchronize_session=False)
        )
        self.db.commit()
        return modified

    # ==========================================================
    # [DELETE]
    # ==========================================================
    def delete(self, grade_id: int) -> int:
        grade = self.get(grade_id)
        if grade is None:
            return 0
        self.db.delete(grade)
        self.db.commit()
        return 1

    def delete_first_for_learner(self, learner_id: int) -> int:
        """학습자의 첫 번째 기록 한 건만 삭제"""
        grade = (
            self.db.query(GradeModel)
            .filter(GradeModel.learner_id == learner_id)
            .order_by(GradeModel.id)
            .first()
        )
        if grade is None:
            return 0
        self.db.delete(grade)
        self.db.commit()
        return 1

    def delete_class(self, class_id: int) -> int:
        deleted = (
            self.db.query(GradeModel)
            .filter(GradeModel.class_id == class_id)
            .delete(synchronize_session=False)
        )
        self.db.commit()
        return deleted


def get_store(db: Session = Depends(get_db)) -> GradeStore:
    return GradeStore(db)
