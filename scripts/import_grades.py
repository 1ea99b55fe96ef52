import csv
import logging
import sys
from typing import Dict, List, Tuple

from sqlalchemy.orm import Session

from config.settings import settings
from database.db import Base, create_db_engine, create_session_factory
from services.grade_store import GradeStore

logger = logging.getLogger(__name__)

CSV_PATH = "data/grades.csv"  # ✅ 기본 파일 경로 (learner_id,class_id,type,score)


def load_grade_rows(path: str) -> Dict[Tuple[int, int], List[dict]]:
    """CSV 행을 (learner_id, class_id) 기준 기록으로 묶음. 행 순서 유지"""
    grouped: Dict[Tuple[int, int], List[dict]] = {}
    with open(path, newline="", encoding="utf-8-sig") as csvfile:
        reader = csv.DictReader(csvfile)
        for row in reader:
            key = (int(row["learner_id"]), int(row["class_id"]))
            scores = grouped.setdefault(key, [])
            score_type = (row.get("type") or "").strip()
            raw_score = (row.get("score") or "").strip()
            if score_type and raw_score:
                scores.append({"type": score_type, "score": float(raw_score)})
    return grouped


def import_grades(db: Session, path: str) -> int:
    store = GradeStore(db)
    grouped = load_grade_rows(path)
    for (learner_id, class_id), scores in grouped.items():
        store.create(learner_id=learner_id, class_id=class_id, scores=scores)
    return len(grouped)


def migrate_grades(path: str = CSV_PATH):
    engine = create_db_engine(settings.DATABASE_URL)
    Base.metadata.create_all(bind=engine)
    db: Session = create_session_factory(engine)()
    try:
        count = import_grades(db, path)
    finally:
        db.close()
        engine.dispose()
    print(f"✅ 성적 CSV → DB 마이그레이션 완료 ({count}건)")


if __name__ == "__main__":
    logging.basicConfig(level=settings.LOG_LEVEL)
    migrate_grades(sys.argv[1] if len(sys.argv) > 1 else CSV_PATH)
