"""
Pytest configuration and fixtures

- config.settings는 import 시점에 Settings()를 만들므로 DB 환경변수를 먼저 채움
- 테스트마다 인메모리 SQLite 앱을 새로 생성
"""
import os

os.environ.setdefault("DB_USER", "test")
os.environ.setdefault("DB_PASSWORD", "test")
os.environ.setdefault("DB_HOST", "localhost")
os.environ.setdefault("DB_NAME", "grades_test")
os.environ["DB_URL_OVERRIDE"] = "sqlite://"

import pytest
from fastapi.testclient import TestClient

from config.settings import Settings
from database.db import Base, create_db_engine, create_session_factory
from main import create_app
from models.grades import Grade as GradeModel
from schemas.grades import GradeRecord


def make_record(learner_id, class_id, *scores, record_id=None):
    """(type, score) 튜플로 GradeRecord 스냅샷 생성"""
    return GradeRecord(
        id=record_id,
        learner_id=learner_id,
        class_id=class_id,
        scores=[{"type": t, "score": s} for t, s in scores],
    )


@pytest.fixture
def app():
    return create_app(Settings(DB_URL_OVERRIDE="sqlite://", LOG_LEVEL="DEBUG"))


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def insert_grade(client):
    """API 검증을 거치지 않고 grades 테이블에 직접 기록 삽입"""
    def _insert(learner_id, class_id, scores):
        db = client.app.state.session_factory()
        try:
            grade = GradeModel(learner_id=learner_id, class_id=class_id, scores=scores)
            db.add(grade)
            db.commit()
            db.refresh(grade)
            return grade.id
        finally:
            db.close()
    return _insert


@pytest.fixture
def db_session():
    engine = create_db_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    session = create_session_factory(engine)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()
