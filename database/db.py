from fastapi import Request
from sqlalchemy import create_engine               # SQLAlchemy 엔진 생성 도구
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker  # 모델 Base 클래스 / 세션 팩토리
from sqlalchemy.pool import StaticPool

# ✅ 모델 정의 시 상속할 Base 클래스 (Declarative 방식 사용)
Base = declarative_base()


def create_db_engine(url: str) -> Engine:
    """접속 URL로 엔진 생성. SQLite 인메모리 DB는 모든 세션이 같은 커넥션을 공유해야 함"""
    if url.startswith("sqlite"):
        return create_engine(
            url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_engine(url, pool_pre_ping=True)


def create_session_factory(engine: Engine) -> sessionmaker:
    # ✅ 세션 팩토리: DB 연결에 사용할 세션 생성기 정의
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


# ==========================================================
# [공통] DB 세션 관리
# - 엔진/세션 팩토리는 앱 시작 시 한 번 만들어 app.state에 보관 (main.py lifespan)
# ==========================================================
def get_db(request: Request):
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()
