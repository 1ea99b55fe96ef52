import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config.settings import Settings, settings as default_settings
from database.db import Base, create_db_engine, create_session_factory

# ✅ 미들웨어 임포트
from middlewares.timing import TimingMiddleware
from middlewares.error_handler import add_error_handlers

# ✅ 라우터 임포트 (models.grades 등록 포함)
import models.grades  # noqa: F401
from routers import grades

logger = logging.getLogger(__name__)


def configure_logging(level: str):
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")
    # HTTP 라이브러리 디버그 로그 비활성화
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    app_settings = app_settings or default_settings
    configure_logging(app_settings.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # ✅ DB 엔진은 시작 시 한 번 생성해서 요청마다 세션으로 나눠 씀
        engine = create_db_engine(app_settings.DATABASE_URL)
        if app_settings.DB_CREATE_TABLES:
            Base.metadata.create_all(bind=engine)
        app.state.session_factory = create_session_factory(engine)
        logger.info(f"DB 엔진 준비 완료 (env={app_settings.ENV}, dialect={engine.dialect.name})")
        try:
            yield
        finally:
            engine.dispose()
            logger.info("DB 엔진 종료")

    app = FastAPI(
        title=app_settings.APP_TITLE,
        description=app_settings.APP_DESCRIPTION,
        version=app_settings.APP_VERSION,
        lifespan=lifespan,
    )

    # ✅ CORS 설정 (프론트엔드 연동 대비)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ✅ 요청 지연 측정 미들웨어 (응답 헤더 X-Latency-Ms 추가)
    app.add_middleware(TimingMiddleware)

    # ✅ 전역 에러 핸들러 등록 (일관된 JSON 에러 포맷)
    add_error_handlers(app)

    app.include_router(grades.router)

    # ✅ 헬스체크 엔드포인트
    @app.get("/health")
    def health_check():
        return {"status": "ok", "message": "API is running"}

    # ✅ 루트 엔드포인트
    @app.get("/")
    def root():
        return {"message": "Welcome to the API."}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host=default_settings.HOST, port=default_settings.PORT)
