"""FastAPI 애플리케이션 진입점. 저장소 핸들, 미들웨어, API 라우터, 정적 프론트엔드 서빙을 등록합니다."""

import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from app.config import Settings, settings as default_settings
from app.database import Database
from app.errors import register_exception_handlers
import app.models  # noqa: F401 - 모델 import로 metadata 등록
from app.routers import admin, ai, auth, batches, reports, stats
from app.services.bootstrap_service import bootstrap

logger = logging.getLogger(__name__)

SERVICE_NAME = "Training Portal"


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def create_app(settings: Optional[Settings] = None, database: Optional[Database] = None) -> FastAPI:
    settings = settings or default_settings
    configure_logging(settings.LOG_LEVEL)
    database = database or Database(settings.DATABASE_URL, max_workers=settings.STATS_MAX_WORKERS)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        database.create_all()
        db = database.SessionLocal()
        try:
            bootstrap(db, settings)
        finally:
            db.close()
        logger.info("%s started (database=%s)", SERVICE_NAME, database.engine.url.render_as_string(hide_password=True))
        yield
        database.dispose()

    app = FastAPI(
        title=SERVICE_NAME,
        description="차수 수강 등록, 일일 보고서, 규칙 기반 학습 분석을 제공하는 교육 관리 시스템",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.database = database
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    # Register all routers
    app.include_router(auth.router)
    app.include_router(batches.router)
    app.include_router(reports.router)
    app.include_router(stats.router)
    app.include_router(ai.router)
    app.include_router(admin.router)

    @app.get("/api/health")
    def health_check():
        return {"status": "ok", "service": SERVICE_NAME}

    # Serve frontend static files
    frontend_dir = os.path.join(os.path.dirname(os.path.dirname(os.path.dirname(__file__))), "frontend")
    if os.path.exists(frontend_dir):
        app.mount("/", StaticFiles(directory=frontend_dir, html=True), name="frontend")

    return app


app = create_app()
