"""
FastAPI 메인 애플리케이션
피부 분석 개인화 API 서버
"""
from fastapi import FastAPI, Request, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from datetime import datetime
import asyncio
import logging
import time

from app.config.settings import get_settings
from app.database.postgres_db import init_database, close_database
from app.database.schema import create_tables
from app.models.personalization_models import (
    PersonalizationEngineError, WizardTransitionError
)
from app.models.response import ErrorDetail
from app.services.catalog_service import build_catalog_store
from app.services.personalization_engine import (
    PersonalizationService, InMemoryAnalysisHistoryLog
)
from app.services.profile_repository import (
    InMemoryProfileRepository, PostgresProfileRepository
)
from app.services.questionnaire_wizard import WizardSessionManager

settings = get_settings()

# 로깅 설정
logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """애플리케이션 생명주기 관리"""
    logger.info("피부 분석 API 서버 시작")

    db = None
    if settings.database_enabled:
        try:
            db = await init_database()
            await asyncio.to_thread(create_tables)
        except Exception as e:
            logger.error(f"데이터베이스 초기화 실패 - fallback 모드로 진행: {e}")
            db = None
    else:
        logger.info("DATABASE_URL 미설정 - fallback 모드로 진행")

    catalog_store = build_catalog_store(db, settings.products_fallback_file)
    profile_repository = PostgresProfileRepository(db) if db else InMemoryProfileRepository()

    app.state.settings = settings
    app.state.catalog_store = catalog_store
    app.state.personalization_service = PersonalizationService(
        catalog_store=catalog_store,
        profile_repository=profile_repository,
        history_log=InMemoryAnalysisHistoryLog(),
        product_limit=settings.product_match_limit
    )
    app.state.wizard_sessions = WizardSessionManager()

    yield

    logger.info("애플리케이션 종료 시작")
    if db is not None:
        try:
            await close_database()
            logger.info("데이터베이스 연결 종료 완료")
        except Exception as e:
            logger.warning(f"데이터베이스 연결 종료 중 오류 (무시됨): {e}")
    logger.info("피부 분석 API 서버 종료 완료")

# FastAPI 애플리케이션 생성
app = FastAPI(
    title="피부 분석 개인화 API",
    description="""
    # 피부 분석 기반 개인화 스킨케어 API

    설문 응답으로 피부 타입을 분류하고, 고민 우선순위에 맞는 성분, 루틴, 예상 결과,
    성분 조합 위험도, 카탈로그 제품 매칭을 제공합니다.

    ## 📋 API 구조

    - `POST /api/v1/analysis` - 설문 일괄 분석
    - `GET /api/v1/analysis/profiles/{profile_key}` - 저장된 프로필 조회
    - `POST /api/v1/analysis/sessions` - 단계별 설문 시작
    - `POST /api/v1/analysis/sessions/{id}/answers|next|previous` - 설문 진행
    - `GET /api/v1/products` - 제품 카탈로그 검색
    - `GET /health`, `GET /health/db` - 상태 확인
    """,
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

# 요청 로깅 미들웨어
@app.middleware("http")
async def log_requests(request: Request, call_next):
    """요청 로깅 미들웨어"""
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time

    logger.debug(
        f"요청 완료: {request.method} {request.url.path} "
        f"status={response.status_code} time={process_time:.3f}s"
    )
    response.headers["X-Process-Time"] = str(process_time)
    return response

def _error_response(request: Request, status_code: int, detail: ErrorDetail) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": detail.model_dump(),
            "timestamp": datetime.now().isoformat(),
            "path": str(request.url.path)
        }
    )

# 전역 예외 처리기
@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """HTTP 예외 처리기"""
    logger.warning(
        f"HTTP 예외: {exc.status_code} {exc.detail} "
        f"for {request.method} {request.url.path}"
    )
    return _error_response(
        request, exc.status_code,
        ErrorDetail(code=f"HTTP_{exc.status_code}", message=str(exc.detail))
    )

@app.exception_handler(WizardTransitionError)
async def wizard_transition_handler(request: Request, exc: WizardTransitionError):
    """설문 단계 전환 불가 (409)"""
    logger.info(f"설문 전환 거부: {exc} for {request.url.path}")
    return _error_response(
        request, 409,
        ErrorDetail(code="WIZARD_TRANSITION_INVALID", message=str(exc))
    )

@app.exception_handler(PersonalizationEngineError)
async def engine_exception_handler(request: Request, exc: PersonalizationEngineError):
    """엔진 오류 (500)"""
    logger.error(f"개인화 엔진 오류: {exc} for {request.method} {request.url.path}")
    return _error_response(
        request, 500,
        ErrorDetail(
            code="PERSONALIZATION_ENGINE_ERROR",
            message=str(exc),
            details={"error_type": type(exc).__name__}
        )
    )

@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """일반 예외 처리기"""
    logger.error(
        f"예상치 못한 오류: {str(exc)} "
        f"for {request.method} {request.url.path}",
        exc_info=True
    )
    return _error_response(
        request, 500,
        ErrorDetail(
            code="INTERNAL_SERVER_ERROR",
            message="서버 내부 오류가 발생했습니다",
            details={"error_type": type(exc).__name__}
        )
    )

# 라우터 등록
from app.api.analysis import router as analysis_router
from app.api.catalog import router as catalog_router
from app.routers.health import router as health_router

app.include_router(analysis_router)
app.include_router(catalog_router)
app.include_router(health_router)

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=False)
