from fastapi import APIRouter, Request
from sqlalchemy import text
from datetime import datetime
import logging

from app.database.schema import get_engine

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["Health Check"])


@router.get("")
async def health_check(request: Request):
    """기본 헬스 체크"""
    settings = request.app.state.settings
    return {
        "status": "healthy",
        "timestamp": datetime.now().isoformat(),
        "service": "Skin Analysis API",
        "catalog": "postgresql" if settings.database_enabled else "json-fallback"
    }


@router.get("/db")
async def database_health_check(request: Request):
    """데이터베이스 연결 상태 확인"""
    if not request.app.state.settings.database_enabled:
        return {
            "status": "disabled",
            "database": "not configured",
            "message": "DATABASE_URL 미설정 - JSON 카탈로그 / 메모리 프로필 저장소 사용",
            "timestamp": datetime.now().isoformat()
        }

    try:
        # 간단한 쿼리로 DB 연결 테스트
        with get_engine().connect() as conn:
            conn.execute(text("SELECT 1"))
        return {
            "status": "healthy",
            "database": "connected",
            "message": "PostgreSQL 연결 성공",
            "timestamp": datetime.now().isoformat()
        }
    except Exception as e:
        logger.warning(f"데이터베이스 헬스체크 실패: {e}")
        return {
            "status": "unhealthy",
            "database": "disconnected",
            "error": str(e),
            "timestamp": datetime.now().isoformat()
        }
