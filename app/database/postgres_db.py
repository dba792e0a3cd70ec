"""
PostgreSQL 데이터베이스 연결 관리
asyncpg 기반 연결 풀 및 헬스체크 기능
"""

import asyncpg
import asyncio
import logging
import ssl
from typing import Optional, Dict, Any, List
from urllib.parse import urlparse
from contextlib import asynccontextmanager

from app.config.settings import get_settings

logger = logging.getLogger(__name__)

class PostgreSQLDB:
    """PostgreSQL 데이터베이스 연결 클래스"""

    def __init__(self, database_url: Optional[str] = None):
        """
        PostgreSQL 데이터베이스 초기화

        Args:
            database_url: PostgreSQL 연결 URL (없으면 설정에서 로드)
        """
        self.database_url = database_url or get_settings().database_url
        if not self.database_url:
            raise ValueError("DATABASE_URL 환경변수가 설정되지 않았습니다.")

        self._pool: Optional[asyncpg.Pool] = None
        self._connection_config = self._parse_database_url()
        self._closing = False

    def _parse_database_url(self) -> Dict[str, Any]:
        """DATABASE_URL 파싱하여 연결 설정 추출"""
        parsed = urlparse(self.database_url)

        config = {
            'host': parsed.hostname,
            'port': parsed.port or 5432,
            'database': parsed.path.lstrip('/'),
            'user': parsed.username,
            'password': parsed.password,
        }

        if 'sslmode=require' in self.database_url:
            ssl_context = ssl.create_default_context()
            ssl_context.check_hostname = False
            ssl_context.verify_mode = ssl.CERT_NONE
            config['ssl'] = ssl_context

        return config

    async def create_pool(self, min_size: int = 1, max_size: int = 5) -> asyncpg.Pool:
        """연결 풀 생성"""
        if self._closing:
            raise RuntimeError("데이터베이스가 종료 중입니다")

        if self.is_pool_active():
            return self._pool

        try:
            logger.info("PostgreSQL 연결 풀 생성 시작")
            self._pool = await asyncio.wait_for(
                asyncpg.create_pool(
                    **self._connection_config,
                    min_size=min_size,
                    max_size=max_size,
                    max_inactive_connection_lifetime=180.0,
                    command_timeout=15.0,
                    server_settings={
                        'application_name': 'skin_analysis_api',
                        'timezone': 'UTC'
                    }
                ),
                timeout=10.0
            )

            async with self._pool.acquire() as conn:
                await conn.fetchval("SELECT 1")

            logger.info(f"PostgreSQL 연결 풀 생성 완료 (min={min_size}, max={max_size})")
            return self._pool

        except Exception as e:
            logger.error(f"PostgreSQL 연결 풀 생성 실패: {e}")
            if self._pool is not None:
                self._pool.terminate()
                self._pool = None
            raise

    async def close_pool(self):
        """연결 풀 종료"""
        self._closing = True

        if not self._pool:
            return

        try:
            logger.info("PostgreSQL 연결 풀 종료 시작")
            await asyncio.wait_for(self._pool.close(), timeout=5.0)
            logger.info("PostgreSQL 연결 풀 종료 완료")
        except (asyncio.TimeoutError, asyncpg.PostgresError) as e:
            logger.warning(f"연결 풀 정상 종료 실패 - 강제 종료: {e}")
            self._pool.terminate()
        finally:
            self._pool = None

    def is_pool_active(self) -> bool:
        """연결 풀이 활성 상태인지 확인"""
        return self._pool is not None and not self._pool.is_closing()

    @asynccontextmanager
    async def get_connection(self):
        """연결 풀에서 연결 획득"""
        if not self.is_pool_active():
            logger.warning("연결 풀이 비활성 상태")
            raise asyncpg.ConnectionDoesNotExistError("연결 풀이 비활성 상태입니다")

        async with self._pool.acquire() as connection:
            yield connection

    async def execute_query(self, query: str, *args) -> List[Dict[str, Any]]:
        """쿼리 실행 및 결과 반환"""
        try:
            async with self.get_connection() as conn:
                rows = await conn.fetch(query, *args)
                return [dict(row) for row in rows]
        except Exception as e:
            logger.error(f"쿼리 실행 오류: {e}")
            raise

    async def execute_single(self, query: str, *args) -> Optional[Dict[str, Any]]:
        """단일 결과 쿼리 실행"""
        try:
            async with self.get_connection() as conn:
                row = await conn.fetchrow(query, *args)
                return dict(row) if row else None
        except Exception as e:
            logger.error(f"단일 쿼리 실행 오류: {e}")
            raise

    async def execute_command(self, query: str, *args) -> str:
        """INSERT/UPDATE/DELETE 명령 실행"""
        try:
            async with self.get_connection() as conn:
                return await conn.execute(query, *args)
        except Exception as e:
            logger.error(f"명령 실행 오류: {e}")
            raise

    async def test_connection(self) -> bool:
        """데이터베이스 연결 테스트"""
        try:
            async with self.get_connection() as conn:
                result = await conn.fetchval("SELECT 1")
                return result == 1
        except Exception as e:
            logger.error(f"PostgreSQL 연결 테스트 실패: {e}")
            return False


# 전역 데이터베이스 인스턴스
_db_instance: Optional[PostgreSQLDB] = None

def get_postgres_db() -> PostgreSQLDB:
    """PostgreSQL 데이터베이스 인스턴스 반환"""
    global _db_instance
    if _db_instance is None:
        _db_instance = PostgreSQLDB()
        logger.debug("새로운 PostgreSQL 인스턴스 생성")
    return _db_instance

async def init_database() -> PostgreSQLDB:
    """데이터베이스 초기화 (애플리케이션 시작 시 호출)"""
    db = get_postgres_db()

    logger.info("PostgreSQL 데이터베이스 초기화 시작")
    try:
        await asyncio.wait_for(db.create_pool(), timeout=15.0)
    except asyncio.TimeoutError:
        logger.error("PostgreSQL 초기화 시간 초과")
        raise

    if not await db.test_connection():
        raise ConnectionError("PostgreSQL 데이터베이스 연결 테스트 실패")

    logger.info("PostgreSQL 데이터베이스 초기화 및 연결 테스트 완료")
    return db

async def close_database():
    """데이터베이스 연결 종료 (애플리케이션 종료 시 호출)"""
    global _db_instance
    if _db_instance is not None:
        await _db_instance.close_pool()
        _db_instance = None
