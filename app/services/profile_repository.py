"""
프로필 저장소
세션/사용자 키 기준 최신 분석 프로필 캐시 (upsert, last-write-wins)
"""
from typing import Dict, Optional, Any
import copy
import json
import logging

from app.database.postgres_db import PostgreSQLDB
from app.interfaces.personalization_interfaces import IProfileRepository
from app.models.personalization_models import ProfilePersistenceError

logger = logging.getLogger(__name__)

UPSERT_PROFILE_SQL = """
    INSERT INTO skin_profiles (profile_key, profile, skin_type, personalization_score, algorithm_version, updated_at)
    VALUES ($1, $2::jsonb, $3, $4, $5, NOW())
    ON CONFLICT (profile_key) DO UPDATE SET
        profile = EXCLUDED.profile,
        skin_type = EXCLUDED.skin_type,
        personalization_score = EXCLUDED.personalization_score,
        algorithm_version = EXCLUDED.algorithm_version,
        updated_at = NOW()
"""

SELECT_PROFILE_SQL = "SELECT profile FROM skin_profiles WHERE profile_key = $1"

class InMemoryProfileRepository(IProfileRepository):
    """메모리 기반 프로필 저장소"""

    def __init__(self):
        self._profiles: Dict[str, Dict[str, Any]] = {}

    async def load(self, key: str) -> Optional[Dict[str, Any]]:
        profile = self._profiles.get(key)
        return copy.deepcopy(profile) if profile is not None else None

    async def save(self, key: str, profile: Dict[str, Any]) -> None:
        self._profiles[key] = copy.deepcopy(profile)

    def __len__(self) -> int:
        return len(self._profiles)

class PostgresProfileRepository(IProfileRepository):
    """PostgreSQL 프로필 저장소 (skin_profiles 테이블)"""

    def __init__(self, db: PostgreSQLDB):
        self.db = db

    async def load(self, key: str) -> Optional[Dict[str, Any]]:
        try:
            row = await self.db.execute_single(SELECT_PROFILE_SQL, key)
        except Exception as e:
            raise ProfilePersistenceError(f"프로필 조회 실패: {key} ({e})") from e

        if row is None:
            return None

        profile = row['profile']
        # asyncpg는 코덱 미설정 시 JSONB를 문자열로 반환
        if isinstance(profile, str):
            profile = json.loads(profile)
        return profile

    async def save(self, key: str, profile: Dict[str, Any]) -> None:
        skin_type = (profile.get('skin_type') or {}).get('type')
        try:
            await self.db.execute_command(
                UPSERT_PROFILE_SQL,
                key,
                json.dumps(profile, ensure_ascii=False),
                skin_type,
                profile.get('personalization_score'),
                profile.get('algorithm_version')
            )
        except Exception as e:
            raise ProfilePersistenceError(f"프로필 저장 실패: {key} ({e})") from e
