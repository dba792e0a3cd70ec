"""
개인화 엔진 외부 연동 인터페이스
카탈로그 조회, 프로필 저장, 분석 이력 기록의 표준 포트 정의
"""

from abc import ABC, abstractmethod
from typing import List, Dict, Optional, Any

from app.models.catalog_models import CatalogProduct, CatalogFilter

# === 카탈로그 인터페이스 ===

class ICatalogStore(ABC):
    """카탈로그 저장소 인터페이스"""

    @abstractmethod
    async def fetch_candidate_products(self, catalog_filter: CatalogFilter) -> List[CatalogProduct]:
        """
        필터 조건에 맞는 후보 제품 조회

        Args:
            catalog_filter: 검색어, 카테고리, 피부타입, 가격대, 정렬 조건

        Returns:
            List[CatalogProduct]: 후보 제품 목록

        Raises:
            CatalogUnavailableError: 저장소 조회 실패
        """
        pass

# === 프로필 저장소 인터페이스 ===

class IProfileRepository(ABC):
    """프로필 저장소 인터페이스 (세션/사용자 키 기준 upsert)"""

    @abstractmethod
    async def load(self, key: str) -> Optional[Dict[str, Any]]:
        """
        저장된 프로필 조회

        Args:
            key: 세션 또는 사용자 식별자

        Returns:
            Optional[Dict]: 직렬화된 프로필 (없으면 None)
        """
        pass

    @abstractmethod
    async def save(self, key: str, profile: Dict[str, Any]) -> None:
        """
        프로필 저장 (기존 프로필 덮어쓰기, last-write-wins)

        Args:
            key: 세션 또는 사용자 식별자
            profile: 직렬화된 프로필
        """
        pass

# === 분석 이력 인터페이스 ===

class IAnalysisHistoryLog(ABC):
    """호출자가 관리하는 추가 전용 분석 이력"""

    @abstractmethod
    def append(self, entry: Dict[str, Any]) -> None:
        """이력 항목 추가"""
        pass

    @abstractmethod
    def entries(self) -> List[Dict[str, Any]]:
        """전체 이력 조회 (오래된 순)"""
        pass
