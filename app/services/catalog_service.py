"""
카탈로그 조회 서비스
PostgreSQL 우선 조회, 실패 시 JSON 폴백 데이터 사용
"""
from typing import List, Optional, Any, Tuple
import json
import logging

from app.database.postgres_db import PostgreSQLDB
from app.interfaces.personalization_interfaces import ICatalogStore
from app.models.catalog_models import (
    CatalogProduct, CatalogFilter, ALL_CATEGORIES, ALL_SKIN_TYPES,
    SORT_PRICE_LOW, SORT_PRICE_HIGH, SORT_RATING
)
from app.models.personalization_models import CatalogUnavailableError

logger = logging.getLogger(__name__)

ORDER_BY = {
    SORT_PRICE_LOW: "price ASC, id ASC",
    SORT_PRICE_HIGH: "price DESC, id ASC",
    SORT_RATING: "rating DESC NULLS LAST, id ASC",
}
DEFAULT_ORDER_BY = "ai_match_score DESC NULLS LAST, id ASC"

class InMemoryCatalogStore(ICatalogStore):
    """메모리 기반 카탈로그 (테스트/폴백용)"""

    def __init__(self, products: Optional[List[CatalogProduct]] = None):
        self.products = list(products or [])

    async def fetch_candidate_products(self, catalog_filter: CatalogFilter) -> List[CatalogProduct]:
        return catalog_filter.apply(self.products)

class JsonCatalogStore(ICatalogStore):
    """JSON 파일 기반 카탈로그"""

    def __init__(self, file_path: str):
        self.file_path = file_path
        self._products: Optional[List[CatalogProduct]] = None

    def _load_products(self) -> List[CatalogProduct]:
        """폴백 제품 데이터 로드 (최초 1회)"""
        if self._products is not None:
            return self._products

        try:
            with open(self.file_path, 'r', encoding='utf-8') as f:
                raw = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise CatalogUnavailableError(f"폴백 제품 데이터 로드 실패: {self.file_path} ({e})") from e

        products = []
        for product_dict in raw:
            try:
                products.append(CatalogProduct.from_db_row(product_dict))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"폴백 제품 처리 오류 (건너뜀): {e}")

        self._products = products
        logger.info(f"폴백 제품 데이터 로드: {len(products)}개")
        return products

    async def fetch_candidate_products(self, catalog_filter: CatalogFilter) -> List[CatalogProduct]:
        return catalog_filter.apply(self._load_products())

class PostgresCatalogStore(ICatalogStore):
    """PostgreSQL 카탈로그 (조회 실패 시 폴백 저장소 사용)"""

    def __init__(self, db: PostgreSQLDB, fallback: Optional[ICatalogStore] = None):
        self.db = db
        self.fallback = fallback

    async def fetch_candidate_products(self, catalog_filter: CatalogFilter) -> List[CatalogProduct]:
        query, params = self.build_query(catalog_filter)

        try:
            rows = await self.db.execute_query(query, *params)
            products = [CatalogProduct.from_db_row(row) for row in rows]
            logger.info(f"PostgreSQL에서 후보 제품 조회 성공: {len(products)}개")
            return products
        except Exception as e:
            logger.warning(f"PostgreSQL 제품 조회 실패: {e}")

        if self.fallback is None:
            raise CatalogUnavailableError("PostgreSQL 제품 조회 실패 (폴백 없음)")

        logger.warning("PostgreSQL 조회 실패 - fallback 데이터 사용")
        return await self.fallback.fetch_candidate_products(catalog_filter)

    @staticmethod
    def build_query(catalog_filter: CatalogFilter) -> Tuple[str, List[Any]]:
        """필터 조건으로 SQL 쿼리 구성"""
        query = "SELECT * FROM products WHERE 1=1"
        params: List[Any] = []

        if catalog_filter.search:
            params.append(f"%{escape_like(catalog_filter.search)}%")
            n = len(params)
            query += (
                f" AND (name ILIKE ${n} ESCAPE '\\'"
                f" OR brand ILIKE ${n} ESCAPE '\\'"
                f" OR description ILIKE ${n} ESCAPE '\\')"
            )

        if catalog_filter.category and catalog_filter.category != ALL_CATEGORIES:
            params.append(catalog_filter.category)
            query += f" AND category = ${len(params)}"

        if catalog_filter.skin_type and catalog_filter.skin_type != ALL_SKIN_TYPES:
            params.append([catalog_filter.skin_type.lower(), ALL_SKIN_TYPES.lower()])
            query += (
                " AND EXISTS (SELECT 1 FROM jsonb_array_elements_text(skin_types) AS st"
                f" WHERE lower(st) = ANY(${len(params)}))"
            )

        if catalog_filter.price_ranges:
            range_conditions = []
            for low, high in catalog_filter.price_ranges:
                params.append(low)
                condition = f"price >= ${len(params)}"
                if high is not None:
                    params.append(high)
                    condition += f" AND price <= ${len(params)}"
                range_conditions.append(f"({condition})")
            query += " AND (" + " OR ".join(range_conditions) + ")"

        params.append(catalog_filter.limit)
        query += f" ORDER BY {ORDER_BY.get(catalog_filter.sort_by, DEFAULT_ORDER_BY)} LIMIT ${len(params)}"

        return query, params

def escape_like(term: str) -> str:
    """LIKE 패턴 문자(%, _, \\) 이스케이프"""
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")

def build_catalog_store(db: Optional[PostgreSQLDB], fallback_file: str) -> ICatalogStore:
    """설정에 맞는 카탈로그 저장소 생성"""
    json_store = JsonCatalogStore(fallback_file)
    if db is None:
        logger.info("DATABASE_URL 미설정 - JSON 카탈로그 사용")
        return json_store
    return PostgresCatalogStore(db, fallback=json_store)
