"""
카탈로그 제품 모델 정의
PostgreSQL 행 / JSON 폴백 데이터를 공통 제품 레코드로 변환
"""

from typing import List, Dict, Optional, Any, Tuple
from dataclasses import dataclass, field
import json
import logging

logger = logging.getLogger(__name__)

SORT_AI_MATCH = "ai-match"
SORT_PRICE_LOW = "price-low"
SORT_PRICE_HIGH = "price-high"
SORT_RATING = "rating"
SORT_KEYS = [SORT_AI_MATCH, SORT_PRICE_LOW, SORT_PRICE_HIGH, SORT_RATING]

ALL_CATEGORIES = "All"
ALL_SKIN_TYPES = "All Types"


def _parse_string_list(raw: Any) -> List[str]:
    """JSONB/문자열/리스트 필드를 문자열 리스트로 변환"""
    if raw is None:
        return []
    if isinstance(raw, str):
        try:
            parsed = json.loads(raw)
        except json.JSONDecodeError:
            # JSON이 아니면 콤마 구분 문자열로 처리
            return [part.strip() for part in raw.split(",") if part.strip()]
        raw = parsed if isinstance(parsed, list) else []
    if isinstance(raw, (list, tuple, set)):
        return [str(item).strip() for item in raw if item]
    return []


@dataclass
class CatalogProduct:
    """카탈로그 제품"""
    id: str
    name: str
    brand: str = ""
    price: float = 0.0
    rating: float = 0.0
    review_count: int = 0
    category: str = ""
    description: str = ""
    benefits: List[str] = field(default_factory=list)
    skin_types: List[str] = field(default_factory=list)
    ingredients: List[str] = field(default_factory=list)
    clinical_evidence_score: float = 0.0
    usage_frequency: Optional[str] = None
    ai_match_score: float = 0.0
    image_url: Optional[str] = None

    @classmethod
    def from_db_row(cls, row: Dict[str, Any]) -> 'CatalogProduct':
        """데이터베이스 행(또는 JSON 딕셔너리)에서 제품 생성"""
        return cls(
            id=str(row['id']),
            name=row['name'],
            brand=row.get('brand') or "",
            price=float(row.get('price') or 0.0),
            rating=float(row.get('rating') or 0.0),
            review_count=int(row.get('review_count') or 0),
            category=row.get('category') or "",
            description=row.get('description') or "",
            benefits=_parse_string_list(row.get('benefits')),
            skin_types=_parse_string_list(row.get('skin_types')),
            ingredients=_parse_string_list(row.get('ingredients')),
            clinical_evidence_score=float(row.get('clinical_evidence_score') or 0.0),
            usage_frequency=row.get('usage_frequency'),
            ai_match_score=float(row.get('ai_match_score') or 0.0),
            image_url=row.get('image_url'),
        )

    def suits_skin_type(self, skin_type: str) -> bool:
        """피부 타입 적합 여부 ("All Types" 제품은 모든 타입에 적합)"""
        normalized = {s.lower() for s in self.skin_types}
        return ALL_SKIN_TYPES.lower() in normalized or skin_type.lower() in normalized


@dataclass
class CatalogFilter:
    """카탈로그 조회 필터"""
    search: Optional[str] = None
    category: str = ALL_CATEGORIES
    skin_type: str = ALL_SKIN_TYPES
    price_ranges: List[Tuple[float, Optional[float]]] = field(default_factory=list)  # (min, max) / max=None은 상한 없음
    sort_by: str = SORT_AI_MATCH
    limit: int = 50

    def matches(self, product: CatalogProduct) -> bool:
        """제품이 필터 조건을 만족하는지 확인"""
        if self.search:
            term = self.search.lower()
            haystack = (product.name, product.brand, product.description)
            if not any(term in text.lower() for text in haystack):
                return False

        if self.category and self.category != ALL_CATEGORIES and product.category != self.category:
            return False

        if self.skin_type and self.skin_type != ALL_SKIN_TYPES and not product.suits_skin_type(self.skin_type):
            return False

        if self.price_ranges:
            in_range = any(
                product.price >= low and (high is None or product.price <= high)
                for low, high in self.price_ranges
            )
            if not in_range:
                return False

        return True

    def sort(self, products: List[CatalogProduct]) -> List[CatalogProduct]:
        """정렬 기준 적용"""
        if self.sort_by == SORT_PRICE_LOW:
            return sorted(products, key=lambda p: p.price)
        if self.sort_by == SORT_PRICE_HIGH:
            return sorted(products, key=lambda p: p.price, reverse=True)
        if self.sort_by == SORT_RATING:
            return sorted(products, key=lambda p: p.rating, reverse=True)
        return sorted(products, key=lambda p: p.ai_match_score, reverse=True)

    def apply(self, products: List[CatalogProduct]) -> List[CatalogProduct]:
        """필터링 + 정렬 + 개수 제한"""
        filtered = [p for p in products if self.matches(p)]
        return self.sort(filtered)[:self.limit]
