"""
제품 카탈로그 API
검색어, 카테고리, 피부 타입, 가격대 필터와 정렬
"""
from fastapi import APIRouter, HTTPException, Query, Request
from typing import List, Optional
from dataclasses import asdict
import logging

from pydantic import ValidationError

from app.models.catalog_models import SORT_AI_MATCH, ALL_CATEGORIES, ALL_SKIN_TYPES
from app.models.personalization_models import CatalogUnavailableError
from app.models.request import CatalogQueryParams, PriceRange
from app.models.response import CatalogResponse

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/v1",
    tags=["catalog"]
)

@router.get("/products", response_model=CatalogResponse)
async def list_products(
    request: Request,
    search: Optional[str] = Query(None, description="제품명/브랜드/설명 검색어"),
    category: str = Query(ALL_CATEGORIES, description="카테고리"),
    skin_type: str = Query(ALL_SKIN_TYPES, description="피부 타입"),
    price_range: List[str] = Query([], description="가격 범위 (예: 0-2000, 6000-), 여러 개는 OR"),
    sort_by: str = Query(SORT_AI_MATCH, description="ai-match, price-low, price-high, rating"),
    limit: int = Query(50, description="최대 개수")
):
    """제품 목록 조회"""
    try:
        params = CatalogQueryParams(
            search=search,
            category=category,
            skin_type=skin_type,
            price_ranges=[PriceRange.parse(raw) for raw in price_range],
            sort_by=sort_by,
            limit=limit
        )
    except (ValidationError, ValueError) as e:
        raise HTTPException(status_code=422, detail=str(e))

    try:
        products = await request.app.state.catalog_store.fetch_candidate_products(params.to_filter())
    except CatalogUnavailableError as e:
        logger.error(f"카탈로그 조회 실패: {e}")
        raise HTTPException(status_code=503, detail="제품 카탈로그를 사용할 수 없습니다")

    return CatalogResponse(
        total=len(products),
        products=[asdict(product) for product in products]
    )
