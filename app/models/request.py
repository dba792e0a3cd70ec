"""
요청 모델 정의
"""
from pydantic import BaseModel, Field, field_validator
from typing import List, Optional, Dict, Tuple, Union

from app.config.scoring_config import SkinTraits
from app.models.catalog_models import (
    CatalogFilter, SORT_AI_MATCH, SORT_KEYS, ALL_CATEGORIES, ALL_SKIN_TYPES
)
from app.models.personalization_models import QuestionnaireResponse

class ScaleAnswers(BaseModel):
    """피부 특성 척도 응답 (0-10, 미응답은 None)"""
    oiliness: Optional[int] = Field(None, ge=0, le=10, description="유분")
    dryness: Optional[int] = Field(None, ge=0, le=10, description="건조함")
    sensitivity: Optional[int] = Field(None, ge=0, le=10, description="민감도")
    breakouts: Optional[int] = Field(None, ge=0, le=10, description="트러블")
    aging_signs: Optional[int] = Field(None, ge=0, le=10, description="노화 징후")
    pore_size: Optional[int] = Field(None, ge=0, le=10, description="모공 크기")
    pigmentation: Optional[int] = Field(None, ge=0, le=10, description="색소침착")

    def answered(self) -> Dict[str, int]:
        """응답한 항목만 반환"""
        return {trait: getattr(self, trait) for trait in SkinTraits.ALL if getattr(self, trait) is not None}

class QuestionnaireRequest(BaseModel):
    """피부 분석 요청"""
    scale_answers: ScaleAnswers = Field(default_factory=ScaleAnswers, description="피부 특성 척도")
    selected_concerns: List[str] = Field(default_factory=list, description="피부 고민 (선택 순서)")
    environment_factors: List[str] = Field(default_factory=list, description="환경 요인")
    demographics: List[str] = Field(default_factory=list, description="연령대 등 인구통계")
    routine_habits: List[str] = Field(default_factory=list, description="루틴 습관")
    goals: List[str] = Field(default_factory=list, description="스킨케어 목표")
    preferences: List[str] = Field(default_factory=list, description="제품 선호 조건")
    profile_key: Optional[str] = Field(None, max_length=100, description="프로필 저장 키 (세션/사용자 ID)")

    @field_validator('selected_concerns')
    @classmethod
    def validate_unique_concerns(cls, v):
        if len(v) != len(set(v)):
            raise ValueError('피부 고민은 중복 선택할 수 없습니다')
        return v

    def to_response(self) -> QuestionnaireResponse:
        """엔진 입력으로 변환"""
        return QuestionnaireResponse.from_answers(
            scale_answers=self.scale_answers.answered(),
            selected_concerns=self.selected_concerns,
            environment_factors=self.environment_factors,
            demographics=self.demographics,
            routine_habits=self.routine_habits,
            goals=self.goals,
            preferences=self.preferences,
        )

class PriceRange(BaseModel):
    """가격 범위 (max_price 없으면 상한 없음)"""
    min_price: float = Field(0.0, ge=0, description="최소 가격")
    max_price: Optional[float] = Field(None, ge=0, description="최대 가격")

    @classmethod
    def parse(cls, raw: str) -> 'PriceRange':
        """'2000-4000' / '6000-' 형식 문자열 파싱"""
        low, sep, high = raw.partition("-")
        if not sep:
            raise ValueError(f"가격 범위 형식 오류: {raw} (예: 2000-4000, 6000-)")
        return cls(
            min_price=float(low) if low.strip() else 0.0,
            max_price=float(high) if high.strip() else None
        )

class CatalogQueryParams(BaseModel):
    """제품 목록 조회 조건"""
    search: Optional[str] = Field(None, description="제품명/브랜드/설명 검색어")
    category: str = Field(ALL_CATEGORIES, description="카테고리 ('All' = 전체)")
    skin_type: str = Field(ALL_SKIN_TYPES, description="피부 타입 ('All Types' = 전체)")
    price_ranges: List[PriceRange] = Field(default_factory=list, description="가격 범위 (하나라도 만족)")
    sort_by: str = Field(SORT_AI_MATCH, description="정렬 (ai-match, price-low, price-high, rating)")
    limit: int = Field(50, ge=1, le=200, description="최대 개수")

    @field_validator('sort_by')
    @classmethod
    def validate_sort_by(cls, v):
        if v not in SORT_KEYS:
            raise ValueError(f"정렬 기준은 {', '.join(SORT_KEYS)} 중 하나여야 합니다")
        return v

    def to_filter(self) -> CatalogFilter:
        ranges: List[Tuple[float, Optional[float]]] = [
            (price_range.min_price, price_range.max_price) for price_range in self.price_ranges
        ]
        return CatalogFilter(
            search=self.search,
            category=self.category,
            skin_type=self.skin_type,
            price_ranges=ranges,
            sort_by=self.sort_by,
            limit=self.limit
        )

class WizardAnswerRequest(BaseModel):
    """설문 위저드 현재 단계 응답"""
    value: Union[Dict[str, Optional[int]], List[str], str] = Field(
        ..., description="척도 단계: {trait: 0-10}, 단일 선택: 문자열, 다중 선택: 문자열 목록"
    )
