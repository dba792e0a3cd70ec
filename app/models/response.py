"""
응답 모델 정의
"""
from pydantic import BaseModel
from typing import Optional, Dict, Any, List, Union
from datetime import datetime

class ErrorDetail(BaseModel):
    """에러 상세 정보"""
    code: str
    message: str
    field: Optional[str] = None
    details: Optional[Dict[str, Any]] = None

class ErrorResponse(BaseModel):
    """에러 응답"""
    error: ErrorDetail
    timestamp: datetime
    path: str

# === 분석 결과 ===

class SkinTypeResult(BaseModel):
    type: str
    confidence: float
    score_per_type: Dict[str, float]

class PrioritizedConcernResult(BaseModel):
    label: str
    priority_score: float
    urgency: str
    is_known: bool

class ConcernPriorityResult(BaseModel):
    ranked: List[PrioritizedConcernResult]
    treatment_complexity: str

class IngredientResult(BaseModel):
    name: str
    match_percent: int
    rationale: str
    scientific_evidence_score: int
    synergy_partners: List[str]
    targeted_concerns: List[str]

class RoutineStepResult(BaseModel):
    step_name: str
    product_category: str
    rationale: str
    time_of_day: str
    application_note: str
    step_class: str

class RoutineResult(BaseModel):
    morning: List[RoutineStepResult]
    evening: List[RoutineStepResult]

class OutcomeTimelineResult(BaseModel):
    week_1: List[str]
    week_4: List[str]
    week_8: List[str]
    week_12: List[str]

class RiskAssessmentResult(BaseModel):
    ingredient_conflicts: List[str]
    over_treatment_risk: int
    sensitivity_alerts: List[str]

class ProductMatchResult(BaseModel):
    product_id: str
    name: str
    brand: str
    price: float
    ai_match_score: int
    match_reasons: List[str]
    predicted_results: List[str]
    usage_timeline: str
    expected_timeline: str
    image_url: Optional[str] = None

class PersonalizedProfileResponse(BaseModel):
    """개인화 분석 결과"""
    skin_type: SkinTypeResult
    concern_priority: ConcernPriorityResult
    ingredient_recommendations: List[IngredientResult]
    routine: RoutineResult
    predicted_outcomes: OutcomeTimelineResult
    risk_assessment: RiskAssessmentResult
    personalization_score: int
    ai_insights: List[str]
    product_matches: List[ProductMatchResult]
    products_enriched: bool
    algorithm_version: str

# === 설문 위저드 ===

class WizardStepInfo(BaseModel):
    id: str
    title: str
    question: str
    kind: str
    options: List[str]
    answer: Optional[Union[Dict[str, int], List[str], str]] = None

class WizardStateResponse(BaseModel):
    """위저드 상태"""
    session_id: str
    state: str
    step_index: int
    total_steps: int
    progress: int
    can_proceed: bool
    current_step: Optional[WizardStepInfo] = None
    profile: Optional[PersonalizedProfileResponse] = None

# === 카탈로그 ===

class CatalogProductResponse(BaseModel):
    id: str
    name: str
    brand: str
    price: float
    rating: float
    review_count: int
    category: str
    description: str
    benefits: List[str]
    skin_types: List[str]
    ingredients: List[str]
    clinical_evidence_score: float
    usage_frequency: Optional[str] = None
    ai_match_score: float
    image_url: Optional[str] = None

class CatalogResponse(BaseModel):
    """제품 목록"""
    total: int
    products: List[CatalogProductResponse]
