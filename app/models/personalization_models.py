"""
개인화 피부 분석 엔진 핵심 데이터 모델
설문 응답, 피부 타입 분류, 고민 우선순위, 성분 추천, 루틴, 위험도 평가 결과를 담는 데이터 클래스들
"""

from typing import List, Dict, Optional, Any, Tuple
from dataclasses import dataclass, field, asdict
from enum import Enum

from app.config.scoring_config import SkinTraits

# === 열거형 정의 ===

class SkinType(str, Enum):
    """피부 타입"""
    NORMAL = "normal"
    OILY = "oily"
    DRY = "dry"
    COMBINATION = "combination"
    SENSITIVE = "sensitive"

class Urgency(str, Enum):
    """고민 긴급도"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

class TreatmentComplexity(str, Enum):
    """치료 복잡도 (선택한 고민 수 기준)"""
    SIMPLE = "simple"
    MODERATE = "moderate"
    COMPLEX = "complex"

class StepClass(str, Enum):
    """루틴 단계 분류"""
    CLEANSER = "cleanser"
    TREATMENT = "treatment"
    MOISTURIZER = "moisturizer"  # 보습제, 선크림, 나이트 크림 등 마지막 레이어

# === 입력 모델 ===

@dataclass(frozen=True)
class QuestionnaireResponse:
    """설문 응답 (UI에서 구성, 1회 소비)"""
    scale_answers: Dict[str, int] = field(default_factory=dict)
    selected_concerns: Tuple[str, ...] = ()
    environment_factors: frozenset = frozenset()
    demographics: frozenset = frozenset()
    routine_habits: frozenset = frozenset()
    goals: frozenset = frozenset()
    preferences: frozenset = frozenset()

    @classmethod
    def from_answers(
        cls,
        scale_answers: Optional[Dict[str, Any]] = None,
        selected_concerns: Optional[List[str]] = None,
        environment_factors: Optional[List[str]] = None,
        demographics: Optional[List[str]] = None,
        routine_habits: Optional[List[str]] = None,
        goals: Optional[List[str]] = None,
        preferences: Optional[List[str]] = None,
    ) -> 'QuestionnaireResponse':
        """원시 응답으로부터 생성 (척도 범위 보정, 고민 중복 제거)"""
        scales = {}
        for trait, value in (scale_answers or {}).items():
            if value is None:
                continue
            scales[trait] = int(max(SkinTraits.SCALE_MIN, min(SkinTraits.SCALE_MAX, int(value))))

        concerns: List[str] = []
        for concern in selected_concerns or []:
            if concern not in concerns:
                concerns.append(concern)

        return cls(
            scale_answers=scales,
            selected_concerns=tuple(concerns),
            environment_factors=frozenset(environment_factors or []),
            demographics=frozenset(demographics or []),
            routine_habits=frozenset(routine_habits or []),
            goals=frozenset(goals or []),
            preferences=frozenset(preferences or []),
        )

    def scale(self, trait: str) -> int:
        """척도 값 조회 (미응답 시 중간값 5)"""
        return self.scale_answers.get(trait, SkinTraits.DEFAULT_VALUE)

    @property
    def answered_trait_count(self) -> int:
        """실제 응답한 척도 항목 수"""
        return sum(1 for trait in SkinTraits.ALL if trait in self.scale_answers)

# === 분류 결과 모델 ===

@dataclass(frozen=True)
class SkinTypeClassification:
    """피부 타입 분류 결과"""
    type: SkinType
    confidence: float
    score_per_type: Dict[str, float]

    @property
    def confidence_percent(self) -> int:
        """신뢰도 (%)"""
        return int(round(self.confidence * 100))

@dataclass(frozen=True)
class PrioritizedConcern:
    """우선순위가 매겨진 개별 고민"""
    label: str
    priority_score: float
    urgency: Urgency
    is_known: bool = True

@dataclass(frozen=True)
class ConcernPriority:
    """고민 우선순위 결과"""
    ranked: Tuple[PrioritizedConcern, ...]
    treatment_complexity: TreatmentComplexity

    @property
    def concerns(self) -> List[str]:
        """우선순위 순 고민 라벨"""
        return [concern.label for concern in self.ranked]

    @property
    def top_concern(self) -> Optional[PrioritizedConcern]:
        """최우선 고민"""
        return self.ranked[0] if self.ranked else None

# === 추천 결과 모델 ===

@dataclass(frozen=True)
class IngredientRecommendation:
    """성분 추천"""
    name: str
    match_percent: int
    rationale: str
    scientific_evidence_score: int
    synergy_partners: Tuple[str, ...] = ()
    targeted_concerns: Tuple[str, ...] = ()

@dataclass(frozen=True)
class RoutineStep:
    """루틴 단계"""
    step_name: str
    product_category: str
    rationale: str
    time_of_day: str
    application_note: str
    step_class: StepClass = StepClass.TREATMENT

@dataclass(frozen=True)
class RoutinePlan:
    """아침/저녁 루틴"""
    morning: Tuple[RoutineStep, ...]
    evening: Tuple[RoutineStep, ...]

    @property
    def steps(self) -> List[RoutineStep]:
        """전체 단계 (아침 -> 저녁)"""
        return list(self.morning) + list(self.evening)

@dataclass(frozen=True)
class OutcomeTimeline:
    """예상 결과 타임라인 (1/4/8/12주)"""
    week_1: Tuple[str, ...]
    week_4: Tuple[str, ...]
    week_8: Tuple[str, ...]
    week_12: Tuple[str, ...]

@dataclass(frozen=True)
class RiskAssessment:
    """위험도 평가"""
    ingredient_conflicts: Tuple[str, ...] = ()
    over_treatment_risk: int = 0
    sensitivity_alerts: Tuple[str, ...] = ()

    @property
    def has_warnings(self) -> bool:
        """경고 존재 여부"""
        return bool(self.ingredient_conflicts or self.sensitivity_alerts)

@dataclass(frozen=True)
class ProductMatch:
    """카탈로그 제품 AI 매칭 결과"""
    product_id: str
    name: str
    brand: str
    price: float
    ai_match_score: int
    match_reasons: Tuple[str, ...] = ()
    predicted_results: Tuple[str, ...] = ()
    usage_timeline: str = ""
    expected_timeline: str = ""
    image_url: Optional[str] = None

# === 집계 루트 ===

@dataclass(frozen=True)
class PersonalizedProfile:
    """개인화 프로필 (엔진 출력)"""
    skin_type: SkinTypeClassification
    concern_priority: ConcernPriority
    ingredient_recommendations: Tuple[IngredientRecommendation, ...]
    routine: RoutinePlan
    predicted_outcomes: OutcomeTimeline
    risk_assessment: RiskAssessment
    personalization_score: int
    ai_insights: Tuple[str, ...]
    product_matches: Tuple[ProductMatch, ...] = ()
    products_enriched: bool = False
    algorithm_version: str = "1.0"

    @property
    def recommended_ingredient_names(self) -> List[str]:
        """추천 성분 이름 목록"""
        return [rec.name for rec in self.ingredient_recommendations]

    def to_dict(self) -> Dict[str, Any]:
        """저장/전송용 평면 구조로 변환"""
        return _to_plain(asdict(self))

def _to_plain(value: Any) -> Any:
    """Enum/튜플/집합을 JSON 호환 값으로 변환"""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {str(k): _to_plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_plain(v) for v in value]
    if isinstance(value, (set, frozenset)):
        return sorted(_to_plain(v) for v in value)
    return value

# === 예외 클래스 ===

class PersonalizationEngineError(Exception):
    """개인화 엔진 기본 예외"""
    pass

class ClassificationError(PersonalizationEngineError):
    """피부 타입 분류 불가 (가중치 테이블 구성 오류)"""
    pass

class CatalogUnavailableError(PersonalizationEngineError):
    """카탈로그 조회 실패"""
    pass

class ProfilePersistenceError(PersonalizationEngineError):
    """프로필 저장/조회 실패"""
    pass

class WizardTransitionError(PersonalizationEngineError):
    """설문 단계 전환 불가"""
    pass
