"""
피부 분석 점수 설정 관리
분류기 가중치, 고민 우선순위 공식, 성분 데이터베이스 등 모든 고정 상수를 중앙 집중 관리
"""
from typing import Dict, List, Tuple


class SkinTraits:
    """설문 척도 항목 (0-10)"""

    OILINESS = "oiliness"
    DRYNESS = "dryness"
    SENSITIVITY = "sensitivity"
    BREAKOUTS = "breakouts"
    AGING_SIGNS = "aging_signs"
    PORE_SIZE = "pore_size"
    PIGMENTATION = "pigmentation"

    ALL = [OILINESS, DRYNESS, SENSITIVITY, BREAKOUTS, AGING_SIGNS, PORE_SIZE, PIGMENTATION]

    SCALE_MIN = 0
    SCALE_MAX = 10
    DEFAULT_VALUE = 5  # 미응답 시 중간값


class Concerns:
    """피부 고민 라벨 (설문 선택지와 동일)"""

    ACNE = "Active acne/breakouts"
    FINE_LINES = "Fine lines & wrinkles"
    LARGE_PORES = "Large pores"
    DARK_SPOTS = "Hyperpigmentation/dark spots"
    UNEVEN_TONE = "Uneven skin tone"
    DULLNESS = "Dullness"
    DRYNESS = "Dryness/dehydration"
    REDNESS = "Redness/sensitivity"
    EXCESS_OIL = "Excess oil/shine"
    FIRMNESS = "Loss of firmness"
    BLACKHEADS = "Blackheads"
    UNEVEN_TEXTURE = "Uneven texture"
    DARK_CIRCLES = "Dark circles"

    ALL = [
        ACNE, FINE_LINES, LARGE_PORES, DARK_SPOTS, UNEVEN_TONE, DULLNESS,
        DRYNESS, REDNESS, EXCESS_OIL, FIRMNESS, BLACKHEADS, UNEVEN_TEXTURE,
        DARK_CIRCLES
    ]

    # 루틴 규칙용 그룹
    PIGMENTATION_GROUP = {DARK_SPOTS, UNEVEN_TONE, DULLNESS}
    ACNE_GROUP = {ACNE, BLACKHEADS}
    AGING_GROUP = {FINE_LINES, FIRMNESS}
    HYDRATION_GROUP = {DRYNESS}


class ClassifierConfig:
    """피부 타입 분류기 설정"""

    SKIN_TYPES = ["normal", "oily", "dry", "combination", "sensitive"]

    # 피부 타입별 가중치 테이블 (주 항목 + 상관 항목, 각 계수는 (0, 1])
    TYPE_WEIGHTS: Dict[str, Dict[str, float]] = {
        "oily": {
            SkinTraits.OILINESS: 0.7,
            SkinTraits.BREAKOUTS: 0.3,
            SkinTraits.PORE_SIZE: 0.2,
        },
        "dry": {
            SkinTraits.DRYNESS: 0.7,
            SkinTraits.AGING_SIGNS: 0.2,
            SkinTraits.SENSITIVITY: 0.2,
        },
        "sensitive": {
            SkinTraits.SENSITIVITY: 0.8,
            SkinTraits.BREAKOUTS: 0.2,
            SkinTraits.DRYNESS: 0.1,
        },
    }

    # 복합성: |유분 - 건조| 임계값 기반 이진 점수
    COMBINATION_GAP_THRESHOLD = 3
    COMBINATION_HIGH_BASE = 10.0
    COMBINATION_LOW_BASE = 3.0
    COMBINATION_WEIGHT = 0.85

    # 중성: 10 - 중간값(5) 대비 가중 평균 절대편차
    NORMAL_MIDPOINT = 5.0
    NORMAL_CEILING = 10.0
    NORMAL_DEVIATION_WEIGHTS: Dict[str, float] = {
        SkinTraits.OILINESS: 0.4,
        SkinTraits.DRYNESS: 0.4,
        SkinTraits.SENSITIVITY: 0.2,
    }

    # 동점 처리 우선순위 (앞쪽이 우선)
    TIE_BREAK_ORDER = ["oily", "dry", "sensitive", "combination", "normal"]

    # 신뢰도 = 0.70 + 0.28 * (1위 - 2위) / 10, [0.70, 0.98] 범위
    CONFIDENCE_FLOOR = 0.70
    CONFIDENCE_CEILING = 0.98
    CONFIDENCE_SPAN = 0.28
    CONFIDENCE_GAP_SCALE = 10.0


class ConcernConfig:
    """피부 고민 우선순위 설정"""

    DEFAULT_PRIORITY = 5.0  # 테이블에 없는 고민

    # 고민 -> 척도 항목 선형 결합
    PRIORITY_FORMULAS: Dict[str, Dict[str, float]] = {
        Concerns.ACNE: {SkinTraits.BREAKOUTS: 0.4, SkinTraits.OILINESS: 0.3},
        Concerns.FINE_LINES: {SkinTraits.AGING_SIGNS: 0.5, SkinTraits.DRYNESS: 0.2},
        Concerns.LARGE_PORES: {SkinTraits.PORE_SIZE: 0.4, SkinTraits.OILINESS: 0.3},
        Concerns.DARK_SPOTS: {SkinTraits.PIGMENTATION: 0.5, SkinTraits.AGING_SIGNS: 0.1},
        Concerns.UNEVEN_TONE: {SkinTraits.PIGMENTATION: 0.4, SkinTraits.SENSITIVITY: 0.1},
        Concerns.DULLNESS: {SkinTraits.PIGMENTATION: 0.3, SkinTraits.DRYNESS: 0.3},
        Concerns.DRYNESS: {SkinTraits.DRYNESS: 0.5, SkinTraits.SENSITIVITY: 0.1},
        Concerns.REDNESS: {SkinTraits.SENSITIVITY: 0.5, SkinTraits.BREAKOUTS: 0.1},
        Concerns.EXCESS_OIL: {SkinTraits.OILINESS: 0.5, SkinTraits.PORE_SIZE: 0.2},
        Concerns.FIRMNESS: {SkinTraits.AGING_SIGNS: 0.4, SkinTraits.DRYNESS: 0.2},
        Concerns.BLACKHEADS: {
            SkinTraits.PORE_SIZE: 0.3, SkinTraits.OILINESS: 0.3, SkinTraits.BREAKOUTS: 0.1
        },
        Concerns.UNEVEN_TEXTURE: {SkinTraits.PORE_SIZE: 0.3, SkinTraits.BREAKOUTS: 0.2},
        Concerns.DARK_CIRCLES: {SkinTraits.AGING_SIGNS: 0.2, SkinTraits.PIGMENTATION: 0.2},
    }

    # 긴급도: (기준 항목, (medium, high, critical) 하한)
    URGENCY_THRESHOLDS: Dict[str, Tuple[str, Tuple[float, float, float]]] = {
        Concerns.ACNE: (SkinTraits.BREAKOUTS, (3, 6, 8)),
        Concerns.FINE_LINES: (SkinTraits.AGING_SIGNS, (4, 6, 8)),
        Concerns.LARGE_PORES: (SkinTraits.PORE_SIZE, (4, 7, 9)),
        Concerns.DARK_SPOTS: (SkinTraits.PIGMENTATION, (3, 6, 8)),
        Concerns.UNEVEN_TONE: (SkinTraits.PIGMENTATION, (4, 6, 9)),
        Concerns.DULLNESS: (SkinTraits.PIGMENTATION, (4, 7, 9)),
        Concerns.DRYNESS: (SkinTraits.DRYNESS, (3, 6, 8)),
        Concerns.REDNESS: (SkinTraits.SENSITIVITY, (3, 5, 8)),
        Concerns.EXCESS_OIL: (SkinTraits.OILINESS, (4, 6, 8)),
        Concerns.FIRMNESS: (SkinTraits.AGING_SIGNS, (4, 6, 8)),
        Concerns.BLACKHEADS: (SkinTraits.PORE_SIZE, (4, 6, 8)),
        Concerns.UNEVEN_TEXTURE: (SkinTraits.PORE_SIZE, (4, 7, 9)),
        Concerns.DARK_CIRCLES: (SkinTraits.AGING_SIGNS, (5, 7, 9)),
    }

    # 치료 복잡도: 선택 개수 기준
    SIMPLE_MAX_CONCERNS = 2
    MODERATE_MAX_CONCERNS = 4


class IngredientConfig:
    """성분 추천 설정 및 성분 참조 테이블"""

    ALL_SKIN_TYPES = "all"
    MAX_RECOMMENDATIONS = 6
    MAX_MATCH_PERCENT = 98

    OVERLAP_WEIGHT = 40.0
    EVIDENCE_WEIGHT = 0.4
    SKIN_TYPE_BONUS = 20.0

    # 이름, 적용 고민, 적합 피부타입, 근거 점수, 시너지 성분, 금기 피부타입, 고정 근거 문구
    INGREDIENT_DATABASE: List[Dict] = [
        {
            "name": "Salicylic Acid",
            "concerns": {Concerns.ACNE, Concerns.LARGE_PORES, Concerns.BLACKHEADS,
                         Concerns.EXCESS_OIL, Concerns.UNEVEN_TEXTURE},
            "skin_types": {"oily", "combination", "normal", "sensitive"},
            "evidence_score": 92,
            "synergy": {"Niacinamide", "Tea Tree Oil", "Zinc PCA"},
            "contraindicated": {"dry"},
            "rationale": "Oil-soluble BHA that exfoliates inside the pore to clear congestion and breakouts",
        },
        {
            "name": "Niacinamide",
            "concerns": {Concerns.ACNE, Concerns.LARGE_PORES, Concerns.DARK_SPOTS,
                         Concerns.UNEVEN_TONE, Concerns.EXCESS_OIL, Concerns.REDNESS},
            "skin_types": {"all"},
            "evidence_score": 90,
            "synergy": {"Hyaluronic Acid", "Salicylic Acid", "Zinc PCA", "Ceramides"},
            "contraindicated": set(),
            "rationale": "Regulates sebum, strengthens the barrier and visibly refines pores",
        },
        {
            "name": "Retinol",
            "concerns": {Concerns.FINE_LINES, Concerns.FIRMNESS, Concerns.ACNE,
                         Concerns.UNEVEN_TEXTURE, Concerns.DARK_SPOTS},
            "skin_types": {"normal", "oily", "combination", "dry"},
            "evidence_score": 95,
            "synergy": {"Hyaluronic Acid", "Peptides", "Ceramides"},
            "contraindicated": {"sensitive"},
            "rationale": "Gold-standard retinoid that accelerates cell turnover and stimulates collagen",
        },
        {
            "name": "Hyaluronic Acid",
            "concerns": {Concerns.DRYNESS, Concerns.FINE_LINES, Concerns.DULLNESS},
            "skin_types": {"all"},
            "evidence_score": 88,
            "synergy": {"Niacinamide", "Vitamin C", "Ceramides", "Retinol"},
            "contraindicated": set(),
            "rationale": "Humectant that binds water for immediate, weightless hydration",
        },
        {
            "name": "Vitamin C",
            "concerns": {Concerns.DARK_SPOTS, Concerns.DULLNESS, Concerns.UNEVEN_TONE,
                         Concerns.FINE_LINES},
            "skin_types": {"normal", "oily", "combination", "dry"},
            "evidence_score": 89,
            "synergy": {"Hyaluronic Acid", "Alpha Arbutin", "Ferulic Acid"},
            "contraindicated": {"sensitive"},
            "rationale": "Antioxidant that brightens and defends against environmental damage",
        },
        {
            "name": "Ceramides",
            "concerns": {Concerns.DRYNESS, Concerns.REDNESS},
            "skin_types": {"all"},
            "evidence_score": 85,
            "synergy": {"Hyaluronic Acid", "Niacinamide", "Retinol"},
            "contraindicated": set(),
            "rationale": "Replenishes barrier lipids to lock in moisture and calm reactivity",
        },
        {
            "name": "Azelaic Acid",
            "concerns": {Concerns.ACNE, Concerns.REDNESS, Concerns.DARK_SPOTS,
                         Concerns.UNEVEN_TONE},
            "skin_types": {"all"},
            "evidence_score": 84,
            "synergy": {"Niacinamide", "Salicylic Acid"},
            "contraindicated": set(),
            "rationale": None,
        },
        {
            "name": "Glycolic Acid",
            "concerns": {Concerns.DULLNESS, Concerns.UNEVEN_TONE, Concerns.DARK_SPOTS,
                         Concerns.UNEVEN_TEXTURE, Concerns.FINE_LINES},
            "skin_types": {"normal", "oily", "combination"},
            "evidence_score": 86,
            "synergy": {"Hyaluronic Acid"},
            "contraindicated": {"sensitive", "dry"},
            "rationale": "AHA that dissolves dull surface cells for a smoother, brighter finish",
        },
        {
            "name": "Peptides",
            "concerns": {Concerns.FINE_LINES, Concerns.FIRMNESS, Concerns.DARK_CIRCLES},
            "skin_types": {"all"},
            "evidence_score": 78,
            "synergy": {"Retinol", "Hyaluronic Acid"},
            "contraindicated": set(),
            "rationale": None,
        },
        {
            "name": "Centella Asiatica",
            "concerns": {Concerns.REDNESS, Concerns.ACNE},
            "skin_types": {"all"},
            "evidence_score": 76,
            "synergy": {"Ceramides", "Niacinamide"},
            "contraindicated": set(),
            "rationale": "Soothing botanical that calms inflammation and supports repair",
        },
        {
            "name": "Tea Tree Oil",
            "concerns": {Concerns.ACNE, Concerns.EXCESS_OIL},
            "skin_types": {"oily", "combination"},
            "evidence_score": 70,
            "synergy": {"Salicylic Acid"},
            "contraindicated": {"sensitive", "dry"},
            "rationale": None,
        },
        {
            "name": "Alpha Arbutin",
            "concerns": {Concerns.DARK_SPOTS, Concerns.UNEVEN_TONE, Concerns.DARK_CIRCLES},
            "skin_types": {"all"},
            "evidence_score": 80,
            "synergy": {"Vitamin C", "Niacinamide"},
            "contraindicated": set(),
            "rationale": "Gentle tyrosinase inhibitor that fades dark spots without irritation",
        },
        {
            "name": "Zinc PCA",
            "concerns": {Concerns.EXCESS_OIL, Concerns.ACNE, Concerns.LARGE_PORES},
            "skin_types": {"oily", "combination", "normal"},
            "evidence_score": 72,
            "synergy": {"Niacinamide", "Salicylic Acid"},
            "contraindicated": {"dry"},
            "rationale": None,
        },
        {
            "name": "Benzoyl Peroxide",
            "concerns": {Concerns.ACNE},
            "skin_types": {"oily"},
            "evidence_score": 91,
            "synergy": {"Niacinamide"},
            "contraindicated": {"sensitive", "dry"},
            "rationale": "Antibacterial that kills acne-causing bacteria in inflamed breakouts",
        },
    ]


class RiskConfig:
    """위험도 평가 설정"""

    ACTIVE_INGREDIENTS = {
        "Retinol", "Salicylic Acid", "Glycolic Acid", "Vitamin C",
        "Benzoyl Peroxide", "Azelaic Acid"
    }
    MAX_SAFE_ACTIVES = 2

    PER_ACTIVE_RISK = 10
    ACTIVE_OVERLOAD_RISK = 30
    PAIR_CONFLICT_RISK = 10
    SENSITIVITY_ALERT_RISK = 15
    HIGH_SENSITIVITY_SCALE = 7
    HIGH_SENSITIVITY_RISK = 10
    MAX_RISK = 100

    # 같은 시간대 레이어링 금지 조합
    CONFLICTING_PAIRS: List[Tuple[str, str, str]] = [
        ("Retinol", "Glycolic Acid",
         "Retinol and Glycolic Acid should not be layered on the same night"),
        ("Retinol", "Salicylic Acid",
         "Retinol and Salicylic Acid should be used on alternating nights"),
        ("Vitamin C", "Benzoyl Peroxide",
         "Benzoyl Peroxide oxidises Vitamin C; apply them at different times of day"),
    ]

    SENSITIVE_ALERTS: Dict[str, str] = {
        "Retinol": "Retinol can irritate sensitive skin: start with a low strength twice a week and buffer with moisturizer",
        "Salicylic Acid": "Salicylic Acid may sting sensitive skin: patch test first and limit use to 2-3 evenings a week",
    }

    PREGNANCY_SAFE_PREFERENCE = "Pregnancy-safe"
    PREGNANCY_CONFLICTS: Dict[str, str] = {
        "Retinol": "Retinol is not recommended during pregnancy; consider Azelaic Acid or Bakuchiol instead",
    }


class OutcomeConfig:
    """예상 결과 타임라인 설정"""

    BUCKETS = ["week_1", "week_4", "week_8", "week_12"]

    BASE_STATEMENTS: Dict[str, List[str]] = {
        "week_1": ["Skin feels cleaner and more balanced as the routine settles in"],
        "week_4": ["Smoother texture as cell turnover picks up"],
        "week_8": ["Consistent use compounds results and the routine becomes habit"],
        "week_12": ["Full reassessment point: retake the skin analysis to fine-tune your routine"],
    }

    # (버킷, 성분, 문구)
    INGREDIENT_STATEMENTS: List[Tuple[str, str, str]] = [
        ("week_1", "Hyaluronic Acid", "Noticeably plumper, better-hydrated skin"),
        ("week_1", "Ceramides", "Less tightness and flaking after cleansing"),
        ("week_1", "Centella Asiatica", "Calmer skin with less visible irritation"),
        ("week_4", "Salicylic Acid", "Fewer new breakouts and clearer pores"),
        ("week_4", "Niacinamide", "Reduced shine and more refined-looking pores"),
        ("week_4", "Vitamin C", "Brighter, more radiant complexion"),
        ("week_4", "Benzoyl Peroxide", "Active blemishes heal faster"),
        ("week_8", "Retinol", "Fine lines begin to soften"),
        ("week_8", "Alpha Arbutin", "Dark spots start to fade"),
        ("week_8", "Azelaic Acid", "Post-blemish marks and redness are visibly reduced"),
        ("week_8", "Glycolic Acid", "More even skin tone and refined surface texture"),
        ("week_12", "Retinol", "Improved firmness and visibly reduced wrinkles"),
        ("week_12", "Peptides", "Skin looks more resilient and elastic"),
        ("week_12", "Niacinamide", "Significant improvement in overall tone evenness"),
    ]


class RoutineConfig:
    """루틴 생성 규칙 테이블"""

    AM = "AM"
    PM = "PM"
    AM_PM = "AM/PM"

    CLEANSER_BY_TYPE: Dict[str, Tuple[str, str]] = {
        "oily": ("Foaming gel cleanser", "Removes excess sebum without stripping the barrier"),
        "dry": ("Cream cleanser", "Cleanses while preserving natural oils"),
        "combination": ("Balancing gel cleanser", "Clears the T-zone while staying gentle on cheeks"),
        "sensitive": ("Fragrance-free milky cleanser", "Minimises friction and irritation"),
        "normal": ("Gentle pH-balanced cleanser", "Maintains a healthy, balanced barrier"),
    }

    MOISTURIZER_BY_TYPE: Dict[str, str] = {
        "oily": "Oil-free gel moisturizer",
        "dry": "Rich barrier-repair cream",
        "combination": "Lightweight lotion",
        "sensitive": "Fragrance-free soothing cream",
        "normal": "Daily hydrating lotion",
    }

    NIGHT_MOISTURIZER_BY_TYPE: Dict[str, str] = {
        "oily": "Lightweight night gel",
        "dry": "Nourishing night cream",
        "combination": "Balancing night lotion",
        "sensitive": "Ceramide recovery cream",
        "normal": "Replenishing night cream",
    }

    ALTERNATING_NOTE = "Alternate nights: BHA on odd nights, retinoid on even nights"


class InsightConfig:
    """인사이트 및 개인화 점수 설정"""

    SKIN_TYPE_TIPS: Dict[str, List[str]] = {
        "oily": [
            "Use a gentle, oil-free cleanser twice daily",
            "Incorporate salicylic acid for pore control",
            "Choose lightweight, non-comedogenic moisturizers",
        ],
        "dry": [
            "Use a cream-based cleanser to avoid stripping natural oils",
            "Apply hyaluronic acid serum on damp skin",
            "Use a rich moisturizer to restore barrier function",
        ],
        "sensitive": [
            "Avoid fragrances and harsh actives",
            "Patch test new products before full application",
            "Use gentle, pH-balanced formulations",
        ],
        "combination": [
            "Use different products for T-zone and cheek areas",
            "Consider dual-action formulations",
            "Balance oil control with hydration",
        ],
        "normal": [
            "Maintain a consistent basic routine",
            "Focus on prevention with antioxidants",
            "Adjust products based on seasonal changes",
        ],
    }

    MATURE_AGE_LABELS = {"30-39", "40-49", "50+"}
    MATURE_TIPS = [
        "Incorporate anti-aging ingredients like retinol",
        "Use products with peptides and antioxidants",
        "Consider professional treatments for enhanced results",
    ]

    HUMID_CLIMATES = {"Humid climate", "Tropical climate"}
    DRY_CLIMATES = {"Dry climate", "Cold climate"}
    HUMID_TIP = "Choose gel-based, lightweight formulations"
    DRY_TIP = "Use richer, more occlusive formulations"

    # 개인화 점수 = 기본 + 응답 완성도 + 고민 수 + 분류 신뢰도
    PERSONALIZATION_BASE = 40.0
    SCALE_COMPLETENESS_WEIGHT = 30.0
    CONCERN_WEIGHT = 10.0
    CONCERN_SATURATION = 3
    CONFIDENCE_WEIGHT = 20.0


class ProductMatchConfig:
    """제품 AI 매칭 점수 설정"""

    SKIN_TYPE_POINTS = 30.0
    BENEFIT_POINTS = 30.0
    INGREDIENT_POINTS = 25.0
    CLINICAL_EVIDENCE_FACTOR = 0.1
    CONTRAINDICATION_PENALTY = 20.0

    COMMITMENT_HABIT = "Consistent twice-daily routine"
    COMMITMENT_BONUS = 5
    PATIENCE_GOAL = "Long-term skin health"
    PATIENCE_BONUS = 3
    SCIENCE_PREFERENCE = "Science-backed"
    MINIMAL_ROUTINE_HABIT = "Minimal routine"

    # 고민 -> 제품 효능 태그
    CONCERN_BENEFITS: Dict[str, str] = {
        Concerns.ACNE: "acne-fighting",
        Concerns.BLACKHEADS: "acne-fighting",
        Concerns.FINE_LINES: "anti-aging",
        Concerns.FIRMNESS: "anti-aging",
        Concerns.DRYNESS: "hydrating",
        Concerns.DULLNESS: "brightening",
        Concerns.DARK_SPOTS: "brightening",
        Concerns.UNEVEN_TONE: "brightening",
        Concerns.LARGE_PORES: "pore-minimizing",
        Concerns.REDNESS: "soothing",
        Concerns.EXCESS_OIL: "oil-control",
        Concerns.UNEVEN_TEXTURE: "exfoliating",
        Concerns.DARK_CIRCLES: "brightening",
    }

    MAX_REASONS = 3
